"""
Monitoring Utilities
Bot counters, system metrics and health reporting
"""

import os
import platform
import time
from typing import Any, Dict

import psutil

from utils.whatsapp import WhatsAppUtils


class HealthStatus:
    """Health status result."""

    def __init__(self, healthy: bool, status: str, checks: Dict[str, bool], timestamp: str):
        self.healthy = healthy
        self.status = status
        self.checks = checks
        self.timestamp = timestamp


class Monitoring:
    """Bot counters and system metrics."""

    def __init__(self):
        self.start_time = time.time()
        self.connected = False
        self.metrics = {
            "commandsExecuted": 0,
            "messagesProcessed": 0,
            "selectionsResolved": 0,
            "permissionDenials": 0,
            "errors": 0,
        }

    def record_command(self) -> None:
        self.metrics["commandsExecuted"] += 1

    def record_message(self) -> None:
        self.metrics["messagesProcessed"] += 1

    def record_selection(self) -> None:
        self.metrics["selectionsResolved"] += 1

    def record_denial(self) -> None:
        self.metrics["permissionDenials"] += 1

    def record_error(self) -> None:
        self.metrics["errors"] += 1

    def uptime_seconds(self) -> int:
        """Seconds since the bot started."""
        return int(time.time() - self.start_time)

    def get_system_metrics(self) -> Dict[str, Any]:
        """
        Get system metrics.

        Returns:
            Dict with memory, CPU, uptime, and platform info
        """
        process = psutil.Process()
        memory_info = process.memory_info()
        virtual = psutil.virtual_memory()
        load_avg = os.getloadavg() if hasattr(os, "getloadavg") else (0.0, 0.0, 0.0)

        return {
            "memory": {
                "used": round(memory_info.rss / 1024 / 1024),
                "systemTotal": round(virtual.total / 1024 / 1024),
                "systemFree": round(virtual.available / 1024 / 1024),
            },
            "cpu": {
                "loadAvg1m": round(load_avg[0], 2),
                "cores": psutil.cpu_count(),
            },
            "uptime": {
                "bot": WhatsAppUtils.format_duration(self.uptime_seconds()),
                "system": WhatsAppUtils.format_duration(int(time.time() - psutil.boot_time())),
            },
            "platform": {
                "python": platform.python_version(),
                "os": f"{platform.system()} {platform.release()}",
            },
        }

    def commands_per_hour(self) -> int:
        hours = (time.time() - self.start_time) / 3600
        return round(self.metrics["commandsExecuted"] / hours) if hours > 0 else 0

    def get_health_status(self) -> HealthStatus:
        """
        Get health status.

        Returns:
            HealthStatus with overall health and individual checks
        """
        system = self.get_system_metrics()

        checks = {
            "memory": system["memory"]["used"] < system["memory"]["systemTotal"] * 0.8,
            "whatsapp": self.connected,
            "errors": self.metrics["errors"] < 100,
        }
        healthy = all(checks.values())

        return HealthStatus(
            healthy=healthy,
            status="healthy" if healthy else "degraded",
            checks=checks,
            timestamp=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        )

    def format_health_status(self) -> str:
        """
        Format health status for a chat reply.

        Returns:
            Formatted health status string
        """
        health = self.get_health_status()
        system = self.get_system_metrics()

        status_icon = "🟢" if health.healthy else "🟡"

        lines = [
            f"{status_icon} *Bot Health: {health.status.upper()}*",
            "",
            "📊 *System:*",
            f"Memory: {system['memory']['used']}MB / {system['memory']['systemTotal']}MB",
            f"CPU Load: {system['cpu']['loadAvg1m']} ({system['cpu']['cores']} cores)",
            f"Python: {system['platform']['python']} on {system['platform']['os']}",
            "",
            "📈 *Metrics:*",
            f"Commands: {self.metrics['commandsExecuted']} ({self.commands_per_hour()}/hr)",
            f"Messages: {self.metrics['messagesProcessed']}",
            f"Selections: {self.metrics['selectionsResolved']}",
            f"Denied: {self.metrics['permissionDenials']}",
            f"Errors: {self.metrics['errors']}",
            "",
            "⏱️ *Uptime:*",
            f"Bot: {system['uptime']['bot']}",
            f"System: {system['uptime']['system']}",
        ]

        return "\n".join(lines)
