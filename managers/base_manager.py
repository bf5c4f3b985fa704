"""
Base Manager
Base class for managers that own background timers
"""

import asyncio
from typing import Any, Callable, Dict

from utils.logger import LoggerMixin


class BaseManager(LoggerMixin):
    """Base class for all managers with timer management and cleanup."""

    def __init__(self, name: str):
        super().__init__(name)
        self.enabled = False
        self.timers: Dict[str, asyncio.Task] = {}

    def set_enabled(self, enabled: bool) -> None:
        """Enable/disable the manager."""
        self.enabled = enabled
        self.info(f"{self.__class__.__name__} {'Enabled' if enabled else 'Disabled'}")

    def is_enabled(self) -> bool:
        return self.enabled

    async def _run_callback(self, name: str, callback: Callable[[], Any]) -> None:
        try:
            result = callback()
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            self.error(f"Timer {name} error: {e}")

    def set_managed_timer(self, name: str, callback: Callable[[], Any], delay_ms: int) -> asyncio.Task:
        """
        Run a callback once after a delay (cancelled on cleanup).

        Args:
            name: Timer name
            callback: Async or sync callback to execute
            delay_ms: Delay in milliseconds

        Returns:
            The created task
        """
        self.clear_managed_timer(name)

        async def timer_task() -> None:
            try:
                await asyncio.sleep(delay_ms / 1000)
                self.timers.pop(name, None)
                await self._run_callback(name, callback)
            except asyncio.CancelledError:
                pass

        task = asyncio.create_task(timer_task())
        self.timers[name] = task
        return task

    def set_periodic_timer(self, name: str, callback: Callable[[], Any], interval_ms: int) -> asyncio.Task:
        """
        Run a callback every interval until cleared.

        Args:
            name: Timer name
            callback: Async or sync callback to execute
            interval_ms: Interval in milliseconds

        Returns:
            The created task
        """
        self.clear_managed_timer(name)

        async def timer_task() -> None:
            try:
                while True:
                    await asyncio.sleep(interval_ms / 1000)
                    await self._run_callback(name, callback)
            except asyncio.CancelledError:
                pass

        task = asyncio.create_task(timer_task())
        self.timers[name] = task
        return task

    def clear_managed_timer(self, name: str) -> None:
        """Clear a managed timer."""
        task = self.timers.pop(name, None)
        if task and not task.done():
            task.cancel()

    def clear_all_timers(self) -> None:
        """Clear all managed timers."""
        for name, task in list(self.timers.items()):
            if not task.done():
                task.cancel()
            self.debug(f"Cleared timer: {name}")
        self.timers.clear()

    def cleanup(self) -> None:
        """Clean up all resources."""
        self.info("Cleaning up...")
        self.clear_all_timers()
        self.enabled = False
