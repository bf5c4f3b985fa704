"""
Managers for the WhatsApp bot.
"""

from .base_manager import BaseManager
from .download_manager import DownloadApiError, DownloadManager
from .settings_manager import SettingsManager
from .reminder_manager import ReminderManager
from .moderation_manager import ModerationManager
from .maintenance_manager import MaintenanceManager

__all__ = [
    "BaseManager",
    "DownloadApiError",
    "DownloadManager",
    "SettingsManager",
    "ReminderManager",
    "ModerationManager",
    "MaintenanceManager",
]
