"""
Database repositories for the WhatsApp bot.
"""

from .base_repository import BaseRepository
from .user_repository import UserRepository
from .group_repository import GroupRepository, GROUP_SETTING_KEYS
from .command_log_repository import CommandLogRepository
from .settings_repository import SettingsRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "GroupRepository",
    "GROUP_SETTING_KEYS",
    "CommandLogRepository",
    "SettingsRepository",
]
