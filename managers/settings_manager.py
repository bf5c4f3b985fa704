"""
Settings Manager
Global bot switches, per-group moderation flags and the bad-word list
"""

from typing import Any, Dict, List, Optional

from repositories.group_repository import GroupRepository
from repositories.settings_repository import SettingsRepository
from utils.logger import LoggerMixin

GLOBAL_SETTINGS_KEY = "global"
BAD_WORDS_KEY = "badWords"

DEFAULT_BAD_WORDS = ["badword1", "badword2", "fuck", "shit", "damn"]

GLOBAL_SETTING_NAMES = ("autoStatusView", "alwaysOnline", "autoSeen", "antilink", "antibadword")


class SettingsManager(LoggerMixin):
    """Cached access to bot settings."""

    def __init__(self, settings_repo: SettingsRepository, group_repo: GroupRepository):
        super().__init__("Settings")
        self.settings_repo = settings_repo
        self.group_repo = group_repo
        self._cache: Optional[Dict[str, Any]] = None

    async def get_global_settings(self) -> Dict[str, Any]:
        """Global settings, loaded once and cached until the next update."""
        if self._cache is None:
            self._cache = dict(await self.settings_repo.get(GLOBAL_SETTINGS_KEY, {}) or {})
        return self._cache

    async def update_global_setting(self, key: str, value: Any) -> None:
        """
        Change one global setting.

        Args:
            key: One of GLOBAL_SETTING_NAMES
            value: New value
        """
        if key not in GLOBAL_SETTING_NAMES:
            raise ValueError(f"Unknown setting: {key}")
        settings = dict(await self.get_global_settings())
        settings[key] = value
        await self.settings_repo.set(GLOBAL_SETTINGS_KEY, settings)
        self._cache = settings
        self.info(f"Global setting {key} = {value}")

    async def get_group_settings(self, group_jid: str) -> Dict[str, bool]:
        return await self.group_repo.get_settings(group_jid)

    async def update_group_setting(self, group_jid: str, key: str, value: bool) -> None:
        await self.group_repo.update_setting(group_jid, key, value)
        self.info(f"Group {group_jid} setting {key} = {value}")

    async def get_bad_words(self) -> List[str]:
        words = await self.settings_repo.get(BAD_WORDS_KEY)
        return list(DEFAULT_BAD_WORDS if words is None else words)

    async def add_bad_word(self, word: str) -> bool:
        """
        Add a word to the filter list.

        Returns:
            False if the word was already listed
        """
        word = word.lower()
        words = await self.get_bad_words()
        if word in words:
            return False
        words.append(word)
        await self.settings_repo.set(BAD_WORDS_KEY, words)
        return True

    async def remove_bad_word(self, word: str) -> bool:
        """
        Remove a word from the filter list.

        Returns:
            False if the word was not listed
        """
        word = word.lower()
        words = await self.get_bad_words()
        if word not in words:
            return False
        words.remove(word)
        await self.settings_repo.set(BAD_WORDS_KEY, words)
        return True

    async def is_antilink_enabled(self, group_jid: str) -> bool:
        group = await self.get_group_settings(group_jid)
        settings = await self.get_global_settings()
        return bool(group.get("antilink") or settings.get("antilink"))

    async def is_antibadword_enabled(self, group_jid: str) -> bool:
        group = await self.get_group_settings(group_jid)
        settings = await self.get_global_settings()
        return bool(group.get("antibadword") or settings.get("antibadword"))

    async def is_auto_status_view_enabled(self) -> bool:
        return bool((await self.get_global_settings()).get("autoStatusView", False))

    async def is_always_online_enabled(self) -> bool:
        # On unless explicitly switched off
        return (await self.get_global_settings()).get("alwaysOnline") is not False

    async def is_auto_seen_enabled(self) -> bool:
        return bool((await self.get_global_settings()).get("autoSeen", False))

    def clear_cache(self) -> None:
        self._cache = None
