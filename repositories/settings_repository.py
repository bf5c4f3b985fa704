"""
Settings Repository
Bot-wide settings stored as JSON values under string keys
"""

import json
from typing import Any, Dict, Optional

import asyncpg

from repositories.base_repository import BaseRepository


class SettingsRepository(BaseRepository):
    """Repository for bot_settings table."""

    def __init__(self, pool: Optional[asyncpg.Pool]):
        super().__init__(pool, "bot_settings", "key")

    async def get(self, key: str, default_value: Any = None) -> Any:
        """
        Get a setting value by key.

        Args:
            key: Setting key
            default_value: Default value if not found

        Returns:
            Decoded value or default
        """
        row = await self.find_by_id(key)
        if not row or row.get("value") is None:
            return default_value

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            self.logger.warning(f"Setting {key} holds invalid JSON, using default")
            return default_value

    async def set(self, key: str, value: Any) -> bool:
        """
        Store a setting value.

        Args:
            key: Setting key
            value: JSON-serialisable value

        Returns:
            True if a row was written
        """
        sql = f"""
            INSERT INTO {self.table_name} (key, value, updated_at)
            VALUES ($1, $2, CURRENT_TIMESTAMP)
            ON CONFLICT (key)
            DO UPDATE SET value = $2, updated_at = CURRENT_TIMESTAMP
        """
        return await self.execute(sql, [key, json.dumps(value)]) > 0

    async def get_all(self) -> Dict[str, Any]:
        """
        Get all settings as a dict.

        Returns:
            Dict of key to decoded value
        """
        settings: Dict[str, Any] = {}
        for row in await self.find_where():
            try:
                settings[row["key"]] = json.loads(row["value"]) if row.get("value") else None
            except (json.JSONDecodeError, TypeError):
                settings[row["key"]] = None
        return settings
