"""
Group Repository
Handles group metadata snapshots and per-group moderation settings
"""

from typing import Any, Dict, List, Optional

import asyncpg

from repositories.base_repository import BaseRepository

# Per-group switches stored as boolean columns
GROUP_SETTING_KEYS = ("antilink", "antibadword", "muted", "locked")


class GroupRepository(BaseRepository):
    """Repository for groups table."""

    def __init__(self, pool: Optional[asyncpg.Pool]):
        super().__init__(pool, "groups", "jid")

    async def get_or_create(
        self,
        jid: str,
        name: str = "",
        participants: Optional[List[str]] = None,
        admins: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Store the latest participant snapshot of a group.

        Args:
            jid: Group JID
            name: Group subject
            participants: Participant JIDs
            admins: Admin JIDs

        Returns:
            Group dict or None when persistence is disabled
        """
        sql = f"""
            INSERT INTO {self.table_name} (jid, name, participants, admins)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (jid)
            DO UPDATE SET name = $2, participants = $3, admins = $4,
                          updated_at = CURRENT_TIMESTAMP
            RETURNING *
        """
        row = await self.query(sql, [jid, name or "", participants or [], admins or []])
        return dict(row) if row else None

    async def get_settings(self, jid: str) -> Dict[str, bool]:
        """
        Get moderation settings of a group.

        Args:
            jid: Group JID

        Returns:
            Dict of setting name to flag (all False for unknown groups)
        """
        row = await self.find_by_id(jid)
        return {key: bool(row.get(key)) if row else False for key in GROUP_SETTING_KEYS}

    async def update_setting(self, jid: str, key: str, value: bool) -> bool:
        """
        Set one moderation flag, creating the group row if needed.

        Args:
            jid: Group JID
            key: One of GROUP_SETTING_KEYS
            value: New flag

        Returns:
            True if a row was written
        """
        if key not in GROUP_SETTING_KEYS:
            raise ValueError(f"Unknown group setting: {key}")

        sql = f"""
            INSERT INTO {self.table_name} (jid, {key})
            VALUES ($1, $2)
            ON CONFLICT (jid)
            DO UPDATE SET {key} = $2, updated_at = CURRENT_TIMESTAMP
        """
        return await self.execute(sql, [jid, value]) > 0

    async def all_jids(self) -> List[str]:
        """JIDs of every known group."""
        rows = await self.query_many(f"SELECT jid FROM {self.table_name}")
        return [row["jid"] for row in rows]
