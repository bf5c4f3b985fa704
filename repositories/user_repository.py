"""
User Repository
Handles bot users, bans, warnings and command usage counters
"""

from typing import Any, Dict, List, Optional

import asyncpg

from repositories.base_repository import BaseRepository


class UserRepository(BaseRepository):
    """Repository for users table."""

    def __init__(self, pool: Optional[asyncpg.Pool]):
        super().__init__(pool, "users", "jid")

    async def find_user(self, jid: str) -> Optional[Dict[str, Any]]:
        """
        Get a user by JID.

        Args:
            jid: User JID

        Returns:
            User dict or None
        """
        return await self.find_by_id(jid)

    async def get_or_create(self, jid: str, name: str = "") -> Optional[Dict[str, Any]]:
        """
        Create the user on first contact, otherwise refresh last_seen.

        Args:
            jid: User JID
            name: Push name shown in WhatsApp

        Returns:
            User dict or None when persistence is disabled
        """
        sql = f"""
            INSERT INTO {self.table_name} (jid, name)
            VALUES ($1, $2)
            ON CONFLICT (jid)
            DO UPDATE SET last_seen = CURRENT_TIMESTAMP,
                          name = COALESCE(NULLIF($2, ''), {self.table_name}.name)
            RETURNING *
        """
        row = await self.query(sql, [jid, name or ""])
        return dict(row) if row else None

    async def is_user_banned(self, jid: str) -> bool:
        """Check the ban flag of a user (unknown users are not banned)."""
        user = await self.find_user(jid)
        return bool(user and user.get("is_banned"))

    async def set_banned(self, jid: str, banned: bool) -> bool:
        """
        Ban or unban a user, creating the record if needed.

        Args:
            jid: User JID
            banned: New ban flag

        Returns:
            True if a row was written
        """
        sql = f"""
            INSERT INTO {self.table_name} (jid, is_banned)
            VALUES ($1, $2)
            ON CONFLICT (jid)
            DO UPDATE SET is_banned = $2, updated_at = CURRENT_TIMESTAMP
        """
        return await self.execute(sql, [jid, banned]) > 0

    async def increment_command_usage(self, jid: str) -> None:
        """Add one to the user's command counter."""
        sql = f"""
            UPDATE {self.table_name}
            SET command_usage = command_usage + 1, updated_at = CURRENT_TIMESTAMP
            WHERE jid = $1
        """
        await self.execute(sql, [jid])

    async def add_warning(self, jid: str) -> int:
        """
        Add a warning to a user.

        Args:
            jid: User JID

        Returns:
            Warning count after the update (0 when persistence is disabled)
        """
        sql = f"""
            INSERT INTO {self.table_name} (jid, warnings)
            VALUES ($1, 1)
            ON CONFLICT (jid)
            DO UPDATE SET warnings = {self.table_name}.warnings + 1,
                          updated_at = CURRENT_TIMESTAMP
            RETURNING warnings
        """
        row = await self.query(sql, [jid])
        return row["warnings"] if row else 0

    async def reset_warnings(self, jid: str) -> bool:
        """Clear a user's warnings. Returns True if the user existed."""
        sql = f"""
            UPDATE {self.table_name}
            SET warnings = 0, updated_at = CURRENT_TIMESTAMP
            WHERE jid = $1
        """
        return await self.execute(sql, [jid]) > 0

    async def count_banned(self) -> int:
        return await self.count({"is_banned": True})

    async def top_users(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Users ordered by command usage, highest first."""
        return await self.find_where({}, {"order_by": "command_usage", "order": "DESC", "limit": limit})
