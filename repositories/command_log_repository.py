"""
Command Log Repository
Append-only usage records, one per permitted command
"""

from typing import Any, Dict, List, Optional

import asyncpg

from repositories.base_repository import BaseRepository


class CommandLogRepository(BaseRepository):
    """Repository for command_logs table."""

    def __init__(self, pool: Optional[asyncpg.Pool]):
        super().__init__(pool, "command_logs", "id")

    async def append(self, user_jid: str, command: str, group_jid: Optional[str] = None) -> None:
        """
        Append a usage record.

        Args:
            user_jid: Caller JID
            command: Command token as typed (alias or name)
            group_jid: Group JID, None for private chats
        """
        sql = f"""
            INSERT INTO {self.table_name} (user_jid, command, group_jid)
            VALUES ($1, $2, $3)
        """
        await self.execute(sql, [user_jid, command, group_jid])

    async def top_commands(self, limit: int = 5) -> List[Dict[str, Any]]:
        """
        Most used command tokens.

        Args:
            limit: Number of rows

        Returns:
            Dicts with ``command`` and ``uses``
        """
        sql = f"""
            SELECT command, COUNT(*) AS uses
            FROM {self.table_name}
            GROUP BY command
            ORDER BY uses DESC
            LIMIT $1
        """
        rows = await self.query_many(sql, [limit])
        return [dict(row) for row in rows]
