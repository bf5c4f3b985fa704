"""
Base Repository
Generic repository pattern for database operations
Provides common CRUD operations and connection management
"""

from abc import ABC
from typing import Any, Dict, List, Optional

import asyncpg

from utils.logger import get_logger


class BaseRepository(ABC):
    """
    Base repository class for database operations.

    Subclasses provide table_name and primary_key. When the pool is None
    (no DATABASE_URL) reads return nothing and writes are skipped, so the
    bot keeps answering commands without persistence.
    """

    def __init__(
        self,
        pool: Optional[asyncpg.Pool],
        table_name: str,
        primary_key: str = "id"
    ):
        """
        Create a new repository instance.

        Args:
            pool: PostgreSQL connection pool (None disables persistence)
            table_name: Database table name
            primary_key: Primary key column name
        """
        if self.__class__ == BaseRepository:
            raise TypeError("Cannot instantiate abstract BaseRepository directly")

        self.pool = pool
        self.table_name = table_name
        self.primary_key = primary_key
        self.logger = get_logger(self.__class__.__name__)

    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self.pool is not None

    async def query(
        self,
        sql: str,
        params: Optional[List[Any]] = None
    ) -> Optional[asyncpg.Record]:
        """
        Execute a query returning at most one row.

        Args:
            sql: SQL query string
            params: Query parameters

        Returns:
            Row or None
        """
        if not self.is_connected():
            self.logger.debug("Database not connected, query skipped")
            return None

        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchrow(sql, *(params or []))
        except Exception as e:
            self.logger.error(f"Query failed: {e}")
            raise

    async def query_many(
        self,
        sql: str,
        params: Optional[List[Any]] = None
    ) -> List[asyncpg.Record]:
        """
        Execute a query returning multiple rows.

        Args:
            sql: SQL query string
            params: Query parameters

        Returns:
            List of rows
        """
        if not self.is_connected():
            self.logger.debug("Database not connected, query skipped")
            return []

        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(sql, *(params or []))
        except Exception as e:
            self.logger.error(f"Query failed: {e}")
            raise

    async def execute(
        self,
        sql: str,
        params: Optional[List[Any]] = None
    ) -> int:
        """
        Execute a statement without result rows.

        Args:
            sql: SQL statement
            params: Statement parameters

        Returns:
            Number of affected rows (0 when skipped)
        """
        if not self.is_connected():
            self.logger.debug("Database not connected, statement skipped")
            return 0

        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(sql, *(params or []))
        except Exception as e:
            self.logger.error(f"Statement failed: {e}")
            raise

        return self.affected_rows(status)

    async def find_by_id(self, id: Any) -> Optional[Dict[str, Any]]:
        """
        Find a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            Record as dict or None
        """
        sql = f"SELECT * FROM {self.table_name} WHERE {self.primary_key} = $1"
        row = await self.query(sql, [id])
        return dict(row) if row else None

    async def find_where(
        self,
        conditions: Optional[Dict[str, Any]] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Find records by conditions.

        Args:
            conditions: Column-value equality conditions
            options: Query options (limit, order_by, order)

        Returns:
            List of records as dicts
        """
        conditions = conditions or {}
        options = options or {}

        sql = f"SELECT * FROM {self.table_name}"
        where_clause, values = self.build_where(conditions)
        if where_clause:
            sql += f" WHERE {where_clause}"

        if options.get("order_by"):
            order = "DESC" if str(options.get("order", "ASC")).upper() == "DESC" else "ASC"
            sql += f" ORDER BY {options['order_by']} {order}"

        if options.get("limit"):
            sql += f" LIMIT {int(options['limit'])}"

        rows = await self.query_many(sql, values)
        return [dict(row) for row in rows]

    async def count(self, conditions: Optional[Dict[str, Any]] = None) -> int:
        """
        Count records.

        Args:
            conditions: Optional filter conditions

        Returns:
            Record count
        """
        sql = f"SELECT COUNT(*) FROM {self.table_name}"
        where_clause, values = self.build_where(conditions or {})
        if where_clause:
            sql += f" WHERE {where_clause}"

        row = await self.query(sql, values)
        return row[0] if row else 0

    async def delete(self, id: Any) -> bool:
        """
        Delete a record by primary key.

        Args:
            id: Primary key value

        Returns:
            True if a row was deleted
        """
        sql = f"DELETE FROM {self.table_name} WHERE {self.primary_key} = $1"
        return await self.execute(sql, [id]) > 0

    @staticmethod
    def build_where(conditions: Dict[str, Any]) -> "tuple[str, List[Any]]":
        """
        Build a positional-parameter WHERE clause.

        Args:
            conditions: Column-value equality conditions

        Returns:
            Tuple of (clause without ``WHERE``, parameter values)
        """
        keys = list(conditions.keys())
        clause = " AND ".join(f"{key} = ${i + 1}" for i, key in enumerate(keys))
        return clause, list(conditions.values())

    @staticmethod
    def affected_rows(status: Optional[str]) -> int:
        """
        Parse the row count from an asyncpg status string.

        Args:
            status: e.g. ``"UPDATE 3"``, ``"INSERT 0 1"``, ``"DELETE 0"``

        Returns:
            Affected row count
        """
        if not status:
            return 0
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError):
            return 0
