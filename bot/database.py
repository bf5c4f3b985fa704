"""
Database connection management using asyncpg.
"""

from typing import Optional

import asyncpg

from bot.config import config
from utils.logger import get_logger

logger = get_logger("Database")

_pool: Optional[asyncpg.Pool] = None


async def init_database(database_url: Optional[str] = None) -> Optional[asyncpg.Pool]:
    """
    Initialize database connection pool.

    Args:
        database_url: Override for ``config.DATABASE_URL``

    Returns:
        The pool, or None when no database is configured
    """
    global _pool

    url = database_url or config.DATABASE_URL
    if not url:
        logger.warning("DATABASE_URL not set - persistence disabled")
        return None

    try:
        _pool = await asyncpg.create_pool(
            url,
            min_size=1,
            max_size=10,
            command_timeout=60,
        )
        logger.info("Database connected successfully")
        await _init_tables()
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise

    return _pool


async def _init_tables() -> None:
    """Initialize database tables if they don't exist."""
    if not _pool:
        return

    async with _pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                jid VARCHAR(255) PRIMARY KEY,
                name VARCHAR(255) DEFAULT '',
                is_banned BOOLEAN DEFAULT FALSE,
                warnings INTEGER DEFAULT 0,
                command_usage INTEGER DEFAULT 0,
                registered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                last_seen TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS groups (
                jid VARCHAR(255) PRIMARY KEY,
                name VARCHAR(255) DEFAULT '',
                participants TEXT[] DEFAULT '{}',
                admins TEXT[] DEFAULT '{}',
                antilink BOOLEAN DEFAULT FALSE,
                antibadword BOOLEAN DEFAULT FALSE,
                muted BOOLEAN DEFAULT FALSE,
                locked BOOLEAN DEFAULT FALSE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS command_logs (
                id SERIAL PRIMARY KEY,
                user_jid VARCHAR(255) NOT NULL,
                command VARCHAR(255) NOT NULL,
                group_jid VARCHAR(255),
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS bot_settings (
                key VARCHAR(255) PRIMARY KEY,
                value TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        logger.info("Database tables initialized")


async def close_database() -> None:
    """Close database connection pool."""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database connection closed")


def is_connected() -> bool:
    """Check if database is connected."""
    return _pool is not None


def get_pool() -> Optional[asyncpg.Pool]:
    """Get the database connection pool."""
    return _pool
