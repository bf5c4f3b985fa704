"""
Configuration management for the WhatsApp bot.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_API_BASE = "https://api.prabath.top/api/v1"
DEFAULT_MAX_FILE_SIZE = 2000 * 1024 * 1024  # WhatsApp document limit


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Identity
    OWNER_NUMBER: str
    PREFIX: str = "."
    BOT_NAME: str = "WhatsApp Bot"
    BOT_NUMBER: str = ""

    # Database
    DATABASE_URL: str = ""

    # WhatsApp bridge (runs the session library)
    BRIDGE_URL: str = "http://127.0.0.1:3000"
    BRIDGE_TOKEN: str = ""

    # Download/search API
    DOWNLOAD_API_BASE: str = DEFAULT_API_BASE
    DOWNLOAD_API_KEY: str = ""
    TEMP_DIR: str = "temp"
    MAX_FILE_SIZE: int = DEFAULT_MAX_FILE_SIZE

    # Pending numbered-list selections expire after this many seconds
    SELECTION_TTL: int = 300

    # Web server (health + bridge webhooks)
    PORT: int = 11186
    HOST: str = "0.0.0.0"

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            OWNER_NUMBER=os.getenv("OWNER_NUMBER", ""),
            PREFIX=os.getenv("PREFIX", "."),
            BOT_NAME=os.getenv("BOT_NAME", "WhatsApp Bot"),
            BOT_NUMBER=os.getenv("BOT_NUMBER", ""),
            DATABASE_URL=os.getenv("DATABASE_URL", ""),
            BRIDGE_URL=os.getenv("BRIDGE_URL", "http://127.0.0.1:3000"),
            BRIDGE_TOKEN=os.getenv("BRIDGE_TOKEN", ""),
            DOWNLOAD_API_BASE=os.getenv("DOWNLOAD_API_BASE", DEFAULT_API_BASE),
            DOWNLOAD_API_KEY=os.getenv("DOWNLOAD_API_KEY", ""),
            TEMP_DIR=os.getenv("TEMP_DIR", "temp"),
            MAX_FILE_SIZE=int(os.getenv("MAX_FILE_SIZE", str(DEFAULT_MAX_FILE_SIZE))),
            SELECTION_TTL=int(os.getenv("SELECTION_TTL", "300")),
            PORT=int(os.getenv("PORT", "11186")),
            HOST=os.getenv("HOST", "0.0.0.0"),
            DEBUG=os.getenv("DEBUG", "false").lower() == "true",
        )

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.OWNER_NUMBER:
            raise ValueError("OWNER_NUMBER is required")
        if not self.BRIDGE_URL:
            raise ValueError("BRIDGE_URL is required")
        if not self.PREFIX:
            raise ValueError("PREFIX must not be empty")


# Global config instance
config = Config.from_env()
