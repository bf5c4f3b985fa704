"""Shared fixtures for bot tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bot.config import Config
from commands import CommandRegistry, Dispatcher, SelectionStore, Services
from tests.helpers import OWNER_NUMBER, FakeTransport, make_users
from utils.error_handler import get_error_handler
from utils.monitoring import Monitoring


@pytest.fixture(autouse=True)
def reset_error_counts():
    yield
    get_error_handler().reset()


@pytest.fixture
def bot_config() -> Config:
    return Config(OWNER_NUMBER=OWNER_NUMBER, PREFIX=".", BOT_NAME="Test Bot", TEMP_DIR="temp")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def services(transport, bot_config, registry) -> Services:
    command_logs = MagicMock()
    command_logs.append = AsyncMock()
    command_logs.top_commands = AsyncMock(return_value=[])

    settings = MagicMock()
    settings.update_group_setting = AsyncMock()
    settings.update_global_setting = AsyncMock()

    return Services(
        transport=transport,
        config=bot_config,
        registry=registry,
        selections=SelectionStore(),
        users=make_users(),
        groups=MagicMock(),
        command_logs=command_logs,
        settings=settings,
        downloads=MagicMock(),
        reminders=MagicMock(),
        monitoring=Monitoring(),
    )


@pytest.fixture
def dispatcher(registry, services) -> Dispatcher:
    return Dispatcher(registry, services)
