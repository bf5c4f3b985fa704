"""
Tests for managers/settings_manager.py.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from managers.settings_manager import DEFAULT_BAD_WORDS, SettingsManager
from tests.helpers import GROUP


def make_manager(stored=None, group_settings=None):
    stored = dict(stored or {})

    settings_repo = MagicMock()
    settings_repo.get = AsyncMock(side_effect=lambda key, default=None: stored.get(key, default))

    async def set_value(key, value):
        stored[key] = value

    settings_repo.set = AsyncMock(side_effect=set_value)

    group_repo = MagicMock()
    group_repo.get_settings = AsyncMock(return_value=group_settings or {})
    group_repo.update_setting = AsyncMock()
    return SettingsManager(settings_repo, group_repo), stored


@pytest.mark.asyncio
async def test_global_settings_are_cached():
    manager, _ = make_manager({"global": {"autoSeen": True}})

    assert await manager.is_auto_seen_enabled()
    assert await manager.is_auto_seen_enabled()
    manager.settings_repo.get.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_global_setting_persists_and_updates_cache():
    manager, stored = make_manager()

    await manager.update_global_setting("autoStatusView", True)

    assert stored["global"] == {"autoStatusView": True}
    assert await manager.is_auto_status_view_enabled()


@pytest.mark.asyncio
async def test_update_unknown_global_setting_raises():
    manager, _ = make_manager()
    with pytest.raises(ValueError):
        await manager.update_global_setting("selfDestruct", True)


@pytest.mark.asyncio
async def test_always_online_defaults_to_on():
    manager, _ = make_manager()
    assert await manager.is_always_online_enabled()

    await manager.update_global_setting("alwaysOnline", False)
    assert not await manager.is_always_online_enabled()


@pytest.mark.asyncio
async def test_bad_words_default_list():
    manager, _ = make_manager()
    assert await manager.get_bad_words() == DEFAULT_BAD_WORDS


@pytest.mark.asyncio
async def test_add_and_remove_bad_word():
    manager, stored = make_manager()

    assert await manager.add_bad_word("Spam")
    assert not await manager.add_bad_word("spam")
    assert "spam" in stored["badWords"]

    assert await manager.remove_bad_word("SPAM")
    assert not await manager.remove_bad_word("spam")
    assert "spam" not in stored["badWords"]


@pytest.mark.asyncio
async def test_group_flag_or_global_flag_enables_filter():
    manager, _ = make_manager(group_settings={"antilink": True})
    assert await manager.is_antilink_enabled(GROUP)
    assert not await manager.is_antibadword_enabled(GROUP)

    manager, _ = make_manager({"global": {"antibadword": True}})
    assert await manager.is_antibadword_enabled(GROUP)


@pytest.mark.asyncio
async def test_update_group_setting_delegates():
    manager, _ = make_manager()
    await manager.update_group_setting(GROUP, "muted", True)
    manager.group_repo.update_setting.assert_awaited_once_with(GROUP, "muted", True)
