"""
Tests for the timer-based managers: reminders and periodic maintenance.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from commands.selection_store import SelectionKind, SelectionStore, VideoSearchResults
from managers.base_manager import BaseManager
from managers.maintenance_manager import MaintenanceManager
from managers.reminder_manager import ReminderManager
from tests.helpers import ALICE, FakeTransport


@pytest.mark.asyncio
async def test_managed_timer_runs_once_and_is_removed():
    manager = BaseManager("Test")
    fired = []

    manager.set_managed_timer("once", lambda: fired.append(1), 1)
    await asyncio.sleep(0.05)

    assert fired == [1]
    assert "once" not in manager.timers


@pytest.mark.asyncio
async def test_timer_callback_errors_are_contained():
    manager = BaseManager("Test")

    async def broken():
        raise RuntimeError("boom")

    task = manager.set_managed_timer("broken", broken, 1)
    await asyncio.sleep(0.05)
    assert task.done() and task.exception() is None


@pytest.mark.asyncio
async def test_cleanup_cancels_timers():
    manager = BaseManager("Test")
    fired = []
    manager.set_periodic_timer("tick", lambda: fired.append(1), 10_000)

    manager.cleanup()
    await asyncio.sleep(0)

    assert manager.timers == {}
    assert not manager.is_enabled()
    assert fired == []


@pytest.mark.asyncio
async def test_reminder_fires_with_mention():
    transport = FakeTransport()
    reminders = ReminderManager(transport)

    name = reminders.schedule(ALICE, ALICE, 0, "drink water")
    assert name == "reminder:1"
    await asyncio.sleep(0.05)

    assert transport.sent == [(ALICE, {
        "text": "⏰ *REMINDER*\n\n@94771111111\ndrink water",
        "mentions": [ALICE],
    })]
    assert reminders.pending_count() == 0


@pytest.mark.asyncio
async def test_reminders_are_independent_and_cancellable():
    reminders = ReminderManager(FakeTransport())
    reminders.schedule(ALICE, ALICE, 5, "one")
    reminders.schedule(ALICE, ALICE, 5, "two")
    assert reminders.pending_count() == 2

    reminders.cleanup()
    assert reminders.pending_count() == 0


@pytest.mark.asyncio
async def test_refresh_presence_respects_always_online():
    transport = FakeTransport()
    settings = MagicMock()
    settings.is_always_online_enabled = AsyncMock(return_value=True)
    maintenance = MaintenanceManager(transport, settings, SelectionStore())

    await maintenance.refresh_presence()
    assert transport.calls == [("presence", "available")]

    settings.is_always_online_enabled.return_value = False
    await maintenance.refresh_presence()
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_sweep_selections_delegates_to_store():
    now = [0.0]
    store = SelectionStore(ttl=10, clock=lambda: now[0])
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, VideoSearchResults(query="q"))
    now[0] = 11.0

    maintenance = MaintenanceManager(FakeTransport(), MagicMock(), store)
    assert maintenance.sweep_selections() == 1


@pytest.mark.asyncio
async def test_start_registers_periodic_jobs():
    maintenance = MaintenanceManager(FakeTransport(), MagicMock(), SelectionStore())
    maintenance.start()
    try:
        assert set(maintenance.timers) == {"presence", "selection-sweep"}
        assert maintenance.is_enabled()
    finally:
        maintenance.cleanup()
