"""
Tests for commands/selection_store.py: per-user pending selections.
"""

import asyncio

import pytest

from commands.selection_store import (
    MovieSearchResults,
    SelectionKind,
    SelectionStore,
    VideoQualityChoice,
    VideoSearchResults,
)
from tests.helpers import ALICE, BOB


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def video_results(count: int = 3) -> VideoSearchResults:
    return VideoSearchResults(
        query="lofi",
        results=[{"title": f"Video {i}", "url": f"https://youtu.be/{i}"} for i in range(1, count + 1)],
    )


@pytest.mark.asyncio
async def test_take_returns_and_removes():
    store = SelectionStore()
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())

    pending = await store.take(ALICE)
    assert pending.kind is SelectionKind.VIDEO_SEARCH_RESULTS
    assert pending.payload.results[0]["title"] == "Video 1"
    assert await store.take(ALICE) is None


@pytest.mark.asyncio
async def test_take_without_entry_returns_none():
    assert await SelectionStore().take(ALICE) is None


@pytest.mark.asyncio
async def test_put_replaces_previous_selection():
    store = SelectionStore()
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())
    await store.put(ALICE, SelectionKind.MOVIE_SEARCH_RESULTS, MovieSearchResults(query="x", results=[{}]))

    pending = await store.take(ALICE)
    assert pending.kind is SelectionKind.MOVIE_SEARCH_RESULTS
    assert len(store) == 0


@pytest.mark.asyncio
async def test_users_are_isolated():
    store = SelectionStore()
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())

    assert await store.take(BOB) is None
    assert await store.take(ALICE) is not None


@pytest.mark.asyncio
async def test_put_rejects_mismatched_payload():
    store = SelectionStore()
    with pytest.raises(TypeError):
        await store.put(ALICE, SelectionKind.MOVIE_SEARCH_RESULTS, video_results())
    assert len(store) == 0


@pytest.mark.asyncio
async def test_concurrent_takes_resolve_once():
    store = SelectionStore()
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())

    first, second = await asyncio.gather(store.take(ALICE), store.take(ALICE))
    assert [first, second].count(None) == 1


@pytest.mark.asyncio
async def test_expired_selection_is_dropped_on_take():
    clock = FakeClock()
    store = SelectionStore(ttl=300, clock=clock)
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())

    clock.now += 301
    assert await store.take(ALICE) is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_selection_within_ttl_survives():
    clock = FakeClock()
    store = SelectionStore(ttl=300, clock=clock)
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())

    clock.now += 299
    assert await store.take(ALICE) is not None


@pytest.mark.asyncio
async def test_sweep_removes_only_expired():
    clock = FakeClock()
    store = SelectionStore(ttl=60, clock=clock)
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())
    clock.now += 45
    await store.put(BOB, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())
    clock.now += 30

    assert store.sweep() == 1
    assert len(store) == 1
    assert await store.take(BOB) is not None


@pytest.mark.asyncio
async def test_zero_ttl_never_expires():
    clock = FakeClock()
    store = SelectionStore(ttl=0, clock=clock)
    await store.put(ALICE, SelectionKind.VIDEO_SEARCH_RESULTS, video_results())
    clock.now += 10 ** 6
    assert store.sweep() == 0
    assert await store.take(ALICE) is not None


def test_search_results_pick_is_one_based():
    payload = video_results(3)
    assert payload.pick(1)["title"] == "Video 1"
    assert payload.pick(3)["title"] == "Video 3"
    assert payload.pick(0) is None
    assert payload.pick(4) is None
    assert payload.option_count() == 3


def test_quality_choice_pick():
    choice = VideoQualityChoice(url="https://youtu.be/1", title="Song")
    assert choice.pick(1) == "high"
    assert choice.pick(2) == "medium"
    assert choice.pick(3) == "audio"
    assert choice.pick(4) is None
    assert choice.option_count() == 3
