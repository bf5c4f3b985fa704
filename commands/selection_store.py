"""
Selection Store
One pending numbered-list selection per user, consumed by the next bare-number reply
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from utils.logger import get_logger

DEFAULT_SELECTION_TTL = 300


class SelectionKind(str, Enum):
    """Which listing a pending selection answers."""

    VIDEO_SEARCH_RESULTS = "video-search-results"
    VIDEO_QUALITY_CHOICE = "video-quality-choice"
    MOVIE_SEARCH_RESULTS = "movie-search-results"
    TV_SEARCH_RESULTS = "tv-search-results"
    BAISCOPE_SEARCH_RESULTS = "baiscope-search-results"
    SUBTITLE_SEARCH_RESULTS = "subtitle-search-results"


@dataclass
class SearchResults:
    """Items of a numbered search listing."""

    query: str
    results: List[Dict[str, Any]] = field(default_factory=list)

    def option_count(self) -> int:
        return len(self.results)

    def pick(self, number: int) -> Optional[Dict[str, Any]]:
        """1-based item, or None when out of range."""
        if 1 <= number <= len(self.results):
            return self.results[number - 1]
        return None


class VideoSearchResults(SearchResults):
    pass


class MovieSearchResults(SearchResults):
    pass


class TvSearchResults(SearchResults):
    pass


class BaiscopeSearchResults(SearchResults):
    pass


class SubtitleSearchResults(SearchResults):
    pass


# Menu order of the quality choice
VIDEO_QUALITIES = ("high", "medium", "audio")


@dataclass
class VideoQualityChoice:
    """Quality menu shown for one video."""

    url: str
    title: str
    info: Dict[str, Any] = field(default_factory=dict)

    def option_count(self) -> int:
        return len(VIDEO_QUALITIES)

    def pick(self, number: int) -> Optional[str]:
        if 1 <= number <= len(VIDEO_QUALITIES):
            return VIDEO_QUALITIES[number - 1]
        return None


SelectionPayload = Union[
    VideoSearchResults,
    VideoQualityChoice,
    MovieSearchResults,
    TvSearchResults,
    BaiscopeSearchResults,
    SubtitleSearchResults,
]

PAYLOAD_TYPES = {
    SelectionKind.VIDEO_SEARCH_RESULTS: VideoSearchResults,
    SelectionKind.VIDEO_QUALITY_CHOICE: VideoQualityChoice,
    SelectionKind.MOVIE_SEARCH_RESULTS: MovieSearchResults,
    SelectionKind.TV_SEARCH_RESULTS: TvSearchResults,
    SelectionKind.BAISCOPE_SEARCH_RESULTS: BaiscopeSearchResults,
    SelectionKind.SUBTITLE_SEARCH_RESULTS: SubtitleSearchResults,
}


@dataclass
class PendingSelection:
    """A listing waiting for the user's numeric reply."""

    kind: SelectionKind
    payload: SelectionPayload
    created_at: float

    def is_expired(self, ttl: float, now: float) -> bool:
        return ttl > 0 and now - self.created_at > ttl


class SelectionStore:
    """
    Per-user pending selections.

    ``put`` overwrites, ``take`` reads and deletes in one step. Both run under
    a per-user asyncio.Lock so two concurrent replies from the same user can
    never resolve the same selection twice. Different users never contend.
    """

    def __init__(self, ttl: float = DEFAULT_SELECTION_TTL, clock: Callable[[], float] = time.monotonic):
        self.logger = get_logger("SelectionStore")
        self.ttl = ttl
        self._clock = clock
        self._pending: Dict[str, PendingSelection] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, user_id: str) -> asyncio.Lock:
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        return self._locks[user_id]

    async def put(self, user_id: str, kind: SelectionKind, payload: SelectionPayload) -> None:
        """
        Store a pending selection for a user, replacing any previous one.

        Args:
            user_id: User JID
            kind: Selection kind
            payload: Payload matching the kind

        Raises:
            TypeError: If the payload type does not belong to the kind
        """
        kind = SelectionKind(kind)
        expected = PAYLOAD_TYPES[kind]
        if type(payload) is not expected:
            raise TypeError(f"{kind.value} expects {expected.__name__}, got {type(payload).__name__}")

        async with self._get_lock(user_id):
            self._pending[user_id] = PendingSelection(kind, payload, self._clock())
        self.logger.debug(f"Pending {kind.value} for {user_id}")

    async def take(self, user_id: str) -> Optional[PendingSelection]:
        """
        Remove and return a user's pending selection.

        Args:
            user_id: User JID

        Returns:
            PendingSelection, or None if there is none or it has expired
        """
        async with self._get_lock(user_id):
            pending = self._pending.pop(user_id, None)

        if pending and pending.is_expired(self.ttl, self._clock()):
            self.logger.debug(f"Dropped expired {pending.kind.value} for {user_id}")
            return None
        return pending

    def sweep(self) -> int:
        """
        Remove every expired selection.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [
            user_id
            for user_id, pending in self._pending.items()
            if pending.is_expired(self.ttl, now)
        ]
        for user_id in expired:
            del self._pending[user_id]

        # Locks of users with nothing pending are no longer needed
        for user_id in [u for u, lock in self._locks.items() if u not in self._pending and not lock.locked()]:
            del self._locks[user_id]

        if expired:
            self.logger.debug(f"Swept {len(expired)} expired selections")
        return len(expired)

    def __len__(self) -> int:
        return len(self._pending)
