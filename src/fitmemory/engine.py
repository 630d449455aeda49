"""The public facade: store, search, summarize, stats.

This is the only surface a UI layer or any other caller needs.
"""

from __future__ import annotations

import logging
import sys
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Sequence

from .embeddings import EmbeddingProvider
from .generation import TextGenerator
from .providers import (
    BaselineCollection,
    BaselineProvider,
    CandidateProvider,
    LogProvider,
    SimilarityProvider,
    TranscriptProvider,
    TranscriptSource,
)
from .store import InMemoryMemoryLog, MemoryLog, MemoryStore
from .summarizer import RecallSummarizer
from .types import (
    MediaType,
    MemoryEntry,
    RankingConfig,
    RecallSummary,
    SearchResult,
    StatsReport,
)

logger = logging.getLogger(__name__)


class MemoryEngine:
    """Activity memory & recall for a single user's bounded history.

    Usage:
        engine = MemoryEngine(
            transcript=lambda user_id: chat_history[user_id],
            generator=OpenAITextGenerator(),
        )

        # Store (returns None for text with no activity in it)
        entry = engine.store("user_1", "leg day: squats 4x8", "media://abc")

        # Search (transcript, then embedding matches when an embedder is
        # set, then stored entries, then baseline)
        results = engine.search("user_1", "what did I do last week?")

        # Answer
        summary = await engine.summarize("what did I do last week?", results)

        # Totals
        report = engine.stats("user_1")

    Pass ``providers`` to replace the default pipeline entirely.
    """

    def __init__(
        self,
        *,
        transcript: TranscriptSource | None = None,
        log: MemoryLog | None = None,
        baseline: BaselineCollection | None = None,
        generator: TextGenerator | None = None,
        embedder: EmbeddingProvider | None = None,
        ranking: RankingConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        providers: Sequence[CandidateProvider] | None = None,
        default_limit: int = 10,
        stats_limit: int | None = None,
    ):
        self._log = log if log is not None else InMemoryMemoryLog()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._default_limit = default_limit
        self._stats_limit = stats_limit

        if providers is None:
            providers = []
            if transcript is not None:
                providers.append(TranscriptProvider(transcript))
            if embedder is not None:
                providers.append(SimilarityProvider(self._log, embedder))
            providers.append(LogProvider(self._log))
            if baseline is not None:
                providers.append(BaselineProvider(baseline))

        self._store = MemoryStore(
            self._log, providers, ranking=ranking, clock=self._clock
        )
        self._summarizer = RecallSummarizer(generator)

    @property
    def log(self) -> MemoryLog:
        return self._log

    def store(
        self,
        user_id: str,
        source_text: str,
        media_ref: str | None = None,
        *,
        media_type: MediaType | None = None,
        timestamp: datetime | None = None,
    ) -> MemoryEntry | None:
        """Record ``source_text`` if it describes an activity."""
        return self._store.store(
            user_id, source_text, media_ref, media_type=media_type, timestamp=timestamp
        )

    def search(self, user_id: str, query: str, limit: int | None = None) -> list[SearchResult]:
        """Ranked recall results for ``query``; empty when nothing qualifies."""
        return self._store.search(
            user_id, query, self._default_limit if limit is None else limit
        )

    async def summarize(self, query: str, results: list[SearchResult]) -> RecallSummary:
        """Synthesize an answer. Never raises on generator failure."""
        return await self._summarizer.summarize(query, results)

    async def recall(self, user_id: str, query: str, limit: int | None = None) -> RecallSummary:
        """``search`` then ``summarize`` in one call."""
        return await self.summarize(query, self.search(user_id, query, limit))

    def stats(self, user_id: str) -> StatsReport:
        """Totals over every entry visible to search for ``user_id``."""
        # An empty query carries no temporal or keyword signal, so every
        # activity-bearing entry scores the base relevance and is kept.
        limit = sys.maxsize if self._stats_limit is None else self._stats_limit
        entries = [r.entry for r in self.search(user_id, "", limit)]
        if len(entries) >= limit:
            logger.debug("stats: user=%s capped at stats_limit=%d", user_id, limit)
        if not entries:
            return StatsReport()

        muscles: set[str] = set()
        exercises: set[str] = set()
        for e in entries:
            muscles |= e.muscle_groups
            exercises |= e.exercises
        frequency = Counter(e.activity_date for e in entries)
        recent = sorted(entries, key=lambda e: e.timestamp, reverse=True)[:10]

        logger.debug("stats: user=%s entries=%d days=%d", user_id, len(entries), len(frequency))
        return StatsReport(
            total_count=len(entries),
            muscle_groups=frozenset(muscles),
            exercises=frozenset(exercises),
            frequency=dict(sorted(frequency.items())),
            recent_entries=recent,
        )
