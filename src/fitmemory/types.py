"""Core domain types for fitmemory.

These are plain Python objects with no framework dependencies.
They are the lingua franca between the extractor, the ranker, the store
and your code.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone


class MediaType(str, enum.Enum):
    """What an entry was captured from. Not interpreted by the engine."""

    PHOTO = "photo"
    VIDEO = "video"
    TEXT = "text"    # chat message, no media attached


class TemporalWindow(str, enum.Enum):
    """The date range a recall query implies."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_WEEK = "last week"
    RECENT = "recent"
    UNSCOPED = "unscoped"


@dataclass(frozen=True)
class ActivityTags:
    """Structured facts extracted from one piece of free text."""

    workout_types: frozenset[str] = frozenset()
    muscle_groups: frozenset[str] = frozenset()
    exercises: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.workout_types or self.muscle_groups or self.exercises)

    @property
    def all_tags(self) -> frozenset[str]:
        return self.workout_types | self.muscle_groups | self.exercises


@dataclass
class MemoryEntry:
    """One recorded activity fact.

    Entries are append-only: created once when qualifying text is observed,
    never updated. The tag sets are always derived from ``source_text``;
    build entries with :func:`fitmemory.extraction.build_entry` rather than
    filling the tags by hand.
    """

    # ── identity ────────────────────────────────────────────────────
    id: str
    user_id: str

    # ── content ─────────────────────────────────────────────────────
    source_text: str
    media_ref: str | None = None
    media_type: MediaType = MediaType.TEXT

    # ── extracted tags ──────────────────────────────────────────────
    workout_types: frozenset[str] = frozenset()
    muscle_groups: frozenset[str] = frozenset()
    exercises: frozenset[str] = frozenset()

    # ── time ────────────────────────────────────────────────────────
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    activity_date: date | None = None

    # ── provenance ──────────────────────────────────────────────────
    source: str = "log"    # 'transcript', 'log', 'baseline'

    def __post_init__(self) -> None:
        if self.activity_date is None:
            self.activity_date = self.timestamp.date()

    @property
    def tags(self) -> ActivityTags:
        return ActivityTags(self.workout_types, self.muscle_groups, self.exercises)

    @property
    def search_text(self) -> str:
        """Source text plus extracted tags, lower-cased, for keyword matching."""
        return " ".join(
            [self.source_text, *sorted(self.muscle_groups), *sorted(self.exercises)]
        ).lower()


@dataclass
class SearchResult:
    """A memory entry returned from search, with its relevance score.

    ``relevance`` is additive and unbounded; it is only comparable to other
    results from the same ranking run.
    """

    entry: MemoryEntry
    relevance: float = 0.0
    matched_text: str = ""

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def text(self) -> str:
        return self.entry.source_text

    @staticmethod
    def format_results(results: list[SearchResult]) -> str:
        """Format search results as an LLM-readable string."""
        if not results:
            return "No workout memories found."
        return "\n".join(
            f"[{r.entry.activity_date.isoformat()}] (score={r.relevance:.2f}) "
            f"{r.matched_text}"
            for r in results
        )


@dataclass
class DateRange:
    start: date | None = None
    end: date | None = None


@dataclass
class Aggregates:
    """Union/min/max roll-up over a result set."""

    total_count: int = 0
    date_range: DateRange = field(default_factory=DateRange)
    muscle_groups: frozenset[str] = frozenset()
    exercises: frozenset[str] = frozenset()

    @classmethod
    def empty(cls) -> Aggregates:
        return cls()

    @classmethod
    def from_results(cls, results: list[SearchResult]) -> Aggregates:
        if not results:
            return cls.empty()
        dates = [r.entry.activity_date for r in results]
        muscles: set[str] = set()
        exercises: set[str] = set()
        for r in results:
            muscles |= r.entry.muscle_groups
            exercises |= r.entry.exercises
        return cls(
            total_count=len(results),
            date_range=DateRange(start=min(dates), end=max(dates)),
            muscle_groups=frozenset(muscles),
            exercises=frozenset(exercises),
        )


@dataclass
class RecallSummary:
    """The answer to one recall query. Ephemeral, never persisted."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    narrative: str = ""
    aggregates: Aggregates = field(default_factory=Aggregates)


@dataclass
class StatsReport:
    """Totals over everything visible to search for one user."""

    total_count: int = 0
    muscle_groups: frozenset[str] = frozenset()
    exercises: frozenset[str] = frozenset()
    frequency: dict[date, int] = field(default_factory=dict)
    recent_entries: list[MemoryEntry] = field(default_factory=list)


@dataclass
class TranscriptRecord:
    """One message from the running chat transcript. Read-only to the engine."""

    text: str
    is_from_user: bool
    timestamp: datetime | float | str | None = None
    id: str | None = None


@dataclass
class RankingConfig:
    """Scoring constants for recall ranking.

    The values are tuned by feel rather than derived; override them per
    engine instead of editing the defaults.
    """

    # Temporal bonuses
    today_bonus: float = 1.0
    yesterday_bonus: float = 1.0
    last_week_bonus: float = 0.8
    recent_bonus: float = 0.7
    last_week_days: int = 7
    recent_days: int = 3

    # Lexical overlap
    keyword_bonus: float = 0.3
    min_token_length: int = 3

    # Floor for activity-bearing entries with no other signal
    base_relevance: float = 0.5

    # Entries scoring at or below this are dropped
    min_relevance: float = 0.2

    # Scores this close are ordered by recency instead
    tie_tolerance: float = 0.1
