"""Relevance ranking of memory entries against a recall query.

Scoring formula:
    relevance = temporal_bonus(window, entry.timestamp)
              + keyword_bonus * (# query tokens found in entry.search_text)

If neither term fires and the entry is activity-bearing, it gets
``base_relevance`` instead, so broad queries ("show me my workouts")
still surface it. Entries at or below ``min_relevance`` are dropped.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from . import temporal
from .extraction import is_activity_content
from .types import MemoryEntry, RankingConfig, SearchResult, TemporalWindow

logger = logging.getLogger(__name__)

_PUNCTUATION = ".,!?;:\"'()[]{}"

# Absorbs float noise so 0.6 vs 0.5 counts as "within 0.1".
_EPSILON = 1e-9


def tokenize(query: str, min_length: int = 3) -> list[str]:
    """Lower-cased query words of at least ``min_length`` characters.

    Repeated words are kept; each occurrence counts toward the score.
    """
    tokens = []
    for word in (query or "").lower().split():
        word = word.strip(_PUNCTUATION)
        if len(word) >= min_length:
            tokens.append(word)
    return tokens


def is_activity_bearing(entry: MemoryEntry) -> bool:
    return not entry.tags.is_empty or is_activity_content(entry.source_text)


def score(
    entry: MemoryEntry,
    query: str,
    *,
    now: datetime | None = None,
    config: RankingConfig | None = None,
    window: TemporalWindow | None = None,
) -> float:
    """Composite relevance of ``entry`` for ``query``."""
    cfg = config or RankingConfig()
    now = now or datetime.now(timezone.utc)
    if window is None:
        window = temporal.classify_window(query)

    time_bonus = temporal.score(entry.timestamp, window, now, cfg)

    haystack = entry.search_text
    hits = [t for t in tokenize(query, cfg.min_token_length) if t in haystack]
    keyword_bonus = cfg.keyword_bonus * len(hits)

    relevance = time_bonus + keyword_bonus
    if relevance == 0 and is_activity_bearing(entry):
        relevance = cfg.base_relevance

    logger.debug(
        "  candidate id=%s window=%s time=%.2f keywords=%s total=%.2f text=%r",
        entry.id, window.value, time_bonus, hits, relevance, entry.source_text[:80],
    )
    return relevance


def order_results(results: list[SearchResult], tolerance: float = 0.1) -> list[SearchResult]:
    """Sort by relevance, breaking near-ties by recency.

    Results are sorted by descending relevance, then split into runs where
    neighbouring scores differ by at most ``tolerance``. Each run is
    re-ordered newest first. Runs stay in relevance order, so any two
    results from different runs differ by more than ``tolerance``.
    """
    by_score = sorted(
        results, key=lambda r: (r.relevance, r.entry.timestamp), reverse=True
    )
    ordered: list[SearchResult] = []
    run: list[SearchResult] = []
    for r in by_score:
        if run and run[-1].relevance - r.relevance > tolerance + _EPSILON:
            ordered.extend(sorted(run, key=lambda x: x.entry.timestamp, reverse=True))
            run = []
        run.append(r)
    ordered.extend(sorted(run, key=lambda x: x.entry.timestamp, reverse=True))
    return ordered


def rank(
    entries: Iterable[MemoryEntry],
    query: str,
    limit: int,
    *,
    now: datetime | None = None,
    config: RankingConfig | None = None,
) -> list[SearchResult]:
    """Score, filter, order and truncate ``entries`` for ``query``.

    Truncation happens after the full ordering, so the result is always the
    top ``limit`` of the complete ranking.
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    cfg = config or RankingConfig()
    now = now or datetime.now(timezone.utc)
    window = temporal.classify_window(query)

    results = []
    for entry in entries:
        relevance = score(entry, query, now=now, config=cfg, window=window)
        if relevance <= cfg.min_relevance:
            logger.debug("  → FILTERED id=%s (%.2f <= %.2f)",
                         entry.id, relevance, cfg.min_relevance)
            continue
        results.append(
            SearchResult(entry=entry, relevance=round(relevance, 4),
                         matched_text=entry.source_text)
        )

    ordered = order_results(results, cfg.tie_tolerance)
    return ordered[:limit]
