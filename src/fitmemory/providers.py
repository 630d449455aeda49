"""Candidate providers for recall search.

Search runs an ordered pipeline of providers. Each one yields its own
pre-ranked candidates; earlier providers take priority when the results
are merged. :class:`SimilarityProvider` blends embedding similarity in;
other sources slot in by subclassing :class:`CandidateProvider`.
"""

from __future__ import annotations

import abc
import json
import logging
import math
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from . import ranking, temporal
from .embeddings import EmbeddingProvider, cosine_similarity
from .extraction import build_entry, is_activity_content
from .temporal import coerce_timestamp
from .types import MediaType, MemoryEntry, RankingConfig, SearchResult

logger = logging.getLogger(__name__)

# Transcript messages with an unusable timestamp are dated here, so they
# never match a temporal window and sort last by recency.
UNKNOWN_TIME = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TRANSCRIPT_NS = uuid.UUID("6f1c3a52-9d1e-4c8e-a7b5-2f0d8e4b9c31")

# A transcript accessor: user_id → that user's messages, oldest first.
TranscriptSource = Callable[[str], Iterable[Any]]


class CandidateProvider(abc.ABC):
    """Abstract base. Implement ``candidates``."""

    name: str = "provider"

    @abc.abstractmethod
    def candidates(
        self,
        user_id: str,
        query: str,
        *,
        now: datetime,
        limit: int,
        config: RankingConfig,
    ) -> list[SearchResult]:
        """Return up to ``limit`` ranked results for ``query``."""
        ...


class TranscriptProvider(CandidateProvider):
    """Live scan of the user's chat transcript.

    Every qualifying user message is re-extracted on the fly, so the
    transcript itself is the store; nothing is written back to it.
    """

    name = "transcript"

    def __init__(self, source: TranscriptSource):
        self._source = source

    def entries(self, user_id: str) -> list[MemoryEntry]:
        records = list(self._source(user_id) or [])
        entries = []
        for record in reversed(records):    # newest first
            text = getattr(record, "text", None) or ""
            if not getattr(record, "is_from_user", False) or not text.strip():
                continue
            if not is_activity_content(text):
                continue
            raw_ts = getattr(record, "timestamp", None)
            ts = coerce_timestamp(raw_ts)
            if ts is None:
                logger.debug("transcript: no usable timestamp on %r", text[:60])
                ts = UNKNOWN_TIME
            entries.append(
                build_entry(
                    user_id,
                    text,
                    timestamp=ts,
                    entry_id=self._entry_id(user_id, record, raw_ts, text),
                    source=self.name,
                )
            )
        return entries

    @staticmethod
    def _entry_id(user_id: str, record: Any, raw_ts: Any, text: str) -> str:
        record_id = getattr(record, "id", None)
        if record_id:
            return f"conv_{record_id}"
        return "conv_" + uuid.uuid5(_TRANSCRIPT_NS, f"{user_id}|{raw_ts}|{text}").hex

    def candidates(self, user_id, query, *, now, limit, config):
        return ranking.rank(self.entries(user_id), query, limit, now=now, config=config)


class LogProvider(CandidateProvider):
    """Entries persisted through ``MemoryStore.store``."""

    name = "log"

    def __init__(self, log):
        self._log = log

    def candidates(self, user_id, query, *, now, limit, config):
        return ranking.rank(self._log.entries(user_id), query, limit, now=now, config=config)


# Appended to every query before embedding, pulling it toward training
# content in the vector space.
WORKOUT_QUERY_CONTEXT = "workout fitness exercise gym training muscle"


class SimilarityProvider(CandidateProvider):
    """Stored entries ranked by embedding similarity to the query.

    relevance = ranking.score(entry, query) + similarity_weight * cosine

    Entries below ``min_similarity`` are left to the lexical providers.
    Vectors are cached per entry id; entries are append-only, so a cached
    vector never goes stale. Only ``limit_share`` of the slots are offered,
    leaving room for the lexical log results behind it.
    """

    name = "similarity"

    def __init__(
        self,
        log,
        embedder: EmbeddingProvider,
        *,
        min_similarity: float = 0.3,
        similarity_weight: float = 1.0,
        limit_share: float = 0.5,
        query_context: str = WORKOUT_QUERY_CONTEXT,
    ):
        self._log = log
        self._embedder = embedder
        self._min_similarity = min_similarity
        self._similarity_weight = similarity_weight
        self._limit_share = limit_share
        self._query_context = query_context
        self._vectors: dict[str, list[float]] = {}

    @staticmethod
    def embedding_text(entry: MemoryEntry) -> str:
        """Tags prepended to the text, like "legs, squats: leg day squats"."""
        tags = sorted(entry.tags.all_tags)
        if tags:
            return f"{', '.join(tags)}: {entry.source_text}"
        return entry.source_text

    def candidates(self, user_id, query, *, now, limit, config):
        # An empty query carries no meaning to embed.
        if not (query or "").strip():
            return []
        entries = self._log.entries(user_id)
        if not entries:
            return []

        missing = [e for e in entries if e.id not in self._vectors]
        query_text = f"{query} {self._query_context}".strip()
        vectors = self._embedder.embed(
            [query_text, *(self.embedding_text(e) for e in missing)]
        )
        if len(vectors) != len(missing) + 1:
            raise ValueError(
                f"embedder returned {len(vectors)} vectors for {len(missing) + 1} texts"
            )
        query_vec = vectors[0]
        for entry, vec in zip(missing, vectors[1:]):
            self._vectors[entry.id] = vec

        window = temporal.classify_window(query)
        results = []
        for entry in entries:
            similarity = cosine_similarity(query_vec, self._vectors[entry.id])
            if similarity < self._min_similarity:
                continue
            relevance = ranking.score(entry, query, now=now, config=config, window=window)
            relevance += self._similarity_weight * similarity
            logger.debug("  similarity id=%s cos=%.4f total=%.2f", entry.id, similarity, relevance)
            if relevance <= config.min_relevance:
                continue
            results.append(
                SearchResult(entry=entry, relevance=round(relevance, 4),
                             matched_text=entry.source_text)
            )

        share = max(1, math.ceil(limit * self._limit_share))
        return ranking.order_results(results, config.tie_tolerance)[:share]


class BaselineCollection:
    """A fixed seed set of entries that keeps recall useful for new users.

    Entries owned by :attr:`SHARED` are visible to every user.
    """

    SHARED = "*"

    def __init__(self, entries: Sequence[MemoryEntry] = ()):
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries_for(self, user_id: str) -> list[MemoryEntry]:
        return [e for e in self._entries if e.user_id in (user_id, self.SHARED)]

    @classmethod
    def from_records(
        cls,
        records: Iterable[dict[str, Any]],
        *,
        user_id: str = SHARED,
    ) -> BaselineCollection:
        """Build from dicts with ``text`` and optional ``timestamp``,
        ``user_id``, ``media_ref``, ``media_type`` and ``id`` keys.

        Records with no activity content are skipped, as they would be by
        ``store``.
        """
        entries = []
        for i, rec in enumerate(records):
            text = (rec.get("text") or "").strip()
            if not is_activity_content(text):
                logger.debug("baseline: skipping record %d, no activity content", i)
                continue
            ts = coerce_timestamp(rec.get("timestamp")) or UNKNOWN_TIME
            entries.append(
                build_entry(
                    rec.get("user_id") or user_id,
                    text,
                    timestamp=ts,
                    media_ref=rec.get("media_ref"),
                    media_type=MediaType(rec.get("media_type") or MediaType.TEXT.value),
                    entry_id=rec.get("id") or f"baseline_{i}",
                    source="baseline",
                )
            )
        return cls(entries)

    @classmethod
    def from_json(cls, path: str | Path, *, user_id: str = SHARED) -> BaselineCollection:
        """Load a JSON array of records (see :meth:`from_records`)."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"baseline file {path} must hold a JSON array")
        collection = cls.from_records(data, user_id=user_id)
        logger.info("baseline: loaded %d entries from %s", len(collection), path)
        return collection


class BaselineProvider(CandidateProvider):
    """Seed entries, used to fill whatever slots real history leaves."""

    name = "baseline"

    def __init__(self, collection: BaselineCollection):
        self._collection = collection

    def candidates(self, user_id, query, *, now, limit, config):
        return ranking.rank(
            self._collection.entries_for(user_id), query, limit, now=now, config=config
        )
