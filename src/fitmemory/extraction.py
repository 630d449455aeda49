"""Entity extraction: free text → structured activity tags.

Pure functions of the input text. No hidden state, no I/O; running
extraction twice on the same text always yields the same tags.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

from .temporal import coerce_timestamp
from .types import ActivityTags, MediaType, MemoryEntry
from .vocabulary import (
    ACTIVITY_KEYWORDS,
    COMPOUND_EXERCISES,
    EXERCISE_NAMES,
    MUSCLE_GROUPS,
    QUANTITY_PATTERNS,
    WORKOUT_TYPES,
)

# "squat", "squats", "presses", "crunches". Whole words only, so "pressure"
# and "diploma" report nothing.
_EXERCISE_NAME_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(n) for n in EXERCISE_NAMES) + r")(?:es|s)?\b",
    re.IGNORECASE,
)


def _labels(lowered: str, table: dict[str, tuple[str, ...]]) -> frozenset[str]:
    return frozenset(
        label for label, triggers in table.items()
        if any(t in lowered for t in triggers)
    )


def _exercises(text: str, lowered: str) -> frozenset[str]:
    found: set[str] = set()
    for pattern in QUANTITY_PATTERNS:
        found.update(" ".join(m.group(0).split()).casefold() for m in pattern.finditer(text))
    found.update(name for name in COMPOUND_EXERCISES if name in lowered)
    found.update(m.group(0).casefold() for m in _EXERCISE_NAME_RE.finditer(text))
    return frozenset(found)


def extract(text: str) -> ActivityTags:
    """Extract workout types, muscle groups and exercises from ``text``.

    All three sets may come back empty; that is a valid "no signal" result.
    """
    if not text:
        return ActivityTags()
    lowered = text.lower()
    return ActivityTags(
        workout_types=_labels(lowered, WORKOUT_TYPES),
        muscle_groups=_labels(lowered, MUSCLE_GROUPS),
        exercises=_exercises(text, lowered),
    )


def is_activity_content(text: str) -> bool:
    """True if ``text`` contains any known activity keyword.

    Callers use this to decide whether a piece of text deserves a memory
    entry at all.
    """
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in ACTIVITY_KEYWORDS)


def build_entry(
    user_id: str,
    text: str,
    *,
    timestamp: datetime | None = None,
    media_ref: str | None = None,
    media_type: MediaType = MediaType.TEXT,
    entry_id: str | None = None,
    source: str = "log",
) -> MemoryEntry:
    """Build a :class:`MemoryEntry` with tags derived from ``text``.

    Naive timestamps are taken as UTC; every entry carries an aware one.
    """
    tags = extract(text)
    ts = coerce_timestamp(timestamp) if timestamp is not None else None
    return MemoryEntry(
        id=entry_id or uuid.uuid4().hex,
        user_id=user_id,
        source_text=text,
        media_ref=media_ref,
        media_type=media_type,
        workout_types=tags.workout_types,
        muscle_groups=tags.muscle_groups,
        exercises=tags.exercises,
        timestamp=ts or datetime.now(timezone.utc),
        source=source,
    )
