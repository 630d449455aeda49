"""Temporal qualification of recall queries.

Classifies the time window a query implies and scores timestamps against
it. The reference instant is always passed in; nothing here reads the
system clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from .types import RankingConfig, TemporalWindow

logger = logging.getLogger(__name__)

# Scanned in order; first phrase found wins.
WINDOW_PHRASES: tuple[tuple[str, TemporalWindow], ...] = (
    ("today", TemporalWindow.TODAY),
    ("yesterday", TemporalWindow.YESTERDAY),
    ("last week", TemporalWindow.LAST_WEEK),
    ("recent", TemporalWindow.RECENT),
)


def classify_window(query: str) -> TemporalWindow:
    """Return the time window implied by ``query``."""
    lowered = (query or "").lower()
    for phrase, window in WINDOW_PHRASES:
        if phrase in lowered:
            return window
    return TemporalWindow.UNSCOPED


def coerce_timestamp(value: object, tz=timezone.utc) -> datetime | None:
    """Best-effort conversion to an aware datetime. ``None`` if unusable.

    Accepts datetimes (naive ones are taken as ``tz``), epoch seconds or
    milliseconds, and ISO-8601 strings.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, datetime):
            ts = value
        elif isinstance(value, (int, float)):
            seconds = float(value)
            if seconds > 1e11:    # epoch milliseconds
                seconds /= 1000.0
            ts = datetime.fromtimestamp(seconds, tz=timezone.utc)
        elif isinstance(value, str):
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        else:
            return None
    except (ValueError, OverflowError, OSError) as e:
        logger.debug("unparseable timestamp %r: %s", value, e)
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=tz)
    return ts


def score(
    timestamp: object,
    window: TemporalWindow,
    now: datetime,
    config: RankingConfig | None = None,
) -> float:
    """Temporal bonus for ``timestamp`` under ``window``, relative to ``now``.

    Never raises: a missing or unparseable timestamp scores 0.
    """
    if window is TemporalWindow.UNSCOPED:
        return 0.0
    cfg = config or RankingConfig()
    tz = now.tzinfo or timezone.utc
    ts = coerce_timestamp(timestamp, tz)
    if ts is None:
        return 0.0
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)

    day = ts.astimezone(tz).date()
    today = now.astimezone(tz).date()

    if window is TemporalWindow.TODAY:
        return cfg.today_bonus if day == today else 0.0
    if window is TemporalWindow.YESTERDAY:
        return cfg.yesterday_bonus if day == today - timedelta(days=1) else 0.0
    if window is TemporalWindow.LAST_WEEK:
        return cfg.last_week_bonus if ts >= now - timedelta(days=cfg.last_week_days) else 0.0
    if window is TemporalWindow.RECENT:
        return cfg.recent_bonus if ts >= now - timedelta(days=cfg.recent_days) else 0.0
    return 0.0
