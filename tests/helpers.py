"""Test utilities — fake embedders, text generators and transcripts, plus a fixed clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fitmemory.embeddings import EmbeddingProvider
from fitmemory.generation import TextGenerator
from fitmemory.types import TranscriptRecord

# A fixed "now" keeps calendar-day comparisons stable whatever the wall clock says.
NOW = datetime(2024, 6, 15, 14, 30, tzinfo=timezone.utc)


def fixed_clock(now: datetime = NOW):
    return lambda: now


def days_ago(n: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=n)


class FakeTextGenerator(TextGenerator):
    """Echoes a canned reply and remembers every prompt. No external calls."""

    def __init__(self, reply: str = "Great work this week!"):
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FailingTextGenerator(TextGenerator):
    """Always raises, like an unreachable provider."""

    def __init__(self, exc: Exception | None = None):
        self.exc = exc or ConnectionError("provider unavailable")
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise self.exc


class ListTranscript:
    """Per-user message lists, usable as a transcript accessor."""

    def __init__(self):
        self.messages: dict[str, list[TranscriptRecord]] = {}

    def add(self, user_id: str, text: str, when: datetime, *, from_user: bool = True,
            msg_id: str | None = None) -> None:
        self.messages.setdefault(user_id, []).append(
            TranscriptRecord(text=text, is_from_user=from_user, timestamp=when, id=msg_id)
        )

    def __call__(self, user_id: str) -> list[TranscriptRecord]:
        return list(self.messages.get(user_id, []))


class FakeEmbeddingProvider(EmbeddingProvider):
    """Keyword-axis embeddings for testing. No external calls.

    Each axis is 1.0 when any of its trigger words appears in the text, so
    similarity between two texts is predictable by hand.
    """

    AXES = {
        "legs": ("leg", "squat", "lower body"),
        "chest": ("chest", "bench"),
        "cardio": ("cardio", "treadmill", "run"),
    }

    def __init__(self):
        self.calls: list[list[str]] = []

    @property
    def dimensions(self) -> int:
        return len(self.AXES)

    def embed(self, texts):
        self.calls.append(list(texts))
        return [
            [1.0 if any(w in t.lower() for w in words) else 0.0 for words in self.AXES.values()]
            for t in texts
        ]


class FailingEmbeddingProvider(EmbeddingProvider):
    """Always raises, like an unreachable embedding service."""

    def __init__(self):
        self.calls = 0

    @property
    def dimensions(self) -> int:
        return 3

    def embed(self, texts):
        self.calls += 1
        raise ConnectionError("embedding service unavailable")
