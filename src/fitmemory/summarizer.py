"""Recall summaries: ranked results → a natural-language answer.

The narrative comes from a TextGenerator when one is configured and
answers; otherwise it is templated from the aggregates. Generator errors
never reach the caller.
"""

from __future__ import annotations

import logging

from .generation import TextGenerator
from .types import Aggregates, RecallSummary, SearchResult

logger = logging.getLogger(__name__)

NOTHING_FOUND = (
    "I couldn't find any workout memories matching your search. "
    "Try searching for specific exercises, muscle groups, or dates."
)


def build_prompt(query: str, results: list[SearchResult], aggregates: Aggregates) -> str:
    """Structured prompt: the query, numbered results and the roll-up."""
    lines = [
        f"{i}. {r.entry.activity_date.isoformat()}: {r.entry.source_text}"
        for i, r in enumerate(results, start=1)
    ]
    start, end = aggregates.date_range.start, aggregates.date_range.end
    return "\n".join([
        f'User searched for: "{query}"',
        "",
        f"Found {len(results)} workout memories:",
        *lines,
        "",
        f"Muscle groups trained: {', '.join(sorted(aggregates.muscle_groups)) or 'none recorded'}",
        f"Exercises performed: {', '.join(sorted(aggregates.exercises)) or 'none recorded'}",
        f"Date range: {start.isoformat() if start else '?'} to {end.isoformat() if end else '?'}",
        "",
        "Please provide a helpful summary of these workouts that answers the user's query.",
        "Be specific about what they did, when they did it, and any patterns you notice.",
        "Keep it conversational and encouraging.",
    ])


def fallback_narrative(query: str, aggregates: Aggregates) -> str:
    """Deterministic narrative assembled from the aggregates alone."""
    n = aggregates.total_count
    noun = "workout" if n == 1 else "workouts"
    text = f'Found {n} {noun} matching "{query}"'
    if aggregates.muscle_groups:
        text += f" covering {', '.join(sorted(aggregates.muscle_groups))}"
    start, end = aggregates.date_range.start, aggregates.date_range.end
    if start and end and start != end:
        text += f" between {start.isoformat()} and {end.isoformat()}"
    elif start:
        text += f" on {start.isoformat()}"
    return text + "."


class RecallSummarizer:
    """Turns a ranked result list into a :class:`RecallSummary`."""

    def __init__(self, generator: TextGenerator | None = None):
        self._generator = generator

    async def summarize(self, query: str, results: list[SearchResult]) -> RecallSummary:
        results = list(results)
        if not results:
            return RecallSummary(
                query=query, results=[], narrative=NOTHING_FOUND,
                aggregates=Aggregates.empty(),
            )

        aggregates = Aggregates.from_results(results)
        narrative = await self._narrate(query, results, aggregates)
        return RecallSummary(
            query=query, results=results, narrative=narrative, aggregates=aggregates,
        )

    async def _narrate(
        self, query: str, results: list[SearchResult], aggregates: Aggregates
    ) -> str:
        if self._generator is None:
            return fallback_narrative(query, aggregates)

        prompt = build_prompt(query, results, aggregates)
        try:
            reply = await self._generator.generate(prompt)
        except Exception as e:
            logger.warning("summarize: text generation failed, using fallback: %s", e)
            return fallback_narrative(query, aggregates)

        if not reply or not reply.strip():
            logger.warning("summarize: empty reply from text generation, using fallback")
            return fallback_narrative(query, aggregates)
        return reply.strip()
