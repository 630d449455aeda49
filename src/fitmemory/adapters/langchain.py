"""LangChain / LangGraph adapter.

Wraps a MemoryEngine as a chat-history-style memory object and provides
LangChain Tools for agent-driven logging and recall.

    pip install fitmemory[langchain]

Usage:
    from fitmemory import MemoryEngine
    from fitmemory.adapters.langchain import LangChainRecall, build_langchain_tools

    engine = MemoryEngine(generator=OpenAITextGenerator())
    memory = LangChainRecall(engine, user_id="user_1")
    tools = build_langchain_tools(engine, user_id="user_1")
"""

from __future__ import annotations

import logging
from typing import Any

from ..engine import MemoryEngine
from ..types import MemoryEntry, SearchResult

logger = logging.getLogger(__name__)


class LangChainRecall:
    """Feeds chat messages into the engine and exposes recall.

    Only human messages can become memories; AI replies are ignored.
    """

    def __init__(self, engine: MemoryEngine, user_id: str, *, search_limit: int = 10):
        self._engine = engine
        self._user_id = user_id
        self._search_limit = search_limit

    def add_message(self, message: Any) -> MemoryEntry | None:
        """Store a message if it describes a workout.

        Accepts a string or any object with a .content attribute
        (e.g. LangChain BaseMessage).
        """
        if isinstance(message, str):
            text, role = message, "human"
        else:
            text = getattr(message, "content", str(message))
            role = getattr(message, "type", "human")
        if role not in ("human", "user") or not isinstance(text, str):
            return None
        return self._engine.store(self._user_id, text)

    def search(self, query: str, **kwargs) -> list[SearchResult]:
        return self._engine.search(
            self._user_id, query, kwargs.get("limit", self._search_limit)
        )

    async def arecall(self, query: str) -> str:
        summary = await self._engine.recall(self._user_id, query, self._search_limit)
        return summary.narrative


def build_langchain_tools(engine: MemoryEngine, user_id: str) -> list:
    """Create LangChain Tool objects bound to a MemoryEngine.

    Returns tools compatible with LangChain's agent framework.
    """
    try:
        from langchain_core.tools import Tool
    except ImportError:
        raise ImportError(
            "langchain-core is required for LangChain tools. "
            "pip install fitmemory[langchain]"
        )

    async def _search(query: str) -> str:
        summary = await engine.recall(user_id, query)
        if not summary.results:
            return summary.narrative
        return summary.narrative + "\n\n" + SearchResult.format_results(summary.results)

    async def _log(text: str) -> str:
        entry = engine.store(user_id, text)
        if entry is None:
            return "Nothing workout-related to remember in that."
        tags = sorted(entry.tags.all_tags)
        return f"Logged workout (id={entry.id}): {', '.join(tags) or text}"

    return [
        Tool(name="search_workouts", func=None, coroutine=_search,
             description="Recall the user's past workouts from a natural-language question."),
        Tool(name="log_workout", func=None, coroutine=_log,
             description="Record a workout the user describes."),
    ]
