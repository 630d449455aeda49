"""fitmemory — Activity memory & recall for fitness chat apps.

Core (no framework deps beyond SQLAlchemy):
    from fitmemory import MemoryEngine, MemoryEntry, SearchResult, RecallSummary

Persistence:
    from fitmemory import InMemoryMemoryLog, SQLMemoryLog

Embedding providers (similarity recall):
    from fitmemory import OpenAIEmbeddingProvider, OllamaEmbeddingProvider, VertexEmbeddingProvider

Text generation providers:
    from fitmemory import OpenAITextGenerator, OllamaTextGenerator, VertexTextGenerator

Adapters (optional deps):
    from fitmemory.adapters.langchain import LangChainRecall, build_langchain_tools
"""

from importlib.metadata import version

__version__ = version("fitmemory")

from .embeddings import (
    EmbeddingProvider,
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    VertexEmbeddingProvider,
)
from .engine import MemoryEngine
from .extraction import build_entry, extract, is_activity_content
from .generation import (
    OllamaTextGenerator,
    OpenAITextGenerator,
    TextGenerator,
    VertexTextGenerator,
)
from .providers import (
    BaselineCollection,
    BaselineProvider,
    CandidateProvider,
    LogProvider,
    SimilarityProvider,
    TranscriptProvider,
)
from .ranking import rank
from .store import InMemoryMemoryLog, MemoryLog, MemoryStore, SQLMemoryLog
from .temporal import classify_window
from .types import (
    ActivityTags,
    Aggregates,
    DateRange,
    MediaType,
    MemoryEntry,
    RankingConfig,
    RecallSummary,
    SearchResult,
    StatsReport,
    TemporalWindow,
    TranscriptRecord,
)

RECALL_INSTRUCTIONS = """\
You can remember the user's workouts. Use these tools proactively.

**log_workout** — Record a workout whenever the user describes one they did \
(exercises, sets, reps, weights, muscle groups).
**search_workouts** — Answer questions about past training ("what did I do \
last week?", "when did I last train legs?").

Only workout-related text is remembered; small talk is ignored.\
"""

__all__ = [
    # Version
    "__version__",
    # Facade
    "MemoryEngine",
    "RECALL_INSTRUCTIONS",
    # Types
    "ActivityTags",
    "Aggregates",
    "DateRange",
    "MediaType",
    "MemoryEntry",
    "RankingConfig",
    "RecallSummary",
    "SearchResult",
    "StatsReport",
    "TemporalWindow",
    "TranscriptRecord",
    # Components
    "extract",
    "is_activity_content",
    "build_entry",
    "classify_window",
    "rank",
    # Storage
    "MemoryLog",
    "InMemoryMemoryLog",
    "SQLMemoryLog",
    "MemoryStore",
    # Providers
    "CandidateProvider",
    "TranscriptProvider",
    "LogProvider",
    "SimilarityProvider",
    "BaselineProvider",
    "BaselineCollection",
    # Embeddings
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "VertexEmbeddingProvider",
    # Text generation
    "TextGenerator",
    "OpenAITextGenerator",
    "OllamaTextGenerator",
    "VertexTextGenerator",
]
