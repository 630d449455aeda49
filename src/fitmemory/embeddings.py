"""Pluggable embedding providers for similarity recall.

Similarity search needs vectors. How you generate them is your business.
Implement EmbeddingProvider or use one of the built-in ones. Calls are
synchronous because search is.
"""

from __future__ import annotations

import abc
import math
from typing import Sequence


class EmbeddingProvider(abc.ABC):
    """Abstract base. Implement `embed` and `dimensions`."""

    @abc.abstractmethod
    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Return one embedding vector per input text."""
        ...

    @property
    @abc.abstractmethod
    def dimensions(self) -> int:
        """Dimensionality of the output vectors."""
        ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``; 0.0 if either is all zeros."""
    if len(a) != len(b):
        raise ValueError(f"vector size mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI / Azure OpenAI embeddings.

    pip install fitmemory[openai]
    """

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        *,
        dimensionality: int = 1536,
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        self._model = model
        self._dimensions = dimensionality
        self._api_key = api_key
        self._base_url = base_url

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        from openai import OpenAI

        client = OpenAI(api_key=self._api_key, base_url=self._base_url)
        response = client.embeddings.create(
            model=self._model,
            input=list(texts),
            dimensions=self._dimensions,
        )
        return [item.embedding for item in response.data]


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Local Ollama (e.g. nomic-embed-text).

    pip install fitmemory[ollama]
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        *,
        dimensionality: int = 768,
        host: str | None = None,
    ):
        self._model = model
        self._dimensions = dimensionality
        self._host = host

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        import ollama as _ollama

        client = _ollama.Client(host=self._host) if self._host else _ollama.Client()
        response = client.embed(model=self._model, input=list(texts))
        return [list(v) for v in response["embeddings"]]


class VertexEmbeddingProvider(EmbeddingProvider):
    """Google text-embedding model via the google-genai SDK.

    pip install fitmemory[vertex]
    """

    def __init__(
        self,
        model: str = "text-embedding-004",
        *,
        task_type: str = "RETRIEVAL_DOCUMENT",
        dimensionality: int = 768,
    ):
        self._model = model
        self._task_type = task_type
        self._dimensions = dimensionality

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        from google import genai

        client = genai.Client()
        response = client.models.embed_content(
            model=self._model,
            contents=list(texts),
            config=genai.types.EmbedContentConfig(
                task_type=self._task_type,
                output_dimensionality=self._dimensions,
            ),
        )
        if response.embeddings is None:
            raise RuntimeError("embedding response carried no vectors")
        return [list(e.values or ()) for e in response.embeddings]
