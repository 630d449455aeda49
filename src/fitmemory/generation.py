"""Pluggable text-generation providers.

The recall summarizer wants a narrative. How you generate it is your
business. Implement TextGenerator or use one of the built-in ones; every
call may fail, and the summarizer always has a local fallback.
"""

from __future__ import annotations

import abc

COACH_SYSTEM_PROMPT = (
    "You are a helpful fitness coach reviewing workout history. "
    "Be encouraging and specific."
)


class TextGenerator(abc.ABC):
    """Abstract base. Implement `generate`."""

    @abc.abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the model's reply to ``prompt``. May raise."""
        ...


class OpenAITextGenerator(TextGenerator):
    """OpenAI / Azure OpenAI chat completions.

    pip install fitmemory[openai]
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        system_prompt: str = COACH_SYSTEM_PROMPT,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._system_prompt = system_prompt
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(self, prompt: str) -> str:
        from openai import AsyncOpenAI

        client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        response = await client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        return response.choices[0].message.content or ""


class OllamaTextGenerator(TextGenerator):
    """Local Ollama chat model (e.g. llama3.2).

    pip install fitmemory[ollama]
    """

    def __init__(
        self,
        model: str = "llama3.2",
        *,
        host: str | None = None,
        system_prompt: str = COACH_SYSTEM_PROMPT,
        temperature: float = 0.7,
    ):
        self._model = model
        self._host = host
        self._system_prompt = system_prompt
        self._temperature = temperature

    async def generate(self, prompt: str) -> str:
        import ollama as _ollama

        client = _ollama.AsyncClient(host=self._host) if self._host else _ollama.AsyncClient()
        response = await client.chat(
            model=self._model,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            options={"temperature": self._temperature},
        )
        return response["message"]["content"]


class VertexTextGenerator(TextGenerator):
    """Google Gemini via the google-genai SDK (Vertex AI or API key).

    pip install fitmemory[vertex]
    """

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        *,
        system_prompt: str = COACH_SYSTEM_PROMPT,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self._model = model
        self._system_prompt = system_prompt
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(self, prompt: str) -> str:
        from google import genai

        client = genai.Client()
        response = await client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=genai.types.GenerateContentConfig(
                system_instruction=self._system_prompt,
                max_output_tokens=self._max_tokens,
                temperature=self._temperature,
            ),
        )
        return response.text or ""
