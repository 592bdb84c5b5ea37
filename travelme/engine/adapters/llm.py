"""Hosted LLM adapter: chat completions and embeddings via the OpenAI SDK."""

import json
import logging
from typing import Any, Protocol

from openai import AsyncOpenAI

from travelme.engine.config import (
    MissingOpenAIKeyError,
    Settings,
    get_openai_api_key,
    get_settings,
)

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    """Text completion and embedding operations used by the engine."""

    @property
    def available(self) -> bool:
        """Whether the client has credentials to call the hosted model."""
        ...

    async def complete(
        self,
        model: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        system: str | None = None,
    ) -> str:
        """Return the model's text response for a single prompt."""
        ...

    async def embed(self, texts: list[str], model: str) -> list[list[float]]:
        """Return one vector per input text, in order."""
        ...


class OpenAILLMClient:
    """LLMClient backed by ``AsyncOpenAI``.

    The underlying SDK client is created lazily so that constructing the
    adapter without a key is cheap; calls then raise MissingOpenAIKeyError.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client: AsyncOpenAI | None = None

    @property
    def available(self) -> bool:
        try:
            get_openai_api_key(self._settings)
        except MissingOpenAIKeyError:
            return False
        return True

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=get_openai_api_key(self._settings))
        return self._client

    async def complete(
        self,
        model: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        system: str | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = await self._get_client().chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if response.usage is not None:
            logger.debug(
                f"{model} used {response.usage.prompt_tokens}+"
                f"{response.usage.completion_tokens} tokens"
            )
        return response.choices[0].message.content or ""

    async def embed(self, texts: list[str], model: str) -> list[list[float]]:
        if not texts:
            return []
        response = await self._get_client().embeddings.create(model=model, input=texts)
        # Return embeddings in input order
        return [item.embedding for item in response.data]


def strip_code_fences(content: str) -> str:
    """Extract JSON from a markdown code block if present."""
    if "```json" in content:
        content = content.split("```json")[1].split("```")[0]
    elif "```" in content:
        content = content.split("```")[1].split("```")[0]
    return content.strip()


def parse_json_object(content: str) -> dict[str, Any]:
    """Parse a model response into a JSON object.

    Raises:
        ValueError: If the text is empty, is not JSON, or is not an object.
    """
    text = strip_code_fences(content)
    if not text:
        raise ValueError("Empty model response")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object, got {type(data).__name__}")
    return data
