"""Ollama HTTP backend for showroom.

Talks to a running Ollama server. Ollama loads and evicts models itself;
this adapter only owns the HTTP client.

API reference: https://github.com/ollama/ollama/blob/main/docs/api.md
"""

from __future__ import annotations

import json
import logging
from typing import AsyncGenerator

import httpx

from . import GenerationError, ModelLoadError
from .base import CompletionBackend

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:11434"


def _error_message(body: bytes | str, default: str) -> str:
    """Pull Ollama's {"error": ...} text out of a response body."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return default
    if isinstance(data, dict) and "error" in data:
        return f"Ollama error: {data['error']}"
    return default


class OllamaBackend(CompletionBackend):
    """Completion backend over Ollama's /api/chat.

    Example:
        backend = OllamaBackend("llama3.2:latest")
        await backend.load()  # checks the model exists

        async for chunk in backend.generate_stream(messages):
            print(chunk, end="")

        await backend.unload()  # closes the HTTP client

    Attributes:
        _name: Ollama model name
        _endpoint: API base URL without trailing slash
        _client: httpx.AsyncClient, present only while loaded
    """

    def __init__(self, model_name: str, endpoint: str = DEFAULT_ENDPOINT) -> None:
        self._name = model_name
        self._endpoint = endpoint.rstrip("/")
        self._client: httpx.AsyncClient | None = None

    @property
    def model_name(self) -> str:
        return self._name

    @property
    def is_loaded(self) -> bool:
        """True once load() succeeded; says nothing about Ollama's own memory."""
        return self._client is not None

    async def load(self) -> None:
        """Open the HTTP client and check the model via /api/show.

        Raises:
            ModelLoadError: If Ollama is unreachable or lacks the model
        """
        if self._client is not None:
            return

        client = httpx.AsyncClient(timeout=60.0)
        try:
            resp = await client.post(f"{self._endpoint}/api/show", json={"name": self._name})
        except httpx.ConnectError as e:
            await client.aclose()
            raise ModelLoadError(
                f"Cannot connect to Ollama at {self._endpoint}. Is `ollama serve` running?"
            ) from e
        except httpx.TimeoutException as e:
            await client.aclose()
            raise ModelLoadError(f"Timeout connecting to Ollama at {self._endpoint}") from e

        if resp.status_code != 200:
            await client.aclose()
            raise ModelLoadError(
                _error_message(resp.content, f"Model '{self._name}' not found in Ollama")
            )

        logger.info(f"Ollama model ready: {self._name}")
        self._client = client

    async def unload(self) -> None:
        """Close the HTTP client. Idempotent."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def generate_stream(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 512,
        temperature: float = 0.7,
    ) -> AsyncGenerator[str, None]:
        """Stream a chat completion from /api/chat.

        Ollama streams one JSON object per line; each carries a message
        chunk and the last one has "done": true.

        Raises:
            RuntimeError: If load() has not been called
            GenerationError: If the request fails or Ollama reports an error
        """
        if self._client is None:
            raise RuntimeError("OllamaBackend not loaded. Call load() before generate_stream()")

        payload = {
            "model": self._name,
            "messages": list(messages),
            "stream": True,
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }

        try:
            async with self._client.stream(
                "POST", f"{self._endpoint}/api/chat", json=payload
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    raise GenerationError(
                        _error_message(body, f"Ollama API error (status {response.status_code})")
                    )

                async for line in response.aiter_lines():
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        logger.debug(f"Skipping malformed Ollama line: {line[:80]}")
                        continue

                    content = data.get("message", {}).get("content", "")
                    if content:
                        yield content
                    if data.get("done", False):
                        break

        except httpx.ConnectError as e:
            raise GenerationError(f"Lost connection to Ollama at {self._endpoint}") from e
        except httpx.TimeoutException as e:
            raise GenerationError("Timeout during generation") from e

    @classmethod
    async def is_available(cls, endpoint: str = DEFAULT_ENDPOINT) -> bool:
        """Check that an Ollama server answers /api/tags within 2 seconds."""
        try:
            async with httpx.AsyncClient(timeout=2.0) as client:
                response = await client.get(f"{endpoint.rstrip('/')}/api/tags")
                return response.status_code == 200
        except httpx.HTTPError:
            return False


__all__ = ["OllamaBackend"]
