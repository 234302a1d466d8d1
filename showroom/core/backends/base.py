"""Abstract base class for text-completion backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncGenerator


class CompletionBackend(ABC):
    """Abstract base class for the optional LLM collaborator.

    The query parser only ever asks for a short completion, so the contract
    is the minimal streaming chat interface plus lifecycle hooks.

    Lifecycle:
    1. Create backend instance with model name
    2. Call load() to connect / verify the model
    3. Call generate_stream() (or complete()) to generate responses
    4. Call unload() to release resources (must be idempotent)
    """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the human-readable model name."""
        ...

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the backend is ready to generate."""
        ...

    @abstractmethod
    async def load(self) -> None:
        """Prepare the backend for generation.

        Raises:
            ModelLoadError: If the model cannot be reached or found
        """
        ...

    @abstractmethod
    async def unload(self) -> None:
        """Release resources. Must be safe to call multiple times."""
        ...

    @abstractmethod
    async def generate_stream(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 512,
        temperature: float = 0.7,
    ) -> AsyncGenerator[str, None]:
        """Stream token generation.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": str}
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic)

        Yields:
            String chunks (may be partial tokens for some backends)

        Raises:
            RuntimeError: If backend not loaded
            GenerationError: If generation fails mid-stream
        """
        ...
        # Make this a generator
        yield ""

    @classmethod
    @abstractmethod
    async def is_available(cls) -> bool:
        """Check if this backend can be used without loading a model."""
        ...


async def complete(
    backend: CompletionBackend,
    messages: list[dict[str, str]],
    max_tokens: int = 200,
    temperature: float = 0.1,
) -> str:
    """Run a streamed generation to completion and return the joined text."""
    chunks: list[str] = []
    async for chunk in backend.generate_stream(
        messages, max_tokens=max_tokens, temperature=temperature
    ):
        chunks.append(chunk)
    return "".join(chunks)


__all__ = ["CompletionBackend", "complete"]
