"""LLM completion backends for showroom.

The query parser can optionally ask an LLM to classify queries that no
deterministic rule recognized. The collaborator is opaque: anything that
implements CompletionBackend works. OllamaBackend is the bundled adapter.

Usage:
    from showroom.core.backends import create_backend, complete

    backend = create_backend("llama3.2:latest")
    await backend.load()
    text = await complete(backend, [{"role": "user", "content": "hi"}])
    await backend.unload()
"""

from __future__ import annotations

from .base import CompletionBackend, complete


# Exceptions
class BackendError(Exception):
    """Base exception for backend errors."""

    pass


class ModelLoadError(BackendError):
    """Model not reachable or not found."""

    pass


class GenerationError(BackendError):
    """Error during text generation."""

    pass


def create_backend(
    model_name: str,
    endpoint: str = "http://localhost:11434",
) -> CompletionBackend:
    """Create the Ollama backend for a model (not yet loaded).

    Args:
        model_name: Ollama model name (e.g., "llama3.2:latest")
        endpoint: Ollama API base URL

    Returns:
        Configured CompletionBackend instance
    """
    from .ollama import OllamaBackend

    return OllamaBackend(model_name, endpoint=endpoint)


__all__ = [
    # Base class
    "CompletionBackend",
    "complete",
    # Backends (lazy imported)
    "OllamaBackend",
    # Factory
    "create_backend",
    # Exceptions
    "BackendError",
    "ModelLoadError",
    "GenerationError",
]


def __getattr__(name: str):
    """Lazy import backends so httpx is only loaded when needed."""
    if name == "OllamaBackend":
        from .ollama import OllamaBackend
        return OllamaBackend
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
