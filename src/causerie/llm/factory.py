from typing import Any

from .base import GenerationClient
from .providers import GeminiClient


def create_generation_client(provider: str = "gemini", **config: Any) -> GenerationClient:
    """Create a generation client instance.

    This factory function hides the instantiation logic for different providers.
    The credential is deliberately not required here: a missing key surfaces as
    a ConfigurationError on the first ``stream_chat`` call.

    Args:
        provider: Provider type (only 'gemini' is supported)
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str | None (default: resolved from environment)
                - model: str (default: 'gemini-3-flash-preview')
                - temperature: float (default: 0.7)
                - system_instruction: str | None
                - first_chunk_timeout / chunk_timeout: float seconds
                - include_history: bool

    Returns:
        Initialized generation client

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> client = create_generation_client("gemini", model="gemini-2.5-flash")
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        return GeminiClient(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
