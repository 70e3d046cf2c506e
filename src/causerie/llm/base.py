from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class GenerationClient(ABC):
    """Abstract base class for remote generation clients.

    This module hides the design decision of which generation service is used.
    Implementations must handle provider-specific details like:
    - Credential resolution (once per client lifetime)
    - Request/response format conversion
    - Mapping SDK and network failures onto the causerie error taxonomy
    - Bounded waits for the first fragment and between fragments

    A client holds no conversation state between invocations. Model, system
    instruction and temperature are client-level configuration.

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            stream = await client.stream_chat(history, "Bonjour")
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Name of the model used for generation."""

    @abstractmethod
    async def stream_chat(
        self,
        history: list[ChatMessage],
        user_input: str,
    ) -> StreamingResponse:
        """Open a streamed reply to ``user_input``.

        Args:
            history: Prior conversation, oldest first (context only)
            user_input: New user text, non-empty after stripping

        Returns:
            StreamingResponse yielding non-empty text fragments in the order
            the remote service emits them. Each call opens a new remote
            interaction; the stream cannot be restarted.

        Raises:
            ConfigurationError: Raised here, before any network interaction,
                when the credential is missing.

        The returned stream may raise TransportError or UpstreamError while
        being iterated; after such a failure it yields nothing further.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "GenerationClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
