from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for a streamed reply that captures usage info.

    Acts as an async iterator over text fragments while storing token usage
    that becomes available at the end of the stream. Closing it releases the
    underlying remote stream even when iteration stopped early.

    Usage:
        stream = await client.stream_chat(history, "Bonjour")
        async with contextlib.aclosing(stream):
            async for fragment in stream:
                print(fragment, end="")
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[str], usage: dict[str, int] | None = None):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
            usage: Mapping the producer fills in once usage is known
        """
        self._iter = async_iter
        self._usage = usage if usage is not None else {}
        self._closed = False

    @property
    def usage(self) -> dict[str, int] | None:
        """Get token usage info (available after iteration completes)."""
        return dict(self._usage) if self._usage else None

    def set_usage(self, usage: dict[str, int]) -> None:
        """Set token usage info."""
        self._usage.clear()
        self._usage.update(usage)

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        return await self._iter.__anext__()

    async def aclose(self) -> None:
        """Stop the stream and release the remote connection."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class ChatMessage(BaseModel):
    """A provider-neutral conversation turn sent as context."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")


def usage_from_metadata(metadata: Any) -> dict[str, int]:
    """Normalize SDK usage metadata into prompt/completion/total counts."""
    return {
        "prompt_tokens": getattr(metadata, "prompt_token_count", None) or 0,
        "completion_tokens": getattr(metadata, "candidates_token_count", None) or 0,
        "total_tokens": getattr(metadata, "total_token_count", None) or 0,
    }
