"""Google Gemini generation client.

Uses the official Google GenAI SDK for async streamed generation.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return chunks without text (usage-only or safety-filtered
chunks). Those are skipped so the stream only carries non-empty fragments.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import structlog
from google import genai
from google.genai import errors, types

from ...config import (
    CHUNK_TIMEOUT,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    FIRST_CHUNK_TIMEOUT,
    resolve_api_key,
)
from ...errors import ConfigurationError, TransportError, UpstreamError
from ...prompts import MISSING_API_KEY_MESSAGE, get_system_instruction
from ..base import GenerationClient
from ..models import ChatMessage, StreamingResponse, usage_from_metadata

logger = structlog.get_logger(__name__)

_END = object()


@contextlib.contextmanager
def _translate_errors(waiting_for: str) -> Iterator[None]:
    """Map SDK and network failures onto the causerie error taxonomy."""
    try:
        yield
    except errors.APIError as e:
        raise UpstreamError(f"Gemini API error: {e}", status_code=e.code) from e
    except TimeoutError as e:
        raise TransportError(f"Timed out waiting for {waiting_for}") from e
    except (httpx.HTTPError, OSError) as e:
        raise TransportError(f"Network failure while waiting for {waiting_for}: {e}") from e


class GeminiClient(GenerationClient):
    """Google Gemini generation client.

    Hidden design decisions:
    - Lazy credential resolution, cached with the SDK client
    - Message format conversion (assistant -> 'model' role)
    - One bounded wait per fragment, spanning empty chunks
    - Error translation and stream release
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        system_instruction: str | None = None,
        first_chunk_timeout: float = FIRST_CHUNK_TIMEOUT,
        chunk_timeout: float = CHUNK_TIMEOUT,
        include_history: bool = True,
        credential_source: Callable[[], str | None] = resolve_api_key,
        **client_kwargs: Any
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google AI API key (None resolves it from the environment on first use)
            model: Model name (default: gemini-3-flash-preview)
            temperature: Sampling temperature
            system_instruction: Persona/format instruction (default: packaged prompt)
            first_chunk_timeout: Seconds to wait for the stream to open and yield its first fragment
            chunk_timeout: Seconds to wait between two fragments
            include_history: Send prior turns as context
            credential_source: Callable returning the API key or None
            **client_kwargs: Additional kwargs for genai.Client
        """
        self._api_key = api_key
        self._credential_source = credential_source
        self._model = model
        self._temperature = temperature
        self._system_instruction = (
            system_instruction if system_instruction is not None else get_system_instruction()
        )
        self._first_chunk_timeout = first_chunk_timeout
        self._chunk_timeout = chunk_timeout
        self._include_history = include_history
        self._client_kwargs = client_kwargs
        self._client: genai.Client | None = None

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    def _get_client(self) -> genai.Client:
        """Resolve the credential and build the SDK client once."""
        if self._client is None:
            api_key = self._api_key or self._credential_source()
            if not api_key:
                logger.warning("credential_missing", model=self._model)
                raise ConfigurationError(MISSING_API_KEY_MESSAGE)
            self._client = genai.Client(api_key=api_key, **self._client_kwargs)
        return self._client

    def _convert_messages(
        self, history: list[ChatMessage], user_input: str
    ) -> list[types.Content]:
        """Convert prior messages plus the new input to Gemini contents."""
        contents = []
        if self._include_history:
            for msg in history:
                if not msg.content:
                    continue
                role = "model" if msg.role == "assistant" else "user"
                contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))
        contents.append(types.Content(role="user", parts=[types.Part(text=user_input)]))
        return contents

    def _extract_text(self, chunk: Any) -> str:
        """Extract text from a streamed chunk, handling empty chunks."""
        if chunk.candidates:
            candidate = chunk.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                return "".join(texts)
            return ""
        return getattr(chunk, "text", None) or ""

    async def stream_chat(
        self,
        history: list[ChatMessage],
        user_input: str,
    ) -> StreamingResponse:
        """Open a streamed Gemini reply.

        Args:
            history: Prior conversation, oldest first
            user_input: New user text

        Returns:
            StreamingResponse yielding text fragments and capturing usage

        Raises:
            ConfigurationError: If no API key is available
        """
        client = self._get_client()
        contents = self._convert_messages(history, user_input)
        config = types.GenerateContentConfig(
            system_instruction=self._system_instruction,
            temperature=self._temperature,
        )
        usage: dict[str, int] = {}
        return StreamingResponse(self._stream_generator(client, contents, config, usage), usage=usage)

    async def _stream_generator(
        self,
        client: genai.Client,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
        usage: dict[str, int],
    ) -> AsyncIterator[str]:
        """Internal generator yielding fragments under bounded waits."""
        log = logger.bind(model=self._model)
        loop = asyncio.get_running_loop()

        # One deadline covers opening the stream and the first fragment; it
        # only moves once a fragment has been handed out
        deadline = loop.time() + self._first_chunk_timeout
        waiting_for = "the first fragment"
        with _translate_errors(waiting_for):
            async with asyncio.timeout_at(deadline):
                stream = await client.aio.models.generate_content_stream(
                    model=self._model, contents=contents, config=config
                )
        log.debug("stream_opened")

        try:
            while True:
                with _translate_errors(waiting_for):
                    async with asyncio.timeout_at(deadline):
                        chunk = await anext(stream, _END)
                if chunk is _END:
                    break

                feedback = getattr(chunk, "prompt_feedback", None)
                if feedback is not None and feedback.block_reason:
                    raise UpstreamError(f"Prompt blocked by Gemini: {feedback.block_reason}")

                if chunk.usage_metadata:
                    usage.update(usage_from_metadata(chunk.usage_metadata))

                text = self._extract_text(chunk)
                if text:
                    yield text
                    deadline = loop.time() + self._chunk_timeout
                    waiting_for = "the next fragment"
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            log.debug("stream_released")

    async def close(self) -> None:
        """Close the SDK client if one was created."""
        if self._client is None:
            return
        aclose = getattr(self._client.aio, "aclose", None)
        if aclose is not None:
            await aclose()
        self._client = None
