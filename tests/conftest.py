"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator, Iterable

import pytest

from causerie.errors import ConfigurationError
from causerie.llm import ChatMessage, GenerationClient, StreamingResponse
from causerie.log import configure_logging
from causerie.transcript import Transcript
from causerie.turn import TurnController

_END = object()


class ScriptedClient(GenerationClient):
    """Generation client fed from a queue instead of the network.

    Items are fragments (str) or exceptions to raise mid-stream. ``finish()``
    ends the current stream normally.
    """

    def __init__(
        self,
        script: Iterable = (),
        finished: bool = True,
        configuration_error: bool = False,
    ) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()
        for item in script:
            self.queue.put_nowait(item)
        if finished:
            self.queue.put_nowait(_END)
        self.configuration_error = configuration_error
        self.calls: list[tuple[list[ChatMessage], str]] = []
        self.released = 0
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted-model"

    def push(self, *items) -> None:
        for item in items:
            self.queue.put_nowait(item)

    def finish(self) -> None:
        self.queue.put_nowait(_END)

    async def stream_chat(self, history: list[ChatMessage], user_input: str) -> StreamingResponse:
        self.calls.append((list(history), user_input))
        if self.configuration_error:
            raise ConfigurationError("API key missing")
        return StreamingResponse(self._generate(), usage={})

    async def _generate(self) -> AsyncIterator[str]:
        try:
            while True:
                item = await self.queue.get()
                if item is _END:
                    return
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.released += 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Keep structured logs out of test output unless they are errors."""
    configure_logging("error")


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"gemini": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")}


@pytest.fixture
def make_client():
    """Factory for scripted generation clients."""
    return ScriptedClient


@pytest.fixture
def transcript():
    return Transcript()


@pytest.fixture
def make_controller(transcript):
    """Factory building a controller over the shared transcript."""
    def _make(client: GenerationClient, **kwargs) -> TurnController:
        return TurnController(transcript, client, **kwargs)
    return _make


@pytest.fixture
def settle():
    """Let pending tasks run until they block again."""
    async def _settle(rounds: int = 10) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)
    return _settle
