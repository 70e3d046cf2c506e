"""Provider factory functions for CLI.

Centralizes creation of the generation client and the turn controller from
settings. Hides configuration details from command implementations.
"""

from ..config import ChatSettings
from ..llm import GenerationClient, create_generation_client
from ..transcript import Transcript
from ..turn import TurnController


def get_client(settings: ChatSettings) -> GenerationClient:
    """Create the Gemini client.

    The API key is not checked here: it is resolved from GEMINI_API_KEY (or
    API_KEY) on the first request, and a missing key fails that turn.
    """
    return create_generation_client(
        "gemini",
        model=settings.model,
        temperature=settings.temperature,
        first_chunk_timeout=settings.first_chunk_timeout,
        chunk_timeout=settings.chunk_timeout,
        include_history=settings.include_history,
    )


def get_controller(settings: ChatSettings, client: GenerationClient) -> TurnController:
    """Create a turn controller over a fresh transcript."""
    return TurnController(
        Transcript(),
        client,
        preserve_partial=settings.preserve_partial_on_failure,
    )
