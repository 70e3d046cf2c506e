from .base import GenerationClient
from .factory import create_generation_client
from .models import ChatMessage, StreamingResponse
from .providers import GeminiClient

__all__ = [
    "ChatMessage",
    "GeminiClient",
    "GenerationClient",
    "StreamingResponse",
    "create_generation_client",
]
