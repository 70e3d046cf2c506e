"""Turn module: one request/response cycle against a transcript."""

from .controller import TurnController
from .models import SubmitResult, Turn, TurnState

__all__ = ["SubmitResult", "Turn", "TurnController", "TurnState"]
