"""Prompt and user-facing text module.

Externalizes the system instruction to a text file for easy customization.
The instruction can be overridden by placing a file in the working directory.
"""

from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

# Fixed user-facing strings (French locale)
GENERATION_ERROR_MESSAGE = (
    "Désolé, une erreur s'est produite lors de la génération de la réponse."
)
CANCELLED_MESSAGE = "Génération annulée."
MISSING_API_KEY_MESSAGE = (
    "Clé API manquante. Veuillez configurer la variable d'environnement "
    "GEMINI_API_KEY (ou API_KEY)."
)

WELCOME_TITLE = "Bonjour ! Comment puis-je vous aider ?"
WELCOME_BODY = (
    "Posez-moi n'importe quelle question, je suis là pour vous aider avec "
    "vos tâches, vos idées ou simplement discuter."
)
SUGGESTIONS = (
    "Explique l'informatique quantique",
    "Idées de cadeaux pour un chef",
    "Planifie un voyage à Paris",
    "Code un jeu Snake en Python",
)


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: causerie/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content, stripped of surrounding whitespace

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8").strip()

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8").strip()

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_instruction() -> str:
    """Get the persona and reply-format instruction sent with every request."""
    return load_prompt("system")


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "CANCELLED_MESSAGE",
    "GENERATION_ERROR_MESSAGE",
    "MISSING_API_KEY_MESSAGE",
    "SUGGESTIONS",
    "WELCOME_BODY",
    "WELCOME_TITLE",
    "clear_cache",
    "get_system_instruction",
    "load_prompt",
]
