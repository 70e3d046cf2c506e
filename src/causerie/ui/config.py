"""UI configuration constants.

Centralizes labels and tunables for the UI module.
"""

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history

# Chat display configuration
TIMESTAMP_FORMAT = "%H:%M:%S"
TYPING_INDICATOR = "…"

USER_LABEL = "Vous"
ASSISTANT_LABEL = "Assistant"
SEND_LABEL = "Envoyer"
INPUT_PLACEHOLDER = "Message Gemini..."
DISCLAIMER = "Gemini peut faire des erreurs. Envisagez de vérifier les informations importantes."

BUSY_NOTICE = "Une réponse est en cours de génération."
EMPTY_NOTICE = "Le message est vide."
