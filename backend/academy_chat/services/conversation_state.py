"""
Conversation State Classifier

Decides whether the trial-session booking flow is in progress by looking
at the chat history the client sends on every request.

This is a keyword heuristic, not a state machine: an assistant reply that
mentions "horario" outside the booking flow will still switch it on, and
rephrased questions can slip past it.
"""

from academy_chat.services.llm.models import ConversationMessage


BOOKING_TOOL_NAME = "book_trial_session"

# Phrases the assistant uses while collecting booking data
BOOKING_KEYWORDS = [
    "categoría",
    "día de la prueba",
    "horario",
    "nombre del niño",
    "edad del niño",
    "nombre del padre",
    "celular",
    "correo electrónico",
    "para la clase de prueba gratuita",
]


def content_includes(content: str | None, keywords: list[str]) -> bool:
    if not content:
        return False
    lower_content = content.lower()
    return any(keyword in lower_content for keyword in keywords)


def is_booking_active(history: list[ConversationMessage]) -> bool:
    """
    True if any assistant turn mentions a booking keyword, or any turn
    recorded a call to the booking tool.
    """
    for msg in history:
        if msg.role == "assistant" and content_includes(msg.content, BOOKING_KEYWORDS):
            return True
        if any(
            inv.toolName == BOOKING_TOOL_NAME for inv in (msg.toolInvocations or [])
        ):
            return True
    return False
