"""
Policy Compiler Service

Builds the system prompt for every chat turn from the prompt texts in
academy_chat/prompts/ plus the retrieved knowledge-base context.

Order: general policy -> booking-flow instructions (only while a booking
is in progress) -> the step-by-step booking script -> academy context.
Nothing is cached across turns; context and booking state change every
request.
"""

from functools import lru_cache
from pathlib import Path

from academy_chat.services.rag.retriever import has_meaningful_context


PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache()
def load_prompt(name: str) -> str:
    """Read a prompt text file (without extension) from the prompts directory."""
    return (PROMPTS_DIR / f"{name}.txt").read_text(encoding="utf-8").strip()


def resolve_context(context: str | None, booking_active: bool, has_user_message: bool) -> str:
    """
    Swap retrieval fallbacks for text the model can act on.

    - booking in progress: warn that options cannot be validated
    - a user question went unanswered: offer general help
    - no user message yet: welcome text
    """
    if has_meaningful_context(context):
        return context
    if booking_active:
        return load_prompt("context_booking_warning")
    if has_user_message:
        return load_prompt("context_not_found")
    return load_prompt("context_welcome")


def compile_policy(
    context: str | None,
    booking_active: bool,
    has_user_message: bool = True,
) -> str:
    """
    Compile the LLM system prompt for one chat turn.

    Args:
        context: Output of ContextRetriever.retrieve (may be a fallback string)
        booking_active: Whether the booking flow is in progress
        has_user_message: Whether the history contains a user message

    Returns:
        System prompt string for the LLM
    """
    sections = [load_prompt("system_policy")]
    if booking_active:
        sections.append(load_prompt("booking_instructions"))
    sections.append(load_prompt("booking_script"))

    academy_context = resolve_context(context, booking_active, has_user_message)
    sections.append(
        "Contexto de la Academia (Información de nuestra base de datos para "
        "responder preguntas y validar datos):\n"
        f"---\n{academy_context}\n---"
    )

    return "\n\n".join(sections)
