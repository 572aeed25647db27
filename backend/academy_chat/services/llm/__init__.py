"""
LLM Provider Abstraction Layer

Provides a provider interface for streaming chat completions with tools.
The orchestrator that runs a chat turn on top of it lives in
academy_chat.services.llm.orchestrator.
"""

from academy_chat.services.llm.base import LLMProvider
from academy_chat.services.llm.openai_chat import OpenAIChatProvider
from academy_chat.services.llm.models import ConversationMessage, StreamEvent

__all__ = [
    "LLMProvider",
    "OpenAIChatProvider",
    "ConversationMessage",
    "StreamEvent",
]
