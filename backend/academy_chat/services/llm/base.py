"""
Abstract base class for LLM providers.

Each provider implements the API-specific translation layer.
Tool execution, prompt building and the turn loop are handled by the
orchestrator.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from academy_chat.services.llm.models import StreamChunk


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    provider_name: str = "base"

    @abstractmethod
    def stream_chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        tools: list[dict] | None = None,
        temperature: float = 0.3,
    ) -> AsyncIterator[StreamChunk]:
        """
        Stream a chat completion.

        Args:
            system_prompt: The system prompt
            messages: Chat messages in OpenAI format (role/content/tool_calls)
            model: The API model identifier (e.g., "gpt-4o")
            tools: OpenAI function-tool specs, or None to disable tools
            temperature: Sampling temperature

        Yields:
            StreamChunk objects; text as it arrives, then a final chunk with
            the finish reason and any completed tool calls
        """
        ...
