"""
OpenAI Chat Completions API Provider

Streams GPT-4o style chat completions with function tools:
- client.chat.completions.create(stream=True)
- delta.content for text, delta.tool_calls for incremental tool calls
- choices[0].finish_reason on the last chunk
"""

from typing import AsyncIterator

from openai import AsyncOpenAI

from academy_chat.services.llm.base import LLMProvider
from academy_chat.services.llm.models import StreamChunk, ToolCall


class OpenAIChatProvider(LLMProvider):
    """Provider for OpenAI Chat Completions API (GPT-4o, GPT-4o-mini, etc.)."""

    provider_name = "openai_chat"

    def __init__(self, api_key: str):
        self.client = AsyncOpenAI(api_key=api_key)

    async def stream_chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        tools: list[dict] | None = None,
        temperature: float = 0.3,
    ) -> AsyncIterator[StreamChunk]:
        chat_messages = [{"role": "system", "content": system_prompt}] + messages

        kwargs = {}
        if tools:
            kwargs["tools"] = tools

        stream = await self.client.chat.completions.create(
            model=model,
            messages=chat_messages,
            temperature=temperature,
            stream=True,
            **kwargs,
        )

        # Tool calls arrive in pieces keyed by index
        pending: dict[int, dict] = {}
        finish_reason = None

        async for chunk in stream:
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            delta = choice.delta

            if delta is not None and delta.content:
                yield StreamChunk(text=delta.content)

            if delta is not None and delta.tool_calls:
                for part in delta.tool_calls:
                    call = pending.setdefault(
                        part.index, {"id": "", "name": "", "arguments": ""}
                    )
                    if part.id:
                        call["id"] = part.id
                    if part.function is not None:
                        if part.function.name:
                            call["name"] += part.function.name
                        if part.function.arguments:
                            call["arguments"] += part.function.arguments

            if choice.finish_reason:
                finish_reason = choice.finish_reason

        tool_calls = [ToolCall(**pending[i]) for i in sorted(pending)]
        yield StreamChunk(tool_calls=tool_calls, finish_reason=finish_reason or "stop")
