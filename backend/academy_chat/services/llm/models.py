"""
Pydantic models shared by the chat router, the orchestrator and the
providers.

Field names that cross the HTTP boundary (toolInvocations, toolCallId,
...) keep the camelCase the browser client uses.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel


class ToolInvocation(BaseModel):
    toolCallId: str
    toolName: str
    args: dict[str, Any] = {}
    result: Any = None
    state: str = "result"


class ConversationMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = ""
    toolInvocations: list[ToolInvocation] | None = None


class ChatRequest(BaseModel):
    messages: list[ConversationMessage]


# ── Provider output ───────────────────────────────────────────────────────────

class ToolCall(BaseModel):
    id: str
    name: str
    arguments: str = ""  # raw JSON text as produced by the model

    def parsed_arguments(self) -> dict[str, Any]:
        """Best-effort decode for echoing the call back to the client."""
        try:
            value = json.loads(self.arguments or "{}")
        except json.JSONDecodeError:
            return {}
        return value if isinstance(value, dict) else {}


class StreamChunk(BaseModel):
    """
    One piece of provider output. Text chunks arrive as the model writes;
    the last chunk of a call carries the finish reason and any tool calls.
    """

    text: str | None = None
    tool_calls: list[ToolCall] = []
    finish_reason: str | None = None


# ── Client stream ─────────────────────────────────────────────────────────────

class StreamEvent(BaseModel):
    type: Literal["text", "tool-call", "tool-result", "error", "finish"]
    delta: str | None = None
    toolCallId: str | None = None
    toolName: str | None = None
    args: dict[str, Any] | None = None
    result: Any = None
    message: str | None = None
    finishReason: str | None = None

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(exclude_none=True)}\n\n"
