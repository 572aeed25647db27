"""
Chat Orchestrator

Runs one chat turn:

    Idle -> ContextRetrieved -> PromptBuilt -> LLMStreaming
         -> (ToolInvoked -> ToolResult -> LLMStreaming)* -> Complete | Failed

`prepare` does everything that can fail before the first byte is sent
(retrieval, prompt building) so the router can still answer with a
plain HTTP 500. `stream` then drives the model and the tools and yields
server-sent events. At most `max_tool_rounds` tool rounds run per turn;
the call after the last allowed round goes out without tools so the
turn always ends in a written answer.
"""

import json
from enum import Enum
from typing import AsyncIterator

from pydantic import BaseModel

from academy_chat.services.conversation_state import is_booking_active
from academy_chat.services.llm.base import LLMProvider
from academy_chat.services.llm.models import ConversationMessage, StreamChunk, StreamEvent
from academy_chat.services.policy_compiler import compile_policy
from academy_chat.services.rag.retriever import ContextRetriever
from academy_chat.services.record_store import RecordStore
from academy_chat.services.tools import build_chat_tools, execute_tool


class ChatState(str, Enum):
    IDLE = "Idle"
    CONTEXT_RETRIEVED = "ContextRetrieved"
    PROMPT_BUILT = "PromptBuilt"
    LLM_STREAMING = "LLMStreaming"
    TOOL_INVOKED = "ToolInvoked"
    TOOL_RESULT = "ToolResult"
    COMPLETE = "Complete"
    FAILED = "Failed"


class ChatTurn(BaseModel):
    messages: list[ConversationMessage]
    booking_active: bool = False
    context: str = ""
    system_prompt: str = ""
    tool_rounds: int = 0
    state: ChatState = ChatState.IDLE

    def advance(self, state: ChatState) -> None:
        print(f"[Chat] {self.state.value} -> {state.value}")
        self.state = state


def to_openai_messages(history: list[ConversationMessage]) -> list[dict]:
    """
    Convert client history to Chat Completions messages.

    Finished tool invocations are replayed as an assistant `tool_calls`
    message followed by one `tool` message per call.

    The client keeps one text string per assistant message and no record
    of where tool calls fell inside it. So every finished invocation of a
    message goes into a single `tool_calls` message, even when the model
    made them over several rounds, and the message text is replayed after
    the tool results, including any text streamed before the first call.
    """
    messages = []
    for msg in history:
        finished = [
            inv for inv in (msg.toolInvocations or [])
            if inv.result is not None
        ]
        if msg.role == "assistant" and finished:
            messages.append({
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": inv.toolCallId,
                        "type": "function",
                        "function": {
                            "name": inv.toolName,
                            "arguments": json.dumps(inv.args, ensure_ascii=False),
                        },
                    }
                    for inv in finished
                ],
            })
            for inv in finished:
                messages.append({
                    "role": "tool",
                    "tool_call_id": inv.toolCallId,
                    "content": json.dumps(inv.result, ensure_ascii=False, default=str),
                })
            if msg.content:
                messages.append({"role": "assistant", "content": msg.content})
            continue

        messages.append({"role": msg.role, "content": msg.content})
    return messages


class ChatOrchestrator:
    """Coordinates retrieval, prompt compilation, the LLM and the tools for one request."""

    def __init__(
        self,
        retriever: ContextRetriever,
        store: RecordStore,
        provider: LLMProvider,
        model: str,
        top_k: int = 3,
        max_tool_rounds: int = 2,
    ):
        self.retriever = retriever
        self.store = store
        self.provider = provider
        self.model = model
        self.top_k = top_k
        self.max_tool_rounds = max_tool_rounds

    async def prepare(self, messages: list[ConversationMessage]) -> ChatTurn:
        """Retrieve context and build the system prompt for this turn."""
        turn = ChatTurn(messages=messages)

        last_user = next(
            (m for m in reversed(messages) if m.role == "user"), None
        )
        turn.booking_active = is_booking_active(messages)

        if last_user is not None and last_user.content:
            turn.context = await self.retriever.retrieve(last_user.content, self.top_k)
        turn.advance(ChatState.CONTEXT_RETRIEVED)

        turn.system_prompt = compile_policy(
            turn.context,
            turn.booking_active,
            has_user_message=last_user is not None,
        )
        turn.advance(ChatState.PROMPT_BUILT)
        print(f"[Chat] booking_active={turn.booking_active} model={self.model}")
        return turn

    async def stream(self, turn: ChatTurn) -> AsyncIterator[str]:
        """
        Yield server-sent events for the turn until Complete or Failed.

        A client disconnect cancels the response task, which closes this
        generator mid-stream.
        """
        tools = build_chat_tools(self.store)
        tool_specs = [tool.openai_spec() for tool in tools.values()]
        api_messages = to_openai_messages(turn.messages)

        try:
            while True:
                turn.advance(ChatState.LLM_STREAMING)
                allow_tools = turn.tool_rounds < self.max_tool_rounds
                final = StreamChunk()

                async for chunk in self.provider.stream_chat(
                    system_prompt=turn.system_prompt,
                    messages=api_messages,
                    model=self.model,
                    tools=tool_specs if allow_tools else None,
                ):
                    if chunk.text:
                        yield StreamEvent(type="text", delta=chunk.text).to_sse()
                    if chunk.finish_reason:
                        final = chunk

                if not (allow_tools and final.tool_calls):
                    break

                turn.advance(ChatState.TOOL_INVOKED)
                turn.tool_rounds += 1
                api_messages.append({
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": call.arguments},
                        }
                        for call in final.tool_calls
                    ],
                })

                for call in final.tool_calls:
                    yield StreamEvent(
                        type="tool-call",
                        toolCallId=call.id,
                        toolName=call.name,
                        args=call.parsed_arguments(),
                    ).to_sse()

                    result = await execute_tool(tools, call.name, call.arguments)

                    yield StreamEvent(
                        type="tool-result",
                        toolCallId=call.id,
                        toolName=call.name,
                        result=result,
                    ).to_sse()
                    api_messages.append({
                        "role": "tool",
                        "tool_call_id": call.id,
                        "content": json.dumps(result, ensure_ascii=False, default=str),
                    })
                turn.advance(ChatState.TOOL_RESULT)

            turn.advance(ChatState.COMPLETE)
            yield StreamEvent(type="finish", finishReason=final.finish_reason or "stop").to_sse()

        except Exception as e:
            turn.advance(ChatState.FAILED)
            print(f"[Chat] Error while streaming response: {e}")
            yield StreamEvent(type="error", message=str(e)).to_sse()
