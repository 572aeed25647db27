"""
Chat Router

POST /api/chat: takes the full conversation history and streams the
assistant's answer back as server-sent events.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from academy_chat.core.context import AppContext, get_app_context
from academy_chat.services.llm.models import ChatRequest

router = APIRouter()


@router.post("/chat")
async def chat(
    body: ChatRequest,
    ctx: AppContext = Depends(get_app_context),
):
    """Answer one chat turn, streaming text and tool activity as they happen."""
    orchestrator = ctx.orchestrator()
    try:
        turn = await orchestrator.prepare(body.messages)
    except Exception as e:
        print(f"[Chat] Error in POST /api/chat: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to process chat request",
                "details": str(e) or type(e).__name__,
            },
        )

    return StreamingResponse(
        orchestrator.stream(turn),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
