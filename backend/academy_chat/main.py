from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path

from academy_chat.core.config import get_settings
from academy_chat.core.context import build_app_context
from academy_chat.core.database import create_tables
from academy_chat.routers import chat, rag


# Fails fast with a ValidationError when required credentials are missing
settings = get_settings()

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the shared clients once (tests may install their own)
    owned = getattr(app.state, "context", None) is None
    if owned:
        app.state.context = build_app_context(settings)
        if settings.auto_create_tables:
            await create_tables(app.state.context.engine)
        print("[App] Clients initialized")
    yield
    # Shutdown: release database connections
    if owned and app.state.context.engine is not None:
        await app.state.context.engine.dispose()
        app.state.context = None


app = FastAPI(
    title="Americano FC Academy Assistant API",
    description="Chat assistant for academy information and free trial-session bookings",
    version="1.0.0",
    lifespan=lifespan,
)
app.router.redirect_slashes = False

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Chat UI assets
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(rag.router, prefix="/rag", tags=["RAG"])


@app.get("/", include_in_schema=False)
async def chat_page():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
