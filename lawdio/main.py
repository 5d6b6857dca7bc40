"""
Main FastAPI application for the Lawdio backend.
Handles CORS, request logging middleware, lifespan events, error mapping,
router registration and static asset serving.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from lawdio import __version__
from lawdio.config import Settings, settings as default_settings
from lawdio.errors import LawdioError
from lawdio.routers import ask, health, notes, session_notes
from lawdio.services.exporter import SessionNotesExporter
from lawdio.services.openai_client import OpenAIService, build_http_client
from lawdio.services.storage import NotesStorage, create_storage
from lawdio.services.tutor import TutorService

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_tutor(http_client: httpx.AsyncClient, settings: Settings) -> TutorService:
    return TutorService(
        OpenAIService.from_settings(http_client, settings),
        tts_enabled=settings.TTS_ENABLED,
        text_only_fallback=settings.TTS_TEXT_ONLY_FALLBACK,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown event handler."""
    settings: Settings = app.state.settings

    logger.info("=" * 60)
    logger.info("  Starting Lawdio backend …")
    logger.info("=" * 60)

    if not settings.llm_configured:
        logger.warning(
            "⚠ OPENAI_API_KEY is not set — /api/ask will fail until it is configured"
        )

    owns_client = app.state.tutor is None
    http_client: Optional[httpx.AsyncClient] = None
    if owns_client:
        http_client = build_http_client(settings)
        app.state.tutor = build_tutor(http_client, settings)
    logger.info(
        "✓ Tutor model: %s  (TTS %s)",
        settings.OPENAI_CHAT_MODEL,
        f"on, voice={settings.OPENAI_TTS_VOICE}" if settings.TTS_ENABLED else "off",
    )
    logger.info("✓ Notes storage: %s", app.state.notes_storage.backend_name)

    logger.info("  Lawdio backend ready on http://%s:%d", settings.HOST, settings.PORT)
    logger.info("=" * 60)

    yield  # ← server is running

    logger.info("Shutting down Lawdio backend …")
    if owns_client and http_client is not None:
        await http_client.aclose()
        app.state.tutor = None
    logger.info("✓ Shutdown complete.")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[NotesStorage] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the application with its services.

    ``storage`` and ``http_client`` may be injected; an injected client is
    used as-is and is not closed on shutdown.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Lawdio API",
        description=(
            "**Lawdio** — legal tutoring backend.\n\n"
            "- `POST /api/ask` — ask the tutor a question (text + optional audio)\n"
            "- `POST /api/session-notes/export` — export notes to a Word document\n"
            "- `GET  /notes/{filename}` — download an exported document\n"
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = settings
    app.state.notes_storage = storage or create_storage(settings.NOTES_BACKEND, settings.NOTES_DIR)
    app.state.exporter = SessionNotesExporter(
        app.state.notes_storage, default_case_id=settings.DEFAULT_CASE_ID
    )
    app.state.tutor = build_tutor(http_client, settings) if http_client is not None else None

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Request / response logging middleware
    # -----------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Log every request with method, path, status code, and elapsed time.
        Attaches an ``X-Process-Time`` header (milliseconds) to every response.
        """
        t0 = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - t0) * 1000, 2)

        # Skip noisy health-check polling from the frontend
        if request.url.path != "/api/health":
            logger.info(
                "%s %s → %d  (%.2f ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )

        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
        return response

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(LawdioError)
    async def lawdio_error_handler(request: Request, exc: LawdioError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s (cause: %r)",
                request.method,
                request.url.path,
                exc.message,
                exc.__cause__,
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log any unhandled exception; the client only sees a generic message."""
        logger.error(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(health.router,         prefix="/api/health",        tags=["Health"])
    app.include_router(ask.router,            prefix="/api",               tags=["Tutor"])
    app.include_router(session_notes.router,  prefix="/api/session-notes", tags=["Session notes"])
    app.include_router(notes.router,          prefix="/notes",             tags=["Notes"])

    # Static front-end last so it never shadows the API
    os.makedirs(settings.PUBLIC_DIR, exist_ok=True)
    app.mount("/", StaticFiles(directory=settings.PUBLIC_DIR, html=True), name="public")

    return app


app = create_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lawdio.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
