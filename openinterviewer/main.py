"""
FastAPI application entry point.

Run with: uvicorn openinterviewer.main:app --reload
"""

from contextlib import asynccontextmanager
import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from openinterviewer.core.config import settings
from openinterviewer.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from openinterviewer.persistence.database import init_database
from openinterviewer.api.routes import health, interviews, sessions, studies, synthesis
from openinterviewer.api.exception_handlers import setup_exception_handlers
from openinterviewer.llm.client import CLIENT_CLASSES, resolve_provider

# Configure logging before anything else
configure_logging()
log = get_logger(__name__)

VERSION = "0.1.0"


# =============================================================================
# Correlation ID Middleware
# =============================================================================


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a correlation ID to each request.

    Reuses an incoming X-Request-ID when the upstream gate sets one, binds it
    to the structlog context, and echoes it in the response headers.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        bind_context(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()


# =============================================================================
# Startup checks
# =============================================================================


def check_api_keys() -> list[str]:
    """
    Report missing AI configuration for the default provider.

    Not fatal: each study may pick its own provider, and every AI call
    degrades to a fixed fallback when its client cannot be built.

    Returns:
        List of problems found (empty when the default provider is usable)
    """
    problems = []
    provider = resolve_provider()

    if provider not in CLIENT_CLASSES:
        problems.append(
            f"Unknown AI provider '{provider}'. "
            f"Supported providers: {', '.join(CLIENT_CLASSES)}"
        )
    elif provider == "claude" and not settings.anthropic_api_key:
        problems.append("ANTHROPIC_API_KEY is required for the claude provider")
    elif provider == "gemini" and not settings.gemini_api_key:
        problems.append("GEMINI_API_KEY is required for the gemini provider")

    if problems:
        log.warning("ai_configuration_incomplete", provider=provider, problems=problems)
    else:
        log.info("api_keys_validated", provider=provider)

    return problems


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    log.info(
        "application_starting",
        debug=settings.debug,
        database_path=str(settings.database_path),
    )

    check_api_keys()

    await init_database()

    log.info("application_started")

    yield

    log.info("application_shutting_down")


app = FastAPI(
    title="OpenInterviewer",
    description="AI-led qualitative research interviews with synthesis",
    version=VERSION,
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware for development
if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(CorrelationIDMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["system"])
app.include_router(studies.router)
app.include_router(interviews.router)
app.include_router(sessions.router)
app.include_router(synthesis.router)


@app.get("/")
async def root():
    """Root endpoint with basic info."""
    return {"name": "OpenInterviewer", "version": VERSION, "status": "running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "openinterviewer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
