"""
CastEngine Backend API
FastAPI application that turns text into language-learning podcasts

This is the main entry point that wires together all routes and services.
"""

import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
)
from .core import (
    CastEngineError,
    ErrorKind,
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    parse_bool_env,
)
from .routes import (
    podcast_router,
    chat_router,
    insight_router,
    history_router,
    api_configs_router,
    settings_router,
)
from .services.registry import get_saved_audio_dir, get_settings
from .services.storage import evict

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = parse_bool_env(os.getenv("JSON_LOGS"), default=False)

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")
logger.info("Starting CastEngine API", extra={
    "log_level": log_level,
    "json_logs": use_json_logs,
})

STARTUP_EVICTION_ENABLED = parse_bool_env(os.getenv("STARTUP_EVICTION_ENABLED"), default=True)

ERROR_STATUS_CODES = {
    ErrorKind.INVALID_API_KEY: 401,
    ErrorKind.INSUFFICIENT_BALANCE: 402,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.GENERIC: 400,
    ErrorKind.TRANSCRIPTION_FAILED: 422,
    ErrorKind.STORAGE_ERROR: 500,
    ErrorKind.SYNTHESIS_FAILED: 502,
    ErrorKind.MODEL_UNAVAILABLE: 503,
    ErrorKind.NETWORK_TIMEOUT: 504,
}


def _run_startup() -> None:
    """Evict expired or oversized saved audio once at startup."""
    app.state.startup_eviction = None
    if not STARTUP_EVICTION_ENABLED:
        logger.info("Startup eviction disabled by environment")
        return

    try:
        settings = get_settings()
        app.state.startup_eviction = evict(
            get_saved_audio_dir(),
            settings.cache_max_bytes,
            settings.cache_auto_clean_days,
        )
    except Exception as exc:
        logger.error("Startup eviction failed", extra={"error": str(exc)}, exc_info=True)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    _run_startup()
    yield


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    """Attach a correlation ID to the request's logs and response."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    set_request_id(request_id)
    path = request.url.path

    logger.info(f"{request.method} {path}", extra={
        "method": request.method,
        "path": path,
    })

    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        logger.info(f"Response: {response.status_code}", extra={
            "status_code": response.status_code,
            "method": request.method,
            "path": path,
        })
        return response
    finally:
        clear_context()


@app.exception_handler(CastEngineError)
async def handle_castengine_error(request: Request, exc: CastEngineError):
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    logger.warning(
        f"Request failed: {exc}",
        extra={"path": request.url.path, "error_kind": exc.kind.value, "status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(podcast_router)
app.include_router(chat_router)
app.include_router(insight_router)
app.include_router(history_router)
app.include_router(api_configs_router)
app.include_router(settings_router)


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "message": "CastEngine API - Turn any text into a language-learning podcast",
        "version": API_VERSION,
    }


@app.get("/health")
async def health_check():
    """Liveness plus the result of the startup eviction pass."""
    return {
        "status": "healthy",
        "version": API_VERSION,
        "startup_eviction": getattr(app.state, "startup_eviction", None),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "castengine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_excludes=["data/*", "cache/*", "*.pyc", "__pycache__/*"],
    )
