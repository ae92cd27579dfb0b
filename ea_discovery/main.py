"""EA Discovery Assistant: FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before the other application imports:
# structlog caches the processor chain on first use.
from ea_discovery.core.logging import configure_structlog
from ea_discovery.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ea_discovery.api.routes import api_router
from ea_discovery.core.config import get_settings
from ea_discovery.core.exceptions import EADiscoveryError
from ea_discovery.db import engagement_db
from ea_discovery.middleware.request_id import (
    REQUEST_ID_HEADER,
    current_request_id,
    install_request_id_middleware,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "startup_begin",
        app_name=settings.app_name,
        debug=settings.debug,
        model=settings.anthropic_model,
        api_key_configured=bool(settings.anthropic_api_key),
        upload_max_bytes=settings.upload_max_bytes,
    )

    await engagement_db.open()

    yield

    logger.info("shutdown_begin")
    await engagement_db.close()
    logger.info("shutdown_complete")


async def application_error_handler(request: Request, exc: EADiscoveryError) -> JSONResponse:
    """Render taxonomy errors with their own status code and payload."""
    logger.error(
        "application_error",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        correlation_id=current_request_id(),
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException with debug_id tracking; the id is logged with full context."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=current_request_id(),
        path=request.url.path,
        method=request.method,
        detail=exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled errors: traceback to the log, generic 500 to the client."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=current_request_id(),
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Discovery intake, document import and Salesforce architecture artifact generation",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    )

    # Added last so it wraps CORS and sees every request first
    install_request_id_middleware(app)

    app.exception_handler(EADiscoveryError)(application_error_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ea_discovery.main:app", host="0.0.0.0", port=8000, reload=True)
