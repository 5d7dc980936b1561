"""DropZone FastAPI application factory."""

from __future__ import annotations

import locale
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dropzone import __version__
from dropzone.config import settings
from dropzone.exceptions import BackendError, ValidationError
from dropzone.services import init_services, shutdown_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # === STARTUP ===
    _setup_logging()
    _setup_locale()

    if not settings.uses_http_backend:
        from dropzone.database import init_db

        await init_db()

    await init_services()
    logger.info(
        "DropZone v%s started — listening on %s:%s", __version__, settings.host, settings.port
    )

    try:
        yield
    finally:
        # === SHUTDOWN ===
        await shutdown_services()
        logger.info("DropZone shutting down")


def _setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for noisy in ("aiosqlite", "apscheduler", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _setup_locale() -> None:
    """Apply the configured collation locale for name sorting."""
    try:
        current = locale.setlocale(locale.LC_COLLATE, settings.collation_locale)
    except locale.Error as e:
        logger.warning(
            "Collation locale %r unavailable (%s), keeping %s",
            settings.collation_locale, e, locale.setlocale(locale.LC_COLLATE),
        )
        return
    logger.info("Name collation locale: %s", current)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    logger.error("Record store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Application factory."""
    from dropzone.api.routes import api_router

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(BackendError, _backend_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()


def run(**kwargs: Any) -> None:
    import uvicorn

    uvicorn.run(
        "dropzone.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
