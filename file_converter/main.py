from __future__ import annotations

import time
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from file_converter import __version__
from file_converter.api import router as api_router
from file_converter.config import settings
from file_converter.container import (
    get_conversion_service,
    get_image_service,
    get_pdf_service,
    get_transcode_service,
)
from file_converter.logging_utils import get_logger
from file_converter.models import FORMAT_CATALOG


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Force-init singletons so that failures surface at startup.
    conversion_service = get_conversion_service()
    logger.info(
        "All singleton services initialized "
        "(dispatcher=%s, image=%s, pdf=%s, transcode=%s, inputs=%s, env=%s)",
        type(conversion_service).__name__,
        type(get_image_service()).__name__,
        type(get_pdf_service()).__name__,
        type(get_transcode_service()).__name__,
        ",".join(FORMAT_CATALOG.supported_inputs),
        settings.app_env,
    )
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="file-converter", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_http_requests(request: Request, call_next):
        """Centralized logging for all HTTP requests."""
        start = time.monotonic()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration = time.monotonic() - start
            client_host = request.client.host if request.client else "unknown"
            status_code = response.status_code if response is not None else 500
            logger.info(
                "HTTP %s %s from %s -> %d in %.3fs",
                request.method,
                request.url.path,
                client_host,
                status_code,
                duration,
            )

    app.include_router(api_router)
    return app


@lru_cache(maxsize=1)
def get_app() -> FastAPI:
    return create_app()


app = get_app()
