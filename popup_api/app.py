"""Application factory for the popup API."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from popup_api.core import messages
from popup_api.core.config import Settings, get_settings
from popup_api.core.logging_config import setup_logging
from popup_api.repositories.base import PopupRepository
from popup_api.repositories.json_storage import JsonPopupRepository
from popup_api.repositories.memory import InMemoryPopupRepository
from popup_api.repositories.sql_repository import SQLPopupRepository
from popup_api.routers import popups as popups_router
from popup_api.services.popup_service import PopupService

logger = logging.getLogger(__name__)


class _BodyTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """Answer 413 once a request body passes ``max_bytes``.

    The declared Content-Length is checked up front; chunked bodies are counted
    as they are received.
    """

    def __init__(self, app: ASGIApp, *, max_bytes: int) -> None:
        self.app = app
        self._max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared and declared.isdigit() and int(declared) > self._max_bytes:
            await self._reject(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self._max_bytes:
                    raise _BodyTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except _BodyTooLarge:
            if response_started:
                raise
            logger.warning("Rejected %s %s: body over %d bytes", scope.get("method"), scope.get("path"), self._max_bytes)
            await self._reject(scope, receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse({"error": messages.BODY_TOO_LARGE}, status_code=413)
        await response(scope, receive, send)


def build_repository(settings: Settings) -> PopupRepository:
    backend = settings.storage_backend
    if backend == "json":
        return JsonPopupRepository(settings.data_file)
    if backend == "sql":
        return SQLPopupRepository()
    if backend == "memory":
        return InMemoryPopupRepository()
    raise ValueError(f"Unknown POPUP_STORAGE backend: {backend!r}")


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": messages.BAD_REQUEST}, status_code=400)


def create_app(settings: Settings | None = None, service: PopupService | None = None) -> FastAPI:
    """Build the FastAPI app; also usable as ``uvicorn popup_api.app:create_app --factory``."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    if service is None:
        service = PopupService(build_repository(settings))
    # creates data/popups.json holding [] when missing
    service.repository.initialize()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(messages.SERVER_RUNNING, settings.port)
        logger.info(messages.SERVER_READY)
        yield
        logger.info(messages.SERVER_STOPPING)

    app = FastAPI(title="Popup Store API", lifespan=lifespan)
    app.state.settings = settings
    app.state.popup_service = service

    origins = list(settings.cors_origins) or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_exception_handler(RequestValidationError, _invalid_request)

    app.include_router(popups_router.router)

    # mounted last so API routes take precedence over files
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app
