"""Popup endpoints under /api/popups."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from popup_api.core import messages
from popup_api.domain import popups as rules
from popup_api.repositories.base import StorageError
from popup_api.services.popup_service import PopupService

router = APIRouter(prefix="/api/popups", tags=["popups"])
logger = logging.getLogger(__name__)


def _get_popup_service(request: Request) -> PopupService:
    svc = getattr(getattr(request.app, "state", None), "popup_service", None)
    if not svc:
        raise RuntimeError("PopupService is not configured")
    return svc


async def _popup_payload(request: Request) -> dict[str, Any]:
    """Body as a JSON object; NaN, Infinity and non-objects are rejected with a 400."""
    try:
        payload = rules.loads_strict(await request.body())
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": str(exc), "input": None}]
        ) from exc
    if not isinstance(payload, dict):
        raise RequestValidationError(
            [{"type": "dict_type", "loc": ("body",), "msg": "Input should be a JSON object", "input": payload}]
        )
    return payload


def _failure(log_message: str, client_message: str, exc: Exception) -> JSONResponse:
    logger.error("%s: %s", log_message, exc, exc_info=exc)
    return JSONResponse({"error": client_message}, status_code=500)


@router.get("")
def list_popups(request: Request):
    try:
        return _get_popup_service(request).list_popups()
    except StorageError as exc:
        return _failure(messages.LOG_LIST_FAILED, messages.LIST_FAILED, exc)


@router.post("")
def save_popup(request: Request, payload: dict[str, Any] = Depends(_popup_payload)):
    try:
        popup = _get_popup_service(request).save_popup(payload)
    except StorageError as exc:
        return _failure(messages.LOG_SAVE_FAILED, messages.SAVE_FAILED, exc)
    return {"success": True, "popup": popup}


@router.get("/active")
def list_active_popups(request: Request):
    try:
        return _get_popup_service(request).list_active()
    except StorageError as exc:
        return _failure(messages.LOG_ACTIVE_FAILED, messages.ACTIVE_FAILED, exc)


@router.delete("/{popup_id}")
def delete_popup(popup_id: str, request: Request):
    try:
        _get_popup_service(request).delete_popup(popup_id)
    except StorageError as exc:
        return _failure(messages.LOG_DELETE_FAILED, messages.DELETE_FAILED, exc)
    return {"success": True}
