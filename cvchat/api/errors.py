"""API layer: render chat failures as `{"error": ...}` with a non-2xx status."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cvchat.api.http.chat import CORS_HEADERS
from cvchat.assistant.errors import ChatError
from cvchat.infra.observability.logger import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


async def _handle_chat_error(_: Request, exc: ChatError) -> JSONResponse:
    logger.warning("api.chat.error kind=%s status=%s error=%s", exc.kind, exc.status_code, exc.message)
    return error_response(exc.status_code, exc.message)


async def _handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = str(first.get("msg") or "Invalid request body")
    message = f"Invalid request: {location}: {detail}" if location else f"Invalid request: {detail}"
    logger.info("api.request.invalid error=%s", message)
    return error_response(status.HTTP_400_BAD_REQUEST, message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChatError, _handle_chat_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
