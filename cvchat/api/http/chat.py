"""HTTP API layer: chat endpoint backed by the assistant orchestrator."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from cvchat.api.deps import get_orchestrator
from cvchat.assistant.errors import ChatError
from cvchat.assistant.orchestrator import ChatOrchestrator
from cvchat.infra.observability.logger import compact, get_logger
from cvchat.protocol.messages import ChatRequest, ChatResponse, ErrorResponse

router = APIRouter(prefix="/api", tags=["chat"])
logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@router.options("/chat", include_in_schema=False)
def chat_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(
    request: ChatRequest,
    response: Response,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    logger.info(
        "api.chat.request assistant_id=%s message=%s",
        request.assistant_id or "new",
        compact(request.message),
    )
    try:
        result = orchestrator.run_chat(request)
    except ChatError:
        raise
    except Exception as exc:
        logger.exception("api.chat.unhandled_error type=%s", type(exc).__name__)
        raise ChatError(str(exc) or type(exc).__name__) from exc
    logger.info(
        "api.chat.response assistant_id=%s reply_chars=%s",
        result.assistant_id,
        len(result.reply),
    )
    response.headers.update(CORS_HEADERS)
    return result
