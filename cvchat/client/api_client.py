"""Chat client transport: call the orchestrator's `POST /api/chat` endpoint."""

from __future__ import annotations

from dataclasses import dataclass

from cvchat.infra.http.transport import HttpTransport, TransportError, UrllibTransport, encode_json
from cvchat.infra.observability.logger import compact, get_logger

logger = get_logger(__name__)


class ChatApiError(Exception):
    """The chat endpoint could not be reached or answered with a failure."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class ChatReply:
    reply: str
    assistant_id: str | None = None


class ChatApiClient:
    """Blocking client for the chat endpoint with a bounded request timeout."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 60.0,
        transport: HttpTransport | None = None,
    ) -> None:
        self._endpoint = base_url.rstrip("/") + "/api/chat"
        self._timeout_seconds = timeout_seconds
        self._transport = transport or UrllibTransport()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def send(self, message: str, *, assistant_id: str | None = None) -> ChatReply:
        payload: dict[str, str] = {"message": message}
        if assistant_id:
            payload["assistantId"] = assistant_id
        try:
            response = self._transport.send(
                method="POST",
                url=self._endpoint,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                body=encode_json(payload),
                timeout=self._timeout_seconds,
            )
        except TransportError as exc:
            raise ChatApiError(f"chat endpoint unreachable: {exc}") from exc

        decoded = response.json()
        if not response.ok:
            error = decoded.get("error") if isinstance(decoded, dict) else None
            message_text = error if isinstance(error, str) and error else compact(response.body, limit=200)
            raise ChatApiError(message_text or f"HTTP {response.status}", status=response.status)

        if not isinstance(decoded, dict) or not isinstance(decoded.get("reply"), str):
            raise ChatApiError("chat endpoint returned no reply", status=response.status)
        assistant_id_value = decoded.get("assistantId")
        return ChatReply(
            reply=decoded["reply"],
            assistant_id=assistant_id_value if isinstance(assistant_id_value, str) and assistant_id_value else None,
        )
