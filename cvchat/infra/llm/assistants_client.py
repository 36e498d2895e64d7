"""LLM infra: Azure OpenAI Assistants REST client (assistants, threads, runs)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib import parse

from cvchat.assistant.errors import UpstreamCallError
from cvchat.infra.http.transport import HttpTransport, TransportError, encode_json
from cvchat.infra.observability.logger import compact, get_logger

logger = get_logger(__name__)

AZURE_OPENAI_ENDPOINT = "https://round2letsgo.openai.azure.com/"
AZURE_OPENAI_API_VERSION = "2024-05-01-preview"


@dataclass(frozen=True)
class AssistantsApiConfig:
    """Connection config; endpoint and API version are fixed for this deployment."""

    api_key: str
    base_url: str = AZURE_OPENAI_ENDPOINT
    api_version: str = AZURE_OPENAI_API_VERSION
    timeout_seconds: float = 30.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key.strip())


class AssistantsClient:
    """One method per upstream call; each either returns the decoded object or raises."""

    def __init__(self, config: AssistantsApiConfig, transport: HttpTransport) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> AssistantsApiConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def create_assistant(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._call("create_assistant", "POST", "assistants", payload)

    def create_thread(self) -> dict[str, Any]:
        return self._call("create_thread", "POST", "threads", {})

    def create_message(self, thread_id: str, content: str) -> dict[str, Any]:
        return self._call(
            "create_message",
            "POST",
            f"threads/{thread_id}/messages",
            {"role": "user", "content": content},
        )

    def create_run(self, thread_id: str, assistant_id: str) -> dict[str, Any]:
        return self._call(
            "create_run",
            "POST",
            f"threads/{thread_id}/runs",
            {"assistant_id": assistant_id},
        )

    def get_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        return self._call("get_run", "GET", f"threads/{thread_id}/runs/{run_id}")

    def list_messages(self, thread_id: str) -> dict[str, Any]:
        return self._call("list_messages", "GET", f"threads/{thread_id}/messages")

    def build_url(self, path: str) -> str:
        query = parse.urlencode({"api-version": self._config.api_version})
        return f"{self._config.base_url.rstrip('/')}/openai/{path.lstrip('/')}?{query}"

    def _call(
        self,
        operation: str,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"api-key": self._config.api_key}
        body: bytes | None = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            body = encode_json(payload)

        try:
            response = self._transport.send(
                method=method,
                url=self.build_url(path),
                headers=headers,
                body=body,
                timeout=self._config.timeout_seconds,
            )
        except TransportError as exc:
            logger.error("assistants.call.unreachable operation=%s error=%s", operation, exc)
            raise UpstreamCallError(operation, detail=str(exc)) from exc

        if not response.ok:
            detail = compact(response.body, limit=280)
            logger.error(
                "assistants.call.failed operation=%s status=%s body=%s",
                operation,
                response.status,
                detail,
            )
            raise UpstreamCallError(operation, status=response.status, detail=detail)

        decoded = response.json()
        if not isinstance(decoded, dict):
            logger.error("assistants.call.bad_body operation=%s status=%s", operation, response.status)
            raise UpstreamCallError(
                operation,
                status=response.status,
                detail="response body is not a JSON object",
            )
        return decoded
