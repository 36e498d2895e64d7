"""Chat orchestrator: one user message in, one assistant reply out.

The turn runs as an ordered pipeline of stages over a per-request context:
resolve assistant, create thread, post message, start run, await run, fetch
reply. A stage signals failure by raising a `ChatError` subclass, which skips
every later stage. Nothing is kept between requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from cvchat.assistant.definition import AssistantDefinition
from cvchat.assistant.errors import (
    ChatError,
    ConfigurationError,
    EmptyReplyError,
    InvalidInputError,
    RunNotCompletedError,
    UpstreamCallError,
)
from cvchat.assistant.run_poller import RunPoller
from cvchat.infra.llm.assistants_client import AssistantsClient
from cvchat.infra.observability.logger import compact, get_logger
from cvchat.protocol.messages import ChatRequest, ChatResponse

logger = get_logger(__name__)


@dataclass
class ChatTurnContext:
    """Values accumulated by the stages of one turn."""

    message: str
    assistant_id: str = ""
    assistant_created: bool = False
    thread_id: str = ""
    run_id: str = ""
    run_status: str = "queued"
    poll_attempts: int = 0
    reply: str = ""


def _require_id(payload: dict[str, Any], operation: str) -> str:
    value = payload.get("id")
    if isinstance(value, str) and value.strip():
        return value
    raise UpstreamCallError(operation, detail="response carried no id")


def extract_reply_text(payload: dict[str, Any]) -> str | None:
    """Return the first text block value of the first listed message, if any."""
    data = payload.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    content = data[0].get("content")
    if not isinstance(content, list):
        return None
    for block in content:
        if not isinstance(block, dict):
            continue
        text = block.get("text")
        if not isinstance(text, dict):
            continue
        value = text.get("value")
        if isinstance(value, str) and value.strip():
            return value
        return None
    return None


class ChatOrchestrator:
    """Stateless handler driving the assistant service for a single chat turn."""

    def __init__(
        self,
        *,
        client: AssistantsClient,
        definition: AssistantDefinition,
        poller: RunPoller,
    ) -> None:
        self._client = client
        self._definition = definition
        self._poller = poller
        self._stages: tuple[tuple[str, Callable[[ChatTurnContext], None]], ...] = (
            ("resolve_assistant", self._resolve_assistant),
            ("create_thread", self._create_thread),
            ("post_message", self._post_message),
            ("start_run", self._start_run),
            ("await_run", self._await_run),
            ("fetch_reply", self._fetch_reply),
        )

    def run_chat(self, request: ChatRequest) -> ChatResponse:
        message = (request.message or "").strip()
        if not message:
            logger.info("assistant.turn.rejected reason=missing_message")
            raise InvalidInputError("Message is required")
        if not self._client.enabled:
            logger.error("assistant.turn.rejected reason=missing_api_key")
            raise ConfigurationError("Azure OpenAI API key not configured")

        hint = (request.assistant_id or "").strip()
        context = ChatTurnContext(message=message, assistant_id=hint)
        for name, stage in self._stages:
            try:
                stage(context)
            except ChatError as exc:
                logger.error(
                    "assistant.stage.failed stage=%s kind=%s thread_id=%s run_id=%s error=%s",
                    name,
                    exc.kind,
                    context.thread_id,
                    context.run_id,
                    exc.message,
                )
                raise

        logger.info(
            "assistant.turn.completed assistant_id=%s created=%s thread_id=%s run_id=%s polls=%s reply=%s",
            context.assistant_id,
            context.assistant_created,
            context.thread_id,
            context.run_id,
            context.poll_attempts,
            compact(context.reply, limit=80),
        )
        return ChatResponse(reply=context.reply, assistant_id=context.assistant_id)

    def _resolve_assistant(self, context: ChatTurnContext) -> None:
        if context.assistant_id:
            return
        assistant = self._client.create_assistant(self._definition.to_payload())
        context.assistant_id = _require_id(assistant, "create_assistant")
        context.assistant_created = True
        logger.info(
            "assistant.created assistant_id=%s model=%s",
            context.assistant_id,
            self._definition.model,
        )

    def _create_thread(self, context: ChatTurnContext) -> None:
        thread = self._client.create_thread()
        context.thread_id = _require_id(thread, "create_thread")

    def _post_message(self, context: ChatTurnContext) -> None:
        self._client.create_message(context.thread_id, context.message)

    def _start_run(self, context: ChatTurnContext) -> None:
        run = self._client.create_run(context.thread_id, context.assistant_id)
        context.run_id = _require_id(run, "create_run")
        status = run.get("status")
        context.run_status = status if isinstance(status, str) and status else "queued"

    def _await_run(self, context: ChatTurnContext) -> None:
        outcome = self._poller.wait(
            thread_id=context.thread_id,
            run_id=context.run_id,
            initial_status=context.run_status,
        )
        context.run_status = outcome.status
        context.poll_attempts = outcome.attempts
        if not outcome.completed:
            raise RunNotCompletedError(outcome.status)

    def _fetch_reply(self, context: ChatTurnContext) -> None:
        messages = self._client.list_messages(context.thread_id)
        reply = extract_reply_text(messages)
        if reply is None:
            raise EmptyReplyError()
        context.reply = reply
