"""Error taxonomy for one chat turn; every failure short-circuits the pipeline."""

from __future__ import annotations

from typing import ClassVar

# Client-facing wording per upstream operation. Upstream detail stays in logs.
UPSTREAM_FAILURE_MESSAGES: dict[str, str] = {
    "create_assistant": "Failed to create assistant",
    "create_thread": "Failed to create thread",
    "create_message": "Failed to add message",
    "create_run": "Failed to run assistant",
    "get_run": "Failed to check run status",
    "list_messages": "Failed to retrieve messages",
}


class ChatError(Exception):
    """Base class: a tagged, client-presentable failure of one chat turn."""

    kind: ClassVar[str] = "internal"
    status_code: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ChatError):
    kind = "invalid_input"
    status_code = 400


class ConfigurationError(ChatError):
    kind = "configuration"


class UpstreamCallError(ChatError):
    """An assistant-service call failed: non-2xx status or no response at all."""

    kind = "upstream"

    def __init__(self, operation: str, *, status: int | None = None, detail: str = "") -> None:
        super().__init__(UPSTREAM_FAILURE_MESSAGES.get(operation, f"Failed to {operation}"))
        self.operation = operation
        self.status = status
        self.detail = detail


class RunNotCompletedError(ChatError):
    kind = "run_not_completed"

    def __init__(self, run_status: str) -> None:
        super().__init__(f"Assistant run failed with status: {run_status}")
        self.run_status = run_status


class EmptyReplyError(ChatError):
    kind = "empty_reply"

    def __init__(self) -> None:
        super().__init__("No response from assistant")
