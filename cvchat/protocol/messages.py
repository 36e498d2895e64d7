"""Protocol layer: request/response DTOs shared by the API, orchestrator and chat client."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChatRoleType = Literal["user", "assistant"]
RunStatusType = Literal[
    "queued",
    "in_progress",
    "requires_action",
    "cancelling",
    "cancelled",
    "failed",
    "completed",
    "incomplete",
    "expired",
]


class ChatRequest(BaseModel):
    """One user turn. `message` is validated by the orchestrator, not by the schema."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = Field(default=None, description="Free-text question about the CVs.")
    assistant_id: str | None = Field(
        default=None,
        alias="assistantId",
        description="Existing assistant to reuse; a new one is created when absent.",
    )


class ChatResponse(BaseModel):
    """Successful turn: assistant reply text plus the assistant that produced it."""

    model_config = ConfigDict(populate_by_name=True)

    reply: str
    assistant_id: str = Field(..., alias="assistantId")


class ErrorResponse(BaseModel):
    """Failure payload for every non-2xx chat response."""

    error: str
