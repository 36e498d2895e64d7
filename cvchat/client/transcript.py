"""Chat client state: immutable messages in an append-only, in-memory transcript."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator
from uuid import uuid4

from cvchat.protocol.messages import ChatRoleType


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatMessage:
    """One rendered turn; identity is a generated token."""

    role: ChatRoleType
    content: str
    timestamp: datetime
    id: str = field(default_factory=lambda: uuid4().hex)


class Transcript:
    """Ordered turns of one session. Timestamps are strictly increasing."""

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._messages: list[ChatMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> ChatMessage | None:
        return self._messages[-1] if self._messages else None

    def add(self, role: ChatRoleType, content: str) -> ChatMessage:
        timestamp = self._clock()
        previous = self.last
        if previous is not None and timestamp <= previous.timestamp:
            timestamp = previous.timestamp + timedelta(microseconds=1)
        message = ChatMessage(role=role, content=content, timestamp=timestamp)
        self._messages.append(message)
        return message
