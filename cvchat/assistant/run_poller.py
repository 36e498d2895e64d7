"""Bounded fixed-interval polling of an assistant run until it leaves a pending status."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from cvchat.assistant.errors import UpstreamCallError
from cvchat.infra.llm.assistants_client import AssistantsClient
from cvchat.infra.observability.logger import get_logger

logger = get_logger(__name__)

PENDING_RUN_STATUSES = frozenset({"queued", "in_progress"})
POLL_INTERVAL_SECONDS = 1.0
MAX_POLL_ATTEMPTS = 30


@dataclass(frozen=True)
class PollOutcome:
    """Last-seen run status and how many status checks it took."""

    status: str
    attempts: int

    @property
    def completed(self) -> bool:
        return self.status == "completed"


class RunPoller:
    """Check run status every interval, at most `max_attempts` times."""

    def __init__(
        self,
        client: AssistantsClient,
        *,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._interval_seconds = max(0.0, interval_seconds)
        self._max_attempts = max(0, max_attempts)
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def wait(self, *, thread_id: str, run_id: str, initial_status: str) -> PollOutcome:
        status = initial_status
        attempts = 0
        while status in PENDING_RUN_STATUSES and attempts < self._max_attempts:
            self._sleep(self._interval_seconds)
            attempts += 1
            try:
                run = self._client.get_run(thread_id, run_id)
            except UpstreamCallError as exc:
                # A failed check keeps the last-seen status and still spends an attempt.
                logger.warning(
                    "assistant.run.poll_failed run_id=%s attempt=%s status=%s",
                    run_id,
                    attempts,
                    exc.status,
                )
                continue
            fetched = run.get("status")
            if isinstance(fetched, str) and fetched:
                status = fetched
            logger.debug("assistant.run.poll run_id=%s attempt=%s status=%s", run_id, attempts, status)

        if status in PENDING_RUN_STATUSES:
            logger.warning(
                "assistant.run.poll_exhausted run_id=%s attempts=%s status=%s",
                run_id,
                attempts,
                status,
            )
        return PollOutcome(status=status, attempts=attempts)
