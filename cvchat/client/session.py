"""Chat client controller: submit turns, keep the transcript, surface notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from cvchat.client.api_client import ChatReply
from cvchat.client.transcript import Transcript
from cvchat.infra.observability.logger import compact, get_logger

logger = get_logger(__name__)

GREETING = (
    "Hello! I'm your CV Assistant. I can answer questions about the uploaded CVs "
    "in my knowledge base. What would you like to know?"
)
FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."
PDF_MIME_TYPE = "application/pdf"

NotificationVariant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notification:
    """Transient toast shown to the user."""

    title: str
    description: str
    variant: NotificationVariant = "default"


class ChatBackend(Protocol):
    def send(self, message: str, *, assistant_id: str | None = None) -> ChatReply: ...


class ChatSession:
    """One browser session: transcript, busy flag and the reused assistant id."""

    def __init__(
        self,
        backend: ChatBackend,
        *,
        notify: Callable[[Notification], None] | None = None,
        transcript: Transcript | None = None,
        greeting: str | None = GREETING,
    ) -> None:
        self._backend = backend
        self._notify = notify or (lambda _: None)
        self._transcript = transcript if transcript is not None else Transcript()
        self._busy = False
        self._assistant_id: str | None = None
        if greeting:
            self._transcript.add("assistant", greeting)

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def assistant_id(self) -> str | None:
        return self._assistant_id

    def submit(self, text: str) -> bool:
        """Send one user turn; returns False when nothing was sent."""
        content = (text or "").strip()
        if not content or self._busy:
            return False

        self._transcript.add("user", content)
        self._busy = True
        try:
            reply = self._backend.send(content, assistant_id=self._assistant_id)
        except Exception as exc:
            logger.warning("client.chat.failed type=%s error=%s", type(exc).__name__, compact(str(exc)))
            self._notify(
                Notification(
                    title="Error",
                    description="Failed to send message. Please try again.",
                    variant="destructive",
                )
            )
            self._transcript.add("assistant", FALLBACK_REPLY)
        else:
            if reply.assistant_id:
                self._assistant_id = reply.assistant_id
            self._transcript.add("assistant", reply.reply)
        finally:
            self._busy = False
        return True

    def select_document(self, filename: str, content_type: str | None) -> bool:
        """Check a picked CV file. Only PDFs pass; ingestion itself is not available.

        Adding a document means uploading it to the assistant service and
        attaching it to the document index the assistant searches. That
        integration does not exist yet, so a valid PDF is reported as not
        uploaded rather than pretending it was.
        """
        if content_type != PDF_MIME_TYPE:
            self._notify(
                Notification(
                    title="Invalid file type",
                    description="Please upload a PDF file only.",
                    variant="destructive",
                )
            )
            return False
        logger.info("client.upload.unavailable filename=%s", compact(filename, limit=80))
        self._notify(
            Notification(
                title="Upload not available",
                description=f"{filename} was not uploaded: adding CVs to the knowledge base is not supported yet.",
            )
        )
        return False
