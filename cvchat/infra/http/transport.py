"""HTTP infra: minimal transport seam over urllib, swappable with fakes in tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib import error, request


class TransportError(Exception):
    """Raised when no HTTP response could be obtained (DNS, refused, timeout)."""


@dataclass(frozen=True)
class HttpResponse:
    """Status code plus decoded text body of one HTTP exchange."""

    status: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON; an empty or invalid body yields None."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except json.JSONDecodeError:
            return None


class HttpTransport(Protocol):
    """Anything able to perform one blocking HTTP request."""

    def send(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
        timeout: float,
    ) -> HttpResponse: ...


class UrllibTransport:
    """Production transport: `urllib.request` with HTTP errors folded into responses."""

    def send(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
        timeout: float,
    ) -> HttpResponse:
        req = request.Request(url, data=body, headers=headers, method=method)
        try:
            with request.urlopen(req, timeout=timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
                return HttpResponse(
                    status=resp.status,
                    body=raw,
                    headers={key.lower(): value for key, value in resp.headers.items()},
                )
        except error.HTTPError as exc:
            details = ""
            try:
                raw_error = exc.read()
                if raw_error:
                    details = raw_error.decode("utf-8", errors="replace")
            except OSError:
                details = ""
            return HttpResponse(status=exc.code, body=details)
        except error.URLError as exc:
            raise TransportError(f"url_error reason={exc.reason}") from exc
        except TimeoutError as exc:
            raise TransportError("timeout_error request timed out") from exc


def encode_json(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")
