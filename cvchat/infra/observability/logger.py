"""Observability layer: logging setup and log-safe formatting helpers."""

from __future__ import annotations

import logging

_NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger once for single-line console output (server and UI)."""
    normalized = level.upper()
    logging.basicConfig(
        level=normalized,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(normalized)
        logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger instance."""
    return logging.getLogger(name)


def compact(text: str | None, *, limit: int = 160) -> str:
    """Collapse whitespace and truncate free text so it fits one log line."""
    if not isinstance(text, str):
        return ""
    single = " ".join(text.split())
    if len(single) <= limit:
        return single
    return f"{single[: max(1, limit - 3)].rstrip()}..."


def describe_secret(value: str | None) -> str:
    # Never log the credential itself.
    if not value or not value.strip():
        return "missing"
    return f"set(len={len(value.strip())})"
