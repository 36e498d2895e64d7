"""Assistant persona definition: bundled YAML with embedded fallbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cvchat.infra.observability.logger import get_logger

logger = get_logger(__name__)

DEFINITION_FILE = Path(__file__).resolve().parent / "definitions" / "cv_assistant.yaml"

DEFAULT_NAME = "CV Assistant"
DEFAULT_MODEL = "gpt-4.1round2letsgo"
DEFAULT_INSTRUCTIONS = (
    "You are a helpful assistant that answers questions about the uploaded CV. "
    "Be professional, concise, and accurate. If asked about information not in "
    "the CV, politely say you can only discuss what's in the uploaded CV."
)
DEFAULT_TEMPERATURE = 0.7
DEFAULT_VECTOR_STORE_ID = "vs_pX2hJzVdruY2vW0rte3nFiNr"


@dataclass(frozen=True)
class AssistantDefinition:
    """Everything needed to create the CV persona on the assistant service."""

    name: str = DEFAULT_NAME
    model: str = DEFAULT_MODEL
    instructions: str = DEFAULT_INSTRUCTIONS
    temperature: float = DEFAULT_TEMPERATURE
    tools: tuple[str, ...] = ("file_search",)
    vector_store_ids: tuple[str, ...] = field(default=(DEFAULT_VECTOR_STORE_ID,))

    def to_payload(self) -> dict[str, Any]:
        """Render the create-assistant request body."""
        payload: dict[str, Any] = {
            "model": self.model,
            "name": self.name,
            "instructions": self.instructions,
            "tools": [{"type": tool} for tool in self.tools],
            "temperature": self.temperature,
        }
        if "file_search" in self.tools and self.vector_store_ids:
            payload["tool_resources"] = {
                "file_search": {"vector_store_ids": list(self.vector_store_ids)}
            }
        return payload


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        logger.warning("assistant.definition.unreadable path=%s", path)
        return {}
    if not isinstance(raw, dict):
        return {}
    return raw


def _pick_str(payload: dict[str, Any], key: str, fallback: str) -> str:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return " ".join(value.split()) if key == "instructions" else value.strip()
    return fallback


def _pick_float(payload: dict[str, Any], key: str, fallback: float) -> float:
    value = payload.get(key)
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return fallback
    return fallback


def _pick_str_list(payload: dict[str, Any], key: str, fallback: tuple[str, ...]) -> tuple[str, ...]:
    raw = payload.get(key)
    if not isinstance(raw, list):
        return fallback
    items: list[str] = []
    for item in raw:
        if isinstance(item, str) and item.strip() and item.strip() not in items:
            items.append(item.strip())
    return tuple(items) or fallback


def load_assistant_definition(path: Path | None = None) -> AssistantDefinition:
    """Load the bundled persona; missing or malformed fields keep the embedded defaults."""
    source = path or DEFINITION_FILE
    payload = _read_yaml(source)
    status = payload.get("status")
    if isinstance(status, str) and status.strip().lower() not in {"", "active"}:
        logger.warning("assistant.definition.inactive path=%s status=%s", source, status)
        payload = {}

    defaults = AssistantDefinition()
    temperature = _pick_float(payload, "temperature", defaults.temperature)
    return AssistantDefinition(
        name=_pick_str(payload, "name", defaults.name),
        model=_pick_str(payload, "model", defaults.model),
        instructions=_pick_str(payload, "instructions", defaults.instructions),
        temperature=min(2.0, max(0.0, temperature)),
        tools=_pick_str_list(payload, "tools", defaults.tools),
        vector_store_ids=_pick_str_list(payload, "vector_store_ids", defaults.vector_store_ids),
    )
