"""Composition layer: build and hold long-lived service objects for dependency injection."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from cvchat.assistant.definition import AssistantDefinition, load_assistant_definition
from cvchat.assistant.orchestrator import ChatOrchestrator
from cvchat.assistant.run_poller import RunPoller
from cvchat.core.config import Settings
from cvchat.infra.http.transport import HttpTransport, UrllibTransport
from cvchat.infra.llm.assistants_client import AssistantsApiConfig, AssistantsClient


@dataclass
class AppContainer:
    """Container object attached to FastAPI app state."""

    settings: Settings
    definition: AssistantDefinition
    assistants_client: AssistantsClient
    orchestrator: ChatOrchestrator


def build_container(
    settings: Settings,
    *,
    transport: HttpTransport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> AppContainer:
    """Construct runtime dependencies in one place."""
    definition = load_assistant_definition()
    assistants_client = AssistantsClient(
        AssistantsApiConfig(
            api_key=settings.azure_openai_api_key,
            timeout_seconds=settings.azure_openai_timeout_seconds,
        ),
        transport or UrllibTransport(),
    )
    orchestrator = ChatOrchestrator(
        client=assistants_client,
        definition=definition,
        poller=RunPoller(assistants_client, sleep=sleep),
    )
    return AppContainer(
        settings=settings,
        definition=definition,
        assistants_client=assistants_client,
        orchestrator=orchestrator,
    )
