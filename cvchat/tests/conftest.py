"""Test fixtures shared by unit/integration tests."""

from __future__ import annotations

import pytest

from cvchat.assistant.definition import AssistantDefinition
from cvchat.assistant.orchestrator import ChatOrchestrator
from cvchat.assistant.run_poller import RunPoller
from cvchat.infra.llm.assistants_client import AssistantsApiConfig, AssistantsClient
from cvchat.tests.fakes import FakeTransport, assistant_service


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real credentials out of the tests."""
    for name in ("AZURE_OPENAI_API_KEY", "CHAT_API_URL", "LOG_LEVEL", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sleeps() -> list[float]:
    """Recorded poll delays; passed as the poller's sleep so tests never block."""
    return []


@pytest.fixture
def transport() -> FakeTransport:
    return assistant_service()


@pytest.fixture
def make_orchestrator(sleeps: list[float]):
    def _build(transport: FakeTransport, *, api_key: str = "test-key") -> ChatOrchestrator:
        client = AssistantsClient(AssistantsApiConfig(api_key=api_key), transport)
        return ChatOrchestrator(
            client=client,
            definition=AssistantDefinition(),
            poller=RunPoller(client, sleep=sleeps.append),
        )

    return _build
