"""Unit tests for the chat turn pipeline against a fake assistant service."""

from __future__ import annotations

import pytest

from cvchat.assistant.errors import (
    ConfigurationError,
    EmptyReplyError,
    InvalidInputError,
    RunNotCompletedError,
    UpstreamCallError,
)
from cvchat.assistant.orchestrator import extract_reply_text
from cvchat.infra.http.transport import HttpResponse, TransportError
from cvchat.protocol.messages import ChatRequest
from cvchat.tests.fakes import FakeTransport, assistant_service, json_response

FULL_SEQUENCE = [
    ("POST", "/openai/assistants"),
    ("POST", "/openai/threads"),
    ("POST", "/openai/threads/thread_1/messages"),
    ("POST", "/openai/threads/thread_1/runs"),
    ("GET", "/openai/threads/thread_1/runs/run_1"),
    ("GET", "/openai/threads/thread_1/runs/run_1"),
    ("GET", "/openai/threads/thread_1/messages"),
]


def _sequence(transport: FakeTransport) -> list[tuple[str, str]]:
    return [(item.method, item.path) for item in transport.requests]


def test_round_trip_returns_reply_unchanged(make_orchestrator, sleeps) -> None:
    reply = "  The candidate knows **Python** and Kazakh.\n"
    transport = assistant_service(run_statuses=["in_progress", "completed"], reply=reply)
    orchestrator = make_orchestrator(transport)

    response = orchestrator.run_chat(ChatRequest(message="What languages does the candidate know?"))

    assert response.reply == reply
    assert response.assistant_id == "asst_new"
    assert _sequence(transport) == FULL_SEQUENCE
    assert sleeps == [1.0, 1.0]


def test_upstream_requests_carry_fixed_version_key_and_bodies(make_orchestrator) -> None:
    transport = assistant_service(run_statuses=["completed"])
    orchestrator = make_orchestrator(transport)

    orchestrator.run_chat(ChatRequest(message="  Where did she study?  "))

    for item in transport.requests:
        assert item.url.startswith("https://round2letsgo.openai.azure.com/openai/")
        assert item.query == {"api-version": ["2024-05-01-preview"]}
        assert item.headers["api-key"] == "test-key"

    create_assistant = transport.calls("POST", "/openai/assistants")[0].json()
    assert create_assistant["model"] == "gpt-4.1round2letsgo"
    assert create_assistant["tools"] == [{"type": "file_search"}]
    assert create_assistant["tool_resources"] == {
        "file_search": {"vector_store_ids": ["vs_pX2hJzVdruY2vW0rte3nFiNr"]}
    }
    assert transport.calls("POST", "/openai/threads")[0].json() == {}
    assert transport.calls("POST", "/thread_1/messages")[0].json() == {
        "role": "user",
        "content": "Where did she study?",
    }
    assert transport.calls("POST", "/thread_1/runs")[0].json() == {"assistant_id": "asst_new"}
    assert "Content-Type" not in transport.calls("GET", "/thread_1/messages")[0].headers


def test_supplied_assistant_id_skips_creation(make_orchestrator) -> None:
    transport = assistant_service(run_statuses=["completed"])
    orchestrator = make_orchestrator(transport)

    response = orchestrator.run_chat(ChatRequest(message="hi", assistantId="asst_existing"))

    assert response.assistant_id == "asst_existing"
    assert transport.calls("POST", "/openai/assistants") == []
    assert transport.calls("POST", "/thread_1/runs")[0].json() == {"assistant_id": "asst_existing"}


def test_initially_completed_run_is_not_polled(make_orchestrator, sleeps) -> None:
    transport = assistant_service(initial_run_status="completed")
    orchestrator = make_orchestrator(transport)

    orchestrator.run_chat(ChatRequest(message="hi"))

    assert transport.calls("GET", "/runs/run_1") == []
    assert sleeps == []


@pytest.mark.parametrize("message", [None, "", "   ", "\n\t"])
def test_missing_message_is_rejected_without_upstream_calls(make_orchestrator, message) -> None:
    transport = assistant_service()
    orchestrator = make_orchestrator(transport)

    with pytest.raises(InvalidInputError) as exc_info:
        orchestrator.run_chat(ChatRequest(message=message))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Message is required"
    assert transport.requests == []


@pytest.mark.parametrize("api_key", ["", "   "])
def test_missing_credential_is_rejected_without_upstream_calls(make_orchestrator, api_key) -> None:
    transport = assistant_service()
    orchestrator = make_orchestrator(transport, api_key=api_key)

    with pytest.raises(ConfigurationError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="What languages does the candidate know?"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Azure OpenAI API key not configured"
    assert transport.requests == []


def test_run_stuck_in_progress_fails_after_exactly_thirty_checks(make_orchestrator, sleeps) -> None:
    transport = assistant_service(run_statuses=["in_progress"])
    orchestrator = make_orchestrator(transport)

    with pytest.raises(RunNotCompletedError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="hi"))

    assert exc_info.value.run_status == "in_progress"
    assert exc_info.value.message == "Assistant run failed with status: in_progress"
    assert len(transport.calls("GET", "/runs/run_1")) == 30
    assert len(sleeps) == 30
    assert transport.calls("GET", "/thread_1/messages") == []


@pytest.mark.parametrize("terminal", ["failed", "cancelled", "expired", "requires_action"])
def test_terminal_status_other_than_completed_fails(make_orchestrator, terminal) -> None:
    transport = assistant_service(run_statuses=["in_progress", terminal])
    orchestrator = make_orchestrator(transport)

    with pytest.raises(RunNotCompletedError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="hi"))

    assert exc_info.value.message == f"Assistant run failed with status: {terminal}"
    assert len(transport.calls("GET", "/runs/run_1")) == 2
    assert transport.calls("GET", "/thread_1/messages") == []


def test_failed_status_check_is_tolerated_by_the_poll_loop(make_orchestrator) -> None:
    transport = assistant_service(run_statuses=["completed"])
    transport.override(
        "GET",
        "/runs/run_1",
        HttpResponse(status=503, body="busy"),
        TransportError("timeout_error request timed out"),
        json_response({"id": "run_1", "status": "completed"}),
    )
    orchestrator = make_orchestrator(transport)

    response = orchestrator.run_chat(ChatRequest(message="hi"))

    assert response.reply == "The candidate knows Python, Go and SQL."
    assert len(transport.calls("GET", "/runs/run_1")) == 3


@pytest.mark.parametrize(
    ("method", "suffix", "message", "issued"),
    [
        ("POST", "/openai/assistants", "Failed to create assistant", 1),
        ("POST", "/openai/threads", "Failed to create thread", 2),
        ("POST", "/thread_1/messages", "Failed to add message", 3),
        ("POST", "/thread_1/runs", "Failed to run assistant", 4),
        ("GET", "/thread_1/messages", "Failed to retrieve messages", 7),
    ],
)
def test_failing_upstream_call_aborts_the_sequence(
    make_orchestrator, method, suffix, message, issued
) -> None:
    transport = assistant_service(run_statuses=["in_progress", "completed"])
    transport.override(method, suffix, json_response({"error": {"code": "boom"}}, status=500))
    orchestrator = make_orchestrator(transport)

    with pytest.raises(UpstreamCallError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="hi"))

    assert exc_info.value.message == message
    assert exc_info.value.status == 500
    assert _sequence(transport) == FULL_SEQUENCE[:issued]


def test_unreachable_service_is_an_upstream_failure(make_orchestrator) -> None:
    transport = assistant_service()
    transport.override("POST", "/openai/threads", TransportError("url_error reason=refused"))
    orchestrator = make_orchestrator(transport)

    with pytest.raises(UpstreamCallError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="hi", assistantId="asst_existing"))

    assert exc_info.value.message == "Failed to create thread"
    assert exc_info.value.status is None
    assert len(transport.requests) == 1


def test_thread_without_id_stops_before_posting_message(make_orchestrator) -> None:
    transport = assistant_service()
    transport.override("POST", "/openai/threads", json_response({"object": "thread"}))
    orchestrator = make_orchestrator(transport)

    with pytest.raises(UpstreamCallError):
        orchestrator.run_chat(ChatRequest(message="hi"))

    assert transport.calls("POST", "/messages") == []


@pytest.mark.parametrize(
    "payload",
    [
        {"data": []},
        {"data": [{"content": []}]},
        {"data": [{"content": [{"type": "text", "text": {"value": ""}}]}]},
        {"object": "list"},
    ],
)
def test_missing_reply_text_is_an_empty_reply_error(make_orchestrator, payload) -> None:
    transport = assistant_service(run_statuses=["completed"])
    transport.override("GET", "/thread_1/messages", json_response(payload))
    orchestrator = make_orchestrator(transport)

    with pytest.raises(EmptyReplyError) as exc_info:
        orchestrator.run_chat(ChatRequest(message="hi"))

    assert exc_info.value.message == "No response from assistant"


def test_extract_reply_text_uses_first_text_block_of_first_message() -> None:
    payload = {
        "data": [
            {
                "content": [
                    {"type": "image_file", "image_file": {"file_id": "file_1"}},
                    {"type": "text", "text": {"value": "first"}},
                    {"type": "text", "text": {"value": "second"}},
                ]
            },
            {"content": [{"type": "text", "text": {"value": "older"}}]},
        ]
    }

    assert extract_reply_text(payload) == "first"
