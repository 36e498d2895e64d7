"""Streamlit chat page for asking questions about the uploaded CVs.

Run with:
    streamlit run cvchat/ui/chat_page.py

Requires the API server:
    uvicorn cvchat.main:app --port 8000
"""

from __future__ import annotations

import streamlit as st

from cvchat.client.api_client import ChatApiClient
from cvchat.client.session import ChatSession, Notification
from cvchat.core.config import Settings
from cvchat.infra.observability.logger import setup_logging

st.set_page_config(page_title="CV Assistant", page_icon="🤖", layout="centered")

_AVATARS = {"user": "🧑", "assistant": "🤖"}


def _queue_notification(notification: Notification) -> None:
    st.session_state.setdefault("notifications", []).append(notification)


def _get_session() -> ChatSession:
    if "chat_session" not in st.session_state:
        settings = Settings.from_env()
        setup_logging(settings.log_level)
        backend = ChatApiClient(
            settings.chat_api_url,
            timeout_seconds=settings.chat_api_timeout_seconds,
        )
        st.session_state.chat_session = ChatSession(backend, notify=_queue_notification)
    return st.session_state.chat_session


def _flush_notifications() -> None:
    pending: list[Notification] = st.session_state.get("notifications", [])
    for notification in pending:
        icon = "⚠️" if notification.variant == "destructive" else "ℹ️"
        st.toast(f"**{notification.title}**: {notification.description}", icon=icon)
    st.session_state.notifications = []


def _render_sidebar(session: ChatSession) -> None:
    with st.sidebar:
        st.header("Knowledge base")
        uploaded = st.file_uploader("Upload CV", type=["pdf"], key="cv_upload")
        if uploaded is not None and st.session_state.get("cv_upload_seen") != uploaded.file_id:
            st.session_state.cv_upload_seen = uploaded.file_id
            session.select_document(uploaded.name, uploaded.type)
        st.divider()
        st.caption(f"{len(session.transcript)} messages in this session")


def _render_transcript(session: ChatSession) -> None:
    for message in session.transcript:
        with st.chat_message(message.role, avatar=_AVATARS.get(message.role)):
            st.markdown(message.content)
            st.caption(message.timestamp.astimezone().strftime("%H:%M"))


def main() -> None:
    session = _get_session()

    st.title("CV Assistant")
    st.caption("AI-powered CV analysis")

    _render_sidebar(session)
    _render_transcript(session)

    prompt = st.chat_input(
        "Ask me anything about the uploaded CVs...",
        disabled=session.busy,
    )
    if prompt and prompt.strip():
        with st.chat_message("user", avatar=_AVATARS["user"]):
            st.markdown(prompt.strip())
        with st.chat_message("assistant", avatar=_AVATARS["assistant"]):
            with st.spinner("Thinking..."):
                session.submit(prompt)
        st.rerun()

    _flush_notifications()


main()
