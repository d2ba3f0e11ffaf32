"""Streamlit issues-management page: load, filter, summarize and list issues."""

from __future__ import annotations

import logging
from pathlib import Path

import streamlit as st

from issue_radar.config import Settings, ensure_env, load_settings, project_scope
from issue_radar.ingest.issues_api import IssuesApiError, fetch_issues_payload
from issue_radar.logs import configure_logging
from issue_radar.session import IssuesViewSession
from issue_radar.ui.components.filters import render_filters
from issue_radar.ui.components.issues import render_issue_cards, render_summary

logger = logging.getLogger(__name__)

SESSION_KEY = "__issues_view_session"
LOAD_ERROR_KEY = "__issues_load_error"
VIEW_MODE_KEY = "issues_view_mode"
LOADED_KEY = "__issues_loaded"


def get_view_session() -> IssuesViewSession:
    """Return the view session stored in st.session_state, creating it on first use."""
    session = st.session_state.get(SESSION_KEY)
    if isinstance(session, IssuesViewSession):
        return session
    session = IssuesViewSession(cache_store=st.session_state)
    st.session_state[SESSION_KEY] = session
    return session


def reload_issues(settings: Settings, session: IssuesViewSession) -> None:
    """Replace the snapshot from the configured source; errors leave an empty snapshot."""
    st.session_state[LOAD_ERROR_KEY] = ""
    project_id = project_scope(settings)
    local = str(settings.ISSUES_PAYLOAD_PATH or "").strip()
    if local:
        session.repository.load_json_file(Path(local), project_id=project_id)
        return
    try:
        payload = fetch_issues_payload(settings)
    except IssuesApiError as e:
        logger.error("Failed to load issues: %s", e)
        st.session_state[LOAD_ERROR_KEY] = str(e)
        session.load([])
        return
    session.load(payload, project_id=project_id)


def main() -> None:
    ensure_env()
    settings = load_settings()
    configure_logging(settings.LOG_LEVEL)

    st.set_page_config(page_title=settings.APP_TITLE, layout="wide")
    session = get_view_session()
    if LOADED_KEY not in st.session_state:
        reload_issues(settings, session)
        st.session_state[LOADED_KEY] = True

    head_l, head_r = st.columns([4, 1])
    with head_l:
        st.title(settings.APP_TITLE)
    with head_r:
        st.radio(
            "View",
            options=["grid", "list"],
            index=0 if settings.DEFAULT_VIEW_MODE == "grid" else 1,
            key=VIEW_MODE_KEY,
            horizontal=True,
        )
        if st.button("Reload"):
            reload_issues(settings, session)

    error = str(st.session_state.get(LOAD_ERROR_KEY) or "")
    if error:
        st.error(f"Error Loading Issues: {error}")
    elif not session.snapshot.recognized:
        st.warning("The issues response had an unrecognized shape; nothing was loaded.")

    render_filters(session.filters, session.facets(), key_prefix="issues")
    summary = session.summary()
    render_summary(summary)
    render_issue_cards(
        session.filtered(),
        loaded_total=len(session.snapshot),
        view_mode=str(st.session_state.get(VIEW_MODE_KEY) or settings.DEFAULT_VIEW_MODE),
        max_cards=settings.ISSUE_CARDS_MAX,
    )
