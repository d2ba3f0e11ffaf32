"""Issue cards (grid/list) and summary counters for the filtered view."""

from __future__ import annotations

import html
from typing import Any, Dict, Iterable, List

import pandas as pd
import streamlit as st

from issue_radar.kpis import issues_dataframe

STATE_COLORS = {"opened": "#2da44e", "closed": "#8c959f"}
DEFAULT_STATE_COLOR = "#0969da"
MAX_LABELS_IN_LIST = 2


def state_color(state: object) -> str:
    return STATE_COLORS.get(str(state or "").strip().lower(), DEFAULT_STATE_COLOR)


def _label_badges(labels: Iterable[str], *, limit: int | None) -> str:
    items = list(labels or [])
    shown = items if limit is None else items[:limit]
    out = [f'<span class="badge badge-label">{html.escape(x)}</span>' for x in shown]
    if limit is not None and len(items) > limit:
        out.append(f'<span class="badge-more">+{len(items) - limit}</span>')
    return "".join(out)


def _created_text(value: object) -> str:
    if isinstance(value, pd.Timestamp) and not pd.isna(value):
        return value.strftime("%Y-%m-%d")
    return ""


def prepare_issue_cards_df(records: Iterable[Any], *, max_cards: int) -> pd.DataFrame:
    """Card rows in filtered order, capped at `max_cards`."""
    df = issues_dataframe(records)
    if df.empty:
        return df
    return df.head(max(1, int(max_cards))).reset_index(drop=True)


def _card_html(row: Dict[str, Any], *, view_mode: str) -> str:
    title = html.escape(str(row.get("title") or "(untitled)"))
    issue_id = row.get("id")
    id_txt = f"#{int(issue_id)}" if issue_id is not None and not pd.isna(issue_id) else ""
    state = str(row.get("state") or "")
    assignee = str(row.get("assignee") or "")
    milestone = str(row.get("milestone") or "")
    created = _created_text(row.get("created"))

    badges: List[str] = [
        f'<span class="badge" style="border-color:{state_color(state)};color:{state_color(state)}">'
        f"{html.escape(state or 'unknown')}</span>",
        f'<span class="badge">{html.escape(assignee) if assignee else "Unassigned"}</span>',
    ]
    if milestone:
        badges.append(f'<span class="badge">Milestone: {html.escape(milestone)}</span>')
    if created:
        badges.append(f'<span class="badge">Created: {created}</span>')

    limit = MAX_LABELS_IN_LIST if view_mode == "list" else None
    labels = _label_badges(row.get("labels") or [], limit=limit)
    return (
        f'<article class="issue-card issue-card-{view_mode}">'
        f'<div class="issue-top"><span class="issue-id">{id_txt}</span> {title}</div>'
        f'<div class="badges">{"".join(badges)}</div>'
        f'<div class="labels">{labels}</div>'
        "</article>"
    )


def render_summary(summary: Dict[str, int]) -> None:
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Issues", int(summary.get("total", 0)))
        loaded = summary.get("loaded_total")
        if loaded is not None and loaded != summary.get("total"):
            st.caption(f"({loaded} total loaded)")
    with c2:
        st.metric("Open", int(summary.get("opened", 0)))
    with c3:
        st.metric("Closed", int(summary.get("closed", 0)))
    with c4:
        st.metric("Unassigned", int(summary.get("unassigned", 0)))


def render_issue_cards(
    records: List[Any], *, loaded_total: int, view_mode: str = "grid", max_cards: int = 60
) -> None:
    if not records:
        st.markdown("#### No Issues Found")
        if loaded_total == 0:
            st.info(
                "No issues have been loaded yet. Make sure your project has issues "
                "or try refreshing the page."
            )
        else:
            st.info("Try adjusting your filters or search criteria to find issues.")
        return

    cards_df = prepare_issue_cards_df(records, max_cards=max_cards)
    cards = [_card_html(row, view_mode=view_mode) for row in cards_df.to_dict(orient="records")]
    columns = "repeat(auto-fill, minmax(300px, 1fr))" if view_mode == "grid" else "minmax(0, 1fr)"
    st.markdown(
        f"""
        <style>
          .issue-cards-stack {{
            display: grid;
            grid-template-columns: {columns};
            gap: 12px;
          }}
          .issue-card {{ border: 1px solid #d0d7de; border-radius: 8px; padding: 12px; }}
          .issue-id {{ color: #57606a; }}
          .badge {{ display: inline-block; border: 1px solid #d0d7de; border-radius: 999px;
                    padding: 0 8px; margin: 4px 4px 0 0; font-size: 0.78rem; }}
          .badge-more {{ color: #57606a; font-size: 0.78rem; }}
        </style>
        <div class="issue-cards-stack">{''.join(cards)}</div>
        """,
        unsafe_allow_html=True,
    )
    if len(records) > len(cards_df):
        st.caption(f"Showing {len(cards_df)}/{len(records)} issues.")
