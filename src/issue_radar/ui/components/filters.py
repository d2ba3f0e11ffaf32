"""Filter controls, active-filter chips and their synchronization with FilterStateManager."""

from __future__ import annotations

from typing import List, Sequence

import streamlit as st

from issue_radar.facets import FacetSets
from issue_radar.filters.state import (
    AssignmentFilter,
    FilterState,
    FilterStateManager,
    StateFilter,
    active_filter_chips,
    has_any_filter_active,
)

ALL_OPTION = ""

_ASSIGNMENT_LABELS = {
    AssignmentFilter.ALL: "All issues",
    AssignmentFilter.ASSIGNED: "Assigned",
    AssignmentFilter.UNASSIGNED: "Unassigned",
}
_STATE_LABELS = {
    StateFilter.ALL: "All states",
    StateFilter.OPENED: "Open",
    StateFilter.CLOSED: "Closed",
}


# ---------------------------------------------------------------------
# Internal: namespaced UI keys + widget <-> state sync
# ---------------------------------------------------------------------
def _ui_key(prefix: str, name: str) -> str:
    p = (prefix or "").strip()
    return f"{p}::filter_{name}_ui" if p else f"filter_{name}_ui"


def _with_current(options: Sequence[str], current: str) -> List[str]:
    """Facet options preceded by the "any" entry; a selected value missing from the facet is kept."""
    out = [ALL_OPTION] + list(options)
    if current and current not in out:
        out.append(current)
    return out


def _sync_field_from_ui(manager: FilterStateManager, name: str, ui_key: str) -> None:
    manager.set_field(name, st.session_state.get(ui_key))


def _sync_labels_from_ui(manager: FilterStateManager, ui_key: str) -> None:
    manager.set_field("labels", list(st.session_state.get(ui_key) or []))


def mirror_state_to_ui(fs: FilterState, *, key_prefix: str = "") -> None:
    """Copy the canonical state into widget keys so chips/clear-all show up in the controls."""
    st.session_state[_ui_key(key_prefix, "assignment")] = fs.assignment.value
    st.session_state[_ui_key(key_prefix, "state")] = fs.state.value
    st.session_state[_ui_key(key_prefix, "developer")] = fs.developer
    st.session_state[_ui_key(key_prefix, "milestone")] = fs.milestone
    st.session_state[_ui_key(key_prefix, "search")] = fs.search
    st.session_state[_ui_key(key_prefix, "labels")] = sorted(fs.labels)


def remove_chip(manager: FilterStateManager, field_name: str, value: str, key_prefix: str) -> None:
    if field_name == "labels":
        manager.remove_label(value)
    else:
        manager.set_field(field_name, "")
    mirror_state_to_ui(manager.state, key_prefix=key_prefix)


def clear_filters(manager: FilterStateManager, key_prefix: str) -> None:
    manager.clear_all()
    mirror_state_to_ui(manager.state, key_prefix=key_prefix)


# ---------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------
def render_filters(
    manager: FilterStateManager, facets: FacetSets, *, key_prefix: str = ""
) -> FilterState:
    """Render the filter panel and return the resulting FilterState."""
    fs = manager.state
    mirror_state_to_ui(fs, key_prefix=key_prefix)

    st.text_input(
        "Search",
        key=_ui_key(key_prefix, "search"),
        placeholder="Title, description or #id",
        on_change=_sync_field_from_ui,
        args=(manager, "search", _ui_key(key_prefix, "search")),
    )

    c1, c2, c3 = st.columns(3)
    with c1:
        st.selectbox(
            "Assignment",
            options=[a.value for a in AssignmentFilter],
            format_func=lambda v: _ASSIGNMENT_LABELS[AssignmentFilter(v)],
            key=_ui_key(key_prefix, "assignment"),
            on_change=_sync_field_from_ui,
            args=(manager, "assignment", _ui_key(key_prefix, "assignment")),
        )
        st.selectbox(
            "State",
            options=[s.value for s in StateFilter],
            format_func=lambda v: _STATE_LABELS[StateFilter(v)],
            key=_ui_key(key_prefix, "state"),
            on_change=_sync_field_from_ui,
            args=(manager, "state", _ui_key(key_prefix, "state")),
        )
    with c2:
        st.selectbox(
            "Developer",
            options=_with_current(facets.developers, fs.developer),
            format_func=lambda v: v or "All developers",
            key=_ui_key(key_prefix, "developer"),
            on_change=_sync_field_from_ui,
            args=(manager, "developer", _ui_key(key_prefix, "developer")),
        )
        st.selectbox(
            "Milestone",
            options=_with_current(facets.milestones, fs.milestone),
            format_func=lambda v: v or "All milestones",
            key=_ui_key(key_prefix, "milestone"),
            on_change=_sync_field_from_ui,
            args=(manager, "milestone", _ui_key(key_prefix, "milestone")),
        )
    with c3:
        st.multiselect(
            "Labels (all must match)",
            options=sorted(set(facets.labels) | set(fs.labels)),
            key=_ui_key(key_prefix, "labels"),
            on_change=_sync_labels_from_ui,
            args=(manager, _ui_key(key_prefix, "labels")),
        )

    render_active_filters(manager, key_prefix=key_prefix)
    return manager.state


def render_active_filters(manager: FilterStateManager, *, key_prefix: str = "") -> None:
    fs = manager.state
    chips = active_filter_chips(fs)
    if chips:
        st.caption("Active filters:")
        cols = st.columns(min(len(chips), 6))
        for i, (field_name, value, caption) in enumerate(chips):
            with cols[i % len(cols)]:
                st.button(
                    f"{caption}  ✕",
                    key=_ui_key(key_prefix, f"chip_{field_name}_{value}"),
                    on_click=remove_chip,
                    args=(manager, field_name, value, key_prefix),
                )
    if has_any_filter_active(fs):
        st.button(
            "Clear all filters",
            key=_ui_key(key_prefix, "clear_all"),
            on_click=clear_filters,
            args=(manager, key_prefix),
        )
