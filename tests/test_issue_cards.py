from __future__ import annotations

from issue_radar.ui.components.issues import (
    DEFAULT_STATE_COLOR,
    STATE_COLORS,
    _card_html,
    prepare_issue_cards_df,
    state_color,
)


def test_prepare_issue_cards_df_keeps_filtered_order_and_caps() -> None:
    rows = [{"id": i, "title": f"t{i}", "state": "opened"} for i in (5, 3, 9, 1)]
    out = prepare_issue_cards_df(rows, max_cards=3)
    assert list(out["id"]) == [5, 3, 9]


def test_prepare_issue_cards_df_empty() -> None:
    assert prepare_issue_cards_df([], max_cards=10).empty


def test_state_color() -> None:
    assert state_color("opened") == STATE_COLORS["opened"]
    assert state_color("Closed") == STATE_COLORS["closed"]
    assert state_color("locked") == DEFAULT_STATE_COLOR
    assert state_color(None) == DEFAULT_STATE_COLOR


def test_card_html_list_mode_truncates_labels_and_escapes() -> None:
    row = prepare_issue_cards_df(
        [
            {
                "id": 7,
                "title": "<b>Broken</b>",
                "state": "opened",
                "assignee": "",
                "labels": ["a", "b", "c", "d"],
                "milestone_title": "v1",
                "created_date": "2024-02-01",
            }
        ],
        max_cards=1,
    ).to_dict(orient="records")[0]

    list_html = _card_html(row, view_mode="list")
    assert "#7" in list_html
    assert "&lt;b&gt;Broken&lt;/b&gt;" in list_html
    assert "Unassigned" in list_html
    assert "+2" in list_html
    assert "Milestone: v1" in list_html
    assert "Created: 2024-02-01" in list_html

    grid_html = _card_html(row, view_mode="grid")
    assert "+2" not in grid_html
    assert ">d</span>" in grid_html
