"""Summary counters and tabular projection of a filtered issue sequence."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from issue_radar.schema import coerce_issue

ISSUE_COLUMNS = ["id", "title", "description", "state", "assignee", "labels", "milestone", "created"]


def issues_dataframe(records: Iterable[Any]) -> pd.DataFrame:
    """One row per record, normalized; records that are not keyed structures are dropped."""
    rows: List[Dict[str, Any]] = []
    for rec in records:
        issue = coerce_issue(rec)
        if issue is None:
            continue
        rows.append(
            {
                "id": issue.id,
                "title": issue.title,
                "description": issue.description,
                "state": issue.state,
                "assignee": issue.assignee,
                "labels": list(issue.labels),
                "milestone": issue.milestone_title,
                "created": issue.created_date,
            }
        )
    if not rows:
        return pd.DataFrame(columns=ISSUE_COLUMNS)

    df = pd.DataFrame(rows)
    df["created"] = pd.to_datetime(df["created"], utc=True, errors="coerce", format="ISO8601")
    return df


def compute_summary(
    filtered: Iterable[Any], *, loaded: Optional[Iterable[Any]] = None
) -> Dict[str, int]:
    """Counters shown above the issue list: total, open, closed and unassigned."""
    records = list(filtered)
    df = issues_dataframe(records)
    out = {
        "total": len(records),
        "opened": 0,
        "closed": 0,
        "unassigned": len(records) - len(df),
    }
    if not df.empty:
        state = df["state"].fillna("").astype(str)
        out["opened"] = int((state == "opened").sum())
        out["closed"] = int((state == "closed").sum())
        out["unassigned"] += int((df["assignee"].fillna("").astype(str) == "").sum())
    if loaded is not None:
        out["loaded_total"] = len(list(loaded))
    return out
