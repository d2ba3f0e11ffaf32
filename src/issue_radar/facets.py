"""Facet derivation: the selectable filter values offered by a snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from issue_radar.repositories.issue_repo import IssueSnapshot
from issue_radar.schema import Issue, coerce_issue


@dataclass(frozen=True)
class FacetSets:
    developers: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    milestones: List[str] = field(default_factory=list)


def normalized_issues(source: IssueSnapshot | Iterable[Any]) -> List[Optional[Issue]]:
    if isinstance(source, IssueSnapshot):
        if len(source.issues) == len(source.records):
            return list(source.issues)
        return [coerce_issue(r) for r in source.records]
    return [coerce_issue(r) for r in source]


def derive_facets(source: IssueSnapshot | Iterable[Any]) -> FacetSets:
    """Distinct assignees, labels and milestone titles, each sorted ascending.

    Blank assignees and empty milestone titles are left out. The result only
    depends on the set of records, not on their order.
    """
    issues = [i for i in normalized_issues(source) if i is not None]
    return FacetSets(
        developers=sorted({i.assignee for i in issues if i.has_assignee}),
        labels=sorted({label for i in issues for label in i.labels}),
        milestones=sorted({i.milestone_title for i in issues if i.milestone_title}),
    )
