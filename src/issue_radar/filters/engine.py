"""Composite filter predicate evaluated against every record of a snapshot."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from issue_radar.facets import normalized_issues
from issue_radar.filters.state import AssignmentFilter, FilterState, StateFilter
from issue_radar.repositories.issue_repo import IssueSnapshot
from issue_radar.schema import Issue

logger = logging.getLogger(__name__)

Clause = Callable[[Issue, FilterState], bool]


# ---------------------------------------------------------------------
# Clauses
# ---------------------------------------------------------------------
def matches_assignment(issue: Issue, fs: FilterState) -> bool:
    if fs.assignment is AssignmentFilter.ASSIGNED:
        return issue.has_assignee
    if fs.assignment is AssignmentFilter.UNASSIGNED:
        return not issue.has_assignee
    return True


def matches_state(issue: Issue, fs: FilterState) -> bool:
    if fs.state is StateFilter.ALL:
        return True
    return issue.state == fs.state.value


def matches_developer(issue: Issue, fs: FilterState) -> bool:
    if not fs.developer:
        return True
    return issue.assignee == fs.developer


def matches_labels(issue: Issue, fs: FilterState) -> bool:
    # every selected label must be present
    return fs.labels.issubset(issue.labels)


def matches_milestone(issue: Issue, fs: FilterState) -> bool:
    if not fs.milestone:
        return True
    return issue.milestone_title == fs.milestone


def matches_search(issue: Issue, fs: FilterState) -> bool:
    if not fs.search:
        return True
    needle = fs.search.lower()
    return any(
        needle in target.lower() for target in (issue.title, issue.description, issue.id_text)
    )


def active_clauses(fs: FilterState) -> List[Clause]:
    """Only the clauses whose selection narrows the result."""
    out: List[Clause] = []
    if fs.assignment is not AssignmentFilter.ALL:
        out.append(matches_assignment)
    if fs.state is not StateFilter.ALL:
        out.append(matches_state)
    if fs.developer:
        out.append(matches_developer)
    if fs.labels:
        out.append(matches_labels)
    if fs.milestone:
        out.append(matches_milestone)
    if fs.search:
        out.append(matches_search)
    return out


def issue_matches(issue: Optional[Issue], clauses: List[Clause], fs: FilterState) -> bool:
    if not clauses:
        return True
    if issue is None:
        return False
    return all(clause(issue, fs) for clause in clauses)


def apply_filters(source: IssueSnapshot | Iterable[Any], fs: FilterState) -> List[Any]:
    """Return the records matching every active clause, in snapshot order.

    Records are returned as loaded. A record lacking a field an active clause
    needs does not match that clause; it never raises.
    """
    if isinstance(source, IssueSnapshot):
        records, issues = list(source.records), normalized_issues(source)
    else:
        records = list(source)
        issues = normalized_issues(records)

    clauses = active_clauses(fs)
    filtered = [rec for rec, issue in zip(records, issues) if issue_matches(issue, clauses, fs)]
    logger.debug(
        "Filtered issues: %d of %d (%d active clauses)", len(filtered), len(records), len(clauses)
    )
    return filtered
