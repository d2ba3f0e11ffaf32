"""Typed issue records with every "missing" variant collapsed to one neutral value."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _int_or_none(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def resolve_milestone_title(record: Mapping[str, Any]) -> str:
    """`milestone.title` when present and non-empty, else the flat `milestone_title`."""
    milestone = record.get("milestone")
    if isinstance(milestone, Mapping):
        title = _text(milestone.get("title"))
        if title:
            return title
    return _text(record.get("milestone_title"))


def resolve_project_id(record: Mapping[str, Any]) -> Optional[int]:
    project = record.get("project")
    if isinstance(project, Mapping):
        pid = _int_or_none(project.get("id"))
        if pid is not None:
            return pid
    return _int_or_none(record.get("project_id"))


class Issue(BaseModel):
    """One work item as seen by the filter engine.

    Assignee, labels, description and milestone are never None: absent,
    null, wrongly typed and blank values all land on "" / [] before any
    predicate runs. The assignee keeps its original text so developer
    matching stays exact.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Optional[int] = None
    title: str = ""
    description: str = ""
    state: str = ""
    assignee: str = ""
    labels: List[str] = Field(default_factory=list)
    milestone_title: str = ""
    project_id: Optional[int] = None
    created_date: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _collapse_missing(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        raw = dict(data)
        assignee = _text(raw.get("assignee"))
        labels = raw.get("labels")
        created = raw.get("created_date") or raw.get("created_at")
        return {
            "id": _int_or_none(raw.get("id")),
            "title": _text(raw.get("title")),
            "description": _text(raw.get("description")),
            "state": _text(raw.get("state")),
            "assignee": assignee if assignee.strip() else "",
            "labels": [x for x in labels if isinstance(x, str)] if isinstance(labels, list) else [],
            "milestone_title": resolve_milestone_title(raw),
            "project_id": resolve_project_id(raw),
            "created_date": created if isinstance(created, str) and created else None,
        }

    @property
    def has_assignee(self) -> bool:
        return bool(self.assignee)

    @property
    def id_text(self) -> str:
        return "" if self.id is None else str(self.id)


def coerce_issue(record: object) -> Optional[Issue]:
    """Normalize one raw record; None when it is not a keyed structure at all."""
    if isinstance(record, Issue):
        return record
    if not isinstance(record, Mapping):
        return None
    return Issue.model_validate(record)
