"""Filter selection state and the operations allowed to change it."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Literal, Tuple


class AssignmentFilter(str, Enum):
    ALL = "all"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


class StateFilter(str, Enum):
    ALL = "all"
    OPENED = "opened"
    CLOSED = "closed"


# -------------------------
# Types
# -------------------------
@dataclass(frozen=True)
class FilterState:
    assignment: AssignmentFilter = AssignmentFilter.ALL
    state: StateFilter = StateFilter.ALL
    developer: str = ""
    labels: FrozenSet[str] = field(default_factory=frozenset)
    milestone: str = ""
    search: str = ""

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, coerce_field(f.name, getattr(self, f.name)))


FilterField = Literal["assignment", "state", "developer", "labels", "milestone", "search"]
FILTER_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(FilterState))


def _coerce_enum(enum_cls: Any, value: object) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        return enum_cls("all")


def _coerce_labels(value: object) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        return frozenset()
    return frozenset(x for x in value if isinstance(x, str) and x)


def coerce_field(name: str, value: object) -> Any:
    """Bring a raw value into the declared domain of one field.

    Anything outside the domain falls back to the field's neutral value.
    Raises KeyError for a name that is not one of FILTER_FIELDS.
    """
    if name == "assignment":
        return _coerce_enum(AssignmentFilter, value)
    if name == "state":
        return _coerce_enum(StateFilter, value)
    if name == "labels":
        return _coerce_labels(value)
    if name in ("developer", "milestone", "search"):
        return value if isinstance(value, str) else ""
    raise KeyError(name)


class FilterStateManager:
    """Single mutable holder of the current FilterState for a view session."""

    def __init__(self, initial: FilterState | None = None) -> None:
        self._state = initial or FilterState()
        self._version = 0

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def version(self) -> int:
        """Bumped on every change that produced a different state."""
        return self._version

    def _commit(self, new_state: FilterState) -> FilterState:
        if new_state != self._state:
            self._state = new_state
            self._version += 1
        return self._state

    def set_field(self, name: FilterField, value: object) -> FilterState:
        """Replace one field. Values are coerced; an unknown name raises KeyError."""
        return self._commit(replace(self._state, **{name: coerce_field(name, value)}))

    def add_label(self, label: str) -> FilterState:
        token = label if isinstance(label, str) else ""
        if not token or token in self._state.labels:
            return self._state
        return self._commit(replace(self._state, labels=self._state.labels | {token}))

    def remove_label(self, label: str) -> FilterState:
        token = label if isinstance(label, str) else ""
        if token not in self._state.labels:
            return self._state
        return self._commit(replace(self._state, labels=self._state.labels - {token}))

    def clear_all(self) -> FilterState:
        return self._commit(FilterState())


def has_any_filter_active(fs: FilterState) -> bool:
    return fs != FilterState()


def active_filter_chips(fs: FilterState) -> List[Tuple[str, str, str]]:
    """(field, value, caption) for the removable chips: search, developer, milestone, labels."""
    chips: List[Tuple[str, str, str]] = []
    if fs.search:
        chips.append(("search", fs.search, f'Search: "{fs.search}"'))
    if fs.developer:
        chips.append(("developer", fs.developer, f"Developer: {fs.developer}"))
    if fs.milestone:
        chips.append(("milestone", fs.milestone, f"Milestone: {fs.milestone}"))
    for label in sorted(fs.labels):
        chips.append(("labels", label, label))
    return chips
