"""Issue snapshot repository: payload shape detection, canonicalization and scoping."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from hashlib import blake2b
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from issue_radar.schema import Issue, coerce_issue, resolve_project_id

logger = logging.getLogger(__name__)


class PayloadShape(str, Enum):
    ARRAY = "array"
    ISSUES_ENVELOPE = "issues_envelope"
    DATA_ENVELOPE = "data_envelope"
    UNRECOGNIZED = "unrecognized"


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))


def detect_payload_shape(payload: object) -> PayloadShape:
    if _is_sequence(payload):
        return PayloadShape.ARRAY
    if isinstance(payload, Mapping):
        if _is_sequence(payload.get("issues")):
            return PayloadShape.ISSUES_ENVELOPE
        if _is_sequence(payload.get("data")):
            return PayloadShape.DATA_ENVELOPE
    return PayloadShape.UNRECOGNIZED


def canonicalize_payload(payload: object) -> List[Any]:
    """Return the issue records carried by a response payload.

    A bare array is used as is, then an `issues` array, then a `data` array.
    Any other shape yields an empty list instead of an error.
    """
    shape = detect_payload_shape(payload)
    if shape is PayloadShape.ARRAY:
        return list(payload)  # type: ignore[arg-type]
    if shape is PayloadShape.ISSUES_ENVELOPE:
        return list(payload["issues"])  # type: ignore[index]
    if shape is PayloadShape.DATA_ENVELOPE:
        return list(payload["data"])  # type: ignore[index]
    return []


def scope_to_project(records: Sequence[Any], project_id: Optional[int]) -> List[Any]:
    """Keep records whose `project.id` or `project_id` matches; no-op without a project."""
    if project_id is None:
        return list(records)
    return [r for r in records if isinstance(r, Mapping) and resolve_project_id(r) == project_id]


def records_signature(records: Sequence[Any]) -> str:
    h = blake2b(digest_size=16)
    h.update(str(len(records)).encode("utf-8"))
    try:
        body = json.dumps(list(records), sort_keys=True, default=str)
    except TypeError:
        # mixed key types cannot be sorted
        body = repr(list(records))
    h.update(body.encode("utf-8"))
    return h.hexdigest()


@dataclass(frozen=True)
class IssueSnapshot:
    """Immutable, point-in-time collection of loaded issue records.

    `records` keeps the raw items in payload order; `issues` holds their
    normalized form at the same positions (None for records that are not
    keyed structures).
    """

    records: Tuple[Any, ...] = ()
    shape: PayloadShape = PayloadShape.ARRAY
    loaded_at: str = ""
    issues: Tuple[Optional[Issue], ...] = field(default=(), compare=False)
    signature: str = ""

    @staticmethod
    def build(
        records: Sequence[Any], *, shape: PayloadShape = PayloadShape.ARRAY
    ) -> "IssueSnapshot":
        recs = tuple(records)
        return IssueSnapshot(
            records=recs,
            shape=shape,
            loaded_at=datetime.now(timezone.utc).isoformat(),
            issues=tuple(coerce_issue(r) for r in recs),
            signature=records_signature(recs),
        )

    @staticmethod
    def empty() -> "IssueSnapshot":
        return IssueSnapshot.build([])

    @property
    def recognized(self) -> bool:
        return self.shape is not PayloadShape.UNRECOGNIZED

    def __len__(self) -> int:
        return len(self.records)


class IssueRepository:
    """Holds the most recently loaded snapshot; each load replaces it wholesale."""

    def __init__(self) -> None:
        self._snapshot = IssueSnapshot.empty()

    @property
    def snapshot(self) -> IssueSnapshot:
        return self._snapshot

    def load(self, payload: object, *, project_id: Optional[int] = None) -> IssueSnapshot:
        shape = detect_payload_shape(payload)
        if shape is PayloadShape.UNRECOGNIZED:
            logger.warning(
                "Unrecognized issues payload (%s); using an empty snapshot", type(payload).__name__
            )
        else:
            logger.debug("Issues payload shape: %s", shape.value)

        records = scope_to_project(canonicalize_payload(payload), project_id)
        if project_id is not None:
            logger.debug("Scoped to project %s: %d issues", project_id, len(records))
        self._snapshot = IssueSnapshot.build(records, shape=shape)
        return self._snapshot

    def load_json_file(self, path: Path, *, project_id: Optional[int] = None) -> IssueSnapshot:
        """Load a payload exported to disk. A missing file loads as an empty array."""
        if not path.exists():
            return self.load([], project_id=project_id)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Invalid JSON in %s", path)
            payload = None
        return self.load(payload, project_id=project_id)
