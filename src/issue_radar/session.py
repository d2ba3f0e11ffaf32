"""One issues-view session: snapshot + filter selection + memoized derivations."""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping, Optional

from issue_radar.cache import SignatureCache, filter_state_signature
from issue_radar.facets import FacetSets, derive_facets
from issue_radar.filters.engine import apply_filters
from issue_radar.filters.state import FilterState, FilterStateManager
from issue_radar.kpis import compute_summary
from issue_radar.repositories.issue_repo import IssueRepository, IssueSnapshot


class IssuesViewSession:
    """Pure derivations over (snapshot, filters), recomputed only when an input changed."""

    def __init__(
        self,
        *,
        repository: IssueRepository | None = None,
        filters: FilterStateManager | None = None,
        cache_store: MutableMapping[str, Any] | None = None,
    ) -> None:
        self.repository = repository or IssueRepository()
        self.filters = filters or FilterStateManager()
        self._cache = SignatureCache(cache_store)

    @property
    def snapshot(self) -> IssueSnapshot:
        return self.repository.snapshot

    @property
    def filter_state(self) -> FilterState:
        return self.filters.state

    def load(self, payload: object, *, project_id: Optional[int] = None) -> IssueSnapshot:
        return self.repository.load(payload, project_id=project_id)

    def _filtered_key(self) -> str:
        return f"{self.snapshot.signature}:{filter_state_signature(self.filter_state)}"

    def facets(self) -> FacetSets:
        snap = self.snapshot
        value, _ = self._cache.cached("facets", snap.signature, lambda: derive_facets(snap))
        return value

    def filtered(self) -> List[Any]:
        snap, fs = self.snapshot, self.filter_state
        value, _ = self._cache.cached(
            "filtered", self._filtered_key(), lambda: apply_filters(snap, fs)
        )
        return list(value)

    def summary(self) -> Dict[str, int]:
        filtered = self.filtered()
        value, _ = self._cache.cached(
            "summary",
            self._filtered_key(),
            lambda: compute_summary(filtered, loaded=self.snapshot.records),
        )
        return dict(value)
