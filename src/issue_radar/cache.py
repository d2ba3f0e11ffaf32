"""Signature-keyed memoization for derived views (facets, filtered issues)."""

from __future__ import annotations

from collections import OrderedDict
from hashlib import blake2b
from typing import Any, Callable, MutableMapping, TypeVar

from issue_radar.filters.state import FilterState

T = TypeVar("T")

_CACHE_ROOT_KEY = "__signature_view_cache"


def filter_state_signature(fs: FilterState, *, salt: str = "") -> str:
    """Build a stable signature for a filter selection (label order does not matter)."""
    h = blake2b(digest_size=16)
    h.update(str(salt).encode("utf-8"))
    for part in (
        fs.assignment.value,
        fs.state.value,
        fs.developer,
        "\x1f".join(sorted(fs.labels)),
        fs.milestone,
        fs.search,
    ):
        h.update(part.encode("utf-8"))
        h.update(b"\x1e")
    return h.hexdigest()


class SignatureCache:
    """LRU per namespace, stored under one key of a mutable mapping.

    The mapping defaults to a private dict; the Streamlit page hands in
    `st.session_state` so results survive reruns of the same session.
    """

    def __init__(
        self, store: MutableMapping[str, Any] | None = None, *, max_entries: int = 8
    ) -> None:
        self._store: MutableMapping[str, Any] = store if store is not None else {}
        self._max_entries = max(1, int(max_entries))

    def _root(self) -> dict[str, OrderedDict[str, Any]]:
        root = self._store.get(_CACHE_ROOT_KEY)
        if isinstance(root, dict):
            return root
        root = {}
        self._store[_CACHE_ROOT_KEY] = root
        return root

    def cached(self, namespace: str, signature: str, compute: Callable[[], T]) -> tuple[T, bool]:
        """Return cached value by signature or compute+store it."""
        root = self._root()
        bucket = root.get(namespace)
        if not isinstance(bucket, OrderedDict):
            bucket = OrderedDict()
            root[namespace] = bucket

        if signature in bucket:
            bucket.move_to_end(signature)
            return bucket[signature], True

        value = compute()
        bucket[signature] = value
        bucket.move_to_end(signature)
        while len(bucket) > self._max_entries:
            bucket.popitem(last=False)
        return value, False

    def clear(self) -> None:
        self._store.pop(_CACHE_ROOT_KEY, None)
