"""StorePointer: a persisted reference to a store backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from orcapod.models.base import Record

if TYPE_CHECKING:
    from orcapod.core.local_store import LocalStore


class StorePointer(Record):
    """Points at a store by URI, e.g. ``LocalStore::/data/orcapod``."""

    uri: str

    def get_store(self) -> LocalStore:
        """Reconstruct the store handle this pointer refers to."""
        from orcapod.core.local_store import store_from_uri

        return store_from_uri(self.uri)
