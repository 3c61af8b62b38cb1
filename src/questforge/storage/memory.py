"""In-memory repository backend.

Documents live in plain dictionaries guarded by a re-entrant lock.
Transactions snapshot every collection on entry and restore the snapshot if
the block raises, so a failed reconciliation leaves no partial writes.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from questforge.core.logging import get_logger
from questforge.storage.repository import Collection, Repository

logger = get_logger(__name__)

_Record = tuple[str | None, dict[str, Any]]


class InMemoryRepository(Repository):
    """Repository keeping all records in process memory."""

    def __init__(self) -> None:
        self._collections: dict[Collection, dict[str, _Record]] = {
            collection: {} for collection in Collection
        }
        self._lock = threading.RLock()
        self._depth = 0
        logger.debug("InMemoryRepository initialized")

    def _fetch(self, collection: Collection, key: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._collections[collection].get(key)
            return copy.deepcopy(record[1]) if record else None

    def _scan(self, collection: Collection, owner: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(document)
                for record_owner, document in self._collections[collection].values()
                if owner is None or record_owner == owner
            ]

    def _put(
        self,
        collection: Collection,
        key: str,
        document: dict[str, Any],
        *,
        owner: str | None = None,
    ) -> None:
        with self._lock:
            # dict assignment keeps the original insertion position on replace
            self._collections[collection][key] = (owner, copy.deepcopy(document))

    def _remove(self, collection: Collection, key: str) -> bool:
        with self._lock:
            return self._collections[collection].pop(key, None) is not None

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy(self._collections)
            self._depth = 1
            try:
                yield
            except BaseException:
                self._collections = snapshot
                logger.warning("Transaction rolled back")
                raise
            finally:
                self._depth = 0


__all__ = ["InMemoryRepository"]
