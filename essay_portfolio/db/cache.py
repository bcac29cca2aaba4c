"""Session cache with read-your-writes consistency over a document store."""

import copy
from typing import Optional


class SessionCache:
    """Write-through mirror of the documents one client session has seen.

    The mirror is only updated after the underlying store call succeeds; a
    failed write leaves it holding what the store holds.
    """

    def __init__(self, store):
        self.store = store
        self._docs: dict[tuple[str, str], dict] = {}
        self._missing: set[tuple[str, str]] = set()

    @property
    def scope(self) -> str:
        return self.store.scope

    def new_id(self) -> str:
        return self.store.new_id()

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        key = (collection, doc_id)
        if key in self._docs:
            return copy.deepcopy(self._docs[key])
        if key in self._missing:
            return None

        doc = self.store.get(collection, doc_id)
        if doc is None:
            self._missing.add(key)
            return None
        self._docs[key] = doc
        return copy.deepcopy(doc)

    def put(self, collection: str, doc_id: str, fields: dict) -> None:
        self.store.put(collection, doc_id, fields)
        key = (collection, doc_id)
        doc = copy.deepcopy(fields)
        doc["id"] = doc_id
        self._docs[key] = doc
        self._missing.discard(key)

    def delete(self, collection: str, doc_id: str) -> None:
        self.store.delete(collection, doc_id)
        key = (collection, doc_id)
        self._docs.pop(key, None)
        self._missing.add(key)

    def invalidate(self) -> None:
        """Forget everything mirrored so far."""
        self._docs.clear()
        self._missing.clear()

    def list(self, collection: str) -> list[dict]:
        """List from the store and refresh the mirror for that collection."""
        docs = self.store.list(collection)
        for key in [k for k in self._docs if k[0] == collection]:
            del self._docs[key]
        self._missing = {k for k in self._missing if k[0] != collection}
        for doc in docs:
            self._docs[(collection, doc["id"])] = doc
        return copy.deepcopy(docs)
