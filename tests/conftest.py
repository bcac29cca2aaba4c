"""Shared test helpers."""

from pathlib import Path

from essay_portfolio.config import PortfolioConfig
from essay_portfolio.db.documents import DocumentStore
from essay_portfolio.errors import StoreUnavailable


class FlakyStore:
    """DocumentStore wrapper that fails chosen calls.

    ``fail_on`` holds (method, collection) pairs; the next matching call
    raises StoreUnavailable and the pair is consumed, so a retry succeeds.
    Every call that reaches the real store is recorded in ``calls``.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.fail_on: list[tuple[str, str]] = []
        self.fail_after: dict[tuple[str, str], int] = {}
        self.calls: list[tuple[str, str, str]] = []

    @property
    def scope(self) -> str:
        return self.store.scope

    def new_id(self) -> str:
        return self.store.new_id()

    def _check(self, method: str, collection: str):
        key = (method, collection)
        if key in self.fail_after:
            self.fail_after[key] -= 1
            if self.fail_after[key] < 0:
                del self.fail_after[key]
                raise StoreUnavailable(f"injected {method} failure on {collection}", operation=method)
        if key in self.fail_on:
            self.fail_on.remove(key)
            raise StoreUnavailable(f"injected {method} failure on {collection}", operation=method)

    def get(self, collection, doc_id):
        self._check("get", collection)
        return self.store.get(collection, doc_id)

    def put(self, collection, doc_id, fields):
        self._check("put", collection)
        self.calls.append(("put", collection, doc_id))
        return self.store.put(collection, doc_id, fields)

    def delete(self, collection, doc_id):
        self._check("delete", collection)
        self.calls.append(("delete", collection, doc_id))
        return self.store.delete(collection, doc_id)

    def list(self, collection):
        self._check("list", collection)
        return self.store.list(collection)

    def writes(self, collection: str = None) -> int:
        return sum(1 for c in self.calls if collection is None or c[1] == collection)


def make_portfolio(db_path: Path, flaky: bool = False, student_id: str = "student-1"):
    """Portfolio over a migrated temp database, optionally behind a FlakyStore."""
    from essay_portfolio.portfolio import Portfolio

    config = PortfolioConfig(db_path=db_path, student_id=student_id)
    store = None
    if flaky:
        store = FlakyStore(DocumentStore(db_path, student_id))
    return Portfolio(config, store=store)


def fresh_view(portfolio):
    """A second session on the same store, with nothing cached."""
    from essay_portfolio.portfolio import Portfolio

    store = portfolio.store.store if isinstance(portfolio.store, FlakyStore) else portfolio.store
    return Portfolio(portfolio.config, store=store, migrate=False)
