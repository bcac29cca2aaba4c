"""Document store access for the essay portfolio."""

from essay_portfolio.db.documents import DocumentStore
from essay_portfolio.db.cache import SessionCache
from essay_portfolio.db.entities import EntityRepository, EntityStore

__all__ = ["DocumentStore", "SessionCache", "EntityRepository", "EntityStore"]
