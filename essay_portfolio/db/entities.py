"""Typed repositories for each portfolio collection."""

from typing import Generic, Optional, TypeVar

from essay_portfolio.errors import NotFound
from essay_portfolio.models.entities import College, Essay, Prompt, Value

COLLEGES = "colleges"
PROMPTS = "essay_prompts"
VALUES = "essay_values"
ESSAYS = "essays"
ACTIVITIES = "activities"
HONORS = "honors"

T = TypeVar("T")


class EntityRepository(Generic[T]):
    """Typed get/put/delete/list for one collection of the document store."""

    def __init__(self, store, collection: str, entity_type: type, label: str):
        self.store = store
        self.collection = collection
        self.entity_type = entity_type
        self.label = label

    def get(self, entity_id: Optional[str]) -> Optional[T]:
        if not entity_id:
            return None
        doc = self.store.get(self.collection, entity_id)
        return self.entity_type.from_doc(doc) if doc else None

    def require(self, entity_id: Optional[str]) -> T:
        """Get an entity or raise NotFound."""
        entity = self.get(entity_id)
        if entity is None:
            raise NotFound(self.label, entity_id or "")
        return entity

    def exists(self, entity_id: Optional[str]) -> bool:
        return self.get(entity_id) is not None

    def put(self, entity: T) -> None:
        self.store.put(self.collection, entity.id, entity.to_doc())

    def delete(self, entity_id: str) -> None:
        self.store.delete(self.collection, entity_id)

    def list(self) -> list[T]:
        return [self.entity_type.from_doc(doc) for doc in self.store.list(self.collection)]


class EntityStore:
    """The four portfolio repositories over one (usually cached) store."""

    def __init__(self, store):
        self.store = store
        self.colleges: EntityRepository[College] = EntityRepository(store, COLLEGES, College, "College")
        self.prompts: EntityRepository[Prompt] = EntityRepository(store, PROMPTS, Prompt, "Prompt")
        self.values: EntityRepository[Value] = EntityRepository(store, VALUES, Value, "Value")
        self.essays: EntityRepository[Essay] = EntityRepository(store, ESSAYS, Essay, "Essay")

    def new_id(self) -> str:
        return self.store.new_id()

    def records(self, collection: str) -> list[dict]:
        """Raw documents from collections the core only reads (activities, honors)."""
        return self.store.list(collection)
