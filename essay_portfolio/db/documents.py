"""Student-scoped document store over SQLite."""

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from essay_portfolio.db.connection import get_store_db
from essay_portfolio.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class DocumentStore:
    """Get/put/delete/list of JSON documents keyed by collection and id.

    Every document lives under a single student scope. Each call is its own
    round trip; there is no multi-document transaction.
    """

    def __init__(self, db_path: Path, scope: str):
        self.db_path = str(db_path)
        self.scope = scope

    def new_id(self) -> str:
        """Generate an id for a document that does not exist yet."""
        return uuid.uuid4().hex[:20]

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        """Get a document by id, or None."""
        try:
            with get_store_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT fields FROM documents WHERE scope = ? AND collection = ? AND id = ?",
                    (self.scope, collection, doc_id)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"get {collection}/{doc_id} failed: {e}", operation="get") from e

        if not row:
            return None
        fields = json.loads(row["fields"])
        fields["id"] = doc_id
        return fields

    def put(self, collection: str, doc_id: str, fields: dict) -> None:
        """Write a whole document, creating it if needed."""
        now = datetime.now(timezone.utc).isoformat()
        payload = {k: v for k, v in fields.items() if k != "id"}

        try:
            with get_store_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO documents (scope, collection, id, fields, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(scope, collection, id)
                    DO UPDATE SET fields = excluded.fields, updated_at = excluded.updated_at
                    """,
                    (self.scope, collection, doc_id, json.dumps(payload), now, now)
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"put {collection}/{doc_id} failed: {e}", operation="put") from e

        logger.debug("put %s/%s", collection, doc_id)

    def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is a no-op."""
        try:
            with get_store_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "DELETE FROM documents WHERE scope = ? AND collection = ? AND id = ?",
                    (self.scope, collection, doc_id)
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"delete {collection}/{doc_id} failed: {e}", operation="delete") from e

        logger.debug("delete %s/%s", collection, doc_id)

    def list(self, collection: str) -> list[dict]:
        """List every document in a collection, oldest first."""
        try:
            with get_store_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    SELECT id, fields FROM documents
                    WHERE scope = ? AND collection = ?
                    ORDER BY created_at ASC, rowid ASC
                    """,
                    (self.scope, collection)
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"list {collection} failed: {e}", operation="list") from e

        results = []
        for row in rows:
            fields = json.loads(row["fields"])
            fields["id"] = row["id"]
            results.append(fields)
        return results
