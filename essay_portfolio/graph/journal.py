"""Journal of workflow steps for inspecting and resuming multi-step operations."""

import json
import sqlite3
from pathlib import Path
from typing import Optional

from essay_portfolio.errors import StoreUnavailable


class WorkflowJournal:
    """Append-only log of every step a workflow ran."""

    def __init__(self, db_path: Path, scope: str):
        self.db_path = db_path
        self.scope = scope

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def record(
        self,
        run_id: str,
        operation: str,
        step: str,
        status: str,
        subject_id: str = None,
        detail: dict = None,
    ) -> int:
        """Record one step. Returns the entry ID."""
        try:
            conn = self._connect()
            try:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO workflow_steps
                    (run_id, scope, operation, subject_id, step, status, detail)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    run_id,
                    self.scope,
                    operation,
                    subject_id,
                    step,
                    status,
                    json.dumps(detail) if detail else None,
                ))

                entry_id = cursor.lastrowid
                conn.commit()
                return entry_id
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"journal write failed: {e}", operation="journal") from e

    def query(
        self,
        operation: str = None,
        subject_id: str = None,
        run_id: str = None,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[dict]:
        """Query journal entries, newest first."""
        conditions = ["scope = ?"]
        params = [self.scope]

        if operation:
            conditions.append("operation = ?")
            params.append(operation)

        if subject_id:
            conditions.append("subject_id = ?")
            params.append(subject_id)

        if run_id:
            conditions.append("run_id = ?")
            params.append(run_id)

        if status:
            conditions.append("status = ?")
            params.append(status)

        where = f"WHERE {' AND '.join(conditions)}"

        try:
            conn = self._connect()
            try:
                cursor = conn.cursor()
                cursor.execute(f"""
                    SELECT * FROM workflow_steps
                    {where}
                    ORDER BY id DESC
                    LIMIT ?
                """, params + [limit])
                rows = cursor.fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"journal query failed: {e}", operation="journal") from e

        results = []
        for row in rows:
            entry = dict(row)
            if entry.get("detail"):
                entry["detail"] = json.loads(entry["detail"])
            results.append(entry)

        return results
