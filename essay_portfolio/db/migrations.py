"""Database migrations for the portfolio store tables."""

import sqlite3
from pathlib import Path


MIGRATIONS = [
    # Student-scoped documents (colleges, essay_prompts, essay_values, essays, ...)
    """
    CREATE TABLE IF NOT EXISTS documents (
        scope TEXT NOT NULL,
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        fields JSON NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP,
        PRIMARY KEY (scope, collection, id)
    )
    """,

    # Step log for multi-step workflows
    """
    CREATE TABLE IF NOT EXISTS workflow_steps (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT NOT NULL,
        scope TEXT NOT NULL,
        operation TEXT NOT NULL,
        subject_id TEXT,
        step TEXT NOT NULL,
        status TEXT NOT NULL,
        detail JSON,
        performed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(scope, collection)",
    "CREATE INDEX IF NOT EXISTS idx_steps_run ON workflow_steps(run_id)",
    "CREATE INDEX IF NOT EXISTS idx_steps_operation ON workflow_steps(operation, performed_at)",
    "CREATE INDEX IF NOT EXISTS idx_steps_subject ON workflow_steps(subject_id)",
]


def run_migrations(db_path: Path) -> None:
    """Run all migrations to set up portfolio tables."""
    conn = sqlite3.connect(db_path, timeout=10)
    cursor = conn.cursor()

    # Enable WAL mode for concurrent read/write access
    cursor.execute("PRAGMA journal_mode = WAL")

    for migration in MIGRATIONS:
        cursor.execute(migration)

    for index in INDEXES:
        cursor.execute(index)

    conn.commit()
    conn.close()
