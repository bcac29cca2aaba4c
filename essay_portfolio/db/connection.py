"""Connections to the portfolio's SQLite file.

The document store reads and writes the ``documents`` table, one row per
(scope, collection, id), through :func:`get_store_db`.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from .config import get_db_path

BUSY_TIMEOUT_SECONDS = 10


@contextmanager
def get_store_db(db_path: Optional[Union[str, Path]] = None) -> Generator[sqlite3.Connection, None, None]:
    """Open the portfolio database and close it when the block exits.

    Rows come back as ``sqlite3.Row`` so repositories can read columns by
    name. Commits are left to the caller.

    Example:
        with get_store_db() as conn:
            rows = conn.execute(
                "SELECT id, fields FROM documents WHERE scope = ? AND collection = 'essays'",
                (student_id,),
            ).fetchall()
    """
    path = Path(db_path) if db_path is not None else get_db_path()

    conn = sqlite3.connect(str(path), timeout=BUSY_TIMEOUT_SECONDS)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()
