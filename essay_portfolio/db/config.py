"""Database configuration."""

import os
from pathlib import Path

# Default path to the portfolio store (override with ESSAY_PORTFOLIO_DB env var)
DEFAULT_DB_PATH = Path.home() / ".essay_portfolio" / "portfolio.db"

DEFAULT_STUDENT = "default"


def get_db_path() -> Path:
    """Get the database path, with environment override support."""
    env_path = os.environ.get("ESSAY_PORTFOLIO_DB")
    if env_path:
        return Path(env_path)

    DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    return DEFAULT_DB_PATH


def get_student_scope() -> str:
    """Get the student scope every document is keyed under."""
    return os.environ.get("ESSAY_PORTFOLIO_STUDENT") or DEFAULT_STUDENT
