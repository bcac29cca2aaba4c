# essay_portfolio/config.py
"""Configuration for the essay portfolio."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from essay_portfolio.db.config import DEFAULT_STUDENT, get_db_path, get_student_scope


@dataclass
class PortfolioConfig:
    """Configuration for a portfolio session."""

    # Paths
    db_path: Path = field(default_factory=get_db_path)

    # Every document is keyed under this student
    student_id: str = DEFAULT_STUDENT

    # Idea generation
    idea_model: str = "gpt-4.1-mini"

    # Persist workflow steps to the journal table
    journal_enabled: bool = True

    @classmethod
    def from_env(cls) -> "PortfolioConfig":
        """Create configuration from environment variables."""
        return cls(
            db_path=get_db_path(),
            student_id=get_student_scope(),
            idea_model=os.environ.get("ESSAY_PORTFOLIO_IDEA_MODEL", "gpt-4.1-mini"),
            journal_enabled=os.environ.get("ESSAY_PORTFOLIO_JOURNAL", "1") != "0",
        )
