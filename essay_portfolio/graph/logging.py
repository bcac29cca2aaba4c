# essay_portfolio/graph/logging.py
"""Structured logging for essay graph events."""

import json
import logging
from datetime import datetime, timezone


class PortfolioLogger:
    """Structured JSON logger for portfolio events."""

    def __init__(self, name: str = "essay_portfolio"):
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def _log(self, level: int, event: str, **kwargs):
        """Log a structured event."""
        data = {
            "event": event,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **kwargs
        }
        self.logger.log(level, json.dumps(data))

    def essay_created(self, essay_id: str, kind: str, source_essay_id: str = None):
        """Log a new essay document."""
        self._log(
            logging.INFO,
            "essay_created",
            essay_id=essay_id,
            kind=kind,
            source_essay_id=source_essay_id
        )

    def essay_linked(self, prompt_id: str, essay_id: str, previous_essay_id: str = None):
        """Log a prompt link change."""
        self._log(
            logging.INFO,
            "essay_linked",
            prompt_id=prompt_id,
            essay_id=essay_id,
            previous_essay_id=previous_essay_id
        )

    def essay_unlinked(self, prompt_id: str, essay_id: str, deleted: bool):
        """Log an unlink, noting whether the forked essay was removed."""
        self._log(
            logging.INFO,
            "essay_unlinked",
            prompt_id=prompt_id,
            essay_id=essay_id,
            deleted=deleted
        )

    def essay_deleted(self, essay_id: str, orphaned_branches: int = 0):
        """Log an explicit essay deletion."""
        self._log(
            logging.INFO,
            "essay_deleted",
            essay_id=essay_id,
            orphaned_branches=orphaned_branches
        )

    def values_propagated(self, essay_id: str, value_ids: list, essays_written: int):
        """Log a value toggle and how many essays were rewritten."""
        self._log(
            logging.INFO,
            "values_propagated",
            essay_id=essay_id,
            value_ids=sorted(value_ids),
            essays_written=essays_written
        )

    def value_swept(self, value_id: str, essays_written: int):
        """Log removal of a retired value from every essay."""
        self._log(
            logging.INFO,
            "value_swept",
            value_id=value_id,
            essays_written=essays_written
        )

    def workflow_step(self, operation: str, step: str, status: str, subject_id: str = None):
        """Log a workflow step outcome."""
        self._log(
            logging.DEBUG,
            "workflow_step",
            operation=operation,
            step=step,
            status=status,
            subject_id=subject_id
        )

    def error(self, subject_id: str, error_type: str, message: str):
        """Log an error."""
        self._log(
            logging.ERROR,
            "error",
            subject_id=subject_id,
            error_type=error_type,
            message=message
        )
