"""Multi-step workflows with a step log.

Operations such as branching an essay or sweeping a retired value are an
ordered series of independent store writes. A Workflow runs those steps,
records each one, and turns a failure after the first write into a
PartialCompletionError carrying how far it got. Steps whose target is already
in the desired state are recorded as skipped, so re-running the same
operation converges without repeating writes.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from essay_portfolio.errors import PartialCompletionError, StoreUnavailable

logger = logging.getLogger(__name__)

DONE = "done"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class StepRecord:
    """Outcome of one workflow step."""

    name: str
    status: str
    detail: dict = field(default_factory=dict)


@dataclass
class WorkflowResult:
    """What a multi-step operation did."""

    operation: str
    run_id: str
    subject_id: Optional[str] = None
    steps: list[StepRecord] = field(default_factory=list)
    failed_step: Optional[str] = None
    detail: dict = field(default_factory=dict)

    @property
    def steps_completed(self) -> int:
        return sum(1 for s in self.steps if s.status in (DONE, SKIPPED))

    @property
    def steps_total(self) -> int:
        return len(self.steps) + (1 if self.failed_step else 0)

    @property
    def writes(self) -> int:
        """Steps that actually issued a write."""
        return sum(1 for s in self.steps if s.status == DONE)

    @property
    def complete(self) -> bool:
        return self.failed_step is None

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "run_id": self.run_id,
            "subject_id": self.subject_id,
            "steps_completed": self.steps_completed,
            "steps_total": self.steps_total,
            "writes": self.writes,
            "failed_step": self.failed_step,
            "steps": [{"name": s.name, "status": s.status} for s in self.steps],
            **self.detail,
        }


class Workflow:
    """Runs the ordered steps of one top-level operation."""

    def __init__(self, operation: str, subject_id: str = None, journal=None, events=None):
        self.result = WorkflowResult(
            operation=operation,
            run_id=uuid.uuid4().hex,
            subject_id=subject_id,
        )
        self.journal = journal
        self.events = events

    def _record(self, name: str, status: str, detail: Optional[dict] = None):
        if self.journal is not None:
            self.journal.record(
                run_id=self.result.run_id,
                operation=self.result.operation,
                step=name,
                status=status,
                subject_id=self.result.subject_id,
                detail=detail,
            )
        if self.events is not None:
            self.events.workflow_step(self.result.operation, name, status, self.result.subject_id)

    def run(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Run one step that writes to the store."""
        try:
            value = fn(*args, **kwargs)
        except Exception as e:
            self._fail(name, e)

        self.result.steps.append(StepRecord(name, DONE))
        try:
            self._record(name, DONE)
        except Exception as e:
            self._fail(f"{name}:journal", e)
        return value

    def skip(self, name: str, reason: str) -> None:
        """Record a step whose target was already in the desired state."""
        detail = {"reason": reason}
        self.result.steps.append(StepRecord(name, SKIPPED, detail))
        try:
            self._record(name, SKIPPED, detail)
        except Exception as e:
            self._fail(f"{name}:journal", e)

    def _fail(self, name: str, error: Exception):
        self.result.failed_step = name

        if self.journal is not None:
            try:
                self.journal.record(
                    run_id=self.result.run_id,
                    operation=self.result.operation,
                    step=name,
                    status=FAILED,
                    subject_id=self.result.subject_id,
                    detail={"error": str(error)},
                )
            except StoreUnavailable as journal_error:
                logger.warning("Could not journal failed step %s: %s", name, journal_error)

        if self.events is not None:
            self.events.error(self.result.subject_id, type(error).__name__, str(error))

        if self.result.writes == 0:
            raise error

        raise PartialCompletionError(
            f"{self.result.operation} stopped at step '{name}' after "
            f"{self.result.steps_completed} completed step(s): {error}",
            result=self.result,
            cause=error,
        ) from error

    def finish(self, **detail) -> WorkflowResult:
        self.result.detail.update(detail)
        return self.result
