"""Student-defined value tags."""

import logging
from typing import Optional

from essay_portfolio.db.entities import EntityStore
from essay_portfolio.errors import ValidationError
from essay_portfolio.graph.logging import PortfolioLogger
from essay_portfolio.graph.workflow import Workflow, WorkflowResult
from essay_portfolio.models.entities import Value

logger = logging.getLogger(__name__)

PRESET_COLORS = [
    "#EF4444",  # Red
    "#F59E0B",  # Amber
    "#10B981",  # Emerald
    "#3B82F6",  # Blue
    "#6366F1",  # Indigo
    "#8B5CF6",  # Violet
    "#EC4899",  # Pink
    "#6B7280",  # Gray
]


class ValueRegistry:
    """Owns the student's values and removes retired ones from every essay."""

    def __init__(
        self,
        entities: EntityStore,
        journal=None,
        events: Optional[PortfolioLogger] = None,
        palette: Optional[list[str]] = None,
    ):
        self.entities = entities
        self.journal = journal
        self.events = events
        self.palette = palette or PRESET_COLORS

    def create_value(self, name: str) -> Value:
        """Create a value, coloured by cycling the palette on the current count."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Value name cannot be blank")

        count = len(self.entities.values.list())
        value = Value(
            id=self.entities.new_id(),
            name=name,
            color=self.palette[count % len(self.palette)],
        )
        self.entities.values.put(value)
        logger.info("Created value %s (%s)", value.name, value.color)
        return value

    def get_value(self, value_id: str) -> Value:
        return self.entities.values.require(value_id)

    def list_values(self) -> list[Value]:
        return self.entities.values.list()

    def delete_value(self, value_id: str) -> WorkflowResult:
        """Delete a value, then strip it from every essay that still has it.

        The sweep runs even when the value is already gone, so calling this
        again after an interrupted sweep finishes the job.
        """
        wf = Workflow("delete_value", subject_id=value_id, journal=self.journal, events=self.events)

        if self.entities.values.exists(value_id):
            wf.run("delete_value", self.entities.values.delete, value_id)
        else:
            wf.skip("delete_value", "value already deleted")

        swept = 0
        for essay in self.entities.essays.list():
            if value_id not in essay.assigned_values:
                continue
            essay.assigned_values = [v for v in essay.assigned_values if v != value_id]
            wf.run(f"sweep:{essay.id}", self.entities.essays.put, essay)
            swept += 1

        result = wf.finish(value_id=value_id, essays_swept=swept)
        if self.events:
            self.events.value_swept(value_id, swept)
        return result
