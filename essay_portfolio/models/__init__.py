"""Portfolio entity types."""

from essay_portfolio.models.status import EssayKind, EssayStatus
from essay_portfolio.models.entities import College, Essay, Prompt, Value

__all__ = ["College", "Essay", "EssayKind", "EssayStatus", "Prompt", "Value"]
