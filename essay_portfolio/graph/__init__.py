# essay_portfolio/graph/__init__.py
"""Essay portfolio linking engine."""

from essay_portfolio.graph.coverage import CoverageAggregator
from essay_portfolio.graph.essays import EssayGraph
from essay_portfolio.graph.journal import WorkflowJournal
from essay_portfolio.graph.logging import PortfolioLogger
from essay_portfolio.graph.registry import PromptRegistry
from essay_portfolio.graph.values import ValueRegistry
from essay_portfolio.graph.workflow import Workflow, WorkflowResult

__all__ = [
    "CoverageAggregator",
    "EssayGraph",
    "PortfolioLogger",
    "PromptRegistry",
    "ValueRegistry",
    "Workflow",
    "WorkflowJournal",
    "WorkflowResult",
]
