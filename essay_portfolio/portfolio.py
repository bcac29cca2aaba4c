# essay_portfolio/portfolio.py
"""Portfolio - wires the store, registries and essay graph for one student."""

import logging
from typing import Optional

from essay_portfolio.config import PortfolioConfig
from essay_portfolio.db.cache import SessionCache
from essay_portfolio.db.documents import DocumentStore
from essay_portfolio.db.entities import ACTIVITIES, HONORS, EntityStore
from essay_portfolio.db.migrations import run_migrations
from essay_portfolio.graph.coverage import CoverageAggregator
from essay_portfolio.graph.essays import EssayGraph
from essay_portfolio.graph.journal import WorkflowJournal
from essay_portfolio.graph.logging import PortfolioLogger
from essay_portfolio.graph.registry import PromptRegistry
from essay_portfolio.graph.values import ValueRegistry
from essay_portfolio.ideas.providers.base import IdeaProvider
from essay_portfolio.ideas.types import GeneratedIdea

logger = logging.getLogger(__name__)


class Portfolio:
    """The only mutation surface for one student's essay documents.

    ``store`` defaults to the SQLite DocumentStore at ``config.db_path``;
    pass another object with the same get/put/delete/list/new_id methods to
    run against a different backend.
    """

    def __init__(self, config: PortfolioConfig, store=None, migrate: bool = True):
        self.config = config
        if migrate:
            run_migrations(config.db_path)

        self.store = store if store is not None else DocumentStore(config.db_path, config.student_id)
        self.cache = SessionCache(self.store)
        self.entities = EntityStore(self.cache)
        self.events = PortfolioLogger()
        self.journal = (
            WorkflowJournal(config.db_path, config.student_id)
            if config.journal_enabled else None
        )

        self.registry = PromptRegistry(self.entities)
        self.essays = EssayGraph(self.entities, self.registry, journal=self.journal, events=self.events)
        self.values = ValueRegistry(self.entities, journal=self.journal, events=self.events)
        self.coverage = CoverageAggregator(self.entities)

    @classmethod
    def from_env(cls) -> "Portfolio":
        return cls(PortfolioConfig.from_env())

    def generate_ideas(
        self,
        prompt_text: str,
        provider: IdeaProvider,
        intended_major: str = "Undecided",
        dream_college: str = "",
    ) -> list[GeneratedIdea]:
        """Ask a provider for essay angles drawn from the student's records.

        The ideas are returned unsaved; pass one to
        ``essays.save_generated_idea`` to keep it.
        """
        activities = self.entities.records(ACTIVITIES)
        honors = self.entities.records(HONORS)
        logger.info(
            "Generating ideas with %s from %d activities and %d honors",
            provider.name, len(activities), len(honors),
        )
        return provider.generate(
            prompt_text,
            activities,
            honors,
            intended_major=intended_major,
            dream_college=dream_college,
        )

    def default_provider(self, api_key: Optional[str] = None) -> IdeaProvider:
        from essay_portfolio.ideas.providers.openai_provider import OpenAIIdeaProvider

        return OpenAIIdeaProvider(api_key=api_key, model=self.config.idea_model)
