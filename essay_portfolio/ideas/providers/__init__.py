"""Idea generation providers."""

from essay_portfolio.ideas.providers.base import IdeaProvider
from essay_portfolio.ideas.providers.openai_provider import OpenAIIdeaProvider

__all__ = ["IdeaProvider", "OpenAIIdeaProvider"]
