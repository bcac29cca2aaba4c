"""Essay idea generation."""

from essay_portfolio.ideas.types import GeneratedIdea, strip_markdown

__all__ = ["GeneratedIdea", "strip_markdown"]
