# essay_portfolio/ideas/providers/base.py
"""Abstract base class for idea providers."""

from abc import ABC, abstractmethod

from essay_portfolio.ideas.types import GeneratedIdea


class IdeaProvider(ABC):
    """Abstract base class for essay idea providers."""

    @abstractmethod
    def generate(
        self,
        prompt_text: str,
        activities: list[dict],
        honors: list[dict],
        intended_major: str = "Undecided",
        dream_college: str = "",
    ) -> list[GeneratedIdea]:
        """
        Suggest essay angles for a prompt.

        Args:
            prompt_text: The essay question being answered
            activities: The student's activity records
            honors: The student's honor records
            intended_major: Optional hint for tailoring ideas
            dream_college: Optional hint for tailoring ideas

        Returns:
            Candidate ideas; nothing is saved until the student picks one
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging (e.g., 'openai')."""
        pass
