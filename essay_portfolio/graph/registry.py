"""Colleges and their essay prompts."""

import logging
from typing import Optional

from essay_portfolio.db.entities import EntityStore
from essay_portfolio.errors import ValidationError
from essay_portfolio.models.entities import College, Prompt

logger = logging.getLogger(__name__)


def _clean_text(text: Optional[str], what: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} cannot be blank")
    return cleaned


def normalize_word_limit(limit: Optional[int]) -> Optional[int]:
    """A limit of 0 or None means no limit."""
    if limit is None:
        return None
    limit = int(limit)
    if limit < 0:
        raise ValidationError(f"Word limit cannot be negative: {limit}")
    return limit or None


class PromptRegistry:
    """Owns Colleges and the Prompts that belong to them.

    Deleting a prompt removes only the prompt document. An essay that pointed
    at it keeps its stale ``prompt_id``; callers resolving it must handle
    NotFound.
    """

    def __init__(self, entities: EntityStore):
        self.entities = entities

    # Colleges

    def add_college(self, name: str) -> College:
        college = College(id=self.entities.new_id(), name=_clean_text(name, "College name"))
        self.entities.colleges.put(college)
        logger.info("Added college %s (%s)", college.name, college.id)
        return college

    def rename_college(self, college_id: str, name: str) -> College:
        college = self.entities.colleges.require(college_id)
        college.name = _clean_text(name, "College name")
        self.entities.colleges.put(college)
        return college

    def get_college(self, college_id: str) -> College:
        return self.entities.colleges.require(college_id)

    def list_colleges(self) -> list[College]:
        return self.entities.colleges.list()

    # Prompts

    def add_prompt(self, college_id: str, text: str, word_limit: Optional[int] = None) -> Prompt:
        """Add a prompt under an existing college."""
        self.entities.colleges.require(college_id)
        prompt = Prompt(
            id=self.entities.new_id(),
            college_id=college_id,
            text=_clean_text(text, "Prompt text"),
            word_limit=normalize_word_limit(word_limit),
        )
        self.entities.prompts.put(prompt)
        logger.info("Added prompt %s to college %s", prompt.id, college_id)
        return prompt

    def get_prompt(self, prompt_id: str) -> Prompt:
        return self.entities.prompts.require(prompt_id)

    def delete_prompt(self, prompt_id: str) -> None:
        """Remove the prompt document only; its linked essay is left alone."""
        prompt = self.entities.prompts.require(prompt_id)
        self.entities.prompts.delete(prompt_id)
        if prompt.linked_essay_id:
            logger.info(
                "Deleted prompt %s; essay %s keeps a stale prompt reference",
                prompt_id, prompt.linked_essay_id,
            )

    def update_word_limit(self, prompt_id: str, limit: Optional[int]) -> Prompt:
        prompt = self.entities.prompts.require(prompt_id)
        prompt.word_limit = normalize_word_limit(limit)
        self.entities.prompts.put(prompt)
        return prompt

    def update_prompt_text(self, prompt_id: str, text: str) -> Prompt:
        prompt = self.entities.prompts.require(prompt_id)
        prompt.text = _clean_text(text, "Prompt text")
        self.entities.prompts.put(prompt)
        return prompt

    def set_link(self, prompt: Prompt, essay_id: Optional[str]) -> None:
        """Point a prompt at an essay, or clear it with None."""
        prompt.linked_essay_id = essay_id or None
        self.entities.prompts.put(prompt)

    def list_prompts(self, college_id: Optional[str] = None) -> list[Prompt]:
        prompts = self.entities.prompts.list()
        if college_id is not None:
            prompts = [p for p in prompts if p.college_id == college_id]
        return prompts
