"""Word counts against a prompt's word limit."""

import re
from dataclasses import dataclass
from typing import Optional

_TAG = re.compile(r"<[^>]*>")
_SPACE = re.compile(r"\s+")

# Fraction of the limit past which a draft is "near" it
NEAR_LIMIT = 0.9


def word_count(html: str) -> int:
    """Count words in editor HTML."""
    text = _SPACE.sub(" ", _TAG.sub(" ", html or "")).strip()
    if not text:
        return 0
    return len(text.split(" "))


@dataclass
class WordBudget:
    count: int
    limit: Optional[int] = None

    @property
    def remaining(self) -> Optional[int]:
        if self.limit is None:
            return None
        return max(self.limit - self.count, 0)

    @property
    def over(self) -> int:
        if self.limit is None:
            return 0
        return max(self.count - self.limit, 0)

    @property
    def level(self) -> str:
        if self.limit is None:
            return "unlimited"
        if self.count > self.limit:
            return "over"
        if self.count > self.limit * NEAR_LIMIT:
            return "near"
        return "ok"

    def describe(self) -> str:
        if self.limit is None:
            return f"{self.count} words"
        if self.over:
            return f"{self.count}/{self.limit} words ({self.over} over limit)"
        return f"{self.count}/{self.limit} words ({self.remaining} remaining)"


def word_budget(content: str, limit: Optional[int]) -> WordBudget:
    return WordBudget(count=word_count(content), limit=limit or None)
