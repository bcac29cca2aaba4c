"""Essay status and kind definitions."""

from enum import Enum
from typing import Optional

from essay_portfolio.errors import ValidationError


class EssayStatus(Enum):
    """Where an essay stands in the writing process."""

    IDEA = "Idea"
    IN_PROGRESS = "In Progress"
    PROOFREAD = "Proofread"
    SUBMITTED = "Submitted"

    @classmethod
    def from_string(cls, value: str) -> "EssayStatus":
        """Convert a stored or typed status, accepting enum names too."""
        value = (value or "").strip()
        for member in cls:
            if value == member.value or value.upper().replace(" ", "_") == member.name:
                return member
        raise ValidationError(f"Unknown essay status: {value!r}")


class EssayKind(Enum):
    """Closed set of essay variants."""

    COMMON_APP = "CommonApp"
    BASE = "Base"
    BRANCH = "Branch"


# Intended progression. Not enforced: any status may follow any other.
STATUS_PROGRESSION = [
    EssayStatus.IDEA,
    EssayStatus.IN_PROGRESS,
    EssayStatus.PROOFREAD,
    EssayStatus.SUBMITTED,
]


def can_transition(from_status: EssayStatus, to_status: EssayStatus) -> bool:
    """Every status change is allowed."""
    return True


def next_status(status: EssayStatus) -> Optional[EssayStatus]:
    """The status that normally follows, or None once submitted."""
    index = STATUS_PROGRESSION.index(status)
    if index + 1 < len(STATUS_PROGRESSION):
        return STATUS_PROGRESSION[index + 1]
    return None
