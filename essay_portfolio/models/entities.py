"""Data types for portfolio documents.

Python attributes are snake_case; the stored documents keep the camelCase
field names the student's existing data already uses.
"""

from dataclasses import dataclass, field
from typing import Optional

from essay_portfolio.errors import InvalidState
from essay_portfolio.models.status import EssayKind, EssayStatus


def _unique(items) -> list[str]:
    seen = []
    for item in items or []:
        if item and item not in seen:
            seen.append(item)
    return seen


def _blank_to_none(value):
    return value if value else None


@dataclass
class College:
    """A college the student is applying to."""

    id: str
    name: str

    def to_doc(self) -> dict:
        return {"collegeName": self.name}

    @classmethod
    def from_doc(cls, doc: dict) -> "College":
        return cls(id=doc["id"], name=doc.get("collegeName", ""))


@dataclass
class Prompt:
    """A college-specific essay question, fulfilled by at most one essay."""

    id: str
    college_id: str
    text: str
    word_limit: Optional[int] = None
    linked_essay_id: Optional[str] = None

    def to_doc(self) -> dict:
        return {
            "collegeId": self.college_id,
            "promptText": self.text,
            "wordLimit": self.word_limit,
            "linkedEssayId": self.linked_essay_id or "",
        }

    @classmethod
    def from_doc(cls, doc: dict) -> "Prompt":
        return cls(
            id=doc["id"],
            college_id=doc.get("collegeId", ""),
            text=doc.get("promptText", ""),
            word_limit=doc.get("wordLimit") or None,
            linked_essay_id=_blank_to_none(doc.get("linkedEssayId")),
        )


@dataclass
class Value:
    """A student-defined thematic tag."""

    id: str
    name: str
    color: str

    def to_doc(self) -> dict:
        return {"name": self.name, "color": self.color}

    @classmethod
    def from_doc(cls, doc: dict) -> "Value":
        return cls(id=doc["id"], name=doc.get("name", ""), color=doc.get("color", ""))


@dataclass
class Essay:
    """An essay draft: a Common App essay, a Base idea, or a per-prompt Branch.

    Only a Branch may carry ``source_essay_id``, ``prompt_id`` and
    ``college_id``; a Branch must carry the latter two. ``source_essay_id`` is
    set only on Branches forked from a Base.
    """

    id: str
    title: str
    kind: EssayKind
    status: EssayStatus = EssayStatus.IDEA
    idea: str = ""
    content: str = ""
    source_essay_id: Optional[str] = None
    prompt_id: Optional[str] = None
    college_id: Optional[str] = None
    prompt_text: Optional[str] = None
    common_app_prompt: str = ""
    assigned_values: list[str] = field(default_factory=list)
    assigned_colleges: list[str] = field(default_factory=list)
    is_emphasized: bool = False
    created_at: str = ""
    last_modified: str = ""

    def __post_init__(self):
        self.assigned_values = _unique(self.assigned_values)
        self.assigned_colleges = _unique(self.assigned_colleges)

        if self.kind == EssayKind.BRANCH:
            if not self.prompt_id or not self.college_id:
                raise InvalidState(
                    f"Branch essay {self.id} needs a prompt and a college", entity_id=self.id
                )
        elif self.source_essay_id or self.prompt_id or self.college_id:
            raise InvalidState(
                f"{self.kind.value} essay {self.id} cannot be tied to a source, prompt or college",
                entity_id=self.id,
            )

    @property
    def is_fork(self) -> bool:
        """True for a Branch forked from a Base essay."""
        return self.source_essay_id is not None

    @property
    def value_set(self) -> frozenset:
        return frozenset(self.assigned_values)

    def to_doc(self) -> dict:
        return {
            "title": self.title,
            "idea": self.idea,
            "content": self.content,
            "status": self.status.value,
            "kind": self.kind.value,
            "isCommonApp": self.kind == EssayKind.COMMON_APP,
            "sourceEssayId": self.source_essay_id,
            "promptId": self.prompt_id,
            "collegeId": self.college_id,
            "promptText": self.prompt_text,
            "commonAppPrompt": self.common_app_prompt,
            "assignedValues": list(self.assigned_values),
            "assignedColleges": list(self.assigned_colleges),
            "isEmphasized": self.is_emphasized,
            "createdAt": self.created_at,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_doc(cls, doc: dict) -> "Essay":
        kind_value = doc.get("kind")
        if kind_value:
            kind = EssayKind(kind_value)
        elif doc.get("isCommonApp"):
            kind = EssayKind.COMMON_APP
        elif doc.get("sourceEssayId") or doc.get("promptId"):
            kind = EssayKind.BRANCH
        else:
            kind = EssayKind.BASE

        status = doc.get("status")
        return cls(
            id=doc["id"],
            title=doc.get("title", ""),
            kind=kind,
            status=EssayStatus.from_string(status) if status else EssayStatus.IDEA,
            idea=doc.get("idea") or "",
            content=doc.get("content") or "",
            source_essay_id=_blank_to_none(doc.get("sourceEssayId")),
            prompt_id=_blank_to_none(doc.get("promptId")),
            college_id=_blank_to_none(doc.get("collegeId")),
            prompt_text=doc.get("promptText"),
            common_app_prompt=doc.get("commonAppPrompt") or "",
            assigned_values=doc.get("assignedValues") or [],
            assigned_colleges=doc.get("assignedColleges") or [],
            is_emphasized=bool(doc.get("isEmphasized", False)),
            created_at=doc.get("createdAt") or "",
            last_modified=doc.get("lastModified") or "",
        )
