"""Data types for generated essay ideas."""

import re
from dataclasses import dataclass, field

_MARKDOWN_RULES = [
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),          # headers
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),                # bold
    (re.compile(r"\*([^*]+)\*"), r"\1"),                    # italic
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),                      # inline code
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),          # links keep their text
    (re.compile(r"^[ \t]*[-*+]\s+", re.MULTILINE), ""),     # bullets
    (re.compile(r"^[ \t]*\d+\.\s+", re.MULTILINE), ""),     # numbered lists
    (re.compile(r"^>\s+", re.MULTILINE), ""),               # blockquotes
    (re.compile(r"^[-*_]{3,}$", re.MULTILINE), ""),         # horizontal rules
    (re.compile(r"\n{3,}"), "\n\n"),
]


def strip_markdown(text: str) -> str:
    """Reduce model-formatted markdown to plain text."""
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text or "")
    return text.strip()


@dataclass
class GeneratedIdea:
    """One candidate essay angle returned by an idea provider."""

    title: str
    description: str
    connections: list[str] = field(default_factory=list)

    def clean_title(self) -> str:
        return strip_markdown(self.title)

    def as_idea_text(self) -> str:
        """Idea text as stored on the essay: description, then key connections."""
        connections = "\n".join(strip_markdown(c) for c in self.connections)
        return f"{strip_markdown(self.description)}\n\nKey Connections:\n{connections}"

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "connections": list(self.connections),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeneratedIdea":
        connections = data.get("connections") or []
        if isinstance(connections, str):
            connections = [connections]
        return cls(
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            connections=[str(c) for c in connections],
        )
