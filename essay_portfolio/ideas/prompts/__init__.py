"""Brainstorming prompt templates shipped with the package.

Each template is a ``.txt`` file beside this module written as a
``str.format`` string; ``generate_ideas.txt`` is the one idea providers fill
in with the essay prompt, the student's major and their activity records.
"""

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent


def available_prompts() -> list[str]:
    return sorted(p.stem for p in PROMPTS_DIR.glob("*.txt"))


def load_prompt(name: str) -> str:
    """Return the raw text of the ``name`` template."""
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise ValueError(f"Prompt not found: {name} (available: {', '.join(available_prompts())})")
    return path.read_text(encoding="utf-8")


def render_prompt(name: str, **fields) -> str:
    """Load the ``name`` template and fill in its placeholders.

    Raises ValueError when the template uses a field that was not given.
    """
    template = load_prompt(name)
    try:
        return template.format(**fields)
    except KeyError as e:
        raise ValueError(f"Prompt {name} is missing field {e.args[0]!r}") from e
