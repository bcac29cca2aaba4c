"""Essay graph: ideas, forks, prompt links and value propagation."""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from essay_portfolio.db.entities import EntityStore
from essay_portfolio.errors import InvalidState, NotFound, ValidationError
from essay_portfolio.graph.logging import PortfolioLogger
from essay_portfolio.graph.registry import PromptRegistry
from essay_portfolio.graph.word_budget import WordBudget, word_budget
from essay_portfolio.graph.workflow import Workflow, WorkflowResult
from essay_portfolio.ideas.types import GeneratedIdea
from essay_portfolio.models.entities import Essay, Prompt
from essay_portfolio.models.status import EssayKind, EssayStatus

logger = logging.getLogger(__name__)

COMMON_APP_TITLE = "Common App Essay"
COMMON_APP_IDEA = "Personal Statement"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EssayGraph:
    """Owns essays and every operation that creates, links, forks or deletes them.

    Each multi-step operation is an ordered series of independent writes run
    through a Workflow. Preconditions are checked before the first write;
    re-running an operation after a partial failure converges instead of
    duplicating work.
    """

    def __init__(
        self,
        entities: EntityStore,
        registry: PromptRegistry,
        journal=None,
        events: Optional[PortfolioLogger] = None,
    ):
        self.entities = entities
        self.essays = entities.essays
        self.registry = registry
        self.journal = journal
        self.events = events

    def _workflow(self, operation: str, subject_id: str) -> Workflow:
        return Workflow(operation, subject_id=subject_id, journal=self.journal, events=self.events)

    # Creation

    def create_idea(
        self,
        title: str,
        text: str = "",
        is_common_app: bool = False,
        prompt_text: Optional[str] = None,
    ) -> Essay:
        """Save a new idea as a Base (or Common App) essay."""
        title = (title or "").strip()
        if not title:
            raise ValidationError("Essay title cannot be blank")

        now = _now()
        essay = Essay(
            id=self.entities.new_id(),
            title=title,
            kind=EssayKind.COMMON_APP if is_common_app else EssayKind.BASE,
            status=EssayStatus.IDEA,
            idea=text or "",
            prompt_text=prompt_text,
            created_at=now,
            last_modified=now,
        )
        self.essays.put(essay)
        if self.events:
            self.events.essay_created(essay.id, essay.kind.value)
        return essay

    def create_common_app(self) -> Essay:
        """Start a Common App personal statement draft."""
        now = _now()
        essay = Essay(
            id=self.entities.new_id(),
            title=COMMON_APP_TITLE,
            kind=EssayKind.COMMON_APP,
            status=EssayStatus.IN_PROGRESS,
            idea=COMMON_APP_IDEA,
            created_at=now,
            last_modified=now,
        )
        self.essays.put(essay)
        if self.events:
            self.events.essay_created(essay.id, essay.kind.value)
        return essay

    def save_generated_idea(
        self,
        idea: GeneratedIdea,
        prompt_text: Optional[str] = None,
        is_common_app: bool = False,
    ) -> Essay:
        return self.create_idea(
            idea.clean_title(),
            idea.as_idea_text(),
            is_common_app=is_common_app,
            prompt_text=prompt_text,
        )

    # Linking

    def _link(self, wf: Workflow, prompt: Prompt, essay: Essay) -> None:
        previous = prompt.linked_essay_id

        if previous == essay.id:
            wf.skip("set_prompt_link", "prompt already linked to essay")
        else:
            wf.run("set_prompt_link", self.registry.set_link, prompt, essay.id)

        if prompt.college_id in essay.assigned_colleges:
            wf.skip("assign_college", "college already assigned")
        else:
            essay.assigned_colleges.append(prompt.college_id)
            wf.run("assign_college", self.essays.put, essay)

        if previous != essay.id and self.events:
            self.events.essay_linked(prompt.id, essay.id, previous)

    def link_essay_to_prompt(self, prompt_id: str, essay_id: str) -> WorkflowResult:
        """Make an essay the one fulfilling a prompt.

        Any previously linked essay is left as it was, including its
        ``assigned_colleges`` entry for this prompt's college.
        """
        prompt = self.registry.get_prompt(prompt_id)
        essay = self.essays.require(essay_id)

        wf = self._workflow("link_essay_to_prompt", prompt_id)
        self._link(wf, prompt, essay)
        return wf.finish(essay_id=essay.id)

    def _find_branch(self, base_id: str, prompt_id: str) -> Optional[Essay]:
        for essay in self.essays.list():
            if essay.source_essay_id == base_id and essay.prompt_id == prompt_id:
                return essay
        return None

    def branch_essay(self, prompt_id: str, base_essay_id: str) -> Essay:
        """Fork a Base essay into a Branch fulfilling one prompt.

        Title, idea text, body and values are copied at fork time. A retry
        after a partial failure reuses the Branch already created for this
        Base and prompt.
        """
        prompt = self.registry.get_prompt(prompt_id)
        college = self.registry.get_college(prompt.college_id)
        base = self.essays.require(base_essay_id)

        if base.is_fork or base.kind == EssayKind.BRANCH:
            raise InvalidState(f"Essay {base.id} is already a Branch", entity_id=base.id)
        if base.kind == EssayKind.COMMON_APP:
            raise InvalidState(f"Common App essay {base.id} cannot be branched", entity_id=base.id)

        wf = self._workflow("branch_essay", prompt_id)

        branch = self._find_branch(base.id, prompt.id)
        if branch is not None:
            wf.skip("create_branch", f"branch {branch.id} already exists")
        else:
            now = _now()
            branch = Essay(
                id=self.entities.new_id(),
                title=base.title,
                kind=EssayKind.BRANCH,
                status=EssayStatus.IN_PROGRESS,
                idea=base.idea,
                content=base.content,
                source_essay_id=base.id,
                prompt_id=prompt.id,
                college_id=college.id,
                assigned_values=list(base.assigned_values),
                assigned_colleges=[college.id],
                created_at=now,
                last_modified=now,
            )
            wf.run("create_branch", self.essays.put, branch)
            if self.events:
                self.events.essay_created(branch.id, branch.kind.value, base.id)

        if college.id in base.assigned_colleges:
            wf.skip("assign_college_to_base", "college already assigned")
        else:
            base.assigned_colleges.append(college.id)
            wf.run("assign_college_to_base", self.essays.put, base)

        self._link(wf, prompt, branch)
        wf.finish(essay_id=branch.id, source_essay_id=base.id)
        return branch

    def _find_blank_custom(self, prompt_id: str) -> Optional[Essay]:
        """An untouched custom draft for this prompt that no prompt links to."""
        linked = {p.linked_essay_id for p in self.registry.list_prompts() if p.linked_essay_id}
        for essay in self.essays.list():
            if (
                essay.kind == EssayKind.BRANCH
                and not essay.is_fork
                and essay.prompt_id == prompt_id
                and not essay.idea
                and not essay.content
                and essay.id not in linked
            ):
                return essay
        return None

    def write_custom_for_prompt(self, prompt_id: str) -> Essay:
        """Start an empty essay written specifically for one prompt."""
        prompt = self.registry.get_prompt(prompt_id)
        college = self.registry.get_college(prompt.college_id)

        wf = self._workflow("write_custom_for_prompt", prompt_id)

        essay = self._find_blank_custom(prompt.id)
        if essay is not None:
            wf.skip("create_essay", f"blank draft {essay.id} already exists")
        else:
            now = _now()
            essay = Essay(
                id=self.entities.new_id(),
                title=f"Essay for {college.name}",
                kind=EssayKind.BRANCH,
                status=EssayStatus.IN_PROGRESS,
                prompt_id=prompt.id,
                college_id=college.id,
                assigned_colleges=[college.id],
                created_at=now,
                last_modified=now,
            )
            wf.run("create_essay", self.essays.put, essay)
            if self.events:
                self.events.essay_created(essay.id, essay.kind.value)

        self._link(wf, prompt, essay)
        wf.finish(essay_id=essay.id)
        return essay

    def place_essay_on_prompt(self, prompt_id: str, essay_id: str) -> Essay:
        """Drop an essay onto a prompt: Base essays are forked, others linked as-is."""
        essay = self.essays.require(essay_id)
        if essay.kind == EssayKind.BASE:
            return self.branch_essay(prompt_id, essay_id)
        self.link_essay_to_prompt(prompt_id, essay_id)
        return self.essays.require(essay_id)

    def unlink_essay_from_prompt(self, prompt_id: str) -> WorkflowResult:
        """Clear a prompt's link.

        A forked Branch exists only to fulfil its prompt, so it is deleted.
        Custom Branches, Base and Common App essays survive.
        """
        prompt = self.registry.get_prompt(prompt_id)
        wf = self._workflow("unlink_essay_from_prompt", prompt_id)

        essay_id = prompt.linked_essay_id
        if not essay_id:
            wf.skip("clear_prompt_link", "prompt not linked")
            return wf.finish(essay_id=None, deleted=False)

        essay = self.essays.get(essay_id)
        deleted = False
        if essay is None:
            wf.skip("delete_branch", "linked essay no longer exists")
        elif essay.is_fork:
            wf.run("delete_branch", self.essays.delete, essay.id)
            deleted = True

        wf.run("clear_prompt_link", self.registry.set_link, prompt, None)
        if self.events:
            self.events.essay_unlinked(prompt.id, essay_id, deleted)
        return wf.finish(essay_id=essay_id, deleted=deleted)

    # Deletion

    def delete_essay(self, essay_id: str) -> None:
        """Delete one essay document.

        Branches forked from it and prompts linked to it are not touched; they
        keep references to an essay that no longer exists.
        """
        essay = self.essays.require(essay_id)
        orphaned = self.branches_of(essay.id) if essay.kind == EssayKind.BASE else []
        dangling = [p.id for p in self.registry.list_prompts() if p.linked_essay_id == essay.id]

        self.essays.delete(essay.id)

        if orphaned or dangling:
            logger.warning(
                "Deleted essay %s leaving %d branch(es) and %d prompt link(s) pointing at it",
                essay.id, len(orphaned), len(dangling),
            )
        if self.events:
            self.events.essay_deleted(essay.id, len(orphaned))

    # Values and flags

    def _propagation_family(self, essay: Essay) -> list[Essay]:
        """Essays sharing one value set: a Base and every Branch forked from it."""
        if essay.kind == EssayKind.BASE:
            return [essay] + self.branches_of(essay.id)
        if essay.is_fork:
            base = self.essays.get(essay.source_essay_id)
            if base is not None and base.kind == EssayKind.BASE:
                return [base] + self.branches_of(base.id)
        return [essay]

    def toggle_value_on_essay(
        self,
        essay_id: str,
        value_id: str,
        assigned: Optional[bool] = None,
    ) -> WorkflowResult:
        """Flip (or, with ``assigned``, set) a value on an essay.

        On a Base essay, or a Branch forked from one, the resulting set is
        written to the Base and every Branch of it. Common App essays and
        custom Branches change alone. Essays already holding the resulting
        set are not rewritten.
        """
        essay = self.essays.require(essay_id)
        target = (value_id not in essay.assigned_values) if assigned is None else bool(assigned)
        if target:
            self.entities.values.require(value_id)

        new_values = [v for v in essay.assigned_values if v != value_id]
        if target:
            new_values.append(value_id)

        wf = self._workflow("toggle_value_on_essay", essay.id)
        family = self._propagation_family(essay)
        for member in family:
            if member.value_set == frozenset(new_values):
                wf.skip(f"write_values:{member.id}", "values already in sync")
                continue
            member.assigned_values = list(new_values)
            wf.run(f"write_values:{member.id}", self.essays.put, member)

        result = wf.finish(
            essay_id=essay.id,
            value_id=value_id,
            assigned=target,
            value_ids=list(new_values),
            essay_ids=[m.id for m in family],
        )
        if self.events:
            self.events.values_propagated(essay.id, new_values, result.writes)
        return result

    def toggle_emphasis(self, essay_id: str) -> Essay:
        """Flag or unflag an essay for parent/counselor viewers."""
        essay = self.essays.require(essay_id)
        essay.is_emphasized = not essay.is_emphasized
        self.essays.put(essay)
        return essay

    # Editing

    def update_essay(
        self,
        essay_id: str,
        title: Optional[str] = None,
        idea: Optional[str] = None,
        content: Optional[str] = None,
        common_app_prompt: Optional[str] = None,
    ) -> Essay:
        """Save edits; nothing is written when nothing changed."""
        essay = self.essays.require(essay_id)
        before = essay.to_doc()

        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Essay title cannot be blank")
            essay.title = title
        if idea is not None:
            essay.idea = idea
        if content is not None:
            essay.content = content
        if common_app_prompt is not None:
            essay.common_app_prompt = common_app_prompt

        if essay.to_doc() == before:
            return essay

        essay.last_modified = _now()
        self.essays.put(essay)
        return essay

    def set_status(self, essay_id: str, status: Union[EssayStatus, str]) -> Essay:
        """Move an essay to any status; the progression is not enforced."""
        if not isinstance(status, EssayStatus):
            status = EssayStatus.from_string(status)

        essay = self.essays.require(essay_id)
        if essay.status == status:
            return essay

        essay.status = status
        essay.last_modified = _now()
        self.essays.put(essay)
        return essay

    # Reads

    def get_essay(self, essay_id: str) -> Essay:
        return self.essays.require(essay_id)

    def prompt_for_essay(self, essay_id: str) -> Optional[Prompt]:
        """The prompt an essay was written for.

        Returns None when the essay has no prompt; raises NotFound when the
        prompt it names has been deleted.
        """
        essay = self.essays.require(essay_id)
        if not essay.prompt_id:
            return None
        return self.registry.get_prompt(essay.prompt_id)

    def word_budget(self, essay_id: str) -> WordBudget:
        """Word count of the essay body against its prompt's limit."""
        essay = self.essays.require(essay_id)
        limit = None
        if essay.prompt_id:
            try:
                limit = self.registry.get_prompt(essay.prompt_id).word_limit
            except NotFound:
                logger.debug("Essay %s names deleted prompt %s", essay.id, essay.prompt_id)
        return word_budget(essay.content, limit)

    @staticmethod
    def _matches(essay: Essay, search: Optional[str]) -> bool:
        """Case-insensitive match on title or idea text; no search matches all."""
        if not search:
            return True
        needle = search.lower()
        return needle in essay.title.lower() or needle in essay.idea.lower()

    def list_essays(self, search: Optional[str] = None) -> list[Essay]:
        """Essays matching ``search``, most recently modified first."""
        essays = [e for e in self.essays.list() if self._matches(e, search)]
        return sorted(essays, key=lambda e: e.last_modified or e.created_at, reverse=True)

    def branches_of(self, base_essay_id: str) -> list[Essay]:
        return [e for e in self.essays.list() if e.source_essay_id == base_essay_id]

    def siblings_of(self, essay_id: str) -> list[Essay]:
        """Other versions of a forked Branch: its Base and the Base's other Branches."""
        essay = self.essays.require(essay_id)
        if not essay.is_fork:
            return []
        return [
            e for e in self.essays.list()
            if (e.source_essay_id == essay.source_essay_id or e.id == essay.source_essay_id)
            and e.id != essay.id
        ]

    def common_app_essays(self) -> list[Essay]:
        return [e for e in self.essays.list() if e.kind == EssayKind.COMMON_APP]

    def base_essays(self, search: Optional[str] = None) -> list[Essay]:
        return [
            e for e in self.essays.list()
            if e.kind == EssayKind.BASE and self._matches(e, search)
        ]

    def essays_for_college(self, college_id: str) -> list[Essay]:
        return [e for e in self.essays.list() if e.college_id == college_id]
