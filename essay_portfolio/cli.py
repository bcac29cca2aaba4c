"""Essay Portfolio CLI."""

import functools
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from essay_portfolio.errors import PartialCompletionError, PortfolioError

console = Console()


def _portfolio():
    from .portfolio import Portfolio

    return Portfolio.from_env()


def _handle_errors(fn):
    """Report portfolio errors in red and exit non-zero."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except PartialCompletionError as e:
            console.print(f"[red]Failed: {e}[/red]")
            console.print(
                f"[yellow]{e.steps_completed} step(s) completed; "
                f"re-run the same command to finish.[/yellow]"
            )
            raise click.exceptions.Exit(1)
        except PortfolioError as e:
            console.print(f"[red]Failed: {e}[/red]")
            raise click.exceptions.Exit(1)

    return wrapper


@click.group()
def main():
    """Essay Portfolio - keep essays, prompts and values in sync."""
    pass


@main.command()
def version():
    """Show version."""
    from . import __version__
    console.print(f"essay-portfolio v{__version__}")


@main.command()
def init():
    """Initialize the portfolio database."""
    from .db.config import get_db_path
    from .db.migrations import run_migrations

    db_path = get_db_path()
    console.print(f"[blue]Initializing database at {db_path}[/blue]")

    run_migrations(db_path)

    console.print("[green]Database initialized successfully![/green]")


# Colleges and prompts

@main.command("college-add")
@click.argument("name")
@_handle_errors
def college_add(name: str):
    """Add a college."""
    college = _portfolio().registry.add_college(name)
    console.print(f"[green]Added college: {college.name}[/green] [dim]{college.id}[/dim]")


@main.command()
@_handle_errors
def colleges():
    """List colleges and their prompts."""
    portfolio = _portfolio()
    college_list = portfolio.registry.list_colleges()

    if not college_list:
        console.print("[yellow]No colleges yet[/yellow]")
        return

    table = Table()
    table.add_column("College")
    table.add_column("Prompt ID", style="dim")
    table.add_column("Prompt")
    table.add_column("Limit")
    table.add_column("Linked essay", style="dim")

    for college in college_list:
        prompts = portfolio.registry.list_prompts(college.id)
        if not prompts:
            table.add_row(f"{college.name}\n[dim]{college.id}[/dim]", "", "[dim]no prompts[/dim]", "", "")
        for i, prompt in enumerate(prompts):
            table.add_row(
                f"{college.name}\n[dim]{college.id}[/dim]" if i == 0 else "",
                prompt.id,
                prompt.text[:60],
                str(prompt.word_limit or "-"),
                prompt.linked_essay_id or "-",
            )

    console.print(table)


@main.command("prompt-add")
@click.argument("college_id")
@click.argument("text")
@click.option("--word-limit", "-w", type=int, default=None, help="Word limit for the prompt")
@_handle_errors
def prompt_add(college_id: str, text: str, word_limit: Optional[int]):
    """Add a prompt to a college."""
    prompt = _portfolio().registry.add_prompt(college_id, text, word_limit)
    console.print(f"[green]Added prompt:[/green] [dim]{prompt.id}[/dim]")


@main.command("prompt-delete")
@click.argument("prompt_id")
@_handle_errors
def prompt_delete(prompt_id: str):
    """Delete a prompt (its linked essay is kept)."""
    _portfolio().registry.delete_prompt(prompt_id)
    console.print(f"[yellow]Deleted prompt: {prompt_id}[/yellow]")


@main.command("word-limit")
@click.argument("prompt_id")
@click.argument("limit", type=int, required=False)
@_handle_errors
def word_limit(prompt_id: str, limit: Optional[int]):
    """Set a prompt's word limit (omit LIMIT to clear it)."""
    prompt = _portfolio().registry.update_word_limit(prompt_id, limit)
    shown = prompt.word_limit if prompt.word_limit else "none"
    console.print(f"[green]Word limit for {prompt_id}: {shown}[/green]")


# Essays

@main.command()
@click.argument("title")
@click.option("--text", "-t", default="", help="Idea text")
@click.option("--common-app", is_flag=True, help="Save as a Common App essay")
@_handle_errors
def idea(title: str, text: str, common_app: bool):
    """Save a new essay idea."""
    essay = _portfolio().essays.create_idea(title, text, is_common_app=common_app)
    console.print(f"[green]Saved {essay.kind.value} idea: {essay.title}[/green] [dim]{essay.id}[/dim]")


@main.command()
@click.option("--search", "-s", default=None, help="Filter by title or idea text")
@_handle_errors
def essays(search: Optional[str]):
    """List essays, most recently modified first."""
    portfolio = _portfolio()
    essay_list = portfolio.essays.list_essays(search=search)

    if not essay_list:
        console.print("[yellow]No essays[/yellow]")
        return

    values = {v.id: v for v in portfolio.values.list_values()}

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Kind")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Values")
    table.add_column("Source", style="dim")

    for essay in essay_list:
        tags = ", ".join(values[v].name for v in essay.assigned_values if v in values)
        title = f"* {essay.title}" if essay.is_emphasized else essay.title
        table.add_row(
            essay.id,
            essay.kind.value,
            title[:40],
            essay.status.value,
            tags,
            essay.source_essay_id or "",
        )

    console.print(table)


@main.command()
@click.argument("prompt_id")
@click.argument("base_essay_id")
@_handle_errors
def branch(prompt_id: str, base_essay_id: str):
    """Fork a base essay into a version for one prompt."""
    essay = _portfolio().essays.branch_essay(prompt_id, base_essay_id)
    console.print(f"[green]Branched: {essay.title}[/green] [dim]{essay.id}[/dim]")


@main.command()
@click.argument("prompt_id")
@_handle_errors
def custom(prompt_id: str):
    """Start a new essay written for one prompt."""
    essay = _portfolio().essays.write_custom_for_prompt(prompt_id)
    console.print(f"[green]Created: {essay.title}[/green] [dim]{essay.id}[/dim]")


@main.command()
@click.argument("prompt_id")
@click.argument("essay_id")
@_handle_errors
def link(prompt_id: str, essay_id: str):
    """Link an existing essay to a prompt as-is."""
    _portfolio().essays.link_essay_to_prompt(prompt_id, essay_id)
    console.print(f"[green]Linked {essay_id} to {prompt_id}[/green]")


@main.command()
@click.argument("prompt_id")
@click.option("--yes", is_flag=True, help="Do not ask before deleting a forked version")
@_handle_errors
def unlink(prompt_id: str, yes: bool):
    """Unlink a prompt's essay (forked versions are deleted)."""
    portfolio = _portfolio()
    prompt = portfolio.registry.get_prompt(prompt_id)
    linked = portfolio.entities.essays.get(prompt.linked_essay_id)

    if linked is not None and linked.is_fork and not yes:
        click.confirm(
            "Unlinking will permanently delete this college's version. Continue?",
            abort=True,
        )

    result = portfolio.essays.unlink_essay_from_prompt(prompt_id)
    if result.detail.get("deleted"):
        console.print(f"[yellow]Unlinked and deleted version: {result.detail['essay_id']}[/yellow]")
    elif result.detail.get("essay_id"):
        console.print(f"[yellow]Unlinked: {result.detail['essay_id']}[/yellow]")
    else:
        console.print("[dim]Prompt was not linked[/dim]")


@main.command()
@click.argument("essay_id")
@_handle_errors
def delete(essay_id: str):
    """Delete an essay."""
    _portfolio().essays.delete_essay(essay_id)
    console.print(f"[yellow]Deleted: {essay_id}[/yellow]")


@main.command()
@click.argument("essay_id")
@click.argument("new_status")
@_handle_errors
def status(essay_id: str, new_status: str):
    """Set an essay's status (Idea, In Progress, Proofread, Submitted)."""
    essay = _portfolio().essays.set_status(essay_id, new_status)
    console.print(f"[green]{essay.title}: {essay.status.value}[/green]")


@main.command()
@click.argument("essay_id")
@_handle_errors
def emphasize(essay_id: str):
    """Toggle the highlight shown to parents and counselors."""
    essay = _portfolio().essays.toggle_emphasis(essay_id)
    state = "highlighted" if essay.is_emphasized else "not highlighted"
    console.print(f"[green]{essay.title}: {state}[/green]")


@main.command()
@click.argument("essay_id")
@click.option("--title", default=None, help="New title")
@click.option("--idea", "idea_text", default=None, help="New idea text")
@click.option("--content", default=None, help="New draft body (HTML)")
@click.option("--content-file", type=click.File("r"), default=None, help="Read the draft body from a file")
@_handle_errors
def edit(essay_id: str, title: Optional[str], idea_text: Optional[str], content: Optional[str], content_file):
    """Edit an essay's title, idea text or draft body."""
    if content_file is not None:
        content = content_file.read()

    if title is None and idea_text is None and content is None:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    portfolio = _portfolio()
    before = portfolio.essays.get_essay(essay_id)
    essay = portfolio.essays.update_essay(essay_id, title=title, idea=idea_text, content=content)

    if essay.last_modified == before.last_modified:
        console.print("[dim]No changes to save[/dim]")
        return

    budget = portfolio.essays.word_budget(essay.id)
    style = {"over": "red", "near": "yellow"}.get(budget.level, "green")
    console.print(f"[green]Saved: {essay.title}[/green]")
    console.print(f"[{style}]{budget.describe()}[/{style}]")


@main.command("generate-ideas")
@click.argument("prompt_text")
@click.option("--major", default="Undecided", help="Intended major")
@click.option("--college", "dream_college", default="", help="Dream college")
@click.option("--save", "save_index", type=int, default=None, help="Save idea N (1-based) as an essay")
@click.option("--common-app", is_flag=True, help="Save as a Common App essay")
@_handle_errors
def generate_ideas(prompt_text: str, major: str, dream_college: str, save_index: Optional[int], common_app: bool):
    """Brainstorm essay ideas from your activities and honors."""
    from openai import OpenAIError

    portfolio = _portfolio()

    try:
        provider = portfolio.default_provider()
        ideas = portfolio.generate_ideas(
            prompt_text,
            provider,
            intended_major=major,
            dream_college=dream_college,
        )
    except (OpenAIError, ValueError) as e:
        console.print(f"[red]Failed: {e}[/red]")
        raise click.exceptions.Exit(1)

    if not ideas:
        console.print("[yellow]No ideas returned[/yellow]")
        return

    for i, generated in enumerate(ideas, 1):
        console.print(f"[bold]{i}. {escape(generated.clean_title())}[/bold]")
        console.print(escape(generated.as_idea_text()))
        console.print()

    if save_index is None:
        return

    if not 1 <= save_index <= len(ideas):
        console.print(f"[red]Failed: --save must be between 1 and {len(ideas)}[/red]")
        raise click.exceptions.Exit(1)

    essay = portfolio.essays.save_generated_idea(
        ideas[save_index - 1],
        prompt_text=prompt_text,
        is_common_app=common_app,
    )
    console.print(f"[green]Saved {essay.kind.value} idea: {essay.title}[/green] [dim]{essay.id}[/dim]")


# Values

@main.command("value-add")
@click.argument("name")
@_handle_errors
def value_add(name: str):
    """Create a value tag."""
    value = _portfolio().values.create_value(name)
    console.print(f"[green]Created value: {value.name} ({value.color})[/green] [dim]{value.id}[/dim]")


@main.command()
@_handle_errors
def values():
    """List value tags."""
    value_list = _portfolio().values.list_values()
    if not value_list:
        console.print("[yellow]No values defined yet[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Color")
    for value in value_list:
        table.add_row(value.id, value.name, f"[{value.color}]{value.color}[/{value.color}]")
    console.print(table)


@main.command("value-delete")
@click.argument("value_id")
@_handle_errors
def value_delete(value_id: str):
    """Delete a value and remove it from every essay."""
    result = _portfolio().values.delete_value(value_id)
    console.print(
        f"[yellow]Deleted value {value_id}; "
        f"removed from {result.detail['essays_swept']} essay(s)[/yellow]"
    )


@main.command()
@click.argument("essay_id")
@click.argument("value_id")
@click.option("--on/--off", "assigned", default=None, help="Set instead of toggling")
@_handle_errors
def tag(essay_id: str, value_id: str, assigned: Optional[bool]):
    """Toggle a value on an essay (propagates across a base and its versions)."""
    portfolio = _portfolio()
    if assigned is None:
        assigned = value_id not in portfolio.essays.get_essay(essay_id).assigned_values

    try:
        result = portfolio.essays.toggle_value_on_essay(essay_id, value_id, assigned=assigned)
    except PartialCompletionError as e:
        flag = "--on" if assigned else "--off"
        console.print(f"[red]Failed: {e}[/red]")
        console.print(f"[yellow]Re-run with {flag} to finish updating the other versions.[/yellow]")
        raise click.exceptions.Exit(1)

    action = "Added" if result.detail["assigned"] else "Removed"
    console.print(
        f"[green]{action} {value_id}; {result.writes} essay(s) updated[/green]"
    )


# Read-side views

@main.command()
@click.argument("college_id", required=False)
@_handle_errors
def coverage(college_id: Optional[str]):
    """Show which values each college's essays cover."""
    portfolio = _portfolio()

    if college_id:
        covered = portfolio.coverage.coverage_for_college(college_id)
        names = {v.id: v.name for v in portfolio.values.list_values()}
        if not covered:
            console.print("[yellow]No values covered yet[/yellow]")
            return
        for value_id in sorted(covered):
            console.print(f"  {names.get(value_id, value_id)}")
        return

    table = Table()
    table.add_column("College")
    table.add_column("Prompts")
    table.add_column("Covered")
    table.add_column("Missing")
    for row in portfolio.coverage.coverage_report():
        table.add_row(
            row["college_name"],
            f"{row['fulfilled']}/{row['prompts']}",
            ", ".join(v.name for v in row["covered"]),
            ", ".join(v.name for v in row["missing"]),
        )
    console.print(table)


@main.command()
@click.option("--operation", "-o", default=None, help="Only this operation")
@click.option("--limit", "-n", default=20, help="Number of entries")
@_handle_errors
def journal(operation: Optional[str], limit: int):
    """Show recent workflow steps."""
    from .config import PortfolioConfig
    from .graph.journal import WorkflowJournal

    config = PortfolioConfig.from_env()
    entries = WorkflowJournal(config.db_path, config.student_id).query(operation=operation, limit=limit)

    if not entries:
        console.print("[yellow]No journal entries[/yellow]")
        return

    table = Table()
    table.add_column("When", style="dim")
    table.add_column("Operation")
    table.add_column("Step")
    table.add_column("Status")
    for entry in entries:
        style = "red" if entry["status"] == "failed" else "green" if entry["status"] == "done" else "dim"
        table.add_row(
            str(entry["performed_at"]),
            entry["operation"],
            entry["step"],
            f"[{style}]{entry['status']}[/{style}]",
        )
    console.print(table)


if __name__ == "__main__":
    main()
