"""Tests for per-college value coverage."""

import pytest
import tempfile
from pathlib import Path

from conftest import make_portfolio


@pytest.fixture
def db_path():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


@pytest.fixture
def portfolio(db_path):
    return make_portfolio(db_path)


def test_coverage_unions_linked_essays(portfolio):
    college = portfolio.registry.add_college("Stanford")
    p1 = portfolio.registry.add_prompt(college.id, "Q1")
    p2 = portfolio.registry.add_prompt(college.id, "Q2")
    grit = portfolio.values.create_value("Grit")
    humor = portfolio.values.create_value("Humor")

    a = portfolio.essays.create_idea("A")
    b = portfolio.essays.create_common_app()
    portfolio.essays.toggle_value_on_essay(a.id, grit.id)
    portfolio.essays.toggle_value_on_essay(b.id, humor.id)
    portfolio.essays.branch_essay(p1.id, a.id)
    portfolio.essays.link_essay_to_prompt(p2.id, b.id)

    assert portfolio.coverage.coverage_for_college(college.id) == {grit.id, humor.id}


def test_coverage_ignores_unlinked_prompts_and_other_colleges(portfolio):
    mine = portfolio.registry.add_college("Mine")
    other = portfolio.registry.add_college("Other")
    portfolio.registry.add_prompt(mine.id, "Unlinked")
    other_prompt = portfolio.registry.add_prompt(other.id, "Q")
    value = portfolio.values.create_value("Grit")
    essay = portfolio.essays.create_common_app()
    portfolio.essays.toggle_value_on_essay(essay.id, value.id)
    portfolio.essays.link_essay_to_prompt(other_prompt.id, essay.id)

    assert portfolio.coverage.coverage_for_college(mine.id) == set()


def test_coverage_reflects_latest_toggle(portfolio):
    college = portfolio.registry.add_college("Rice")
    prompt = portfolio.registry.add_prompt(college.id, "Why Rice?")
    value = portfolio.values.create_value("Grit")
    base = portfolio.essays.create_idea("Tide pools")
    portfolio.essays.branch_essay(prompt.id, base.id)

    assert portfolio.coverage.coverage_for_college(college.id) == set()

    # Toggled on the base, seen through the branch
    portfolio.essays.toggle_value_on_essay(base.id, value.id)
    assert portfolio.coverage.coverage_for_college(college.id) == {value.id}

    portfolio.essays.unlink_essay_from_prompt(prompt.id)
    assert portfolio.coverage.coverage_for_college(college.id) == set()


def test_coverage_skips_dangling_links(portfolio):
    college = portfolio.registry.add_college("Rice")
    prompt = portfolio.registry.add_prompt(college.id, "Why Rice?")
    essay = portfolio.essays.create_common_app()
    portfolio.essays.link_essay_to_prompt(prompt.id, essay.id)
    portfolio.essays.delete_essay(essay.id)

    assert portfolio.coverage.coverage_for_college(college.id) == set()


def test_coverage_unknown_college(portfolio):
    from essay_portfolio.errors import NotFound

    with pytest.raises(NotFound):
        portfolio.coverage.coverage_for_college("nope")


def test_coverage_report(portfolio):
    college = portfolio.registry.add_college("Duke")
    portfolio.registry.add_college("Empty")
    p1 = portfolio.registry.add_prompt(college.id, "Q1")
    portfolio.registry.add_prompt(college.id, "Q2")
    grit = portfolio.values.create_value("Grit")
    humor = portfolio.values.create_value("Humor")
    essay = portfolio.essays.create_common_app()
    portfolio.essays.toggle_value_on_essay(essay.id, grit.id)
    portfolio.essays.link_essay_to_prompt(p1.id, essay.id)

    report = {row["college_name"]: row for row in portfolio.coverage.coverage_report()}

    duke = report["Duke"]
    assert duke["prompts"] == 2
    assert duke["fulfilled"] == 1
    assert [v.name for v in duke["covered"]] == ["Grit"]
    assert [v.name for v in duke["missing"]] == ["Humor"]

    empty = report["Empty"]
    assert empty["prompts"] == 0
    assert empty["covered"] == []
    assert {v.id for v in empty["missing"]} == {grit.id, humor.id}
