"""End-to-end walk through forking, tagging, unlinking and retiring a value."""

import pytest
import tempfile
from pathlib import Path

from conftest import fresh_view, make_portfolio


@pytest.fixture
def db_path():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


def test_portfolio_lifecycle(db_path):
    from essay_portfolio.models import EssayStatus

    portfolio = make_portfolio(db_path)
    c1 = portfolio.registry.add_college("College One")
    p1 = portfolio.registry.add_prompt(c1.id, "Describe a time you led others.")

    # Fork a base idea into P1
    base = portfolio.essays.create_idea("My Leadership Story")
    assert base.status == EssayStatus.IDEA
    branch = portfolio.essays.branch_essay(p1.id, base.id)

    assert portfolio.essays.get_essay(branch.id).source_essay_id == base.id
    assert c1.id in portfolio.essays.get_essay(base.id).assigned_colleges
    assert portfolio.registry.get_prompt(p1.id).linked_essay_id == branch.id

    # Tag the base; the branch follows
    resilience = portfolio.values.create_value("Resilience")
    portfolio.essays.toggle_value_on_essay(base.id, resilience.id)

    assert resilience.id in portfolio.essays.get_essay(branch.id).assigned_values

    # Unlinking a fork deletes it
    portfolio.essays.unlink_essay_from_prompt(p1.id)

    assert portfolio.entities.essays.get(branch.id) is None
    assert portfolio.registry.get_prompt(p1.id).linked_essay_id is None

    # Unlinking a custom essay keeps it
    c2 = portfolio.registry.add_college("College Two")
    p2 = portfolio.registry.add_prompt(c2.id, "Why us?")
    custom = portfolio.essays.write_custom_for_prompt(p2.id)
    portfolio.essays.unlink_essay_from_prompt(p2.id)

    assert portfolio.entities.essays.get(custom.id) is not None
    assert portfolio.registry.get_prompt(p2.id).linked_essay_id is None

    # Retiring a value strips it from every essay
    portfolio.essays.toggle_value_on_essay(custom.id, resilience.id)
    tagged = [e.id for e in portfolio.essays.list_essays() if resilience.id in e.assigned_values]
    assert sorted(tagged) == sorted([base.id, custom.id])

    portfolio.values.delete_value(resilience.id)

    view = fresh_view(portfolio)
    assert resilience.id not in view.essays.get_essay(base.id).assigned_values
    assert resilience.id not in view.essays.get_essay(custom.id).assigned_values
    assert resilience.id not in {v.id for v in view.values.list_values()}
