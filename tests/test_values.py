"""Tests for the value tag registry."""

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


def test_create_value_cycles_palette(portfolio):
    from essay_portfolio.graph.values import PRESET_COLORS

    created = [portfolio.values.create_value(f"Value {i}") for i in range(10)]

    assert [v.color for v in created[:8]] == PRESET_COLORS
    assert created[8].color == PRESET_COLORS[0]
    assert created[9].color == PRESET_COLORS[1]


def test_palette_follows_current_count(portfolio):
    from essay_portfolio.graph.values import PRESET_COLORS

    a = portfolio.values.create_value("A")
    portfolio.values.create_value("B")
    portfolio.values.delete_value(a.id)

    c = portfolio.values.create_value("C")
    assert c.color == PRESET_COLORS[1]


def test_custom_palette(db_path):
    from essay_portfolio.graph.values import ValueRegistry

    portfolio = make_portfolio(db_path)
    registry = ValueRegistry(portfolio.entities, palette=["#000000"])

    assert registry.create_value("A").color == "#000000"
    assert registry.create_value("B").color == "#000000"


def test_blank_value_name_rejected(portfolio):
    from essay_portfolio.errors import ValidationError

    with pytest.raises(ValidationError):
        portfolio.values.create_value("  ")


def test_get_and_list_values(portfolio):
    value = portfolio.values.create_value(" Leadership ")

    assert portfolio.values.get_value(value.id).name == "Leadership"
    assert [v.id for v in portfolio.values.list_values()] == [value.id]


def test_delete_value_sweeps_every_essay(portfolio):
    value = portfolio.values.create_value("Resilience")
    keep = portfolio.values.create_value("Humor")
    one = portfolio.essays.create_idea("One")
    two = portfolio.essays.create_common_app()
    untouched = portfolio.essays.create_idea("Three")
    for essay in (one, two):
        portfolio.essays.toggle_value_on_essay(essay.id, value.id)
    portfolio.essays.toggle_value_on_essay(one.id, keep.id)

    result = portfolio.values.delete_value(value.id)

    assert result.detail == {"value_id": value.id, "essays_swept": 2}
    assert portfolio.essays.get_essay(one.id).assigned_values == [keep.id]
    assert portfolio.essays.get_essay(two.id).assigned_values == []
    assert portfolio.essays.get_essay(untouched.id).assigned_values == []
    assert not portfolio.entities.values.exists(value.id)


def test_delete_value_twice_is_safe(portfolio):
    value = portfolio.values.create_value("Resilience")
    essay = portfolio.essays.create_idea("One")
    portfolio.essays.toggle_value_on_essay(essay.id, value.id)

    portfolio.values.delete_value(value.id)
    again = portfolio.values.delete_value(value.id)

    assert again.writes == 0
    assert again.detail["essays_swept"] == 0
    assert again.steps[0].status == "skipped"


def test_delete_unknown_value_still_sweeps_stale_ids(portfolio):
    from essay_portfolio.models import Essay, EssayKind

    portfolio.entities.essays.put(
        Essay(id="legacy", title="Old", kind=EssayKind.BASE, assigned_values=["gone"])
    )

    result = portfolio.values.delete_value("gone")

    assert result.detail["essays_swept"] == 1
    assert portfolio.essays.get_essay("legacy").assigned_values == []
