"""Tests for configuration."""

from pathlib import Path


def test_config_from_env(monkeypatch, tmp_path):
    from essay_portfolio.config import PortfolioConfig

    monkeypatch.setenv("ESSAY_PORTFOLIO_DB", str(tmp_path / "p.db"))
    monkeypatch.setenv("ESSAY_PORTFOLIO_STUDENT", "student-42")
    monkeypatch.setenv("ESSAY_PORTFOLIO_IDEA_MODEL", "gpt-4o")
    monkeypatch.setenv("ESSAY_PORTFOLIO_JOURNAL", "0")

    config = PortfolioConfig.from_env()

    assert config.db_path == tmp_path / "p.db"
    assert config.student_id == "student-42"
    assert config.idea_model == "gpt-4o"
    assert config.journal_enabled is False


def test_config_defaults(monkeypatch, tmp_path):
    from essay_portfolio.config import PortfolioConfig

    monkeypatch.setenv("ESSAY_PORTFOLIO_DB", str(tmp_path / "p.db"))
    monkeypatch.delenv("ESSAY_PORTFOLIO_STUDENT", raising=False)
    monkeypatch.delenv("ESSAY_PORTFOLIO_IDEA_MODEL", raising=False)
    monkeypatch.delenv("ESSAY_PORTFOLIO_JOURNAL", raising=False)

    config = PortfolioConfig.from_env()

    assert config.student_id == "default"
    assert config.idea_model == "gpt-4.1-mini"
    assert config.journal_enabled is True


def test_db_path_env_override(monkeypatch):
    from essay_portfolio.db.config import get_db_path

    monkeypatch.setenv("ESSAY_PORTFOLIO_DB", "/tmp/elsewhere.db")
    assert get_db_path() == Path("/tmp/elsewhere.db")


def test_db_path_default(monkeypatch, tmp_path):
    from essay_portfolio.db import config

    default = tmp_path / "home" / "portfolio.db"
    monkeypatch.delenv("ESSAY_PORTFOLIO_DB", raising=False)
    monkeypatch.setattr(config, "DEFAULT_DB_PATH", default)

    assert config.get_db_path() == default
    assert default.parent.exists()


def test_blank_student_scope_falls_back(monkeypatch):
    from essay_portfolio.db.config import get_student_scope

    monkeypatch.setenv("ESSAY_PORTFOLIO_STUDENT", "")
    assert get_student_scope() == "default"
