"""Tests for configuration loading."""

import logging

from compflow.config import configure_logging, load_config


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
database_url: sqlite:///compflow.db
logging:
  level: DEBUG
engine:
  strict_reject: true
"""
    )
    monkeypatch.setenv("COMPFLOW_CONFIG", str(config_path))
    monkeypatch.delenv("COMPFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("COMPFLOW_LOG_LEVEL", raising=False)

    config = load_config()
    assert config.database_url == "sqlite:///compflow.db"
    assert config.logging.level == "DEBUG"
    assert config.engine.strict_reject is True


def test_missing_config_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("COMPFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("COMPFLOW_LOG_LEVEL", raising=False)

    config = load_config(str(tmp_path / "missing.yaml"))
    assert config.database_url is None
    assert config.logging.level == "INFO"
    assert config.engine.strict_reject is False


def test_environment_overrides_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("database_url: sqlite:///from-file.db\n")
    monkeypatch.setenv("COMPFLOW_DATABASE_URL", "sqlite:///from-env.db")
    monkeypatch.setenv("COMPFLOW_LOG_LEVEL", "WARNING")

    config = load_config(str(config_path))
    assert config.database_url == "sqlite:///from-env.db"
    assert config.logging.level == "WARNING"


def test_configure_logging_sets_level(tmp_path, monkeypatch):
    monkeypatch.delenv("COMPFLOW_LOG_LEVEL", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  level: warning\n")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging(load_config(str(config_path)))

    assert root.level == logging.WARNING
