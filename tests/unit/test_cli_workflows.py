import pytest
from typer.testing import CliRunner

import compflow.persistence as persistence
from compflow.cli import app
from compflow.persistence import (
    InMemoryComponentRepository,
    InMemoryWorkflowRepository,
    Repositories,
)


@pytest.fixture(autouse=True)
def cli_repos(monkeypatch, tmp_path) -> Repositories:
    monkeypatch.setenv("COMPFLOW_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.delenv("COMPFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    repos = Repositories(
        workflows=InMemoryWorkflowRepository(),
        components=InMemoryComponentRepository(),
    )
    monkeypatch.setattr(persistence, "_repositories_instance", repos)
    return repos


runner = CliRunner()


def _create(name: str = "trip-logger", component: str = "TripLogger") -> None:
    result = runner.invoke(
        app,
        [
            "workflow",
            "create",
            name,
            "--component",
            component,
            "--category",
            "TELEMATICS",
            "-d",
            "DataLogger",
        ],
    )
    assert result.exit_code == 0, f"Create failed: {result.stdout}"


def test_create_and_list_workflows():
    _create()
    _create("fuel", "FuelMonitor")

    result = runner.invoke(app, ["workflow", "list"])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "trip-logger" in result.stdout
    assert "fuel" in result.stdout
    assert "DRAFT" in result.stdout

    duplicate = runner.invoke(
        app, ["workflow", "create", "fuel", "--component", "Fuel", "--category", "TELEMATICS"]
    )
    assert duplicate.exit_code == 1
    assert "already exists" in duplicate.stdout


def test_full_lifecycle_through_cli(cli_repos):
    _create()

    assert runner.invoke(app, ["workflow", "submit", "1"]).exit_code == 0
    approved = runner.invoke(app, ["workflow", "approve", "1", "--by", "reviewer"])
    assert approved.exit_code == 0
    assert "Workflow approved successfully" in approved.stdout

    executed = runner.invoke(app, ["workflow", "execute", "1"])
    assert executed.exit_code == 0, f"Execute failed: {executed.stdout}"
    assert "Workflow executed successfully" in executed.stdout

    shown = runner.invoke(app, ["workflow", "show", "1"])
    assert "Workflow 1 trip-logger: COMPLETED" in shown.stdout
    assert "- 3 Code Generation [CODE_GENERATION]: COMPLETED" in shown.stdout
    assert "Approved by reviewer" in shown.stdout

    components = runner.invoke(app, ["component", "list"])
    assert "TripLogger\tapp-trip-logger\tactive" in components.stdout

    code = runner.invoke(app, ["component", "code", "1", "--part", "test"])
    assert "describe('TripLogger'" in code.stdout


def test_execute_failure_exits_with_error(cli_repos):
    _create(component="bad-name")
    runner.invoke(app, ["workflow", "submit", "1"])
    runner.invoke(app, ["workflow", "approve", "1"])

    result = runner.invoke(app, ["workflow", "execute", "1"])

    assert result.exit_code == 1
    assert "Workflow execution failed" in result.stdout
    shown = runner.invoke(app, ["workflow", "show", "1"])
    assert "FAILED" in shown.stdout


def test_illegal_transition_and_missing_workflow():
    _create()

    approve_draft = runner.invoke(app, ["workflow", "approve", "1"])
    assert approve_draft.exit_code == 1

    missing = runner.invoke(app, ["workflow", "show", "42"])
    assert missing.exit_code == 1
    assert "Workflow not found with ID: 42" in missing.stdout


def test_stats_and_templates():
    _create()

    stats = runner.invoke(app, ["workflow", "stats"])
    assert "total: 1" in stats.stdout
    assert "draft: 1" in stats.stdout

    templates = runner.invoke(app, ["template", "list"])
    assert "DIAGNOSTIC" in templates.stdout
