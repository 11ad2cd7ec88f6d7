"""Command line interface for managing compflow workflows and components."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, List, Optional, TypeVar

import typer

from compflow import (
    ComponentCategory,
    ComponentService,
    TemplateService,
    Workflow,
    WorkflowEngine,
    WorkflowService,
    WorkflowStatus,
    get_repositories,
)
from compflow.config import configure_logging, load_config
from compflow.constants import DEFAULT_REJECT_REASON, DEFAULT_USER
from compflow.errors import CompflowError

T = TypeVar("T")

app = typer.Typer(help="CLI for compflow component workflows")

# Command groups
workflow_app = typer.Typer(help="Commands for managing workflows")
component_app = typer.Typer(help="Commands for managing generated components")
template_app = typer.Typer(help="Commands for inspecting component templates")

app.add_typer(workflow_app, name="workflow")
app.add_typer(component_app, name="component")
app.add_typer(template_app, name="template")


@app.callback()
def main() -> None:
    """compflow CLI entry point."""
    configure_logging()


def _run(awaitable: Awaitable[T]) -> T:
    """Run ``awaitable`` and turn domain errors into a failed exit."""
    try:
        return asyncio.run(awaitable)
    except CompflowError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _workflow_service() -> WorkflowService:
    return WorkflowService(get_repositories().workflows)


def _component_service() -> ComponentService:
    return ComponentService(get_repositories().components)


def _engine() -> WorkflowEngine:
    config = load_config()
    return WorkflowEngine(
        get_repositories(), strict_reject=config.engine.strict_reject
    )


def _echo_stats(stats: dict[str, Any]) -> None:
    for key, value in stats.items():
        if isinstance(value, dict):
            typer.echo(f"{key}:")
            for sub_key, sub_value in value.items():
                typer.echo(f"  {sub_key}: {sub_value}")
        else:
            typer.echo(f"{key}: {value}")


# ----------------------------------------------------------------------
# workflow commands
@workflow_app.command("create")
def workflow_create(
    name: str,
    component_name: str = typer.Option(..., "--component", "-c"),
    category: ComponentCategory = typer.Option(..., "--category"),
    dependency: Optional[List[str]] = typer.Option(None, "--dependency", "-d"),
    rule: Optional[List[str]] = typer.Option(None, "--rule", "-r"),
    description: Optional[str] = None,
    component_type: str = typer.Option("component", "--type"),
    created_by: str = typer.Option(DEFAULT_USER, "--created-by"),
) -> None:
    """
    Create a DRAFT workflow with the default steps.

    Example:
        compflow workflow create engine-monitor --component EngineMonitor \\
            --category ENGINE_MANAGEMENT -d SensorModule
    """
    workflow = Workflow(
        name=name,
        description=description,
        category=category,
        component_name=component_name,
        component_type=component_type,
        dependencies=dependency or [],
        validation_rules=rule or [],
        created_by=created_by,
    )
    saved = _run(_workflow_service().create_workflow(workflow))
    typer.echo(f"Workflow {saved.id} created: {saved.name} ({saved.status.value})")


@workflow_app.command("list")
def workflow_list(
    status: Optional[WorkflowStatus] = typer.Option(None, "--status"),
    category: Optional[ComponentCategory] = typer.Option(None, "--category"),
) -> None:
    """List workflows with their current status, optionally filtered."""
    service = _workflow_service()
    if status is not None:
        workflows = _run(service.workflows_by_status(status))
    elif category is not None:
        workflows = _run(service.workflows_by_category(category))
    else:
        workflows = _run(service.list_workflows())
    if category is not None:
        workflows = [wf for wf in workflows if wf.category == category]
    if not workflows:
        typer.echo("No workflows found")
        return
    for wf in workflows:
        typer.echo(f"{wf.id}\t{wf.name}\t{wf.category.value}\t{wf.status.value}")


@workflow_app.command("pending")
def workflow_pending() -> None:
    """List workflows awaiting approval, newest first."""
    workflows = _run(_workflow_service().pending_approval())
    if not workflows:
        typer.echo("No workflows pending approval")
        return
    for wf in workflows:
        typer.echo(f"{wf.id}\t{wf.name}\t{wf.created_by}")


@workflow_app.command("show")
def workflow_show(workflow_id: int) -> None:
    """
    Show a workflow with its step-by-step execution state.

    Example:
        compflow workflow show 1
        # Output: Workflow 1 engine-monitor: COMPLETED
        #         - 1 Validation [VALIDATION]: COMPLETED
    """
    wf = _run(_workflow_service().get_workflow(workflow_id))
    typer.echo(f"Workflow {wf.id} {wf.name}: {wf.status.value}")
    typer.echo(f"Component: {wf.component_name} ({wf.category.value})")
    if wf.dependencies:
        typer.echo(f"Dependencies: {', '.join(wf.dependencies)}")
    if wf.approved_by:
        typer.echo(f"Approved by {wf.approved_by} at {wf.approved_at}")
    for step in wf.ordered_steps():
        line = (
            f"- {step.step_order} {step.step_name} [{step.step_type.value}]: "
            f"{step.status.value}"
        )
        if step.error_message:
            line += f" ({step.error_message})"
        typer.echo(line)


@workflow_app.command("status")
def workflow_status(workflow_id: int) -> None:
    """Print the status summary of a workflow."""
    _echo_stats(_run(_workflow_service().workflow_status(workflow_id)))


@workflow_app.command("submit")
def workflow_submit(workflow_id: int) -> None:
    """Submit a draft workflow for approval."""
    wf = _run(_engine().submit_workflow(workflow_id))
    typer.echo(f"Workflow {wf.id}: {wf.status.value}")


@workflow_app.command("approve")
def workflow_approve(
    workflow_id: int, approved_by: str = typer.Option(DEFAULT_USER, "--by")
) -> None:
    """Approve a workflow that is pending approval."""
    _run(_engine().approve_workflow(workflow_id, approved_by))
    typer.echo("Workflow approved successfully")


@workflow_app.command("reject")
def workflow_reject(
    workflow_id: int,
    rejected_by: str = typer.Option(DEFAULT_USER, "--by"),
    reason: str = typer.Option(DEFAULT_REJECT_REASON, "--reason"),
) -> None:
    """Reject a workflow."""
    _run(_engine().reject_workflow(workflow_id, rejected_by, reason))
    typer.echo("Workflow rejected")


@workflow_app.command("execute")
def workflow_execute(workflow_id: int) -> None:
    """
    Execute an approved workflow.

    Exits with code 1 when a step fails; the failing step is reported.
    """
    result = _run(_engine().execute_workflow(workflow_id))
    if result.success:
        typer.secho(result.message, fg=typer.colors.GREEN)
    else:
        typer.secho(result.message, fg=typer.colors.RED)
    typer.echo(f"Duration: {result.duration_seconds}s")
    if not result.success:
        raise typer.Exit(code=1)


@workflow_app.command("delete")
def workflow_delete(workflow_id: int) -> None:
    """Delete a workflow and its steps."""
    _run(_workflow_service().delete_workflow(workflow_id))
    typer.echo(f"Workflow {workflow_id} deleted")


@workflow_app.command("stats")
def workflow_stats() -> None:
    """Print workflow counts per status."""
    _echo_stats(_run(_workflow_service().statistics()))


# ----------------------------------------------------------------------
# component commands
@component_app.command("list")
def component_list(
    category: Optional[ComponentCategory] = typer.Option(None, "--category"),
    active: bool = typer.Option(False, "--active", help="Only active components"),
    search: Optional[str] = typer.Option(None, "--search"),
) -> None:
    """List generated components."""
    service = _component_service()
    if search:
        components = _run(service.search_components(search))
    elif category is not None:
        components = _run(service.components_by_category(category))
    elif active:
        components = _run(service.active_components())
    else:
        components = _run(service.list_components())
    if active:
        components = [c for c in components if c.is_active]
    if not components:
        typer.echo("No components found")
        return
    for comp in components:
        state = "active" if comp.is_active else "inactive"
        typer.echo(f"{comp.id}\t{comp.name}\t{comp.selector}\t{state}")


@component_app.command("show")
def component_show(component_id: int) -> None:
    """Show a component's metadata."""
    comp = _run(_component_service().get_component(component_id))
    typer.echo(f"Component {comp.id} {comp.name} v{comp.version}")
    typer.echo(f"Selector: {comp.selector}")
    typer.echo(f"Category: {comp.category.value}")
    typer.echo(f"Workflow: {comp.workflow_id}")
    typer.echo(f"Active: {comp.is_active}")


@component_app.command("code")
def component_code(
    component_id: int,
    part: str = typer.Option("template", help="template, style or test"),
) -> None:
    """Print the generated code of a component."""
    code = _run(_component_service().component_code(component_id))
    texts = {
        "template": code.template_code,
        "style": code.style_code,
        "test": code.test_code,
    }
    if part not in texts:
        typer.secho(f"Unknown code part: {part}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(texts[part])


@component_app.command("activate")
def component_activate(component_id: int) -> None:
    comp = _run(_component_service().activate_component(component_id))
    typer.echo(f"Component {comp.id} activated")


@component_app.command("deactivate")
def component_deactivate(component_id: int) -> None:
    comp = _run(_component_service().deactivate_component(component_id))
    typer.echo(f"Component {comp.id} deactivated")


@component_app.command("delete")
def component_delete(component_id: int) -> None:
    _run(_component_service().delete_component(component_id))
    typer.echo(f"Component {component_id} deleted")


@component_app.command("stats")
def component_stats() -> None:
    """Print component counts."""
    _echo_stats(_run(_component_service().statistics()))


# ----------------------------------------------------------------------
@template_app.command("list")
def template_list() -> None:
    """List the available template keys."""
    for key in TemplateService().available_templates():
        typer.echo(key)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
