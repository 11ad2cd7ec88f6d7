"""Workflow engine state machine and execution tests."""

import pytest

from compflow import (
    Component,
    ComponentCategory,
    Repositories,
    StepStatus,
    StepType,
    WorkflowEngine,
    WorkflowService,
    WorkflowStatus,
    WorkflowStep,
)
from compflow.db import Database
from compflow.errors import IllegalStateError, NotFoundError
from compflow.persistence import SQLComponentRepository, SQLWorkflowRepository


@pytest.mark.asyncio
async def test_execute_unknown_workflow_raises_not_found(engine):
    with pytest.raises(NotFoundError):
        await engine.execute_workflow(999)


@pytest.mark.asyncio
async def test_execute_requires_approval_and_leaves_status(
    engine, workflow_service, make_workflow, repos
):
    wf = await workflow_service.create_workflow(make_workflow())

    with pytest.raises(IllegalStateError):
        await engine.execute_workflow(wf.id)

    stored = await repos.workflows.get(wf.id)
    assert stored.status == WorkflowStatus.DRAFT
    assert all(step.status == StepStatus.PENDING for step in stored.steps)


@pytest.mark.asyncio
async def test_execute_pending_workflow_is_illegal(engine, workflow_service, make_workflow, repos):
    wf = await workflow_service.create_workflow(make_workflow())
    await engine.submit_workflow(wf.id)

    with pytest.raises(IllegalStateError):
        await engine.execute_workflow(wf.id)
    assert (await repos.workflows.get(wf.id)).status == WorkflowStatus.PENDING_APPROVAL


@pytest.mark.asyncio
async def test_execute_approved_workflow_completes(engine, approved_workflow, repos):
    wf = await approved_workflow()

    result = await engine.execute_workflow(wf.id)

    assert result.success is True
    assert result.workflow_id == wf.id
    assert result.message == "Workflow executed successfully"
    assert result.error is None
    assert result.end_time >= result.start_time
    assert result.duration_seconds >= 0

    stored = await repos.workflows.get(wf.id)
    assert stored.status == WorkflowStatus.COMPLETED
    assert [s.status for s in stored.ordered_steps()] == [StepStatus.COMPLETED] * 5
    assert all(s.executed_at is not None for s in stored.steps)

    components = await repos.components.list_components(workflow_id=wf.id)
    assert len(components) == 1
    assert components[0].name == "TripLogger"
    assert components[0].selector == "app-trip-logger"


@pytest.mark.asyncio
async def test_failing_third_step_stops_execution(engine, approved_workflow, repos):
    wf = await approved_workflow()
    # The code generation step (order 3) fails on the taken component name.
    await repos.components.add(
        Component(
            name="TripLogger",
            category=ComponentCategory.TELEMATICS,
            component_type="component",
            selector="app-trip-logger",
            template_code="",
        )
    )

    result = await engine.execute_workflow(wf.id)

    assert result.success is False
    assert "Code Generation" in result.error
    assert result.message.startswith("Workflow execution failed")

    stored = await repos.workflows.get(wf.id)
    assert stored.status == WorkflowStatus.FAILED
    steps = stored.ordered_steps()
    assert [s.status for s in steps] == [
        StepStatus.COMPLETED,
        StepStatus.COMPLETED,
        StepStatus.FAILED,
        StepStatus.PENDING,
        StepStatus.PENDING,
    ]
    assert steps[2].error_message
    assert "already exists" in steps[2].error_message
    assert steps[3].executed_at is None


@pytest.mark.asyncio
async def test_validation_failure_is_reported_in_result(engine, approved_workflow, repos):
    wf = await approved_workflow(
        category=ComponentCategory.SAFETY_SYSTEM,
        component_name="BrakeAssist",
        dependencies=["SensorModule"],
    )

    result = await engine.execute_workflow(wf.id)

    assert result.success is False
    assert "Safety system requires dependency: AlertSystem" in result.error
    stored = await repos.workflows.get(wf.id)
    first = stored.ordered_steps()[0]
    assert first.status == StepStatus.FAILED
    assert "AlertSystem" in first.error_message
    assert await repos.components.count() == 0


@pytest.mark.asyncio
async def test_steps_run_in_step_order(engine, workflow_service, make_workflow, repos):
    steps = [
        WorkflowStep(step_order=20, step_name="Generate", step_type=StepType.CODE_GENERATION),
        WorkflowStep(step_order=10, step_name="Validate", step_type=StepType.VALIDATION),
    ]
    wf = await workflow_service.create_workflow(
        make_workflow(component_name="bad name", steps=steps)
    )
    await engine.submit_workflow(wf.id)
    await engine.approve_workflow(wf.id)

    result = await engine.execute_workflow(wf.id)

    # validation (order 10) runs first and stops the run before generation
    assert result.success is False
    stored = await repos.workflows.get(wf.id)
    assert stored.step(10).status == StepStatus.FAILED
    assert stored.step(20).status == StepStatus.PENDING
    assert await repos.components.count() == 0


@pytest.mark.asyncio
async def test_unhandled_step_types_complete(engine, workflow_service, make_workflow, repos):
    steps = [
        WorkflowStep(step_order=1, step_name="Notify", step_type=StepType.NOTIFICATION),
        WorkflowStep(step_order=2, step_name="Deploy", step_type=StepType.DEPLOYMENT),
    ]
    wf = await workflow_service.create_workflow(make_workflow(steps=steps))
    await engine.submit_workflow(wf.id)
    await engine.approve_workflow(wf.id)

    result = await engine.execute_workflow(wf.id)

    assert result.success is True
    stored = await repos.workflows.get(wf.id)
    assert all(s.status == StepStatus.COMPLETED for s in stored.steps)


@pytest.mark.asyncio
async def test_completed_workflow_cannot_run_again(engine, approved_workflow):
    wf = await approved_workflow()
    await engine.execute_workflow(wf.id)

    with pytest.raises(IllegalStateError):
        await engine.execute_workflow(wf.id)


@pytest.mark.asyncio
async def test_approve_draft_is_illegal(engine, workflow_service, make_workflow, repos):
    wf = await workflow_service.create_workflow(make_workflow())

    with pytest.raises(IllegalStateError):
        await engine.approve_workflow(wf.id, "alice")

    stored = await repos.workflows.get(wf.id)
    assert stored.status == WorkflowStatus.DRAFT
    assert stored.approved_by is None


@pytest.mark.asyncio
async def test_approve_pending_workflow(engine, workflow_service, make_workflow):
    wf = await workflow_service.create_workflow(make_workflow())
    await engine.submit_workflow(wf.id)

    approved = await engine.approve_workflow(wf.id, "alice")

    assert approved.status == WorkflowStatus.APPROVED
    assert approved.approved_by == "alice"
    assert approved.approved_at is not None


@pytest.mark.asyncio
async def test_submit_only_from_draft(engine, approved_workflow):
    wf = await approved_workflow()
    with pytest.raises(IllegalStateError):
        await engine.submit_workflow(wf.id)


@pytest.mark.asyncio
async def test_reject_pending_workflow(engine, workflow_service, make_workflow):
    wf = await workflow_service.create_workflow(make_workflow())
    await engine.submit_workflow(wf.id)

    rejected = await engine.reject_workflow(wf.id, "bob", "Missing docs")

    assert rejected.status == WorkflowStatus.REJECTED


@pytest.mark.asyncio
async def test_reject_is_unguarded_by_default(engine, approved_workflow):
    wf = await approved_workflow()
    await engine.execute_workflow(wf.id)

    rejected = await engine.reject_workflow(wf.id, "bob", "Too late")

    assert rejected.status == WorkflowStatus.REJECTED


@pytest.mark.asyncio
async def test_strict_reject_requires_pending(repos, workflow_service, make_workflow):
    engine = WorkflowEngine(repos, strict_reject=True)
    wf = await workflow_service.create_workflow(make_workflow())

    with pytest.raises(IllegalStateError):
        await engine.reject_workflow(wf.id)
    assert (await repos.workflows.get(wf.id)).status == WorkflowStatus.DRAFT

    await engine.submit_workflow(wf.id)
    rejected = await engine.reject_workflow(wf.id)
    assert rejected.status == WorkflowStatus.REJECTED


@pytest.mark.asyncio
async def test_reject_unknown_workflow(engine):
    with pytest.raises(NotFoundError):
        await engine.reject_workflow(42)


@pytest.fixture
def sql_repos(tmp_path) -> Repositories:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}")
    return Repositories(
        workflows=SQLWorkflowRepository(db),
        components=SQLComponentRepository(db),
    )


@pytest.mark.asyncio
async def test_execute_workflow_on_sqlite(sql_repos, make_workflow):
    engine = WorkflowEngine(sql_repos)
    service = WorkflowService(sql_repos.workflows)
    ok = await service.create_workflow(make_workflow())
    bad = await service.create_workflow(
        make_workflow(name="duplicate", component_name="TripLogger")
    )
    for wf in (ok, bad):
        await engine.submit_workflow(wf.id)
        await engine.approve_workflow(wf.id, "reviewer")

    assert (await engine.execute_workflow(ok.id)).success is True
    failed = await engine.execute_workflow(bad.id)

    assert failed.success is False
    stored_ok = await sql_repos.workflows.get(ok.id)
    assert stored_ok.status == WorkflowStatus.COMPLETED
    assert stored_ok.approved_by == "reviewer"
    assert [s.status for s in stored_ok.ordered_steps()] == [StepStatus.COMPLETED] * 5
    assert [s.id for s in stored_ok.ordered_steps()] == [s.id for s in ok.ordered_steps()]

    stored_bad = await sql_repos.workflows.get(bad.id)
    assert stored_bad.status == WorkflowStatus.FAILED
    assert [s.status for s in stored_bad.ordered_steps()] == [
        StepStatus.COMPLETED,
        StepStatus.COMPLETED,
        StepStatus.FAILED,
        StepStatus.PENDING,
        StepStatus.PENDING,
    ]
    assert "already exists" in stored_bad.step(3).error_message
    assert await sql_repos.components.count() == 1
