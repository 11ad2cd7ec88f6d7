import pytest

from compflow import (
    ComponentCategory,
    Repositories,
    Workflow,
    WorkflowEngine,
    WorkflowService,
)
from compflow.persistence import InMemoryComponentRepository, InMemoryWorkflowRepository


@pytest.fixture
def repos() -> Repositories:
    return Repositories(
        workflows=InMemoryWorkflowRepository(),
        components=InMemoryComponentRepository(),
    )


@pytest.fixture
def workflow_service(repos) -> WorkflowService:
    return WorkflowService(repos.workflows)


@pytest.fixture
def engine(repos) -> WorkflowEngine:
    return WorkflowEngine(repos)


@pytest.fixture
def make_workflow():
    """Build an unsaved workflow that passes validation by default."""

    def _make(**overrides) -> Workflow:
        data = dict(
            name="trip-logger",
            description="Logs trips",
            category=ComponentCategory.TELEMATICS,
            component_name="TripLogger",
            component_type="component",
            dependencies=["DataLogger"],
            validation_rules=["must log"],
        )
        data.update(overrides)
        return Workflow(**data)

    return _make


@pytest.fixture
def approved_workflow(workflow_service, engine, make_workflow):
    """Factory creating, submitting and approving a workflow."""

    async def _approved(**overrides) -> Workflow:
        wf = await workflow_service.create_workflow(make_workflow(**overrides))
        await engine.submit_workflow(wf.id)
        return await engine.approve_workflow(wf.id, "reviewer")

    return _approved
