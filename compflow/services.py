"""Workflow and component management services."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .contracts import (
    Component,
    ComponentCategory,
    ComponentCode,
    StepStatus,
    StepType,
    Workflow,
    WorkflowStatus,
    WorkflowStep,
)
from .errors import ConflictError, NotFoundError
from .persistence import ComponentRepository, WorkflowRepository

logger = logging.getLogger(__name__)

# Fields a caller may change through ``update_workflow``.
UPDATABLE_FIELDS = (
    "name",
    "description",
    "category",
    "component_name",
    "component_type",
    "dependencies",
    "validation_rules",
    "template_name",
    "configuration",
)

_DEFAULT_STEPS = (
    ("Validation", "Validate workflow configuration and dependencies", StepType.VALIDATION),
    ("Dependency Check", "Check if all dependencies are available", StepType.DEPENDENCY_CHECK),
    ("Code Generation", "Generate component code from template", StepType.CODE_GENERATION),
    ("File Creation", "Create component files in the project", StepType.FILE_CREATION),
    ("Testing", "Run automated tests on generated component", StepType.TESTING),
)


def default_steps() -> List[WorkflowStep]:
    """The five steps a workflow gets when none are supplied."""
    return [
        WorkflowStep(
            step_order=order,
            step_name=name,
            step_description=description,
            step_type=step_type,
            status=StepStatus.PENDING,
        )
        for order, (name, description, step_type) in enumerate(_DEFAULT_STEPS, start=1)
    ]


class WorkflowService:
    """CRUD and query operations for workflows."""

    def __init__(self, repository: WorkflowRepository) -> None:
        self._repository = repository

    async def create_workflow(self, workflow: Workflow) -> Workflow:
        logger.info(f"Creating workflow: {workflow.name}")
        if await self._repository.exists_by_name(workflow.name):
            raise ConflictError(f"Workflow with name '{workflow.name}' already exists")

        if not workflow.steps:
            workflow = workflow.model_copy(update={"steps": default_steps()})

        saved = await self._repository.add(workflow)
        logger.info(f"Workflow created successfully with ID: {saved.id}")
        return saved

    async def list_workflows(self) -> List[Workflow]:
        return await self._repository.list_workflows()

    async def get_workflow(self, workflow_id: int) -> Workflow:
        workflow = await self._repository.get(workflow_id)
        if workflow is None:
            raise NotFoundError("Workflow", workflow_id)
        return workflow

    async def update_workflow(self, workflow_id: int, changes: Dict[str, Any]) -> Workflow:
        """Apply ``changes`` to the editable fields of a workflow.

        Status, approval data and steps are not editable here.
        """
        existing = await self.get_workflow(workflow_id)
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        new_name = changes.get("name")
        if new_name and new_name != existing.name:
            if await self._repository.exists_by_name(new_name):
                raise ConflictError(f"Workflow with name '{new_name}' already exists")

        data = existing.model_dump()
        data.update(changes)
        updated = Workflow.model_validate(data)
        return await self._repository.save(updated)

    async def delete_workflow(self, workflow_id: int) -> None:
        if not await self._repository.delete(workflow_id):
            raise NotFoundError("Workflow", workflow_id)
        logger.info(f"Workflow deleted: {workflow_id}")

    async def workflows_by_status(self, status: WorkflowStatus) -> List[Workflow]:
        return await self._repository.list_workflows(status=status)

    async def workflows_by_category(self, category: ComponentCategory) -> List[Workflow]:
        return await self._repository.list_workflows(category=category)

    async def pending_approval(self) -> List[Workflow]:
        """Workflows awaiting approval, newest first."""
        workflows = await self._repository.list_workflows(
            status=WorkflowStatus.PENDING_APPROVAL
        )
        return sorted(workflows, key=lambda wf: wf.created_at, reverse=True)

    async def active_workflows(self) -> List[Workflow]:
        """Workflows in progress or pending approval, most recently updated first."""
        workflows = [
            wf
            for wf in await self._repository.list_workflows()
            if wf.status in (WorkflowStatus.IN_PROGRESS, WorkflowStatus.PENDING_APPROVAL)
        ]
        return sorted(
            workflows, key=lambda wf: wf.updated_at or wf.created_at, reverse=True
        )

    async def workflow_status(self, workflow_id: int) -> Dict[str, Any]:
        workflow = await self.get_workflow(workflow_id)
        return {
            "id": workflow.id,
            "name": workflow.name,
            "status": workflow.status.value,
            "category": workflow.category.value,
            "created_at": workflow.created_at,
            "updated_at": workflow.updated_at,
        }

    async def statistics(self) -> Dict[str, int]:
        stats = {"total": await self._repository.count()}
        for status in WorkflowStatus:
            stats[status.value.lower()] = await self._repository.count(status=status)
        return stats


class ComponentService:
    """Queries and lifecycle operations for generated components."""

    def __init__(self, repository: ComponentRepository) -> None:
        self._repository = repository

    async def list_components(self) -> List[Component]:
        return await self._repository.list_components()

    async def get_component(self, component_id: int) -> Component:
        component = await self._repository.get(component_id)
        if component is None:
            raise NotFoundError("Component", component_id)
        return component

    async def components_by_category(
        self, category: ComponentCategory
    ) -> List[Component]:
        return await self._repository.list_components(category=category)

    async def search_components(self, query: str) -> List[Component]:
        return await self._repository.search_by_name(query)

    async def active_components(self) -> List[Component]:
        return await self._repository.list_components(active=True)

    async def components_by_workflow(self, workflow_id: int) -> List[Component]:
        return await self._repository.list_components(workflow_id=workflow_id)

    async def delete_component(self, component_id: int) -> None:
        if not await self._repository.delete(component_id):
            raise NotFoundError("Component", component_id)
        logger.info(f"Component deleted: {component_id}")

    async def _set_active(self, component_id: int, active: bool) -> Component:
        component = await self.get_component(component_id)
        component.is_active = active
        return await self._repository.save(component)

    async def activate_component(self, component_id: int) -> Component:
        return await self._set_active(component_id, True)

    async def deactivate_component(self, component_id: int) -> Component:
        return await self._set_active(component_id, False)

    async def statistics(self) -> Dict[str, Any]:
        by_category: Dict[str, int] = {}
        for category in ComponentCategory:
            by_category[category.value] = await self._repository.count(
                category=category, active=True
            )
        return {
            "total": await self._repository.count(),
            "active": await self._repository.count(active=True),
            "by_category": by_category,
        }

    async def component_code(self, component_id: int) -> ComponentCode:
        component = await self.get_component(component_id)
        return ComponentCode(
            template_code=component.template_code,
            style_code=component.style_code or "",
            test_code=component.test_code or "",
        )
