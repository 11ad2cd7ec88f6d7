"""In-memory implementation of the repositories."""

from __future__ import annotations

from typing import Dict, Optional

from ..contracts import Component, ComponentCategory, Workflow, WorkflowStatus, utcnow
from .repository import ComponentRepository, WorkflowRepository


class InMemoryWorkflowRepository(WorkflowRepository):
    """Store workflows in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts. Records are copied on the way in and
    out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._workflows: Dict[int, Workflow] = {}
        self._workflow_id = 0
        self._step_id = 0

    # ------------------------------------------------------------------
    def _assign_step_ids(self, workflow: Workflow) -> None:
        for step in workflow.steps:
            if step.id is None:
                self._step_id += 1
                step.id = self._step_id

    async def add(self, workflow: Workflow) -> Workflow:
        stored = workflow.model_copy(deep=True)
        self._workflow_id += 1
        stored.id = self._workflow_id
        stored.updated_at = stored.created_at
        self._assign_step_ids(stored)
        self._workflows[stored.id] = stored
        return stored.model_copy(deep=True)

    async def save(self, workflow: Workflow) -> Workflow:
        if workflow.id not in self._workflows:
            raise KeyError(f"Unknown workflow id: {workflow.id}")
        stored = workflow.model_copy(deep=True)
        stored.updated_at = utcnow()
        self._assign_step_ids(stored)
        self._workflows[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, workflow_id: int) -> Workflow | None:
        wf = self._workflows.get(workflow_id)
        return wf.model_copy(deep=True) if wf else None

    async def get_by_name(self, name: str) -> Workflow | None:
        for wf in self._workflows.values():
            if wf.name == name:
                return wf.model_copy(deep=True)
        return None

    async def exists_by_name(self, name: str) -> bool:
        return any(wf.name == name for wf in self._workflows.values())

    async def list_workflows(
        self,
        status: Optional[WorkflowStatus] = None,
        category: Optional[ComponentCategory] = None,
    ) -> list[Workflow]:
        return [
            wf.model_copy(deep=True)
            for _, wf in sorted(self._workflows.items())
            if (status is None or wf.status == status)
            and (category is None or wf.category == category)
        ]

    async def count(self, status: Optional[WorkflowStatus] = None) -> int:
        return sum(
            1 for wf in self._workflows.values() if status is None or wf.status == status
        )

    async def delete(self, workflow_id: int) -> bool:
        return self._workflows.pop(workflow_id, None) is not None


class InMemoryComponentRepository(ComponentRepository):
    """Store generated components in local memory."""

    def __init__(self) -> None:
        self._components: Dict[int, Component] = {}
        self._component_id = 0

    async def add(self, component: Component) -> Component:
        stored = component.model_copy(deep=True)
        self._component_id += 1
        stored.id = self._component_id
        self._components[stored.id] = stored
        return stored.model_copy(deep=True)

    async def save(self, component: Component) -> Component:
        if component.id not in self._components:
            raise KeyError(f"Unknown component id: {component.id}")
        stored = component.model_copy(deep=True)
        self._components[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, component_id: int) -> Component | None:
        comp = self._components.get(component_id)
        return comp.model_copy(deep=True) if comp else None

    async def get_by_name(self, name: str) -> Component | None:
        for comp in self._components.values():
            if comp.name == name:
                return comp.model_copy(deep=True)
        return None

    async def exists_by_name(self, name: str) -> bool:
        return any(comp.name == name for comp in self._components.values())

    def _matching(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
        workflow_id: Optional[int] = None,
    ) -> list[Component]:
        return [
            comp
            for _, comp in sorted(self._components.items())
            if (category is None or comp.category == category)
            and (active is None or comp.is_active == active)
            and (workflow_id is None or comp.workflow_id == workflow_id)
        ]

    async def list_components(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
        workflow_id: Optional[int] = None,
    ) -> list[Component]:
        return [
            comp.model_copy(deep=True)
            for comp in self._matching(category, active, workflow_id)
        ]

    async def search_by_name(self, query: str) -> list[Component]:
        needle = query.lower()
        return [
            comp.model_copy(deep=True)
            for comp in self._matching(active=True)
            if needle in comp.name.lower()
        ]

    async def count(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
    ) -> int:
        return len(self._matching(category, active))

    async def delete(self, component_id: int) -> bool:
        return self._components.pop(component_id, None) is not None
