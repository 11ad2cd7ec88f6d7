"""Repository abstractions for workflow and component persistence."""

from __future__ import annotations

from typing import Optional, Protocol

from ..contracts import Component, ComponentCategory, Workflow, WorkflowStatus


class WorkflowRepository(Protocol):
    """Protocol for workflow persistence backends.

    A workflow owns its steps: they are written with the workflow and
    removed when it is deleted.
    """

    async def add(self, workflow: Workflow) -> Workflow:
        """Persist a new workflow and return it with ids assigned."""

    async def save(self, workflow: Workflow) -> Workflow:
        """Persist changes to an existing workflow and its steps."""

    async def get(self, workflow_id: int) -> Workflow | None:
        """Retrieve the workflow by id."""

    async def get_by_name(self, name: str) -> Workflow | None:
        """Retrieve the workflow by its unique name."""

    async def exists_by_name(self, name: str) -> bool:
        """Return ``True`` if a workflow called ``name`` exists."""

    async def list_workflows(
        self,
        status: Optional[WorkflowStatus] = None,
        category: Optional[ComponentCategory] = None,
    ) -> list[Workflow]:
        """Return workflows ordered by id, optionally filtered."""

    async def count(self, status: Optional[WorkflowStatus] = None) -> int:
        """Count workflows, optionally only those in ``status``."""

    async def delete(self, workflow_id: int) -> bool:
        """Delete a workflow and its steps. Returns ``False`` if missing."""


class ComponentRepository(Protocol):
    """Protocol for generated component persistence backends."""

    async def add(self, component: Component) -> Component:
        """Persist a new component and return it with its id assigned."""

    async def save(self, component: Component) -> Component:
        """Persist changes to an existing component."""

    async def get(self, component_id: int) -> Component | None:
        """Retrieve the component by id."""

    async def get_by_name(self, name: str) -> Component | None:
        """Retrieve the component by its unique name."""

    async def exists_by_name(self, name: str) -> bool:
        """Return ``True`` if a component called ``name`` exists."""

    async def list_components(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
        workflow_id: Optional[int] = None,
    ) -> list[Component]:
        """Return components ordered by id, optionally filtered."""

    async def search_by_name(self, query: str) -> list[Component]:
        """Active components whose name contains ``query``, ignoring case."""

    async def count(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
    ) -> int:
        """Count components, optionally filtered."""

    async def delete(self, component_id: int) -> bool:
        """Delete a component. Returns ``False`` if missing."""
