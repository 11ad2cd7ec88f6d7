"""SQL implementation of the repositories on top of SQLModel."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import select

from ..contracts import (
    Component,
    ComponentCategory,
    Workflow,
    WorkflowStatus,
    WorkflowStep,
    utcnow,
)
from ..db import ComponentRow, Database, WorkflowRow, WorkflowStepRow
from .repository import ComponentRepository, WorkflowRepository


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; everything stored is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ----------------------------------------------------------------------
# Row <-> contract conversion
def _step_from_row(row: WorkflowStepRow) -> WorkflowStep:
    return WorkflowStep(
        id=row.id,
        step_order=row.step_order,
        step_name=row.step_name,
        step_description=row.step_description,
        step_type=row.step_type,
        status=row.status,
        executed_at=_aware(row.executed_at),
        result=row.result,
        error_message=row.error_message,
    )


def _apply_step(row: WorkflowStepRow, step: WorkflowStep) -> None:
    row.step_order = step.step_order
    row.step_name = step.step_name
    row.step_description = step.step_description
    row.step_type = step.step_type.value
    row.status = step.status.value
    row.executed_at = step.executed_at
    row.result = step.result
    row.error_message = step.error_message


def _workflow_from_row(row: WorkflowRow) -> Workflow:
    return Workflow(
        id=row.id,
        name=row.name,
        description=row.description,
        status=row.status,
        category=row.category,
        component_name=row.component_name,
        component_type=row.component_type,
        dependencies=list(row.dependencies or []),
        validation_rules=list(row.validation_rules or []),
        template_name=row.template_name,
        configuration=row.configuration,
        created_by=row.created_by,
        approved_by=row.approved_by,
        approved_at=_aware(row.approved_at),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        steps=[_step_from_row(s) for s in row.steps],
    )


def _apply_workflow(row: WorkflowRow, workflow: Workflow) -> None:
    row.name = workflow.name
    row.description = workflow.description
    row.status = workflow.status.value
    row.category = workflow.category.value
    row.component_name = workflow.component_name
    row.component_type = workflow.component_type
    row.dependencies = list(workflow.dependencies)
    row.validation_rules = list(workflow.validation_rules)
    row.template_name = workflow.template_name
    row.configuration = workflow.configuration
    row.created_by = workflow.created_by
    row.approved_by = workflow.approved_by
    row.approved_at = workflow.approved_at

    existing = {s.id: s for s in row.steps if s.id is not None}
    steps: list[WorkflowStepRow] = []
    for step in workflow.steps:
        step_row = existing.get(step.id) if step.id is not None else None
        if step_row is None:
            step_row = WorkflowStepRow(
                step_order=step.step_order,
                step_name=step.step_name,
                step_type=step.step_type.value,
                status=step.status.value,
            )
        _apply_step(step_row, step)
        steps.append(step_row)
    # steps no longer present are removed by the delete-orphan cascade
    row.steps = steps


def _component_from_row(row: ComponentRow) -> Component:
    return Component(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        component_type=row.component_type,
        selector=row.selector,
        template_code=row.template_code,
        style_code=row.style_code,
        test_code=row.test_code,
        dependencies=list(row.dependencies or []),
        version=row.version,
        created_by=row.created_by,
        workflow_id=row.workflow_id,
        is_active=row.is_active,
        created_at=_aware(row.created_at),
    )


def _apply_component(row: ComponentRow, component: Component) -> None:
    row.name = component.name
    row.description = component.description
    row.category = component.category.value
    row.component_type = component.component_type
    row.selector = component.selector
    row.template_code = component.template_code
    row.style_code = component.style_code
    row.test_code = component.test_code
    row.dependencies = list(component.dependencies)
    row.version = component.version
    row.created_by = component.created_by
    row.workflow_id = component.workflow_id
    row.is_active = component.is_active


class SQLWorkflowRepository(WorkflowRepository):
    """Persist workflows and their steps with SQLModel.

    Every write touches the workflow row and its step rows inside one
    session transaction.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def _select(self):
        return select(WorkflowRow).options(selectinload(WorkflowRow.steps))

    async def add(self, workflow: Workflow) -> Workflow:
        row = WorkflowRow(
            name=workflow.name,
            status=workflow.status.value,
            category=workflow.category.value,
            component_name=workflow.component_name,
            component_type=workflow.component_type,
            created_by=workflow.created_by,
            created_at=workflow.created_at,
            updated_at=workflow.created_at,
        )
        _apply_workflow(row, workflow)
        async with self._db.session() as session:
            session.add(row)
            await session.commit()
            return _workflow_from_row(row)

    async def save(self, workflow: Workflow) -> Workflow:
        async with self._db.session() as session:
            result = await session.exec(
                self._select().where(WorkflowRow.id == workflow.id)
            )
            row = result.first()
            if row is None:
                raise KeyError(f"Unknown workflow id: {workflow.id}")
            _apply_workflow(row, workflow)
            row.updated_at = utcnow()
            await session.commit()
            return _workflow_from_row(row)

    async def get(self, workflow_id: int) -> Workflow | None:
        async with self._db.session() as session:
            result = await session.exec(self._select().where(WorkflowRow.id == workflow_id))
            row = result.first()
            return _workflow_from_row(row) if row else None

    async def get_by_name(self, name: str) -> Workflow | None:
        async with self._db.session() as session:
            result = await session.exec(self._select().where(WorkflowRow.name == name))
            row = result.first()
            return _workflow_from_row(row) if row else None

    async def exists_by_name(self, name: str) -> bool:
        async with self._db.session() as session:
            result = await session.exec(
                select(WorkflowRow.id).where(WorkflowRow.name == name)
            )
            return result.first() is not None

    async def list_workflows(
        self,
        status: Optional[WorkflowStatus] = None,
        category: Optional[ComponentCategory] = None,
    ) -> list[Workflow]:
        query = self._select().order_by(WorkflowRow.id)
        if status is not None:
            query = query.where(WorkflowRow.status == status.value)
        if category is not None:
            query = query.where(WorkflowRow.category == category.value)
        async with self._db.session() as session:
            result = await session.exec(query)
            return [_workflow_from_row(row) for row in result.all()]

    async def count(self, status: Optional[WorkflowStatus] = None) -> int:
        query = select(func.count()).select_from(WorkflowRow)
        if status is not None:
            query = query.where(WorkflowRow.status == status.value)
        async with self._db.session() as session:
            result = await session.exec(query)
            return result.one()

    async def delete(self, workflow_id: int) -> bool:
        async with self._db.session() as session:
            result = await session.exec(self._select().where(WorkflowRow.id == workflow_id))
            row = result.first()
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True


class SQLComponentRepository(ComponentRepository):
    """Persist generated components with SQLModel."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, component: Component) -> Component:
        row = ComponentRow(
            name=component.name,
            category=component.category.value,
            component_type=component.component_type,
            selector=component.selector,
            template_code=component.template_code,
            version=component.version,
            created_by=component.created_by,
            created_at=component.created_at,
        )
        _apply_component(row, component)
        async with self._db.session() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _component_from_row(row)

    async def save(self, component: Component) -> Component:
        async with self._db.session() as session:
            row = await session.get(ComponentRow, component.id)
            if row is None:
                raise KeyError(f"Unknown component id: {component.id}")
            _apply_component(row, component)
            await session.commit()
            await session.refresh(row)
            return _component_from_row(row)

    async def get(self, component_id: int) -> Component | None:
        async with self._db.session() as session:
            row = await session.get(ComponentRow, component_id)
            return _component_from_row(row) if row else None

    async def get_by_name(self, name: str) -> Component | None:
        async with self._db.session() as session:
            result = await session.exec(
                select(ComponentRow).where(ComponentRow.name == name)
            )
            row = result.first()
            return _component_from_row(row) if row else None

    async def exists_by_name(self, name: str) -> bool:
        async with self._db.session() as session:
            result = await session.exec(
                select(ComponentRow.id).where(ComponentRow.name == name)
            )
            return result.first() is not None

    async def list_components(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
        workflow_id: Optional[int] = None,
    ) -> list[Component]:
        query = select(ComponentRow).order_by(ComponentRow.id)
        if category is not None:
            query = query.where(ComponentRow.category == category.value)
        if active is not None:
            query = query.where(ComponentRow.is_active == active)
        if workflow_id is not None:
            query = query.where(ComponentRow.workflow_id == workflow_id)
        async with self._db.session() as session:
            result = await session.exec(query)
            return [_component_from_row(row) for row in result.all()]

    async def search_by_name(self, query: str) -> list[Component]:
        statement = (
            select(ComponentRow)
            .where(func.lower(ComponentRow.name).contains(query.lower(), autoescape=True))
            .where(ComponentRow.is_active == True)  # noqa: E712
            .order_by(ComponentRow.id)
        )
        async with self._db.session() as session:
            result = await session.exec(statement)
            return [_component_from_row(row) for row in result.all()]

    async def count(
        self,
        category: Optional[ComponentCategory] = None,
        active: Optional[bool] = None,
    ) -> int:
        query = select(func.count()).select_from(ComponentRow)
        if category is not None:
            query = query.where(ComponentRow.category == category.value)
        if active is not None:
            query = query.where(ComponentRow.is_active == active)
        async with self._db.session() as session:
            result = await session.exec(query)
            return result.one()

    async def delete(self, component_id: int) -> bool:
        async with self._db.session() as session:
            row = await session.get(ComponentRow, component_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True
