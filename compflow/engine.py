"""Workflow engine: approval state machine and step loop."""

from __future__ import annotations

import logging
from typing import Optional

from .constants import DEFAULT_REJECT_REASON, DEFAULT_USER
from .contracts import (
    Workflow,
    WorkflowExecutionResult,
    WorkflowStatus,
    allowed,
    utcnow,
)
from .errors import IllegalStateError, NotFoundError, StepExecutionFailed
from .execute import StepExecutor
from .generator import ComponentGenerator
from .persistence import Repositories
from .templates import TemplateService
from .validation import WorkflowValidator

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """Runs approved workflows and performs approval transitions.

    Every status change goes through :func:`compflow.contracts.allowed`.
    Steps that completed before a failure are left as they are.
    """

    def __init__(
        self,
        repositories: Repositories,
        executor: Optional[StepExecutor] = None,
        strict_reject: bool = False,
    ) -> None:
        self._workflows = repositories.workflows
        self._executor = executor or StepExecutor(
            WorkflowValidator(),
            ComponentGenerator(repositories.components, TemplateService()),
        )
        self._strict_reject = strict_reject

    async def _load(self, workflow_id: int) -> Workflow:
        workflow = await self._workflows.get(workflow_id)
        if workflow is None:
            raise NotFoundError("Workflow", workflow_id)
        return workflow

    def _transition(
        self, workflow: Workflow, target: WorkflowStatus, message: str
    ) -> None:
        if not allowed(workflow.status, target, lenient_reject=not self._strict_reject):
            raise IllegalStateError(message)
        workflow.status = target

    async def execute_workflow(self, workflow_id: int) -> WorkflowExecutionResult:
        """Execute the steps of an approved workflow in ``step_order``.

        Step failures are reported in the returned result rather than raised.

        Raises:
            NotFoundError: If ``workflow_id`` is unknown.
            IllegalStateError: If the workflow is not APPROVED.
        """
        logger.info(f"Starting workflow execution for workflow ID: {workflow_id}")
        workflow = await self._load(workflow_id)

        self._transition(
            workflow,
            WorkflowStatus.IN_PROGRESS,
            "Workflow must be approved before execution",
        )
        workflow = await self._workflows.save(workflow)

        result = WorkflowExecutionResult(workflow_id=workflow_id, start_time=utcnow())
        try:
            for step in workflow.ordered_steps():
                await self._executor.execute_step(workflow, step)
        except StepExecutionFailed as e:
            logger.error(f"Workflow execution failed for workflow ID: {workflow_id}: {e}")
            self._transition(workflow, WorkflowStatus.FAILED, str(e))
            await self._workflows.save(workflow)

            result.success = False
            result.end_time = utcnow()
            result.message = f"Workflow execution failed: {e}"
            result.error = str(e)
            return result

        self._transition(
            workflow, WorkflowStatus.COMPLETED, "Workflow is not in progress"
        )
        await self._workflows.save(workflow)

        result.success = True
        result.end_time = utcnow()
        result.message = "Workflow executed successfully"
        logger.info(
            f"Workflow execution completed successfully for workflow ID: {workflow_id}"
        )
        return result

    async def submit_workflow(self, workflow_id: int) -> Workflow:
        """Move a DRAFT workflow to PENDING_APPROVAL."""
        workflow = await self._load(workflow_id)
        self._transition(
            workflow,
            WorkflowStatus.PENDING_APPROVAL,
            "Only draft workflows can be submitted for approval",
        )
        workflow = await self._workflows.save(workflow)
        logger.info(f"Workflow submitted for approval: {workflow_id}")
        return workflow

    async def approve_workflow(
        self, workflow_id: int, approved_by: str = DEFAULT_USER
    ) -> Workflow:
        workflow = await self._load(workflow_id)
        self._transition(
            workflow, WorkflowStatus.APPROVED, "Workflow is not pending approval"
        )
        workflow.approved_by = approved_by
        workflow.approved_at = utcnow()
        workflow = await self._workflows.save(workflow)
        logger.info(f"Workflow approved: {workflow_id} by {approved_by}")
        return workflow

    async def reject_workflow(
        self,
        workflow_id: int,
        rejected_by: str = DEFAULT_USER,
        reason: str = DEFAULT_REJECT_REASON,
    ) -> Workflow:
        """Reject a workflow. The reason is logged, not stored.

        Unless ``strict_reject`` is set this works from any status.
        """
        workflow = await self._load(workflow_id)
        previous = workflow.status
        self._transition(
            workflow, WorkflowStatus.REJECTED, "Workflow is not pending approval"
        )
        if previous is not WorkflowStatus.PENDING_APPROVAL:
            logger.warning(
                f"Workflow {workflow_id} rejected from status {previous.value}"
            )
        workflow = await self._workflows.save(workflow)
        logger.info(f"Workflow rejected: {workflow_id} by {rejected_by} - Reason: {reason}")
        return workflow
