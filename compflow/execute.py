"""Step execution for compflow workflows."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Optional

from .constants import STEP_SUCCESS_MESSAGE
from .contracts import StepStatus, StepType, Workflow, WorkflowStep, utcnow
from .errors import StepExecutionFailed
from .generator import ComponentGenerator
from .validation import WorkflowValidator

logger = logging.getLogger(__name__)

StepHandler = Callable[[Workflow, WorkflowStep], Awaitable[Optional[str]]]


class StepExecutor:
    """Executes a single workflow step according to its type."""

    def __init__(
        self,
        validator: WorkflowValidator,
        generator: ComponentGenerator,
    ) -> None:
        self._validator = validator
        self._generator = generator
        self._handlers: Dict[StepType, StepHandler] = {
            StepType.VALIDATION: self._run_validation,
            StepType.CODE_GENERATION: self._run_code_generation,
            StepType.FILE_CREATION: self._run_file_creation,
            StepType.DEPENDENCY_CHECK: self._run_dependency_check,
            StepType.TESTING: self._run_testing,
        }

    async def execute_step(self, workflow: Workflow, step: WorkflowStep) -> None:
        """Run ``step`` in place, recording its status, result and error.

        Raises:
            StepExecutionFailed: If the step's handler raised. The step is
                marked FAILED before the error propagates.
        """
        logger.info(f"Executing step: {step.step_name} for workflow: {workflow.name}")
        step.status = StepStatus.IN_PROGRESS
        step.executed_at = utcnow()

        handler = self._handlers.get(step.step_type)
        try:
            if handler is None:
                logger.warning(f"Unknown step type: {step.step_type.value}")
                detail = None
            else:
                detail = await handler(workflow, step)
        except Exception as e:
            logger.exception(f"Step execution failed: {step.step_name}")
            step.status = StepStatus.FAILED
            step.error_message = str(e)
            raise StepExecutionFailed(step.step_name, e) from e

        step.status = StepStatus.COMPLETED
        step.result = f"{STEP_SUCCESS_MESSAGE}: {detail}" if detail else STEP_SUCCESS_MESSAGE

    # ------------------------------------------------------------------
    async def _run_validation(self, workflow: Workflow, step: WorkflowStep) -> None:
        self._validator.validate_workflow(workflow).raise_for_errors()

    async def _run_code_generation(
        self, workflow: Workflow, step: WorkflowStep
    ) -> str:
        component = await self._generator.generate_component(workflow)
        return f"component {component.id} generated"

    async def _run_file_creation(self, workflow: Workflow, step: WorkflowStep) -> None:
        self._generator.create_component_files(workflow)

    async def _run_dependency_check(
        self, workflow: Workflow, step: WorkflowStep
    ) -> None:
        self._validator.check_dependencies(workflow)

    async def _run_testing(self, workflow: Workflow, step: WorkflowStep) -> None:
        logger.info(f"Testing step completed for workflow: {workflow.name}")
