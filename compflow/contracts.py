"""Core domain contracts for the compflow workflow system."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_COMPONENT_VERSION, DEFAULT_USER


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ComponentCategory(str, Enum):
    """Automobile domain classification driving validation and templates."""

    ENGINE_MANAGEMENT = "ENGINE_MANAGEMENT"
    SAFETY_SYSTEM = "SAFETY_SYSTEM"
    INFOTAINMENT = "INFOTAINMENT"
    DIAGNOSTIC = "DIAGNOSTIC"
    POWERTRAIN = "POWERTRAIN"
    CHASSIS_CONTROL = "CHASSIS_CONTROL"
    BODY_ELECTRONICS = "BODY_ELECTRONICS"
    TELEMATICS = "TELEMATICS"


class StepType(str, Enum):
    VALIDATION = "VALIDATION"
    CODE_GENERATION = "CODE_GENERATION"
    FILE_CREATION = "FILE_CREATION"
    DEPENDENCY_CHECK = "DEPENDENCY_CHECK"
    APPROVAL = "APPROVAL"
    NOTIFICATION = "NOTIFICATION"
    TESTING = "TESTING"
    DEPLOYMENT = "DEPLOYMENT"


class StepStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


TRANSITIONS: Dict[WorkflowStatus, FrozenSet[WorkflowStatus]] = {
    WorkflowStatus.DRAFT: frozenset({WorkflowStatus.PENDING_APPROVAL}),
    WorkflowStatus.PENDING_APPROVAL: frozenset(
        {WorkflowStatus.APPROVED, WorkflowStatus.REJECTED}
    ),
    WorkflowStatus.APPROVED: frozenset({WorkflowStatus.IN_PROGRESS}),
    WorkflowStatus.IN_PROGRESS: frozenset(
        {WorkflowStatus.COMPLETED, WorkflowStatus.FAILED}
    ),
    WorkflowStatus.REJECTED: frozenset(),
    WorkflowStatus.COMPLETED: frozenset(),
    WorkflowStatus.FAILED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    {WorkflowStatus.COMPLETED, WorkflowStatus.FAILED, WorkflowStatus.REJECTED}
)


def allowed(
    current: WorkflowStatus, target: WorkflowStatus, *, lenient_reject: bool = True
) -> bool:
    """Return ``True`` when a workflow may move from ``current`` to ``target``.

    With ``lenient_reject`` every state may move to REJECTED, matching the
    unguarded reject action. Otherwise only the transition table applies.
    """
    if lenient_reject and target is WorkflowStatus.REJECTED:
        return True
    return target in TRANSITIONS.get(current, frozenset())


class WorkflowStep(BaseModel):
    """One unit of work within a workflow run."""

    id: Optional[int] = None
    step_order: int
    step_name: str
    step_description: Optional[str] = None
    step_type: StepType
    status: StepStatus = StepStatus.PENDING
    executed_at: Optional[datetime] = None
    result: Optional[str] = None
    error_message: Optional[str] = None


class Workflow(BaseModel):
    """Named plan for producing a component, with approval state and steps."""

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    status: WorkflowStatus = WorkflowStatus.DRAFT
    category: ComponentCategory
    component_name: str
    component_type: str = "component"
    dependencies: List[str] = Field(default_factory=list)
    validation_rules: List[str] = Field(default_factory=list)
    template_name: Optional[str] = None
    configuration: Optional[str] = None
    created_by: str = DEFAULT_USER
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    steps: List[WorkflowStep] = Field(default_factory=list)

    @field_validator("dependencies")
    @classmethod
    def _unique_dependencies(cls, v: List[str]) -> List[str]:
        # ordered set semantics
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def _unique_step_orders(self) -> "Workflow":
        orders = [step.step_order for step in self.steps]
        if len(orders) != len(set(orders)):
            raise ValueError("step_order values must be unique within a workflow")
        return self

    def ordered_steps(self) -> List[WorkflowStep]:
        """Steps sorted by ascending ``step_order``."""
        return sorted(self.steps, key=lambda s: s.step_order)

    def step(self, step_order: int) -> Optional[WorkflowStep]:
        return next((s for s in self.steps if s.step_order == step_order), None)


class Component(BaseModel):
    """Generated artifact record produced by a code-generation step."""

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    category: ComponentCategory
    component_type: str
    selector: str
    template_code: str
    style_code: Optional[str] = None
    test_code: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    version: str = DEFAULT_COMPONENT_VERSION
    created_by: str = DEFAULT_USER
    workflow_id: Optional[int] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)


class ComponentCode(BaseModel):
    """Generated text of a component, as returned by code retrieval."""

    template_code: str
    style_code: str = ""
    test_code: str = ""


class WorkflowExecutionResult(BaseModel):
    """Outcome of a single workflow run. Not persisted."""

    workflow_id: int
    success: bool = False
    message: Optional[str] = None
    error: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def duration_seconds(self) -> int:
        if self.start_time is None or self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds())
