"""compflow: approval workflows that generate automobile UI components."""

from .contracts import (
    Component,
    ComponentCategory,
    StepStatus,
    StepType,
    Workflow,
    WorkflowExecutionResult,
    WorkflowStatus,
    WorkflowStep,
)
from .engine import WorkflowEngine
from .execute import StepExecutor
from .generator import ComponentGenerator
from .persistence import Repositories, get_repositories
from .services import ComponentService, WorkflowService
from .templates import TemplateService
from .validation import ValidationResult, WorkflowValidator

__version__ = "0.1.0"
__all__ = [
    "Component",
    "ComponentCategory",
    "ComponentGenerator",
    "ComponentService",
    "Repositories",
    "StepExecutor",
    "StepStatus",
    "StepType",
    "TemplateService",
    "ValidationResult",
    "Workflow",
    "WorkflowEngine",
    "WorkflowExecutionResult",
    "WorkflowService",
    "WorkflowStatus",
    "WorkflowStep",
    "WorkflowValidator",
    "get_repositories",
]
