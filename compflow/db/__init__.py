from .database import Database
from .models import ComponentRow, WorkflowRow, WorkflowStepRow

__all__ = [
    "ComponentRow",
    "Database",
    "WorkflowRow",
    "WorkflowStepRow",
]
