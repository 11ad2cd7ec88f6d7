from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, Relationship, SQLModel


class WorkflowRow(SQLModel, table=True):
    """Stored workflow definition and approval state."""

    __tablename__ = "workflows"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    status: str = Field(index=True)
    category: str = Field(index=True)
    component_name: str
    component_type: str
    dependencies: list = Field(default_factory=list, sa_column=Column(JSON))
    validation_rules: list = Field(default_factory=list, sa_column=Column(JSON))
    template_name: Optional[str] = None
    configuration: Optional[str] = None
    created_by: str
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))
    updated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    steps: List["WorkflowStepRow"] = Relationship(
        back_populates="workflow",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "WorkflowStepRow.step_order",
        },
    )


class WorkflowStepRow(SQLModel, table=True):
    """A step owned by exactly one workflow."""

    __tablename__ = "workflow_steps"

    id: Optional[int] = Field(default=None, primary_key=True)
    workflow_id: Optional[int] = Field(default=None, foreign_key="workflows.id")
    step_order: int
    step_name: str
    step_description: Optional[str] = None
    step_type: str
    status: str
    executed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )
    result: Optional[str] = None
    error_message: Optional[str] = None

    workflow: Optional[WorkflowRow] = Relationship(back_populates="steps")


class ComponentRow(SQLModel, table=True):
    """Generated component record."""

    __tablename__ = "components"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None
    category: str = Field(index=True)
    component_type: str
    selector: str
    template_code: str
    style_code: Optional[str] = None
    test_code: Optional[str] = None
    dependencies: list = Field(default_factory=list, sa_column=Column(JSON))
    version: str
    created_by: str
    workflow_id: Optional[int] = Field(default=None, index=True)
    is_active: bool = True
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))
