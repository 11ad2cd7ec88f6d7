"""Workflow validation: naming conventions, category rules and declared rules."""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .constants import PASCAL_CASE_PATTERN
from .contracts import ComponentCategory, Workflow
from .errors import ValidationFailed

logger = logging.getLogger(__name__)

_PASCAL_CASE = re.compile(PASCAL_CASE_PATTERN)

SAFETY_REQUIRED_DEPENDENCIES = ("SensorModule", "AlertSystem")


def is_valid_component_name(name: Optional[str]) -> bool:
    """Return ``True`` for non-empty PascalCase names."""
    if not name:
        return False
    return _PASCAL_CASE.fullmatch(name) is not None


class ValidationResult(BaseModel):
    """Outcome of validating a workflow.

    Validation that ran and found problems is reported through ``errors``
    rather than raised, so callers can tell it apart from validation that
    itself blew up.
    """

    errors: List[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.valid:
            return "Workflow validation passed"
        return "Workflow validation failed: " + ", ".join(self.errors)

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)


def _safety_system_rules(workflow: Workflow, errors: List[str]) -> None:
    for dep in SAFETY_REQUIRED_DEPENDENCIES:
        if dep not in workflow.dependencies:
            errors.append(f"Safety system requires dependency: {dep}")


def _engine_management_rules(workflow: Workflow, errors: List[str]) -> None:
    name = workflow.component_name or ""
    if "Monitor" not in name and "Controller" not in name:
        errors.append(
            "Engine management components should include 'Monitor' or 'Controller' in name"
        )


def _infotainment_rules(workflow: Workflow, errors: List[str]) -> None:
    if not any("UI" in dep or "Display" in dep for dep in workflow.dependencies):
        errors.append("Infotainment components should have UI/Display dependencies")


def _diagnostic_rules(workflow: Workflow, errors: List[str]) -> None:
    if "DataLogger" not in workflow.dependencies:
        errors.append("Diagnostic components require DataLogger dependency")


CATEGORY_RULES: Dict[ComponentCategory, Callable[[Workflow, List[str]], None]] = {
    ComponentCategory.SAFETY_SYSTEM: _safety_system_rules,
    ComponentCategory.ENGINE_MANAGEMENT: _engine_management_rules,
    ComponentCategory.INFOTAINMENT: _infotainment_rules,
    ComponentCategory.DIAGNOSTIC: _diagnostic_rules,
}


class WorkflowValidator:
    """Checks workflows before execution."""

    def validate_workflow(self, workflow: Workflow) -> ValidationResult:
        """Collect every rule violation of ``workflow``.

        All checks run before returning so the caller sees the full list.
        """
        logger.info(f"Validating workflow: {workflow.name}")
        errors: List[str] = []

        if not is_valid_component_name(workflow.component_name):
            errors.append(
                "Invalid component name. Must be PascalCase and start with a letter."
            )

        self._validate_category_rules(workflow, errors)
        self._validate_dependencies(workflow, errors)

        for rule in workflow.validation_rules:
            if rule is None or not rule.strip():
                errors.append("Empty validation rule found")

        result = ValidationResult(errors=errors)
        if result.valid:
            logger.info(f"Workflow validation passed: {workflow.name}")
        else:
            logger.info(
                f"Workflow validation found {len(errors)} problem(s): {workflow.name}"
            )
        return result

    def _validate_category_rules(self, workflow: Workflow, errors: List[str]) -> None:
        rule = CATEGORY_RULES.get(workflow.category)
        if rule is None:
            logger.debug(
                f"No specific validation rules for category: {workflow.category.value}"
            )
            return
        rule(workflow, errors)

    def _validate_dependencies(self, workflow: Workflow, errors: List[str]) -> None:
        if not workflow.dependencies:
            logger.warning(f"Workflow has no dependencies: {workflow.name}")
            return
        for dependency in workflow.dependencies:
            if not is_valid_component_name(dependency):
                errors.append(f"Invalid dependency name: {dependency}")

    def check_dependencies(self, workflow: Workflow) -> None:
        """Placeholder dependency availability check; always succeeds."""
        logger.info(f"Checking dependencies for workflow: {workflow.name}")
        for dependency in workflow.dependencies:
            logger.debug(f"Checking dependency: {dependency}")
        logger.info(f"Dependency check completed for workflow: {workflow.name}")
