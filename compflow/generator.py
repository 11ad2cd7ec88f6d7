"""Component code generation from category templates."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from .constants import COMPONENT_FILES_ROOT, DEFAULT_COMPONENT_VERSION, SELECTOR_PREFIX
from .contracts import Component, ComponentCategory, Workflow
from .errors import ConflictError
from .persistence.repository import ComponentRepository
from .templates import TemplateService

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def kebab_case(name: str) -> str:
    """Convert PascalCase to kebab-case.

    Only a lowercase letter directly followed by an uppercase letter gets a
    hyphen; runs of capitals are not split.
    """
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


def generate_selector(name: str) -> str:
    return SELECTOR_PREFIX + kebab_case(name)


CATEGORY_LOGIC: Dict[ComponentCategory, str] = {
    ComponentCategory.SAFETY_SYSTEM: (
        "  // Safety system logic\n"
        "  private alertSystem: AlertSystem;\n"
        "  private sensorData: any;\n"
        "\n"
        "  monitorSafety(): void {\n"
        "    // Monitor safety parameters\n"
        "  }\n"
    ),
    ComponentCategory.ENGINE_MANAGEMENT: (
        "  // Engine management logic\n"
        "  private engineData: any;\n"
        "  private fuelLevel: number;\n"
        "\n"
        "  monitorEngine(): void {\n"
        "    // Monitor engine parameters\n"
        "  }\n"
    ),
    ComponentCategory.INFOTAINMENT: (
        "  // Infotainment logic\n"
        "  private mediaPlayer: any;\n"
        "  private displayMode: string;\n"
        "\n"
        "  updateDisplay(): void {\n"
        "    // Update display content\n"
        "  }\n"
    ),
    ComponentCategory.DIAGNOSTIC: (
        "  // Diagnostic logic\n"
        "  private diagnosticCodes: string[];\n"
        "  private dataLogger: any;\n"
        "\n"
        "  runDiagnostics(): void {\n"
        "    // Run diagnostic tests\n"
        "  }\n"
    ),
}

GENERIC_LOGIC = "  // Component logic\n"

STYLE_TEMPLATE = """\
/* {name} Component Styles */

:host {{
  display: block;
  padding: 16px;
}}

.component-container {{
  background-color: #ffffff;
  border-radius: 8px;
  box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);
}}

.component-header {{
  font-size: 18px;
  font-weight: 600;
  margin-bottom: 16px;
  color: #333;
}}

.component-content {{
  padding: 16px;
}}
"""

TEST_TEMPLATE = """\
import {{ ComponentFixture, TestBed }} from '@angular/core/testing';
import {{ {name} }} from './{kebab}.component';

describe('{name}', () => {{
  let component: {name};
  let fixture: ComponentFixture<{name}>;

  beforeEach(async () => {{
    await TestBed.configureTestingModule({{
      declarations: [ {name} ]
    }})
    .compileComponents();

    fixture = TestBed.createComponent({name});
    component = fixture.componentInstance;
    fixture.detectChanges();
  }});

  it('should create', () => {{
    expect(component).toBeTruthy();
  }});

  it('should initialize with correct category', () => {{
    expect(component.category).toBe('{category}');
  }});
}});
"""


def category_logic(category: ComponentCategory) -> str:
    return CATEGORY_LOGIC.get(category, GENERIC_LOGIC)


def build_imports(dependencies: List[str]) -> str:
    return "".join(
        f"import {{ {dep} }} from './{kebab_case(dep)}';\n" for dep in dependencies
    )


def generate_component_code(workflow: Workflow, template: str) -> str:
    """Fill the placeholders of ``template`` for ``workflow``."""
    code = template
    code = code.replace("{{COMPONENT_NAME}}", workflow.component_name)
    code = code.replace("{{SELECTOR}}", generate_selector(workflow.component_name))
    code = code.replace("{{DESCRIPTION}}", workflow.description or "")
    code = code.replace("{{CATEGORY}}", workflow.category.value)
    code = code.replace("{{IMPORTS}}", build_imports(workflow.dependencies))
    code = code.replace("{{CATEGORY_LOGIC}}", category_logic(workflow.category))
    return code


def generate_style_code(workflow: Workflow) -> str:
    return STYLE_TEMPLATE.format(name=workflow.component_name)


def generate_test_code(workflow: Workflow) -> str:
    return TEST_TEMPLATE.format(
        name=workflow.component_name,
        kebab=kebab_case(workflow.component_name),
        category=workflow.category.value,
    )


class ComponentGenerator:
    """Generates and persists components for workflows."""

    def __init__(
        self,
        repository: ComponentRepository,
        templates: Optional[TemplateService] = None,
    ) -> None:
        self._repository = repository
        self._templates = templates or TemplateService()

    def render(self, workflow: Workflow) -> Component:
        """Build an unsaved component record for ``workflow``."""
        template = self._templates.get_template(
            workflow.category, workflow.component_type
        )
        return Component(
            name=workflow.component_name,
            description=workflow.description,
            category=workflow.category,
            component_type=workflow.component_type,
            selector=generate_selector(workflow.component_name),
            template_code=generate_component_code(workflow, template),
            style_code=generate_style_code(workflow),
            test_code=generate_test_code(workflow),
            dependencies=list(workflow.dependencies),
            version=DEFAULT_COMPONENT_VERSION,
            created_by=workflow.created_by,
            workflow_id=workflow.id,
            is_active=True,
        )

    async def generate_component(self, workflow: Workflow) -> Component:
        logger.info(f"Generating component for workflow: {workflow.name}")
        if await self._repository.exists_by_name(workflow.component_name):
            raise ConflictError(
                f"Component with name '{workflow.component_name}' already exists"
            )
        component = await self._repository.add(self.render(workflow))
        logger.info(f"Component generated successfully: {component.name}")
        return component

    def create_component_files(self, workflow: Workflow) -> List[str]:
        """Log the files a component would be written to.

        Nothing is written to disk; the paths are returned for inspection.
        """
        logger.info(f"Creating component files for: {workflow.component_name}")
        kebab = kebab_case(workflow.component_name)
        component_path = f"{COMPONENT_FILES_ROOT}/{kebab}"
        logger.info(f"Component files would be created at: {component_path}")
        paths = [
            f"{component_path}/{kebab}.component.{ext}"
            for ext in ("ts", "html", "scss", "spec.ts")
        ]
        for path in paths:
            logger.info(f"  - {path}")
        return paths
