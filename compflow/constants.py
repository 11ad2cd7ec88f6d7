DEFAULT_COMPONENT_VERSION = "1.0.0"
DEFAULT_USER = "system"
DEFAULT_REJECT_REASON = "Not specified"

SELECTOR_PREFIX = "app-"
COMPONENT_FILES_ROOT = "src/app/components"

# PascalCase, starting with a letter
PASCAL_CASE_PATTERN = r"^[A-Z][a-zA-Z0-9]*$"

STEP_SUCCESS_MESSAGE = "Step completed successfully"
