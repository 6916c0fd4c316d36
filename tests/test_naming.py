import ast
import os
import re
from typing import List

import pytest

SERVICES_DIR = os.path.join(os.path.dirname(__file__), "..", "booking_platform", "services")

FUNCTION_VERBS = {
    "get", "set", "create", "update", "delete", "validate", "check", "process",
    "handle", "generate", "send", "receive", "build", "register",
}

CLASS_PATTERN = re.compile(r"^\s*class\s+([A-Za-z0-9]+)(\(|:)")
VARIABLE_PATTERN = re.compile(r"\b([A-Za-z0-9_]+)\s*=\s*[^#]*")


def get_service_files() -> List[str]:
    paths = []
    for root, _, files in os.walk(SERVICES_DIR):
        for file in files:
            if file.endswith(".py") and file != "__init__.py":
                paths.append(os.path.join(root, file))
    return sorted(paths)


def check_class_names(code: str, file_path: str) -> List[str]:
    """Classes are CamelCase and singular (a trailing 's' is treated as plural)."""
    errors = []
    for line_no, line in enumerate(code.split("\n"), 1):
        match = CLASS_PATTERN.match(line)
        if not match:
            continue
        class_name = match.group(1)
        if not re.fullmatch(r"([A-Z][a-z0-9]*)+", class_name):
            errors.append(f"{file_path}:{line_no} - class '{class_name}' is not CamelCase")
        if class_name.endswith("s") and len(class_name) > 3:
            errors.append(f"{file_path}:{line_no} - class '{class_name}' looks plural")
    return errors


def check_snake_case_names(code: str, file_path: str) -> List[str]:
    """Assigned names are snake_case; UPPER_CASE constants and one leading underscore are allowed."""
    errors = []
    for line_no, line in enumerate(code.split("\n"), 1):
        clean_line = re.sub(r"#.*", "", line)
        for match in VARIABLE_PATTERN.finditer(clean_line):
            name = match.group(1)
            if name.isupper():
                continue
            if not re.fullmatch(r"_?[a-z][a-z0-9_]*", name):
                errors.append(f"{file_path}:{line_no} - name '{name}' is not snake_case")
    return errors


def check_function_verbs(code: str, file_path: str) -> List[str]:
    """Public sync functions start with a verb."""
    errors = []
    for node in ast.walk(ast.parse(code)):
        if not isinstance(node, ast.FunctionDef) or node.name.startswith("_"):
            continue
        if node.name.split("_")[0] not in FUNCTION_VERBS:
            errors.append(f"{file_path}:{node.lineno} - function '{node.name}' does not start with a verb")
    return errors


def test_services_directory_is_scanned():
    assert get_service_files()


@pytest.mark.parametrize("path", get_service_files(), ids=os.path.basename)
def test_naming_conventions_on_services(path):
    with open(path, "r", encoding="utf-8") as f:
        code = f.read()

    errors = check_class_names(code, path) + check_snake_case_names(code, path) + check_function_verbs(code, path)

    assert not errors, "\n".join(errors)
