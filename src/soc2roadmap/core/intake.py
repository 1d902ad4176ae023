"""Intake file loading and validation.

Validation happens here, before the engine runs. The engine assumes a
structurally valid intake and never checks it again.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models.intake import IntakeForm


class IntakeError(Exception):
    """Raised when an intake document is unreadable or fails validation."""

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


def _format_problems(exc: ValidationError) -> list[str]:
    problems: list[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{location or '<root>'}: {err.get('msg', 'invalid value')}")
    return problems


def parse_intake(data: dict) -> IntakeForm:
    """Validate a decoded intake document."""
    if not isinstance(data, dict):
        raise IntakeError("Intake must be a mapping of questionnaire sections")
    try:
        return IntakeForm.model_validate(data)
    except ValidationError as e:
        problems = _format_problems(e)
        raise IntakeError(
            f"Intake failed validation ({len(problems)} problem(s))", problems
        ) from e


def load_intake(path: Path) -> IntakeForm:
    """Load an intake questionnaire from a YAML or JSON file."""
    try:
        content = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise IntakeError(f"Cannot read intake file {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise IntakeError(f"Cannot parse intake file {path.name}: {e}") from e

    return parse_intake(data)
