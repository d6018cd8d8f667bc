"""OutputValidator: shallow contract check of a skill's produced output.

Presence checking only. The goal is to catch malformed or truncated model
output before it is trusted downstream, not to type-check arbitrary JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from tibyan_agent.skills.models import OutputKind, ValidationResult
from tibyan_agent.skills.registry import get_default_registry

if TYPE_CHECKING:
    from tibyan_agent.skills.models import SkillDefinition
    from tibyan_agent.skills.registry import SkillRegistry

logger = structlog.get_logger()


def render_output(output: object) -> str:
    """Render an output as the text a caller would receive.

    Strings pass through; everything else becomes compact JSON with
    non-ASCII characters preserved. Raises TypeError/ValueError when the
    value has no JSON form.
    """
    if isinstance(output, str):
        return output
    if isinstance(output, BaseModel):
        return output.model_dump_json()
    return json.dumps(output, ensure_ascii=False, separators=(",", ":"))


class OutputValidator:
    """Validates outputs against the owning skill's ``output_schema``."""

    def __init__(self, registry: SkillRegistry) -> None:
        self._registry = registry

    def validate(self, skill_id: str, output: object) -> ValidationResult:
        skill = self._registry.get_skill_by_id(skill_id)
        if skill is None:
            return ValidationResult(valid=False, errors=[f"Unknown skill: {skill_id}"])

        if isinstance(output, BaseModel):
            output = output.model_dump()

        match skill.output_schema.kind:
            case OutputKind.JSON:
                errors = self._check_json(skill, output)
            case OutputKind.TEXT:
                errors = self._check_text(skill, output)

        if not errors:
            errors = self._check_length(skill, output)

        if errors:
            logger.debug("skill output rejected", skill_id=skill_id, errors=errors)
        return ValidationResult(valid=not errors, errors=errors)

    def _check_json(self, skill: SkillDefinition, output: object) -> list[str]:
        if not isinstance(output, Mapping):
            return [f"Expected object output for skill {skill.id}"]
        return [
            f"Missing required field: {name}"
            for name in skill.output_schema.required_fields()
            if output.get(name) is None
        ]

    def _check_text(self, skill: SkillDefinition, output: object) -> list[str]:
        if not isinstance(output, str):
            return [f"Expected text output for skill {skill.id}"]
        if not output:
            return [f"Empty text output for skill {skill.id}"]
        return []

    def _check_length(self, skill: SkillDefinition, output: object) -> list[str]:
        limit = skill.output_schema.max_length
        if limit is None:
            return []
        try:
            rendered = render_output(dict(output) if isinstance(output, Mapping) else output)
        except (TypeError, ValueError):
            return [f"Output for skill {skill.id} is not serializable"]
        if len(rendered) > limit:
            return [f"Output exceeds max length of {limit}"]
        return []


def validate_skill_output(skill_id: str, output: object) -> ValidationResult:
    """Validate against the process-wide default registry."""
    return OutputValidator(get_default_registry()).validate(skill_id, output)
