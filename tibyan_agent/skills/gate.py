"""SkillGate: composes routing, output validation and leakage detection.

Request flow:
    route(text, is_admin) -> MatchResult
    [caller builds the prompt and invokes the model]
    release(skill_id, output) -> ReleaseDecision

A decision is released only when the output satisfies the skill's contract
and no disclosure pattern matched. The gate never decides what the caller
shows instead.
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog
from pydantic import BaseModel

from tibyan_agent.logger import skill_context
from tibyan_agent.skills.leakage import LeakageDetector, get_default_detector
from tibyan_agent.skills.matcher import SkillMatcher
from tibyan_agent.skills.models import LeakageResult, MatchResult, SkillSummary, ValidationResult
from tibyan_agent.skills.registry import SkillRegistry, get_default_registry
from tibyan_agent.skills.validator import OutputValidator, render_output

logger = structlog.get_logger()


class AuditSink(Protocol):
    """Write-only destination for audit events."""

    def record(self, action: str, **fields: Any) -> None: ...


class LogAuditSink:
    """Writes audit events as structured log entries."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("tibyan_agent.audit")

    def record(self, action: str, **fields: Any) -> None:
        self._log.info(action, **fields)


class ReleaseDecision(BaseModel):
    """Whether a skill output may be shown to the caller, and why not."""

    skill_id: str
    released: bool
    validation: ValidationResult
    leakage: LeakageResult


class SkillGate:
    """Entry point used by the request layer."""

    def __init__(
        self,
        registry: SkillRegistry,
        detector: LeakageDetector | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        self._registry = registry
        self._matcher = SkillMatcher(registry)
        self._validator = OutputValidator(registry)
        self._detector = detector or get_default_detector()
        self._audit: AuditSink = audit or LogAuditSink()

    @classmethod
    def default(cls) -> SkillGate:
        return cls(get_default_registry())

    @property
    def registry(self) -> SkillRegistry:
        return self._registry

    @property
    def detector(self) -> LeakageDetector:
        return self._detector

    def available(self, is_admin: bool) -> list[SkillSummary]:
        """Menu of skills this caller may invoke right now."""
        return [
            SkillSummary(id=s.id, category=s.category, name=s.name, description=s.description)
            for s in self._registry.get_available_skills(is_admin)
        ]

    def route(self, text: str, is_admin: bool = False) -> MatchResult:
        with skill_context(is_admin=is_admin):
            result = self._matcher.match(text, is_admin)
            self._audit.record(
                "skill_routed", skill_id=result.skill_id, confidence=result.confidence, is_admin=is_admin
            )
        return result

    def release(self, skill_id: str, output: object) -> ReleaseDecision:
        """Validate then scan an output. Both checks always run."""
        with skill_context(skill_id=skill_id):
            validation = self._validator.validate(skill_id, output)
            leakage = self._detector.check(_scan_text(output))

            released = validation.valid and not leakage.leaked
            if released:
                logger.debug("skill output released")
            else:
                # The output itself is never logged; it may hold the leaked material.
                logger.warning(
                    "skill output blocked",
                    errors=validation.errors,
                    leak_patterns=leakage.pattern_ids,
                )

            self._audit.record(
                "skill_output_released" if released else "skill_output_blocked",
                skill_id=skill_id,
                valid=validation.valid,
                leaked=leakage.leaked,
            )
        return ReleaseDecision(skill_id=skill_id, released=released, validation=validation, leakage=leakage)


def _scan_text(output: object) -> str:
    if output is None:
        return ""
    try:
        return render_output(output)
    except (TypeError, ValueError):
        return str(output)
