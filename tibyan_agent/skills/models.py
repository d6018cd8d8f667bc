"""Pydantic models for the skills subsystem.

Catalog types are frozen and hold tuples, so a loaded ``SkillDefinition``
cannot be mutated by any caller. Result types are plain per-call values.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Language(StrEnum):
    """Languages every localized field and keyword set must cover."""

    EN = "en"
    AR = "ar"


class SkillCategory(StrEnum):
    """Closed set of skill categories."""

    EDUCATION = "education"
    SYSTEM = "system"
    ANALYSIS = "analysis"


class Enforcement(StrEnum):
    """How a safety rule is applied: advisory or a hard precondition."""

    WARN = "warn"
    BLOCK = "block"


class OutputKind(StrEnum):
    """Shape a skill's output must take."""

    JSON = "json"
    TEXT = "text"


LocalizedText = dict[Language, str]


def _require_all_languages(value: LocalizedText, what: str) -> LocalizedText:
    missing = [lang.value for lang in Language if not str(value.get(lang, "")).strip()]
    if missing:
        msg = f"{what} is missing text for: {', '.join(missing)}"
        raise ValueError(msg)
    return value


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SkillTriggers(_Frozen):
    """Keyword heuristic deciding whether free text routes to a skill."""

    keywords: dict[Language, tuple[str, ...]]
    min_keyword_matches: int = Field(default=1, ge=1)

    @field_validator("keywords")
    @classmethod
    def _every_language_has_keywords(cls, v: dict[Language, tuple[str, ...]]) -> dict[Language, tuple[str, ...]]:
        for lang in Language:
            words = [w for w in v.get(lang, ()) if w.strip()]
            if not words:
                msg = f"keywords for '{lang.value}' must not be empty"
                raise ValueError(msg)
        return v

    def all_keywords(self) -> tuple[str, ...]:
        """Distinct keywords across languages, primary language first."""
        seen: dict[str, None] = {}
        for lang in Language:
            for word in self.keywords.get(lang, ()):
                word = word.strip()
                if word:
                    seen.setdefault(word, None)
        return tuple(seen)


class OutputField(_Frozen):
    """A top-level field of a JSON skill output."""

    name: str
    type: Literal["string", "number", "boolean", "array", "object"] = "string"
    required: bool = False
    description: str = ""


class SkillOutputSchema(_Frozen):
    """Declared contract for a skill's output."""

    kind: OutputKind
    fields: tuple[OutputField, ...] = ()
    max_length: int | None = Field(default=None, gt=0)

    @field_validator("fields")
    @classmethod
    def _unique_field_names(cls, v: tuple[OutputField, ...]) -> tuple[OutputField, ...]:
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            msg = "output field names must be unique"
            raise ValueError(msg)
        return v

    def required_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)


class SkillInput(_Frozen):
    """An input the skill expects the caller to collect before prompting."""

    name: str
    type: Literal["string", "number", "boolean", "array", "file", "image"] = "string"
    description: LocalizedText
    optional: bool = False

    @field_validator("description")
    @classmethod
    def _localized(cls, v: LocalizedText) -> LocalizedText:
        return _require_all_languages(v, "input description")


class SafetyRule(_Frozen):
    """A policy attached to a skill."""

    id: str
    description: LocalizedText
    enforcement: Enforcement

    @field_validator("description")
    @classmethod
    def _localized(cls, v: LocalizedText) -> LocalizedText:
        return _require_all_languages(v, "safety rule description")


class SkillExample(_Frozen):
    """Worked example used for documentation and conformance tests."""

    input: LocalizedText
    expected_output: LocalizedText

    @field_validator("input", "expected_output")
    @classmethod
    def _localized(cls, v: LocalizedText) -> LocalizedText:
        return _require_all_languages(v, "example text")


class SkillDefinition(_Frozen):
    """A self-describing capability the agent can invoke."""

    id: str = Field(pattern=r"^[a-z][a-z0-9_]*$")
    category: SkillCategory
    name: LocalizedText
    description: LocalizedText
    enabled: bool = True
    requires_admin: bool = False
    requires_feature_flag: str | None = None
    triggers: SkillTriggers
    required_inputs: tuple[SkillInput, ...] = ()
    output_schema: SkillOutputSchema
    safety_rules: tuple[SafetyRule, ...] = Field(min_length=1)
    examples: tuple[SkillExample, ...] = Field(min_length=1)
    version: str = "1.0.0"

    @field_validator("name", "description")
    @classmethod
    def _localized(cls, v: LocalizedText) -> LocalizedText:
        return _require_all_languages(v, "skill name/description")

    @model_validator(mode="after")
    def _flag_name_not_blank(self) -> SkillDefinition:
        if self.requires_feature_flag is not None and not self.requires_feature_flag.strip():
            msg = f"skill '{self.id}' declares a blank feature flag"
            raise ValueError(msg)
        return self

    def blocking_rules(self) -> tuple[SafetyRule, ...]:
        """Rules a caller must satisfy before the skill may run."""
        return tuple(r for r in self.safety_rules if r.enforcement == Enforcement.BLOCK)


class SkillSummary(BaseModel):
    """Menu entry describing an invocable skill to a caller."""

    id: str
    category: SkillCategory
    name: LocalizedText
    description: LocalizedText


class MatchResult(BaseModel):
    """Outcome of intent matching. ``confidence`` is 0 exactly when unmatched."""

    skill_id: str | None = None
    confidence: float = Field(default=0.0, ge=0.0)
    matched_keywords: tuple[str, ...] = ()

    @property
    def matched(self) -> bool:
        return self.skill_id is not None


class ValidationResult(BaseModel):
    """Outcome of checking a skill output against its schema."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


class LeakageResult(BaseModel):
    """Outcome of scanning text for disclosure patterns."""

    leaked: bool = False
    issues: list[str] = Field(default_factory=list)
    pattern_ids: list[str] = Field(default_factory=list)
