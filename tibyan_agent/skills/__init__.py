"""Skills system: catalog, intent routing, output validation and leakage detection."""

from tibyan_agent.skills.flags import EnvFeatureFlags, FeatureFlagProvider, StaticFeatureFlags
from tibyan_agent.skills.gate import AuditSink, LogAuditSink, ReleaseDecision, SkillGate
from tibyan_agent.skills.leakage import LeakageDetector, LeakagePattern, check_for_leakage
from tibyan_agent.skills.matcher import SkillMatcher, match_skill
from tibyan_agent.skills.models import (
    Enforcement,
    Language,
    LeakageResult,
    MatchResult,
    OutputKind,
    SafetyRule,
    SkillCategory,
    SkillDefinition,
    SkillExample,
    SkillOutputSchema,
    SkillSummary,
    SkillTriggers,
    ValidationResult,
)
from tibyan_agent.skills.registry import (
    RegistryError,
    SkillRegistry,
    get_all_skill_ids,
    get_available_skills,
    get_enabled_skills,
    get_skill_by_id,
    get_skills_by_category,
)
from tibyan_agent.skills.validator import OutputValidator, validate_skill_output

__all__ = [
    "AuditSink",
    "Enforcement",
    "EnvFeatureFlags",
    "FeatureFlagProvider",
    "Language",
    "LeakageDetector",
    "LeakagePattern",
    "LeakageResult",
    "LogAuditSink",
    "MatchResult",
    "OutputKind",
    "OutputValidator",
    "RegistryError",
    "ReleaseDecision",
    "SafetyRule",
    "SkillCategory",
    "SkillDefinition",
    "SkillExample",
    "SkillGate",
    "SkillMatcher",
    "SkillOutputSchema",
    "SkillRegistry",
    "SkillSummary",
    "SkillTriggers",
    "StaticFeatureFlags",
    "ValidationResult",
    "check_for_leakage",
    "get_all_skill_ids",
    "get_available_skills",
    "get_enabled_skills",
    "get_skill_by_id",
    "get_skills_by_category",
    "match_skill",
    "validate_skill_output",
]
