"""SkillRegistry: the read-only skill catalog and its privilege-aware views."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
import yaml
from pydantic import ValidationError

from tibyan_agent.config import AgentSettings
from tibyan_agent.skills.flags import EnvFeatureFlags, FeatureFlagProvider
from tibyan_agent.skills.models import SkillCategory, SkillDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

logger = structlog.get_logger()


class RegistryError(ValueError):
    """Raised when a catalog cannot be loaded or violates registry invariants."""


class SkillRegistry:
    """Holds the skill catalog in registration order.

    The catalog is fixed at construction. Feature flags are evaluated through
    the injected provider on every call, so flag changes apply immediately.
    """

    def __init__(
        self,
        definitions: Iterable[SkillDefinition],
        flags: FeatureFlagProvider | None = None,
    ) -> None:
        skills = tuple(definitions)
        if not skills:
            msg = "skill catalog is empty"
            raise RegistryError(msg)

        by_id: dict[str, SkillDefinition] = {}
        for skill in skills:
            if skill.id in by_id:
                msg = f"duplicate skill id: {skill.id}"
                raise RegistryError(msg)
            by_id[skill.id] = skill

        self._skills = skills
        self._by_id = by_id
        self._flags: FeatureFlagProvider = flags if flags is not None else EnvFeatureFlags()

    @classmethod
    def from_yaml(cls, path: Path, flags: FeatureFlagProvider | None = None) -> SkillRegistry:
        """Load and validate a catalog file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        registry = cls(parse_catalog(data), flags=flags)
        logger.info("skill catalog loaded", path=str(path), count=len(registry))
        return registry

    @property
    def flags(self) -> FeatureFlagProvider:
        return self._flags

    def __len__(self) -> int:
        return len(self._skills)

    def __iter__(self) -> Iterator[SkillDefinition]:
        return iter(self._skills)

    def get_all_skill_ids(self) -> list[str]:
        """Every registered id in registration order, gated ones included."""
        return [s.id for s in self._skills]

    def get_skill_by_id(self, skill_id: str) -> SkillDefinition | None:
        if not isinstance(skill_id, str):
            return None
        return self._by_id.get(skill_id)

    def get_skills_by_category(self, category: SkillCategory | str) -> list[SkillDefinition]:
        return [s for s in self._skills if s.category == category]

    def get_enabled_skills(self) -> list[SkillDefinition]:
        return [s for s in self._skills if s.enabled]

    def get_available_skills(self, is_admin: bool) -> list[SkillDefinition]:
        """Enabled skills the caller may use given privilege and current flags."""
        return [s for s in self._skills if self.is_available(s, is_admin)]

    def is_available(self, skill: SkillDefinition, is_admin: bool) -> bool:
        if not skill.enabled:
            return False
        if skill.requires_admin and not is_admin:
            return False
        if skill.requires_feature_flag and not self._flags.is_enabled(skill.requires_feature_flag):
            return False
        return True


def parse_catalog(data: object) -> list[SkillDefinition]:
    """Validate a decoded catalog document (``{"skills": [...]}``)."""
    if not isinstance(data, dict) or not isinstance(data.get("skills"), list):
        msg = "catalog must be a mapping with a 'skills' list"
        raise RegistryError(msg)

    skills: list[SkillDefinition] = []
    for index, raw in enumerate(data["skills"]):
        try:
            skills.append(SkillDefinition.model_validate(raw))
        except ValidationError as exc:
            ident = raw.get("id", f"#{index}") if isinstance(raw, dict) else f"#{index}"
            msg = f"invalid skill definition {ident}: {exc}"
            raise RegistryError(msg) from exc
    return skills


# Process-wide default registry, built on first use from the configured catalog.
_default_registry: SkillRegistry | None = None


def get_default_registry() -> SkillRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = SkillRegistry.from_yaml(AgentSettings().catalog_path)
    return _default_registry


def get_all_skill_ids() -> list[str]:
    return get_default_registry().get_all_skill_ids()


def get_skill_by_id(skill_id: str) -> SkillDefinition | None:
    return get_default_registry().get_skill_by_id(skill_id)


def get_skills_by_category(category: SkillCategory | str) -> list[SkillDefinition]:
    return get_default_registry().get_skills_by_category(category)


def get_enabled_skills() -> list[SkillDefinition]:
    return get_default_registry().get_enabled_skills()


def get_available_skills(is_admin: bool) -> list[SkillDefinition]:
    return get_default_registry().get_available_skills(is_admin)
