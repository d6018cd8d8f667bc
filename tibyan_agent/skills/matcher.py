"""SkillMatcher: deterministic bilingual keyword routing of free text to a skill.

Gating runs before scoring: the candidate pool is the registry's available
view for the caller, so a restricted skill cannot win on keyword density.

Score = number of distinct keywords (all languages) found as case-folded
substrings of the text. The highest score wins; ties keep registry order.

Confidence = min(1, CONFIDENCE_SCALE * hits / keyword_count) for the winner,
and exactly 0 when nothing qualifies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tibyan_agent.constants import CONFIDENCE_SCALE, MAX_CONFIDENCE
from tibyan_agent.skills.models import MatchResult
from tibyan_agent.skills.registry import get_default_registry

if TYPE_CHECKING:
    from tibyan_agent.skills.models import SkillDefinition
    from tibyan_agent.skills.registry import SkillRegistry

logger = structlog.get_logger()


def _keyword_hits(skill: SkillDefinition, normalized: str) -> list[str]:
    return [kw for kw in skill.triggers.all_keywords() if kw.casefold() in normalized]


def _confidence(hits: int, keyword_count: int) -> float:
    if hits <= 0 or keyword_count <= 0:
        return 0.0
    return min(MAX_CONFIDENCE, CONFIDENCE_SCALE * hits / keyword_count)


class SkillMatcher:
    """Maps free text plus caller privilege to the best-fitting skill."""

    def __init__(self, registry: SkillRegistry) -> None:
        self._registry = registry

    def match(self, text: str, is_admin: bool = False) -> MatchResult:
        """Return the winning skill, or an empty result when nothing qualifies."""
        if not isinstance(text, str) or not text.strip():
            return MatchResult()

        normalized = text.casefold()
        best: SkillDefinition | None = None
        best_hits: list[str] = []

        for skill in self._registry.get_available_skills(is_admin):
            hits = _keyword_hits(skill, normalized)
            if len(hits) < skill.triggers.min_keyword_matches:
                continue
            # Strictly greater keeps the earlier registered skill on ties.
            if best is None or len(hits) > len(best_hits):
                best, best_hits = skill, hits

        if best is None:
            logger.debug("no skill matched", is_admin=is_admin)
            return MatchResult()

        confidence = _confidence(len(best_hits), len(best.triggers.all_keywords()))
        logger.debug(
            "skill matched",
            skill_id=best.id,
            is_admin=is_admin,
            hits=len(best_hits),
            confidence=confidence,
        )
        return MatchResult(skill_id=best.id, confidence=confidence, matched_keywords=tuple(best_hits))


def match_skill(text: str, is_admin: bool = False) -> MatchResult:
    """Match against the process-wide default registry."""
    return SkillMatcher(get_default_registry()).match(text, is_admin)
