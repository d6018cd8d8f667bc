"""Shared fixtures for the agent core test suite."""

from __future__ import annotations

from typing import Any

import pytest

from tibyan_agent.config import DEFAULT_CATALOG_PATH
from tibyan_agent.constants import DAMAGE_ANALYZER_FLAG
from tibyan_agent.skills.flags import StaticFeatureFlags
from tibyan_agent.skills.registry import SkillRegistry


class RecordingAuditSink:
    """Audit sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def record(self, action: str, **fields: Any) -> None:
        self.events.append((action, fields))

    def actions(self) -> list[str]:
        return [action for action, _ in self.events]


@pytest.fixture
def flags() -> StaticFeatureFlags:
    """Flag provider with every flag off."""
    return StaticFeatureFlags()


@pytest.fixture
def registry(flags: StaticFeatureFlags) -> SkillRegistry:
    """Built-in catalog gated by the static flag fixture."""
    return SkillRegistry.from_yaml(DEFAULT_CATALOG_PATH, flags=flags)


@pytest.fixture
def damage_flag_on(flags: StaticFeatureFlags) -> StaticFeatureFlags:
    """Turn the damage analyzer flag on for the test."""
    flags.enable(DAMAGE_ANALYZER_FLAG)
    return flags


@pytest.fixture
def audit() -> RecordingAuditSink:
    return RecordingAuditSink()
