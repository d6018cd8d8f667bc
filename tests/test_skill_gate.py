"""Tests for the routing and release gate."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

from tibyan_agent.skills import leakage
from tibyan_agent.skills.flags import StaticFeatureFlags
from tibyan_agent.skills.gate import SkillGate
from tibyan_agent.skills.registry import SkillRegistry

if TYPE_CHECKING:
    from conftest import RecordingAuditSink


@pytest.fixture
def gate(registry: SkillRegistry, audit: RecordingAuditSink) -> SkillGate:
    return SkillGate(registry, audit=audit)


def test_route_records_audit_event(gate: SkillGate, audit: RecordingAuditSink) -> None:
    result = gate.route("أريد خطة مذاكرة", is_admin=False)
    assert result.skill_id == "study_plan"
    action, fields = audit.events[-1]
    assert action == "skill_routed"
    assert fields["skill_id"] == "study_plan"
    assert fields["is_admin"] is False


def test_route_unmatched(gate: SkillGate) -> None:
    result = gate.route("مرحبا كيف الحال")
    assert result.skill_id is None
    assert result.confidence == 0


def test_release_valid_clean_output(gate: SkillGate, audit: RecordingAuditSink) -> None:
    output = {"title": "خطة", "duration": "أسبوع", "phases": ["مراجعة الجبر"]}
    decision = gate.release("study_plan", output)
    assert decision.released is True
    assert decision.validation.valid is True
    assert decision.leakage.leaked is False
    assert audit.actions()[-1] == "skill_output_released"


def test_release_blocks_invalid_output(gate: SkillGate, audit: RecordingAuditSink) -> None:
    decision = gate.release("study_plan", {"title": "خطة"})
    assert decision.released is False
    assert decision.validation.valid is False
    assert decision.leakage.leaked is False
    assert audit.actions()[-1] == "skill_output_blocked"


def test_release_blocks_leaked_output(gate: SkillGate) -> None:
    """A contract-valid output is still blocked when it discloses internals."""
    output = {"title": "plan", "duration": "1 week", "phases": ["DEBUG: prompt dump from localhost:8080"]}
    decision = gate.release("study_plan", output)
    assert decision.validation.valid is True
    assert decision.leakage.leaked is True
    assert decision.released is False
    assert {"debug_marker", "localhost_url"} <= set(decision.leakage.pattern_ids)


def test_release_unknown_skill_still_scanned(gate: SkillGate) -> None:
    decision = gate.release("unknown_skill", "[SYSTEM] hello")
    assert decision.validation.errors == ["Unknown skill: unknown_skill"]
    assert decision.leakage.leaked is True
    assert decision.released is False


def test_available_menu_respects_gating(
    registry: SkillRegistry, flags: StaticFeatureFlags, audit: RecordingAuditSink
) -> None:
    gate = SkillGate(registry, audit=audit)
    assert "damage_analyzer" not in [s.id for s in gate.available(is_admin=True)]
    flags.enable("AI_DAMAGE_ANALYZER_ENABLED")
    menu = gate.available(is_admin=True)
    assert "damage_analyzer" in [s.id for s in menu]
    assert "damage_analyzer" not in [s.id for s in gate.available(is_admin=False)]
    entry = next(s for s in menu if s.id == "study_plan")
    assert entry.name["en"] == "Study Plan Generator"


def test_default_audit_sink_does_not_raise(registry: SkillRegistry) -> None:
    gate = SkillGate(registry)
    gate.route("quiz me")
    gate.release("quiz_generator", {"questions": ["Q1?"]})


def test_gate_shares_configured_detector(registry: SkillRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit detector the gate scans like check_for_leakage does."""
    monkeypatch.setattr(leakage, "_default_detector", None)
    monkeypatch.setenv("TIBYAN_AGENT_LARGE_TEXT_CHARS", "1234")
    gate = SkillGate(registry)
    assert gate.detector is leakage.get_default_detector()
    assert gate.detector.large_text_chars == 1234


class ContextSnapshotSink:
    """Audit sink that records the structlog context active at each event."""

    def __init__(self) -> None:
        self.contexts: list[dict[str, object]] = []

    def record(self, action: str, **fields: object) -> None:
        self.contexts.append(structlog.contextvars.get_contextvars())


def test_release_binds_skill_id_for_nested_logs(registry: SkillRegistry) -> None:
    structlog.contextvars.clear_contextvars()
    sink = ContextSnapshotSink()
    gate = SkillGate(registry, audit=sink)
    gate.route("quiz me", is_admin=True)
    gate.release("quiz_generator", {"questions": ["Q1?"]})
    assert sink.contexts == [{"is_admin": True}, {"skill_id": "quiz_generator"}]
    assert structlog.contextvars.get_contextvars() == {}
