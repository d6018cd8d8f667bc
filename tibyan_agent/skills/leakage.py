"""LeakageDetector: final disclosure gate for text headed to a user.

Pattern based, not semantic. Each pattern is tuned so that ordinary
educational prose (study plans, numbered steps, Arabic text) does not trip it:
markers are matched in their canonical case, and credential patterns require
a value next to the key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from tibyan_agent.config import AgentSettings
from tibyan_agent.constants import DEFAULT_LARGE_TEXT_CHARS
from tibyan_agent.skills.models import LeakageResult

logger = structlog.get_logger()


@dataclass(frozen=True)
class LeakagePattern:
    """A named disclosure pattern."""

    id: str
    category: str
    description: str
    regex: re.Pattern[str]

    def search(self, text: str) -> bool:
        return self.regex.search(text) is not None


def _p(pattern_id: str, category: str, description: str, pattern: str, flags: int = 0) -> LeakagePattern:
    return LeakagePattern(pattern_id, category, description, re.compile(pattern, flags))


DEFAULT_PATTERNS: tuple[LeakagePattern, ...] = (
    # -- System / internal markers --------------------------------------------
    _p("system_tag", "system_marker", "[SYSTEM] role tag", r"\[SYSTEM\]", re.IGNORECASE),
    _p("system_prompt", "system_marker", "system prompt reference", r"\bsystem\s*prompt\b", re.IGNORECASE),
    _p("internal_marker", "system_marker", "INTERNAL: marker", r"\bINTERNAL:"),
    # -- Debug markers ----------------------------------------------------------
    _p("debug_marker", "debug_marker", "DEBUG: marker", r"\bDEBUG:"),
    # -- Credentials ------------------------------------------------------------
    _p(
        "api_key",
        "credential",
        "API_KEY with a value",
        r"API_KEY\b\s*(?:[:=]|\bis\b)?\s*[\"']?[\w\-.]{3,}",
        re.IGNORECASE,
    ),
    _p("secret_assignment", "credential", "secret assignment", r"\b[A-Z0-9_]*SECRET[A-Z0-9_]*\s*[:=]\s*\S"),
    _p(
        "authorization_header",
        "credential",
        "Authorization: Bearer header",
        r"\bAuthorization:\s*Bearer\s+\S+",
        re.IGNORECASE,
    ),
    _p(
        "bearer_token",
        "credential",
        "Bearer token",
        r"\bBearer\s+(?=[A-Za-z0-9\-._~+/]*\d)[A-Za-z0-9\-._~+/]{3,}=*",
        re.IGNORECASE,
    ),
    _p("provider_key", "credential", "provider secret key", r"\bsk-[A-Za-z0-9_\-]{16,}"),
    # -- Environment / configuration -------------------------------------------
    _p("dotenv_file", "environment", ".env file reference", r"(?<![\w.])\.env(?:\.[\w]+)?\b", re.IGNORECASE),
    _p("process_env", "environment", "process.env access", r"\bprocess\.env\b"),
    _p("python_environ", "environment", "os.environ access", r"\bos\.(?:environ\b|getenv\s*\()"),
    # -- Internal infrastructure ------------------------------------------------
    _p("localhost_url", "infrastructure", "localhost URL", r"\blocalhost:\d+", re.IGNORECASE),
    _p("loopback_ip", "infrastructure", "loopback address", r"\b127\.0\.0\.1\b"),
    _p("any_address", "infrastructure", "wildcard bind address", r"\b0\.0\.0\.0:\d+"),
    _p("llama_server", "infrastructure", "llama-server process", r"\bllama-server\b", re.IGNORECASE),
)


class LeakageDetector:
    """Scans text against an ordered set of disclosure patterns."""

    def __init__(
        self,
        patterns: tuple[LeakagePattern, ...] = DEFAULT_PATTERNS,
        large_text_chars: int = DEFAULT_LARGE_TEXT_CHARS,
    ) -> None:
        self._patterns = patterns
        self._large_text_chars = large_text_chars

    @property
    def patterns(self) -> tuple[LeakagePattern, ...]:
        return self._patterns

    @property
    def large_text_chars(self) -> int:
        return self._large_text_chars

    def check(self, text: str) -> LeakageResult:
        """Return one issue per matching pattern, in pattern order."""
        if text is None:
            return LeakageResult()
        if not isinstance(text, str):
            text = str(text)

        issues: list[str] = []
        pattern_ids: list[str] = []

        if len(text) > self._large_text_chars:
            logger.warning("scanning oversize text", chars=len(text), threshold=self._large_text_chars)

        for pattern in self._patterns:
            if pattern.search(text):
                issues.append(f"Potential leakage detected: {pattern.description}")
                pattern_ids.append(pattern.id)

        if issues:
            logger.debug("leakage detected", pattern_ids=pattern_ids)
        return LeakageResult(leaked=bool(issues), issues=issues, pattern_ids=pattern_ids)


_default_detector: LeakageDetector | None = None


def get_default_detector() -> LeakageDetector:
    """Return the process-wide detector, built from AgentSettings on first use."""
    global _default_detector
    if _default_detector is None:
        _default_detector = LeakageDetector(large_text_chars=AgentSettings().large_text_chars)
    return _default_detector


def check_for_leakage(text: str) -> LeakageResult:
    """Scan with the default pattern set."""
    return get_default_detector().check(text)
