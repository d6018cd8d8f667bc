"""Feature flag providers used to gate skills."""

from __future__ import annotations

import os
from typing import Protocol

from tibyan_agent.constants import TRUTHY_FLAG_VALUES


class FeatureFlagProvider(Protocol):
    """Answers whether a named flag is on. Must not cache between calls."""

    def is_enabled(self, name: str) -> bool: ...


def is_truthy(raw: str | None) -> bool:
    """Interpret an environment-style flag value."""
    if raw is None:
        return False
    return raw.strip().lower() in TRUTHY_FLAG_VALUES


class EnvFeatureFlags:
    """Reads flags from the process environment on every call."""

    def is_enabled(self, name: str) -> bool:
        return is_truthy(os.environ.get(name))


class StaticFeatureFlags:
    """In-memory flag set for tests and embedding callers."""

    def __init__(self, enabled: set[str] | None = None) -> None:
        self._enabled: set[str] = set(enabled or ())

    def is_enabled(self, name: str) -> bool:
        return name in self._enabled

    def enable(self, name: str) -> None:
        self._enabled.add(name)

    def disable(self, name: str) -> None:
        self._enabled.discard(name)
