"""Agent configuration loaded from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from tibyan_agent.constants import DEFAULT_LARGE_TEXT_CHARS, ENV_PREFIX

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "skills" / "catalog.yaml"


class AgentSettings:
    """Configuration for the agent core, loaded from environment variables.

    Prefix: TIBYAN_AGENT_ for every setting. Feature flags are not settings;
    they are read fresh by the flag provider on each gating decision.
    """

    log_level: str
    log_service: str
    catalog_path: Path
    large_text_chars: int

    def __init__(self) -> None:
        self.log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "info")
        self.log_service = os.environ.get(f"{ENV_PREFIX}LOG_SERVICE", "tibyan-agent")
        catalog = os.environ.get(f"{ENV_PREFIX}SKILLS_CATALOG", "")
        self.catalog_path = Path(catalog) if catalog else DEFAULT_CATALOG_PATH
        self.large_text_chars = int(os.environ.get(f"{ENV_PREFIX}LARGE_TEXT_CHARS", str(DEFAULT_LARGE_TEXT_CHARS)))
