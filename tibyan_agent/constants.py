"""Centralized constants for the Tibyan agent core.

Tunables shared by the matcher, validator, detector and flag providers are
collected here so the numbers have a single home.
"""

from __future__ import annotations

# -- Intent matching ---------------------------------------------------------
CONFIDENCE_SCALE = 2.0  # hits / keywords is scaled by this, then capped at 1.0.
MAX_CONFIDENCE = 1.0

# -- Feature flags -----------------------------------------------------------
TRUTHY_FLAG_VALUES = frozenset({"1", "true", "yes", "on"})
DAMAGE_ANALYZER_FLAG = "AI_DAMAGE_ANALYZER_ENABLED"

# -- Leakage scanning --------------------------------------------------------
DEFAULT_LARGE_TEXT_CHARS = 200_000  # Longer text is scanned in full and logged as oversize.

# -- Environment variable names ----------------------------------------------
ENV_PREFIX = "TIBYAN_AGENT_"
