"""Shared physical and pipeline constants — single source of truth.

Every numeric literal that appears in more than one module should live here
so that a change only needs to happen in one place.
"""

from __future__ import annotations

from typing import Final

from roadrough_core.geodesy import EARTH_RADIUS_M as EARTH_RADIUS_M
from roadrough_core.roughness_metrics import (
    CREST_FACTOR_UNDEFINED as CREST_FACTOR_UNDEFINED,
)

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------
MS_PER_SECOND: Final[float] = 1000.0
"""Position timestamps are wall-clock milliseconds."""

# ---------------------------------------------------------------------------
# Motion pipeline defaults
# ---------------------------------------------------------------------------
DEFAULT_SAMPLE_RATE_HZ: Final[int] = 50
"""Nominal devicemotion rate.  One window is one second at this rate."""

DEFAULT_WINDOW_SIZE: Final[int] = DEFAULT_SAMPLE_RATE_HZ

DEFAULT_HIGHPASS_CUTOFF_HZ: Final[float] = 0.5
DEFAULT_LOWPASS_CUTOFF_HZ: Final[float] = 50.0

ALGORITHM_VERSION: Final[str] = "1.0"
"""Tag stored with every record.  Bump when the filter or metrics change."""
