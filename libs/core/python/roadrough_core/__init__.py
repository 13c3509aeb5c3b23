from .geodesy import EARTH_RADIUS_M, haversine_m
from .roughness_metrics import (
    CREST_FACTOR_UNDEFINED,
    WindowMetrics,
    compute_window_metrics,
    crest_factor,
    rms,
    vdv,
)

__all__ = [
    "CREST_FACTOR_UNDEFINED",
    "EARTH_RADIUS_M",
    "WindowMetrics",
    "compute_window_metrics",
    "crest_factor",
    "haversine_m",
    "rms",
    "vdv",
]
