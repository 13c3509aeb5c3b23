"""Per-window roughness statistics.

All three metrics operate on one completed window of filtered vertical
acceleration:

* ``rms`` — root mean square, reported as *roughness*.
* ``vdv`` — vibration dose value using the fourth-power mean,
  ``mean(|v|^4) ** 0.25``.  More sensitive to isolated peaks than RMS.
* ``crest_factor`` — ``max(|v|) / rms``.  Undefined for a silent window;
  :data:`CREST_FACTOR_UNDEFINED` is returned instead of NaN.
"""

from __future__ import annotations

from collections.abc import Iterable
from math import inf, sqrt
from typing import NamedTuple

CREST_FACTOR_UNDEFINED: float = inf
"""Crest factor reported when the window RMS is exactly zero."""


class WindowMetrics(NamedTuple):
    rms: float
    vdv: float
    crest_factor: float


def _as_floats(values: Iterable[float]) -> list[float]:
    out = [float(v) for v in values]
    if not out:
        raise ValueError("roughness metrics need at least one sample")
    return out


def rms(values: Iterable[float]) -> float:
    samples = _as_floats(values)
    return sqrt(sum(v * v for v in samples) / len(samples))


def vdv(values: Iterable[float]) -> float:
    samples = _as_floats(values)
    return (sum(abs(v) ** 4 for v in samples) / len(samples)) ** 0.25


def crest_factor(values: Iterable[float], *, rms_value: float | None = None) -> float:
    samples = _as_floats(values)
    denom = rms(samples) if rms_value is None else float(rms_value)
    if denom == 0.0:
        return CREST_FACTOR_UNDEFINED
    return max(abs(v) for v in samples) / denom


def compute_window_metrics(values: Iterable[float]) -> WindowMetrics:
    """Compute RMS, VDV and crest factor for one window in a single pass."""
    samples = _as_floats(values)
    n = len(samples)
    sq_sum = 0.0
    quad_sum = 0.0
    peak = 0.0
    for v in samples:
        sq = v * v
        sq_sum += sq
        quad_sum += sq * sq
        mag = abs(v)
        if mag > peak:
            peak = mag
    rms_value = sqrt(sq_sum / n)
    vdv_value = (quad_sum / n) ** 0.25
    cf = peak / rms_value if rms_value != 0.0 else CREST_FACTOR_UNDEFINED
    return WindowMetrics(rms=rms_value, vdv=vdv_value, crest_factor=cf)
