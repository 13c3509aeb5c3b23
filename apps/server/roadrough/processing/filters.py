"""Cascaded single-pole recursive filter applied to every motion sample.

Stage one uses the high-pass cutoff and stage two the low-pass cutoff; both
are the same exponential-smoothing recursion::

    alpha = dt / (rc + dt),  rc = 1 / (2 * pi * fc)
    y[n]  = y[n-1] + alpha * (x[n] - y[n-1])

Stage one passes its recursive output on as-is (it does **not** emit
``x - y``).  Recorded roughness values were calibrated against exactly this
transfer function, so do not swap in a textbook high-pass here.
"""

from __future__ import annotations

import logging
import math

from ..constants import (
    DEFAULT_HIGHPASS_CUTOFF_HZ,
    DEFAULT_LOWPASS_CUTOFF_HZ,
    DEFAULT_SAMPLE_RATE_HZ,
)

LOGGER = logging.getLogger(__name__)


def smoothing_alpha(cutoff_hz: float, sample_rate_hz: float) -> float:
    if cutoff_hz <= 0 or sample_rate_hz <= 0:
        raise ValueError(
            f"cutoff_hz and sample_rate_hz must be positive, got {cutoff_hz!r}, {sample_rate_hz!r}"
        )
    dt = 1.0 / sample_rate_hz
    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    return dt / (rc + dt)


class BandFilter:
    def __init__(
        self,
        sample_rate_hz: float = DEFAULT_SAMPLE_RATE_HZ,
        highpass_cutoff_hz: float = DEFAULT_HIGHPASS_CUTOFF_HZ,
        lowpass_cutoff_hz: float = DEFAULT_LOWPASS_CUTOFF_HZ,
    ):
        self.sample_rate_hz = float(sample_rate_hz)
        self.highpass_cutoff_hz = float(highpass_cutoff_hz)
        self.lowpass_cutoff_hz = float(lowpass_cutoff_hz)
        self.alpha_hp = smoothing_alpha(self.highpass_cutoff_hz, self.sample_rate_hz)
        self.alpha_lp = smoothing_alpha(self.lowpass_cutoff_hz, self.sample_rate_hz)
        self.hp_prev = 0.0
        self.lp_prev = 0.0
        nyquist = self.sample_rate_hz / 2.0
        if self.lowpass_cutoff_hz >= nyquist:
            LOGGER.warning(
                "Low-pass cutoff %.3g Hz is at or above Nyquist (%.3g Hz); "
                "stage two will barely attenuate",
                self.lowpass_cutoff_hz,
                nyquist,
            )

    def apply(self, value: float) -> float:
        hp = self.hp_prev + self.alpha_hp * (value - self.hp_prev)
        self.hp_prev = hp
        lp = self.lp_prev + self.alpha_lp * (hp - self.lp_prev)
        self.lp_prev = lp
        return lp

    def reset(self) -> None:
        self.hp_prev = 0.0
        self.lp_prev = 0.0

    def state(self) -> tuple[float, float]:
        return self.hp_prev, self.lp_prev
