from __future__ import annotations

import logging
from typing import Any

from roadrough_core.geodesy import haversine_m

from .constants import EARTH_RADIUS_M, MS_PER_SECOND
from .domain_models import PositionEvent, PositionSample, WindowAverages

LOGGER = logging.getLogger(__name__)


class GeoTracker:
    """Cumulative trip distance plus the speed samples of the running window.

    Fixes arrive at GPS cadence, independent of the motion windows.  Distance
    keeps growing across window boundaries; only the speed-sample buffer is
    drained once per completed window.
    """

    def __init__(self, earth_radius_m: float = EARTH_RADIUS_M):
        if earth_radius_m <= 0:
            raise ValueError(f"earth_radius_m must be positive, got {earth_radius_m!r}")
        self.earth_radius_m = float(earth_radius_m)
        self.distance_m: float = 0.0
        self.last_position: PositionEvent | None = None
        self.current_position: PositionEvent | None = None
        self._samples: list[PositionSample] = []
        self.fix_count: int = 0

    def reset(self) -> None:
        """Start a new trip.  The current fix is kept so records still carry a position."""
        self.distance_m = 0.0
        self.last_position = None
        self._samples = []
        self.fix_count = 0

    def observe_position(self, fix: PositionEvent) -> float:
        """Record *fix*; return the distance (metres) it added to the trip."""
        step_m = 0.0
        prev = self.last_position
        if prev is not None:
            step_m = haversine_m(
                prev.latitude,
                prev.longitude,
                fix.latitude,
                fix.longitude,
                radius_m=self.earth_radius_m,
            )
            self.distance_m += step_m
        self.last_position = fix
        self.current_position = fix
        speed = fix.speed_mps if fix.speed_mps is not None else 0.0
        self._samples.append(PositionSample(captured_at_ms=fix.captured_at_ms, speed_mps=speed))
        self.fix_count += 1
        return step_m

    def pending_samples(self) -> int:
        return len(self._samples)

    def drain_window_averages(self) -> WindowAverages:
        """Average the buffered speeds and measure their wall-clock span, then clear."""
        samples = self._samples
        self._samples = []
        if not samples:
            return WindowAverages(avg_speed_mps=0.0, interval_s=0.0)
        avg_speed = sum(s.speed_mps for s in samples) / len(samples)
        interval_s = 0.0
        if len(samples) > 1:
            interval_s = (samples[-1].captured_at_ms - samples[0].captured_at_ms) / MS_PER_SECOND
            if interval_s < 0:
                LOGGER.debug("Non-monotonic fix timestamps (span %.3fs); clamping to 0", interval_s)
                interval_s = 0.0
        return WindowAverages(avg_speed_mps=avg_speed, interval_s=interval_s)

    def status_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot — **no side effects**."""
        cur = self.current_position
        return {
            "distance_m": round(self.distance_m, 2),
            "fix_count": self.fix_count,
            "pending_samples": len(self._samples),
            "latitude": cur.latitude if cur is not None else None,
            "longitude": cur.longitude if cur is not None else None,
        }
