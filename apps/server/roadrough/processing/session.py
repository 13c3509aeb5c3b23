"""One recording session: filter → window → metrics, with GPS alongside.

``RecordingSession`` exists only between ``start()`` and ``stop()``.  It
borrows the long-lived :class:`~roadrough.processing.filters.BandFilter`
from the recorder so filter state carries over from one session to the next.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from roadrough_core.roughness_metrics import WindowMetrics, compute_window_metrics

from ..constants import ALGORITHM_VERSION
from ..domain_models import MeasurementRecord, MotionEvent, PositionEvent
from ..gps_track import GeoTracker
from .filters import BandFilter
from .window import WindowAccumulator

LOGGER = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class RecordAssembler:
    def __init__(
        self,
        device_id: str,
        algorithm_version: str = ALGORITHM_VERSION,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.device_id = device_id
        self.algorithm_version = algorithm_version
        self._clock = clock

    def assemble(
        self,
        values: Sequence[float],
        metrics: WindowMetrics,
        geo: GeoTracker,
    ) -> MeasurementRecord:
        averages = geo.drain_window_averages()
        pos = geo.current_position
        return MeasurementRecord(
            timestamp=self._clock(),
            device_id=self.device_id,
            latitude=pos.latitude if pos is not None else None,
            longitude=pos.longitude if pos is not None else None,
            speed_mps=pos.speed_mps if pos is not None and pos.speed_mps is not None else 0.0,
            heading_deg=(
                pos.heading_deg if pos is not None and pos.heading_deg is not None else 0.0
            ),
            distance_m=geo.distance_m,
            roughness=metrics.rms,
            vdv=metrics.vdv,
            crest_factor=metrics.crest_factor,
            z_values=tuple(float(v) for v in values),
            avg_speed_mps=averages.avg_speed_mps,
            interval_s=averages.interval_s,
            algorithm_version=self.algorithm_version,
        )


class RecordingSession:
    def __init__(
        self,
        band_filter: BandFilter,
        window_size: int,
        assembler: RecordAssembler,
        geo: GeoTracker,
    ):
        self.band_filter = band_filter
        self.window = WindowAccumulator(window_size)
        self.assembler = assembler
        self.geo = geo
        self.bias: float = 0.0
        self.samples_seen: int = 0
        self.records_emitted: int = 0

    def on_motion(self, event: MotionEvent) -> MeasurementRecord | None:
        filtered = self.band_filter.apply(event.axis_value - self.bias)
        self.samples_seen += 1
        completed = self.window.push(filtered)
        if completed is None:
            return None
        metrics = compute_window_metrics(completed)
        record = self.assembler.assemble(completed, metrics, self.geo)
        self.records_emitted += 1
        return record

    def on_position(self, event: PositionEvent) -> None:
        self.geo.observe_position(event)

    def close(self) -> int:
        """Drop whatever partial window is buffered; returns the sample count dropped."""
        return self.window.discard()
