"""Recorder — the Idle/Recording state machine around :class:`RecordingSession`.

``RoadRoughnessRecorder`` is long-lived.  It owns the band filter (whose
state survives across sessions), the GPS tracker (whose current fix does too),
the record sinks, and at most one active session.  Every public method is
guarded by one ``RLock`` so callbacks from different threads still see a
single sequential event stream; sinks are invoked after the lock is released.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import wraps
from threading import RLock
from typing import Any, Protocol

from ..constants import (
    ALGORITHM_VERSION,
    DEFAULT_HIGHPASS_CUTOFF_HZ,
    DEFAULT_LOWPASS_CUTOFF_HZ,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_WINDOW_SIZE,
    EARTH_RADIUS_M,
)
from ..domain_models import MeasurementRecord, MotionEvent, PositionEvent
from ..gps_track import GeoTracker
from .filters import BandFilter
from .session import RecordAssembler, RecordingSession, utc_now_iso

LOGGER = logging.getLogger(__name__)


class RecordSink(Protocol):
    def submit(self, record: MeasurementRecord) -> bool: ...


def _synchronized(method):
    @wraps(method)
    def _wrapped(self: RoadRoughnessRecorder, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return _wrapped


class RoadRoughnessRecorder:
    def __init__(
        self,
        device_id: str,
        sinks: Iterable[RecordSink] = (),
        *,
        sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
        window_size: int = DEFAULT_WINDOW_SIZE,
        highpass_cutoff_hz: float = DEFAULT_HIGHPASS_CUTOFF_HZ,
        lowpass_cutoff_hz: float = DEFAULT_LOWPASS_CUTOFF_HZ,
        algorithm_version: str = ALGORITHM_VERSION,
        earth_radius_m: float = EARTH_RADIUS_M,
        reset_filter_on_start: bool = False,
        clock: Callable[[], str] = utc_now_iso,
    ):
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1:
            raise ValueError(f"window_size must be a positive integer, got {window_size!r}")
        self.device_id = device_id
        self.window_size = window_size
        self.earth_radius_m = float(earth_radius_m)
        self.reset_filter_on_start = bool(reset_filter_on_start)
        self.band_filter = BandFilter(
            sample_rate_hz=sample_rate_hz,
            highpass_cutoff_hz=highpass_cutoff_hz,
            lowpass_cutoff_hz=lowpass_cutoff_hz,
        )
        self._assembler = RecordAssembler(
            device_id=device_id, algorithm_version=algorithm_version, clock=clock
        )
        self.geo = GeoTracker(earth_radius_m=self.earth_radius_m)
        self._sinks: list[RecordSink] = list(sinks)
        self._session: RecordingSession | None = None
        self._lock = RLock()
        self.records_emitted: int = 0
        self.sink_failures: int = 0
        self.samples_discarded: int = 0
        self.sessions_started: int = 0

    @classmethod
    def from_config(
        cls, config: Any, device_id: str, sinks: Iterable[RecordSink] = ()
    ) -> RoadRoughnessRecorder:
        """Build a recorder from an :class:`~roadrough.config.AppConfig`."""
        proc = config.processing
        return cls(
            device_id=device_id,
            sinks=sinks,
            sample_rate_hz=proc.sample_rate_hz,
            window_size=proc.window_size,
            highpass_cutoff_hz=proc.highpass_cutoff_hz,
            lowpass_cutoff_hz=proc.lowpass_cutoff_hz,
            algorithm_version=config.record.algorithm_version,
            earth_radius_m=config.geo.earth_radius_m,
            reset_filter_on_start=proc.reset_filter_on_start,
        )

    # -- sinks ----------------------------------------------------------------

    @_synchronized
    def add_sink(self, sink: RecordSink) -> None:
        self._sinks.append(sink)

    def _emit(self, record: MeasurementRecord) -> None:
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            try:
                ok = sink.submit(record)
            except Exception:
                LOGGER.warning("Record sink %r raised; continuing", sink, exc_info=True)
                ok = False
            if not ok:
                with self._lock:
                    self.sink_failures += 1

    # -- control --------------------------------------------------------------

    @property
    def is_recording(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> RecordingSession | None:
        return self._session

    @_synchronized
    def start(self) -> bool:
        """Idle → Recording.  Returns ``False`` if a session was already running."""
        if self._session is not None:
            return False
        if self.reset_filter_on_start:
            self.band_filter.reset()
        self.geo.reset()
        self._session = RecordingSession(
            band_filter=self.band_filter,
            window_size=self.window_size,
            assembler=self._assembler,
            geo=self.geo,
        )
        self.sessions_started += 1
        LOGGER.info("Recording started for device %s", self.device_id)
        return True

    @_synchronized
    def stop(self) -> bool:
        """Recording → Idle.  Any partial window is discarded without a record."""
        session = self._session
        if session is None:
            return False
        self._session = None
        dropped = session.close()
        self.samples_discarded += dropped
        LOGGER.info(
            "Recording stopped for device %s: %d records, %d partial-window samples dropped",
            self.device_id,
            session.records_emitted,
            dropped,
        )
        return True

    @_synchronized
    def set_bias(self, value: float) -> None:
        if self._session is None:
            LOGGER.debug("Ignoring bias update while idle")
            return
        self._session.bias = float(value)

    # -- events ---------------------------------------------------------------

    def on_motion(self, event: MotionEvent) -> MeasurementRecord | None:
        with self._lock:
            session = self._session
            if session is None:
                return None
            record = session.on_motion(event)
            if record is not None:
                self.records_emitted += 1
        if record is not None:
            self._emit(record)
        return record

    @_synchronized
    def on_position(self, event: PositionEvent) -> None:
        if self._session is None:
            return
        self._session.on_position(event)

    # -- observability --------------------------------------------------------

    @_synchronized
    def stats(self) -> dict[str, Any]:
        session = self._session
        hp_prev, lp_prev = self.band_filter.state()
        return {
            "recording": session is not None,
            "sessions_started": self.sessions_started,
            "records_emitted": self.records_emitted,
            "sink_failures": self.sink_failures,
            "samples_discarded": self.samples_discarded,
            "window_fill": len(session.window) if session is not None else 0,
            "geo": session.geo.status_dict() if session is not None else None,
            "filter": {"hp_prev": hp_prev, "lp_prev": lp_prev},
        }
