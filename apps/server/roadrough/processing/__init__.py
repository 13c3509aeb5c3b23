"""Motion-signal processing pipeline.

- :mod:`~roadrough.processing.filters` — the cascaded recursive band filter.
- :mod:`~roadrough.processing.window` — fixed-size window buffer.
- :mod:`~roadrough.processing.session` — per-recording session and record assembly.
- :mod:`~roadrough.processing.recorder` — the Idle/Recording state machine.
"""

from .filters import BandFilter, smoothing_alpha
from .recorder import RecordSink, RoadRoughnessRecorder
from .session import RecordAssembler, RecordingSession, utc_now_iso
from .window import WindowAccumulator

__all__ = [
    "BandFilter",
    "RecordAssembler",
    "RecordSink",
    "RecordingSession",
    "RoadRoughnessRecorder",
    "WindowAccumulator",
    "smoothing_alpha",
    "utc_now_iso",
]
