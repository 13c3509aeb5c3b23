"""Domain model objects for the RoadRough recorder.

Typed dataclasses for the events flowing into the pipeline and the
measurement records flowing out of it.  ``to_dict()`` / ``from_dict()``
keep the upload field names used by the collection API stable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .json_utils import sanitize_value

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _as_float_or_none(value: object) -> float | None:
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def _require_float(payload: dict[str, Any], key: str) -> float:
    value = _as_float_or_none(payload.get(key))
    if value is None:
        raise ValueError(f"{key} must be a finite number, got {payload.get(key)!r}")
    return value


# ---------------------------------------------------------------------------
# 1) Inbound events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MotionEvent:
    """One vertical-axis accelerometer reading (m/s², gravity excluded)."""

    axis_value: float
    captured_at_ms: float

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> MotionEvent:
        return cls(
            axis_value=_require_float(payload, "axis_value"),
            captured_at_ms=_as_float_or_none(payload.get("captured_at_ms")) or 0.0,
        )


@dataclass(frozen=True, slots=True)
class PositionEvent:
    """One GPS fix.  ``speed_mps`` and ``heading_deg`` are optional on most devices."""

    latitude: float
    longitude: float
    captured_at_ms: float
    speed_mps: float | None = None
    heading_deg: float | None = None

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude!r}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude!r}")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> PositionEvent:
        return cls(
            latitude=_require_float(payload, "latitude"),
            longitude=_require_float(payload, "longitude"),
            captured_at_ms=_as_float_or_none(payload.get("captured_at_ms")) or 0.0,
            speed_mps=_as_float_or_none(payload.get("speed_mps")),
            heading_deg=_as_float_or_none(payload.get("heading_deg")),
        )


# ---------------------------------------------------------------------------
# 2) GPS bookkeeping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PositionSample:
    captured_at_ms: float
    speed_mps: float


@dataclass(frozen=True, slots=True)
class WindowAverages:
    avg_speed_mps: float
    interval_s: float


# ---------------------------------------------------------------------------
# 3) MeasurementRecord
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MeasurementRecord:
    """Immutable result of one completed motion window.

    ``crest_factor`` holds ``math.inf`` for a silent window; ``to_dict()``
    turns that into ``None`` so the payload stays valid JSON.
    """

    timestamp: str
    device_id: str
    latitude: float | None
    longitude: float | None
    speed_mps: float
    heading_deg: float
    distance_m: float
    roughness: float
    vdv: float
    crest_factor: float
    z_values: tuple[float, ...]
    avg_speed_mps: float
    interval_s: float
    algorithm_version: str

    @property
    def crest_factor_defined(self) -> bool:
        return math.isfinite(self.crest_factor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "device_id": self.device_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "speed": self.speed_mps,
            "direction": self.heading_deg,
            "distance_m": self.distance_m,
            "roughness": self.roughness,
            "vdv": self.vdv,
            "crest_factor": sanitize_value(self.crest_factor),
            "z_values": list(self.z_values),
            "avg_speed": self.avg_speed_mps,
            "interval_s": self.interval_s,
            "algorithm_version": self.algorithm_version,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> MeasurementRecord:
        crest = _as_float_or_none(payload.get("crest_factor"))
        raw_values = payload.get("z_values") or []
        if not isinstance(raw_values, list):
            raise ValueError("z_values must be a list")
        return cls(
            timestamp=str(payload.get("timestamp") or ""),
            device_id=str(payload.get("device_id") or ""),
            latitude=_as_float_or_none(payload.get("latitude")),
            longitude=_as_float_or_none(payload.get("longitude")),
            speed_mps=_as_float_or_none(payload.get("speed")) or 0.0,
            heading_deg=_as_float_or_none(payload.get("direction")) or 0.0,
            distance_m=_as_float_or_none(payload.get("distance_m")) or 0.0,
            roughness=_require_float(payload, "roughness"),
            vdv=_require_float(payload, "vdv"),
            crest_factor=math.inf if crest is None else crest,
            z_values=tuple(float(v) for v in raw_values),
            avg_speed_mps=_as_float_or_none(payload.get("avg_speed")) or 0.0,
            interval_s=_as_float_or_none(payload.get("interval_s")) or 0.0,
            algorithm_version=str(payload.get("algorithm_version") or ""),
        )
