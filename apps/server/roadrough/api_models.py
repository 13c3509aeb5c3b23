"""Pydantic models for the collection API the recorder talks to.

Field names match the ``/api/upload`` and ``/api/register`` request bodies.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from .domain_models import MeasurementRecord


class DeviceRegistration(BaseModel):
    device_id: str = Field(min_length=1, max_length=100)


class MeasurementPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    timestamp: str = Field(min_length=1)
    device_id: str = Field(min_length=1, max_length=100)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    speed: float = Field(ge=0.0)
    direction: float
    distance_m: float = Field(ge=0.0)
    roughness: float = Field(ge=0.0)
    vdv: float = Field(ge=0.0)
    # None when the window was silent (RMS == 0).
    crest_factor: float | None = Field(default=None, ge=0.0)
    z_values: list[float]
    avg_speed: float = Field(ge=0.0)
    interval_s: float = Field(ge=0.0)
    algorithm_version: str = Field(min_length=1)

    @classmethod
    def from_record(cls, record: MeasurementRecord) -> MeasurementPayload:
        crest = record.crest_factor if math.isfinite(record.crest_factor) else None
        return cls(
            timestamp=record.timestamp,
            device_id=record.device_id,
            latitude=record.latitude,
            longitude=record.longitude,
            speed=record.speed_mps,
            direction=record.heading_deg,
            distance_m=record.distance_m,
            roughness=record.roughness,
            vdv=record.vdv,
            crest_factor=crest,
            z_values=list(record.z_values),
            avg_speed=record.avg_speed_mps,
            interval_s=record.interval_s,
            algorithm_version=record.algorithm_version,
        )
