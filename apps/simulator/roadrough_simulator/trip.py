"""Synthetic trip generator.

Produces the same event dicts the replay CLI reads from disk: a ``start``
marker, interleaved ``motion`` and ``position`` events in timestamp order,
and a ``stop`` marker.  Output is fully determined by the seed.
"""

from __future__ import annotations

from math import asin, atan2, cos, degrees, radians, sin
from typing import Any

import numpy as np
from roadrough_core.geodesy import EARTH_RADIUS_M

from .profiles import RoadProfile


def destination_point(
    lat: float,
    lon: float,
    bearing_deg: float,
    distance_m: float,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> tuple[float, float]:
    """Point reached after travelling *distance_m* along a great circle."""
    delta = distance_m / radius_m
    theta = radians(bearing_deg)
    phi1 = radians(lat)
    lam1 = radians(lon)
    phi2 = asin(sin(phi1) * cos(delta) + cos(phi1) * sin(delta) * cos(theta))
    lam2 = lam1 + atan2(
        sin(theta) * sin(delta) * cos(phi1),
        cos(delta) - sin(phi1) * sin(phi2),
    )
    return degrees(phi2), (degrees(lam2) + 540.0) % 360.0 - 180.0


def simulate_trip(
    profile: RoadProfile,
    seconds: float,
    *,
    sample_rate_hz: int = 50,
    gps_hz: float = 1.0,
    start: tuple[float, float] = (52.3676, 4.9041),
    heading_deg: float = 90.0,
    start_ms: float = 0.0,
    seed: int = 0,
) -> list[dict[str, Any]]:
    if seconds <= 0 or sample_rate_hz <= 0 or gps_hz <= 0:
        raise ValueError("seconds, sample_rate_hz and gps_hz must be positive")
    rng = np.random.default_rng(seed)
    n_samples = int(round(seconds * sample_rate_hz))
    noise = rng.normal(0.0, profile.noise_std, n_samples)
    hits = rng.random(n_samples) < profile.bump_probability
    signs = rng.choice((-1.0, 1.0), n_samples)

    timed: list[tuple[float, int, dict[str, Any]]] = []
    bump = 0.0
    for i in range(n_samples):
        bump *= profile.bump_decay
        if hits[i]:
            bump += signs[i] * profile.bump_amplitude
        t_ms = start_ms + i * 1000.0 / sample_rate_hz
        timed.append(
            (
                t_ms,
                1,
                {
                    "type": "motion",
                    "axis_value": float(noise[i] + bump),
                    "captured_at_ms": t_ms,
                },
            )
        )

    n_fixes = int(seconds * gps_hz) + 1
    for k in range(n_fixes):
        t_s = k / gps_hz
        lat, lon = destination_point(start[0], start[1], heading_deg, profile.speed_mps * t_s)
        t_ms = start_ms + t_s * 1000.0
        # Fixes sort ahead of motion samples with the same timestamp.
        timed.append(
            (
                t_ms,
                0,
                {
                    "type": "position",
                    "latitude": lat,
                    "longitude": lon,
                    "speed_mps": profile.speed_mps,
                    "heading_deg": heading_deg,
                    "captured_at_ms": t_ms,
                },
            )
        )

    timed.sort(key=lambda item: (item[0], item[1]))
    return [{"type": "start"}, *(event for _, _, event in timed), {"type": "stop"}]
