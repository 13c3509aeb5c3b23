from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RoadProfile:
    name: str
    # Vertical acceleration noise of the surface texture (m/s²).
    noise_std: float
    # Chance per motion sample of hitting a pothole or joint.
    bump_probability: float
    bump_amplitude: float
    # Fraction of the bump that survives into the next sample.
    bump_decay: float
    speed_mps: float


PROFILE_LIBRARY: dict[str, RoadProfile] = {
    "smooth_asphalt": RoadProfile(
        name="smooth_asphalt",
        noise_std=0.15,
        bump_probability=0.0005,
        bump_amplitude=1.0,
        bump_decay=0.6,
        speed_mps=22.0,
    ),
    "worn_asphalt": RoadProfile(
        name="worn_asphalt",
        noise_std=0.45,
        bump_probability=0.004,
        bump_amplitude=3.0,
        bump_decay=0.7,
        speed_mps=14.0,
    ),
    "cobblestone": RoadProfile(
        name="cobblestone",
        noise_std=1.6,
        bump_probability=0.03,
        bump_amplitude=4.5,
        bump_decay=0.5,
        speed_mps=6.0,
    ),
    "gravel": RoadProfile(
        name="gravel",
        noise_std=1.1,
        bump_probability=0.015,
        bump_amplitude=6.0,
        bump_decay=0.75,
        speed_mps=9.0,
    ),
}
