from __future__ import annotations

import math

import pytest
from builders import AMSTERDAM, AMSTERDAM_UTRECHT_M, UTRECHT
from roadrough_core.geodesy import EARTH_RADIUS_M, haversine_m


def test_distance_to_self_is_zero() -> None:
    assert haversine_m(*AMSTERDAM, *AMSTERDAM) == 0.0


def test_amsterdam_to_utrecht_within_one_percent() -> None:
    dist = haversine_m(*AMSTERDAM, *UTRECHT)
    assert dist == pytest.approx(AMSTERDAM_UTRECHT_M, rel=0.01)


def test_distance_is_symmetric() -> None:
    assert haversine_m(*AMSTERDAM, *UTRECHT) == pytest.approx(haversine_m(*UTRECHT, *AMSTERDAM))


def test_one_degree_of_latitude() -> None:
    assert haversine_m(10.0, 20.0, 11.0, 20.0) == pytest.approx(
        EARTH_RADIUS_M * math.pi / 180.0, rel=1e-9
    )


def test_antipodal_points_half_circumference() -> None:
    assert haversine_m(0.0, 0.0, 0.0, 180.0) == pytest.approx(EARTH_RADIUS_M * math.pi)


def test_custom_radius_scales_linearly() -> None:
    base = haversine_m(*AMSTERDAM, *UTRECHT)
    assert haversine_m(*AMSTERDAM, *UTRECHT, radius_m=EARTH_RADIUS_M / 2) == pytest.approx(
        base / 2
    )
