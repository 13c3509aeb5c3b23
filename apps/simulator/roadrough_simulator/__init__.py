from .profiles import PROFILE_LIBRARY, RoadProfile
from .trip import destination_point, simulate_trip

__all__ = ["PROFILE_LIBRARY", "RoadProfile", "destination_point", "simulate_trip"]
