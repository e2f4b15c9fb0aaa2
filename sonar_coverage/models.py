"""Dataclasses describing pings, sonar geometry and published points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .config import (
    ALONGSHIP_BEAMWIDTH_DEG,
    INTERVAL_DISTANCE_M,
    PORT_ANGLE_DEG,
    SIMPLIFICATION_TOLERANCE_DEG,
    STARBOARD_ANGLE_DEG,
    STATE_MAX_AGE_S,
)


class GeoPoint(NamedTuple):
    """Geographic point as published on output paths."""

    latitude: float
    longitude: float


# Outside the valid geodetic range; marks a break between rings in a path.
PATH_BREAK = GeoPoint(latitude=-91.0, longitude=-181.0)


@dataclass(frozen=True, slots=True)
class Ping:
    """One depth observation resolved against the vehicle state."""

    heading_deg: float
    nadir_latitude: float
    nadir_longitude: float
    port_distance_m: float
    starboard_distance_m: float

    @property
    def nadir(self) -> GeoPoint:
        return GeoPoint(self.nadir_latitude, self.nadir_longitude)


@dataclass(frozen=True, slots=True)
class SonarGeometry:
    """Beam geometry and processing thresholds for a sonar installation."""

    interval_distance_m: float = INTERVAL_DISTANCE_M
    alongship_beamwidth_deg: float = ALONGSHIP_BEAMWIDTH_DEG
    port_angle_deg: float = PORT_ANGLE_DEG
    starboard_angle_deg: float = STARBOARD_ANGLE_DEG
    max_state_age_s: float = STATE_MAX_AGE_S
    simplification_tolerance_deg: float = SIMPLIFICATION_TOLERANCE_DEG
