"""Turn depth samples into pings and geodesic footprint polygons."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from shapely.geometry import Polygon

from .errors import StaleStateError
from .geodesy import DEFAULT_GEODESY, Geodesy
from .models import Ping, SonarGeometry
from .state import SensorStateTracker

__all__ = ["FootprintBuilder"]

LOGGER = logging.getLogger(__name__)


def _check_depth(depth: float) -> float:
    value = float(depth)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Depth must be a finite, non-negative number (got {depth!r})")
    return value


class FootprintBuilder:
    """Build pings and footprint quadrilaterals for a fixed beam geometry."""

    def __init__(
        self,
        geometry: Optional[SonarGeometry] = None,
        geodesy: Geodesy = DEFAULT_GEODESY,
    ) -> None:
        self.geometry = geometry or SonarGeometry()
        self.geodesy = geodesy
        self.half_alongship_tan = math.tan(
            math.radians(self.geometry.alongship_beamwidth_deg / 2.0)
        )
        self.port_tan = math.tan(math.radians(self.geometry.port_angle_deg))
        self.starboard_tan = math.tan(math.radians(self.geometry.starboard_angle_deg))

    def build_ping(self, depth: float, state: SensorStateTracker) -> Ping:
        """Resolve ``depth`` against the current heading and position.

        Freshness is checked by the caller; this only refuses a state that
        never received a heading or position.
        """

        depth = _check_depth(depth)
        if not state.has_fix:
            raise StaleStateError("Heading and position are required to build a ping")
        return Ping(
            heading_deg=state.heading_deg,
            nadir_latitude=state.latitude,
            nadir_longitude=state.longitude,
            port_distance_m=depth * self.port_tan,
            starboard_distance_m=depth * self.starboard_tan,
        )

    def alongship_half_distance(self, depth: float) -> float:
        return _check_depth(depth) * self.half_alongship_tan

    def build_footprint_polygon(self, ping: Ping, depth: float) -> Polygon:
        """Return the instantaneous footprint rectangle as a lon/lat polygon.

        Each corner is projected from the previous one: starboard beam edge,
        forward half a beam length, across the full swath to port, back a full
        beam length, then across to starboard again. The ring is
        ``[stbd_fwd, port_fwd, port_back, stbd_back, stbd_fwd]``.
        """

        half_length = self.alongship_half_distance(depth)
        swath = ping.starboard_distance_m + ping.port_distance_m
        heading = ping.heading_deg
        forward = self.geodesy.forward

        starboard = forward(
            ping.nadir_latitude, ping.nadir_longitude, heading + 90.0, ping.starboard_distance_m
        )
        starboard_fwd = forward(*starboard, heading, half_length)
        port_fwd = forward(*starboard_fwd, heading - 90.0, swath)
        port_back = forward(*port_fwd, heading + 180.0, 2.0 * half_length)
        starboard_back = forward(*port_back, heading + 90.0, swath)

        corners = [starboard_fwd, port_fwd, port_back, starboard_back]
        ring: List[tuple[float, float]] = [(lon, lat) for lat, lon in corners]
        ring.append(ring[0])
        LOGGER.debug(
            "Footprint heading=%.1f half_length=%.3f swath=%.2f ring=%s",
            heading,
            half_length,
            swath,
            ring,
        )
        return Polygon(ring)
