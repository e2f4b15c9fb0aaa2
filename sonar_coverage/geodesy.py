"""Ellipsoidal forward and inverse projections backed by pyproj."""

from __future__ import annotations

import math
from typing import Tuple

from pyproj import Geod
from pyproj.exceptions import GeodError

from .config import ELLIPSOID
from .errors import GeodesyError

__all__ = ["Geodesy", "DEFAULT_GEODESY"]


class Geodesy:
    """Forward/inverse geodesic calculations on a single reference ellipsoid.

    Latitude is always passed before longitude, matching the order used for
    pings and published points. pyproj expects the opposite order, so the
    swap happens only here.
    """

    def __init__(self, ellipsoid: str = ELLIPSOID) -> None:
        self.ellipsoid = ellipsoid
        self._geod = Geod(ellps=ellipsoid)

    def forward(
        self,
        latitude: float,
        longitude: float,
        bearing_deg: float,
        distance_m: float,
    ) -> Tuple[float, float]:
        """Return the (latitude, longitude) reached from a point along a bearing."""

        try:
            lon, lat, _back = self._geod.fwd(longitude, latitude, bearing_deg, distance_m)
        except GeodError as exc:
            raise GeodesyError(
                f"Forward projection failed from ({latitude}, {longitude}) "
                f"bearing={bearing_deg} distance={distance_m}"
            ) from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise GeodesyError(
                f"Forward projection from ({latitude}, {longitude}) is not finite"
            )
        return float(lat), float(lon)

    def inverse(
        self,
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float,
    ) -> Tuple[float, float]:
        """Return (bearing_deg, distance_m) from the first point to the second."""

        try:
            azimuth, _back, distance = self._geod.inv(lon1, lat1, lon2, lat2)
        except GeodError as exc:
            raise GeodesyError(
                f"Inverse projection failed between ({lat1}, {lon1}) and ({lat2}, {lon2})"
            ) from exc
        if not math.isfinite(distance):
            raise GeodesyError(
                f"Inverse distance between ({lat1}, {lon1}) and ({lat2}, {lon2}) is not finite"
            )
        return float(azimuth) % 360.0, float(distance)


DEFAULT_GEODESY = Geodesy()
