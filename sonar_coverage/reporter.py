"""Serialise coverage polygons and reduced pings into publishable paths."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from shapely.geometry import Polygon, mapping

from .geodesy import DEFAULT_GEODESY, Geodesy
from .models import PATH_BREAK, GeoPoint, Ping

__all__ = ["to_path", "ping_track_path", "to_geojson", "split_path"]


def to_path(coverage: Iterable[Polygon]) -> List[GeoPoint]:
    """Return every exterior ring as a run of points followed by ``PATH_BREAK``."""

    path: List[GeoPoint] = []
    for polygon in coverage:
        path.extend(GeoPoint(latitude=y, longitude=x) for x, y in polygon.exterior.coords)
        path.append(PATH_BREAK)
    return path


def split_path(path: Sequence[GeoPoint]) -> List[List[GeoPoint]]:
    """Inverse of :func:`to_path`: split a published path back into rings."""

    rings: List[List[GeoPoint]] = []
    current: List[GeoPoint] = []
    for point in path:
        if point == PATH_BREAK:
            rings.append(current)
            current = []
        else:
            current.append(point)
    if current:
        rings.append(current)
    return rings


def ping_track_path(
    pings: Sequence[Ping], geodesy: Geodesy = DEFAULT_GEODESY
) -> List[GeoPoint]:
    """Outline the swath corridor traced by the reduced pings.

    Starboard edge points are visited in order, then port edge points in
    reverse, so the path walks round the corridor once.
    """

    starboard: List[GeoPoint] = []
    port: List[GeoPoint] = []
    for ping in pings:
        starboard.append(
            GeoPoint(
                *geodesy.forward(
                    ping.nadir_latitude,
                    ping.nadir_longitude,
                    ping.heading_deg + 90.0,
                    ping.starboard_distance_m,
                )
            )
        )
        port.append(
            GeoPoint(
                *geodesy.forward(
                    ping.nadir_latitude,
                    ping.nadir_longitude,
                    ping.heading_deg - 90.0,
                    ping.port_distance_m,
                )
            )
        )
    return starboard + port[::-1]


def to_geojson(coverage: Iterable[Polygon]) -> Dict[str, Any]:
    """Return coverage as a GeoJSON FeatureCollection (lon/lat order)."""

    features = []
    for index, polygon in enumerate(coverage):
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(polygon),
                "properties": {"index": index, "area_deg2": polygon.area},
            }
        )
    return {"type": "FeatureCollection", "features": features}
