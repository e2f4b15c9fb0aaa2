"""Render coverage polygons and the reduced ping track on an interactive map."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import folium  # Using folium to build an interactive Leaflet map.
from shapely.geometry import Polygon
from shapely.ops import unary_union

from .models import GeoPoint

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

_COVERAGE_COLOR = "#2c7bb6"
_PING_TRACK_COLOR = "#d73027"


def _ring_latlon(polygon: Polygon) -> List[LatLon]:
    return [(y, x) for x, y in polygon.exterior.coords]


def create_coverage_map(
    polygons: Sequence[Polygon],
    *,
    ping_track: Optional[Sequence[GeoPoint]] = None,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create a map showing each coverage polygon and the optional ping track.

    Args:
        polygons: Coverage polygons in lon/lat order.
        ping_track: Optional corridor outline from the reduced pings.
        output_html_path: Optional path to persist the map as an HTML file.

    Returns:
        A :class:`folium.Map` fitted to the coverage bounds.

    Raises:
        ValueError: If ``polygons`` is empty.
    """

    if not polygons:
        raise ValueError("Coverage is empty; nothing to draw")

    min_x, min_y, max_x, max_y = unary_union(list(polygons)).bounds
    centre: LatLon = ((min_y + max_y) / 2.0, (min_x + max_x) / 2.0)
    folium_map = folium.Map(location=centre, zoom_start=17, control_scale=True)

    for index, polygon in enumerate(polygons):
        folium.Polygon(
            _ring_latlon(polygon),
            color=_COVERAGE_COLOR,
            weight=2,
            fill=True,
            fill_opacity=0.35,
            tooltip=f"Coverage polygon {index}",
        ).add_to(folium_map)

    if ping_track and len(ping_track) >= 2:
        track = [(p.latitude, p.longitude) for p in ping_track]
        track.append(track[0])
        folium.PolyLine(
            track,
            color=_PING_TRACK_COLOR,
            weight=3,
            opacity=0.8,
            tooltip="Ping track",
        ).add_to(folium_map)

    folium_map.fit_bounds([(min_y, min_x), (max_y, max_x)])

    if output_html_path is not None:
        path = Path(output_html_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(path))
    return folium_map
