"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable fixtures for footprint,
coverage and interval tests to avoid duplication across files.
"""
from __future__ import annotations

import os
import sys
from typing import List, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sonar_coverage.geodesy import Geodesy
from sonar_coverage.models import Ping, SonarGeometry
from sonar_coverage.state import SensorStateTracker


GEODESY = Geodesy("WGS84")


# --- Factory helpers -------------------------------------------------
def track_points(count: int, spacing_m: float, *, bearing: float = 0.0, start=(0.0, 0.0)) -> List[Tuple[float, float]]:
    """Return ``count`` (lat, lon) points spaced ``spacing_m`` apart along ``bearing``."""

    points = [start]
    for _ in range(count - 1):
        points.append(GEODESY.forward(*points[-1], bearing, spacing_m))
    return points


def make_ping(lat: float, lon: float, *, heading: float = 0.0, port: float = 37.0, starboard: float = 37.0) -> Ping:
    return Ping(
        heading_deg=heading,
        nadir_latitude=lat,
        nadir_longitude=lon,
        port_distance_m=port,
        starboard_distance_m=starboard,
    )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def geodesy():
    return GEODESY


@pytest.fixture
def default_geometry():
    return SonarGeometry(
        interval_distance_m=5.0,
        alongship_beamwidth_deg=5.0,
        port_angle_deg=75.0,
        starboard_angle_deg=75.0,
        max_state_age_s=0.5,
        simplification_tolerance_deg=0.0001,
    )


@pytest.fixture
def wide_geometry():
    """Wide alongship beam with a fine tolerance so 3 m spaced pings overlap."""

    return SonarGeometry(
        interval_distance_m=5.0,
        alongship_beamwidth_deg=30.0,
        port_angle_deg=75.0,
        starboard_angle_deg=75.0,
        max_state_age_s=0.5,
        simplification_tolerance_deg=1e-8,
    )


@pytest.fixture
def fresh_state():
    state = SensorStateTracker()
    state.update_heading(0.0, 100.0)
    state.update_position(0.0, 0.0, 100.0)
    return state
