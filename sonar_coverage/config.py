"""Central configuration for the sonar coverage node.

All values are constants imported by the rest of the package. Each can be
overridden through an environment variable (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Sonar geometry
# ---------------------------------------------------------------------------
# Along-track distance (metres) that closes an interval of pings.
INTERVAL_DISTANCE_M = _env_float("SONAR_INTERVAL_DISTANCE_M", 5.0)

# Full alongship beamwidth (degrees). Half of it sets the footprint length.
ALONGSHIP_BEAMWIDTH_DEG = _env_float("SONAR_ALONGSHIP_BEAMWIDTH_DEG", 5.0)

# Outer beam angles from vertical (degrees) on each side of the vehicle.
PORT_ANGLE_DEG = _env_float("SONAR_PORT_ANGLE_DEG", 75.0)
STARBOARD_ANGLE_DEG = _env_float("SONAR_STARBOARD_ANGLE_DEG", 75.0)


# ---------------------------------------------------------------------------
# Coverage processing
# ---------------------------------------------------------------------------
# Heading and position older than this (seconds) cause depth samples to be
# dropped.
STATE_MAX_AGE_S = _env_float("SONAR_STATE_MAX_AGE_S", 0.5)

# Stamps ahead of the node clock by more than this (seconds) are treated as
# stale; covers clock skew between producers and the node.
STATE_FUTURE_TOLERANCE_S = _env_float("SONAR_STATE_FUTURE_TOLERANCE_S", 0.05)

# Douglas-Peucker tolerance applied to the coverage union, in degrees.
SIMPLIFICATION_TOLERANCE_DEG = _env_float(
    "SONAR_SIMPLIFICATION_TOLERANCE_DEG", 0.0001
)

# Reference ellipsoid passed to pyproj.Geod.
ELLIPSOID = os.getenv("SONAR_ELLIPSOID", "WGS84")

# Publish the reduced ping track (swath corridor outline) after each interval.
PING_TRACK_ENABLED = _env_bool("SONAR_PING_TRACK_ENABLED", False)


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------
DEPTH_TOPIC = os.getenv("SONAR_TOPIC_DEPTH", "/depth")
HEADING_TOPIC = os.getenv("SONAR_TOPIC_HEADING", "/heading")
POSITION_TOPIC = os.getenv("SONAR_TOPIC_POSITION", "/position")
RESET_TOPIC = os.getenv("SONAR_TOPIC_RESET", "/sim_reset")
COVERAGE_TOPIC = os.getenv("SONAR_TOPIC_COVERAGE", "/coverage")
PING_TRACK_TOPIC = os.getenv("SONAR_TOPIC_PING_TRACK", "/mbes_ping")
