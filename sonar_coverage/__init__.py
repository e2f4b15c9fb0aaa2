"""Real-time sonar swath coverage accumulation."""

from .coverage import CoverageAccumulator
from .errors import CoverageMergeError, GeodesyError, SonarCoverageError
from .footprint import FootprintBuilder
from .intervals import IntervalAggregator
from .models import PATH_BREAK, GeoPoint, Ping, SonarGeometry
from .node import SonarCoverageNode
from .state import SensorStateTracker

__all__ = [
    "CoverageAccumulator",
    "CoverageMergeError",
    "FootprintBuilder",
    "GeodesyError",
    "GeoPoint",
    "IntervalAggregator",
    "PATH_BREAK",
    "Ping",
    "SensorStateTracker",
    "SonarCoverageError",
    "SonarCoverageNode",
    "SonarGeometry",
]
