"""Central error types used across the application."""

from __future__ import annotations


class SonarCoverageError(RuntimeError):
    """Base error for coverage processing failures."""


class StaleStateError(SonarCoverageError):
    """Raised when a ping is requested before heading and position are known."""


class GeodesyError(SonarCoverageError):
    """Raised when a geodesic projection fails or returns non-finite values."""


class CoverageMergeError(SonarCoverageError):
    """Raised when the polygon union or simplification step fails."""


class ReplayFormatError(SonarCoverageError):
    """Raised when a recorded message log is missing columns or has bad rows."""


__all__ = [
    "SonarCoverageError",
    "StaleStateError",
    "GeodesyError",
    "CoverageMergeError",
    "ReplayFormatError",
]
