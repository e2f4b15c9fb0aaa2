"""Latest vehicle heading and position with receipt timestamps."""

from __future__ import annotations

import math
from typing import Optional

from .config import STATE_FUTURE_TOLERANCE_S, STATE_MAX_AGE_S

__all__ = ["SensorStateTracker"]


class SensorStateTracker:
    """Hold the most recent heading and position reported by the vehicle."""

    def __init__(self) -> None:
        self.heading_deg: Optional[float] = None
        self.latitude: Optional[float] = None
        self.longitude: Optional[float] = None
        self.heading_time: Optional[float] = None
        self.position_time: Optional[float] = None

    def update_heading(self, value: float, timestamp: float) -> None:
        # Out-of-range headings are stored as given.
        self.heading_deg = float(value)
        self.heading_time = float(timestamp)

    def update_position(self, latitude: float, longitude: float, timestamp: float) -> None:
        self.latitude = float(latitude)
        self.longitude = float(longitude)
        self.position_time = float(timestamp)

    def heading_age(self, now: float) -> float:
        if self.heading_time is None:
            return math.inf
        return now - self.heading_time

    def position_age(self, now: float) -> float:
        if self.position_time is None:
            return math.inf
        return now - self.position_time

    def is_fresh(
        self,
        now: float,
        max_age: float = STATE_MAX_AGE_S,
        future_tolerance: float = STATE_FUTURE_TOLERANCE_S,
    ) -> bool:
        """Return True when both heading and position are younger than ``max_age``.

        An age below ``-future_tolerance`` means the stamp is ahead of ``now``,
        i.e. a different time base, and counts as stale.
        """

        return all(
            -future_tolerance <= age < max_age
            for age in (self.heading_age(now), self.position_age(now))
        )

    @property
    def has_fix(self) -> bool:
        return (
            self.heading_deg is not None
            and self.latitude is not None
            and self.longitude is not None
        )
