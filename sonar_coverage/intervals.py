"""Reduce the ping stream into interval records paced by along-track distance."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import List, Optional, Tuple

from .config import INTERVAL_DISTANCE_M
from .geodesy import DEFAULT_GEODESY, Geodesy
from .models import Ping

__all__ = ["IntervalAggregator"]

LOGGER = logging.getLogger(__name__)


class IntervalAggregator:
    """Buffer pings until the vehicle has travelled ``interval_distance_m``.

    Each flush appends a ping carrying the minimum port and starboard
    distances observed over the interval. The first flush also appends a
    baseline copy of the interval's first ping so the reduced track starts
    where the survey started.
    """

    def __init__(
        self,
        interval_distance_m: float = INTERVAL_DISTANCE_M,
        geodesy: Geodesy = DEFAULT_GEODESY,
    ) -> None:
        if interval_distance_m < 0:
            raise ValueError("interval_distance_m must be >= 0")
        self.interval_distance_m = interval_distance_m
        self.geodesy = geodesy
        self._buffer: List[Ping] = []
        self._accumulated_distance_m = 0.0
        self._pings: List[Ping] = []

    @property
    def buffer(self) -> Tuple[Ping, ...]:
        return tuple(self._buffer)

    @property
    def accumulated_distance_m(self) -> float:
        return self._accumulated_distance_m

    @property
    def pings(self) -> Tuple[Ping, ...]:
        return tuple(self._pings)

    def add_ping(self, ping: Ping) -> bool:
        """Buffer ``ping`` and flush when the interval is complete.

        Returns True when the call flushed an interval.
        """

        if self._buffer:
            last = self._buffer[-1]
            _azimuth, distance = self.geodesy.inverse(
                last.nadir_latitude,
                last.nadir_longitude,
                ping.nadir_latitude,
                ping.nadir_longitude,
            )
            self._accumulated_distance_m += distance
        self._buffer.append(ping)
        if self._accumulated_distance_m > self.interval_distance_m:
            self.flush()
            return True
        return False

    def flush(self) -> Optional[Ping]:
        """Emit the reduced ping for the buffered interval and clear the buffer."""

        if not self._buffer:
            return None
        min_port = min(p.port_distance_m for p in self._buffer)
        min_starboard = min(p.starboard_distance_m for p in self._buffer)
        if not self._pings:
            self._pings.append(
                replace(
                    self._buffer[0],
                    port_distance_m=min_port,
                    starboard_distance_m=min_starboard,
                )
            )
        reduced = replace(
            self._buffer[-1],
            port_distance_m=min_port,
            starboard_distance_m=min_starboard,
        )
        self._pings.append(reduced)
        LOGGER.info(
            "Interval closed after %.2f m over %d pings (port=%.2f m, starboard=%.2f m)",
            self._accumulated_distance_m,
            len(self._buffer),
            min_port,
            min_starboard,
        )
        self._buffer.clear()
        self._accumulated_distance_m = 0.0
        return reduced

    def reset(self) -> None:
        self._buffer.clear()
        self._accumulated_distance_m = 0.0
        self._pings.clear()
