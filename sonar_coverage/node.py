"""Coverage node wiring sensor messages to footprint and coverage processing."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, List, Optional

from .config import (
    COVERAGE_TOPIC,
    DEPTH_TOPIC,
    HEADING_TOPIC,
    PING_TRACK_ENABLED,
    PING_TRACK_TOPIC,
    POSITION_TOPIC,
    RESET_TOPIC,
)
from .coverage import CoverageAccumulator
from .footprint import FootprintBuilder
from .geodesy import DEFAULT_GEODESY, Geodesy
from .intervals import IntervalAggregator
from .messaging import (
    DepthMessage,
    HeadingMessage,
    MessageBus,
    PositionMessage,
    ResetMessage,
)
from .models import GeoPoint, SonarGeometry
from .reporter import ping_track_path, to_path
from .state import SensorStateTracker

__all__ = ["SonarCoverageNode"]

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class SonarCoverageNode:
    """Single owner of sensor state, coverage and interval records.

    Every handler takes the node lock, so heading/position updates, depth
    processing and resets are applied one at a time in arrival order.
    Publishing happens under the same lock. Message stamps and ``clock``
    share one time base, wall-clock seconds by default.
    """

    def __init__(
        self,
        bus: Optional[MessageBus] = None,
        *,
        geometry: Optional[SonarGeometry] = None,
        geodesy: Geodesy = DEFAULT_GEODESY,
        clock: Clock = time.time,
        ping_track_enabled: bool = PING_TRACK_ENABLED,
        coverage_topic: str = COVERAGE_TOPIC,
        ping_track_topic: str = PING_TRACK_TOPIC,
    ) -> None:
        self.geometry = geometry or SonarGeometry()
        self.geodesy = geodesy
        self.clock = clock
        self.ping_track_enabled = ping_track_enabled
        self.coverage_topic = coverage_topic
        self.ping_track_topic = ping_track_topic

        self.state = SensorStateTracker()
        self.builder = FootprintBuilder(self.geometry, geodesy)
        self.coverage = CoverageAccumulator(self.geometry.simplification_tolerance_deg)
        self.intervals = IntervalAggregator(self.geometry.interval_distance_m, geodesy)

        self._lock = threading.RLock()
        self._bus: Optional[MessageBus] = None
        self.dropped_samples = 0
        if bus is not None:
            self.attach(bus)

    def attach(
        self,
        bus: MessageBus,
        *,
        depth_topic: str = DEPTH_TOPIC,
        heading_topic: str = HEADING_TOPIC,
        position_topic: str = POSITION_TOPIC,
        reset_topic: str = RESET_TOPIC,
    ) -> None:
        """Subscribe the node handlers and publish results on ``bus``."""

        self._bus = bus
        bus.subscribe(depth_topic, self._handle_depth)
        bus.subscribe(heading_topic, self._handle_heading)
        bus.subscribe(position_topic, self._handle_position)
        bus.subscribe(reset_topic, self._handle_reset)

    # -- message adapters -------------------------------------------------
    def _handle_depth(self, message: DepthMessage) -> None:
        self.on_depth(message.depth_m)

    def _handle_heading(self, message: HeadingMessage) -> None:
        self.on_heading(message.heading_deg, message.stamp)

    def _handle_position(self, message: PositionMessage) -> None:
        self.on_position(message.latitude, message.longitude, message.stamp)

    def _handle_reset(self, message: ResetMessage) -> None:
        self.on_reset(message.data)

    # -- handlers ---------------------------------------------------------
    def on_heading(self, heading_deg: float, stamp: float) -> None:
        with self._lock:
            self.state.update_heading(heading_deg, stamp)

    def on_position(self, latitude: float, longitude: float, stamp: float) -> None:
        with self._lock:
            self.state.update_position(latitude, longitude, stamp)

    def on_depth(self, depth_m: float, now: Optional[float] = None) -> bool:
        """Process one depth sample; return True when coverage was published."""

        with self._lock:
            now = self.clock() if now is None else now
            if not self.state.is_fresh(now, self.geometry.max_state_age_s):
                self.dropped_samples += 1
                LOGGER.debug(
                    "Dropping depth %.2f: heading age %.2fs, position age %.2fs",
                    depth_m,
                    self.state.heading_age(now),
                    self.state.position_age(now),
                )
                return False

            ping = self.builder.build_ping(depth_m, self.state)
            LOGGER.debug(
                "Depth %.2f at (%.7f, %.7f) heading %.1f",
                depth_m,
                ping.nadir_latitude,
                ping.nadir_longitude,
                ping.heading_deg,
            )
            footprint = self.builder.build_footprint_polygon(ping, depth_m)
            merged = self.coverage.merge(footprint)

            if self.intervals.add_ping(ping) and self.ping_track_enabled:
                self._publish(self.ping_track_topic, self.ping_track())

            if not merged:
                return False
            self._publish(self.coverage_topic, self.coverage_path())
            return True

    def on_reset(self, data: bool = True) -> None:
        """Clear coverage and interval records, then publish empty coverage."""

        with self._lock:
            self.coverage.reset()
            self.intervals.reset()
            LOGGER.info("Coverage reset (signal=%s)", data)
            self._publish(self.coverage_topic, self.coverage_path())

    # -- outputs ----------------------------------------------------------
    def coverage_path(self) -> List[GeoPoint]:
        return to_path(self.coverage.polygons)

    def ping_track(self) -> List[GeoPoint]:
        return ping_track_path(self.intervals.pings, self.geodesy)

    def _publish(self, topic: str, message: Any) -> None:
        if self._bus is None:
            return
        self._bus.publish(topic, message)
