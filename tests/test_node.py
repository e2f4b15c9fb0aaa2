"""End-to-end tests for the coverage node and its message bus wiring."""

from __future__ import annotations

from typing import List

import time

import pytest

from sonar_coverage.config import COVERAGE_TOPIC, DEPTH_TOPIC, HEADING_TOPIC, PING_TRACK_TOPIC, POSITION_TOPIC, RESET_TOPIC
from sonar_coverage.errors import CoverageMergeError, GeodesyError
from sonar_coverage.messaging import (
    DepthMessage,
    HeadingMessage,
    MessageBus,
    PositionMessage,
    RecordingSubscriber,
    ResetMessage,
)
from sonar_coverage.models import PATH_BREAK, SonarGeometry
from sonar_coverage.node import SonarCoverageNode

from conftest import track_points


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bus_and_recorder():
    bus = MessageBus()
    recorder = RecordingSubscriber()
    recorder.listen(bus, COVERAGE_TOPIC)
    recorder.listen(bus, PING_TRACK_TOPIC)
    return bus, recorder


def _drive(node: SonarCoverageNode, clock: FakeClock, points: List[tuple], depth: float = 10.0) -> List[bool]:
    published = []
    for lat, lon in points:
        clock.now += 0.1
        node.on_heading(0.0, clock.now)
        node.on_position(lat, lon, clock.now)
        published.append(node.on_depth(depth))
    return published


def test_stale_heading_drops_sample(default_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, geometry=default_geometry, clock=clock)
    node.on_heading(0.0, clock.now - 1.0)
    node.on_position(0.0, 0.0, clock.now - 0.1)

    assert node.on_depth(10.0) is False
    assert node.coverage.polygons == ()
    assert node.intervals.buffer == ()
    assert node.dropped_samples == 1
    assert recorder.messages == []


def test_depth_before_any_state_is_dropped(clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, clock=clock)
    assert node.on_depth(10.0) is False
    assert recorder.messages == []


def test_fresh_sample_publishes_closed_ring(default_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, geometry=default_geometry, clock=clock)
    assert _drive(node, clock, [(0.0, 0.0)]) == [True]

    path = recorder.last(COVERAGE_TOPIC)
    assert path[-1] == PATH_BREAK
    ring = path[:-1]
    assert ring[0] == ring[-1]
    # The coarse default tolerance may drop a corner of a thin footprint.
    assert len(ring) >= 4
    assert len(node.intervals.buffer) == 1


def test_pings_feed_intervals_and_coverage(wide_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, geometry=wide_geometry, clock=clock)
    assert all(_drive(node, clock, track_points(3, 3.0)))

    assert len(recorder.on(COVERAGE_TOPIC)) == 3
    assert len(node.intervals.pings) == 2
    assert node.intervals.buffer == ()
    assert len(node.coverage.polygons) == 1
    # Ping track stays dormant unless enabled.
    assert recorder.on(PING_TRACK_TOPIC) == []


def test_ping_track_published_when_enabled(wide_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, geometry=wide_geometry, clock=clock, ping_track_enabled=True)
    _drive(node, clock, track_points(3, 3.0))

    (track,) = recorder.on(PING_TRACK_TOPIC)
    assert len(track) == 2 * len(node.intervals.pings)


def test_reset_clears_state_and_publishes_empty_path(wide_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(bus, geometry=wide_geometry, clock=clock)
    _drive(node, clock, track_points(4, 3.0))
    assert node.coverage.polygons

    bus.publish(RESET_TOPIC, ResetMessage(True))

    assert node.coverage.polygons == ()
    assert node.intervals.buffer == ()
    assert node.intervals.pings == ()
    assert node.intervals.accumulated_distance_m == 0.0
    assert recorder.last(COVERAGE_TOPIC) == []


def test_bus_messages_drive_node(default_geometry: SonarGeometry, clock: FakeClock, bus_and_recorder) -> None:
    bus, recorder = bus_and_recorder
    node = SonarCoverageNode(geometry=default_geometry, clock=clock)
    node.attach(bus)

    bus.publish(HEADING_TOPIC, HeadingMessage(heading_deg=45.0, stamp=clock.now))
    bus.publish(POSITION_TOPIC, PositionMessage(latitude=43.07, longitude=-70.71, stamp=clock.now))
    clock.now += 0.2
    bus.publish(DEPTH_TOPIC, DepthMessage(depth_m=15.0))

    assert len(recorder.on(COVERAGE_TOPIC)) == 1
    assert node.state.heading_deg == 45.0
    ping = node.intervals.buffer[0]
    assert ping.nadir == (43.07, -70.71)


def test_geodesy_failure_propagates_and_keeps_coverage(
    wide_geometry: SonarGeometry, clock: FakeClock, monkeypatch: pytest.MonkeyPatch
) -> None:
    node = SonarCoverageNode(geometry=wide_geometry, clock=clock)
    _drive(node, clock, track_points(2, 3.0))
    before = node.coverage.polygons
    buffered = node.intervals.buffer

    def _fail(*_args, **_kwargs):
        raise GeodesyError("projection failed")

    monkeypatch.setattr(node.builder.geodesy, "forward", _fail)
    with pytest.raises(GeodesyError):
        _drive(node, clock, [(0.001, 0.0)])
    assert node.coverage.polygons == before
    assert node.intervals.buffer == buffered


def test_node_without_bus_still_processes(default_geometry: SonarGeometry, clock: FakeClock) -> None:
    node = SonarCoverageNode(geometry=default_geometry, clock=clock)
    assert _drive(node, clock, [(10.0, 10.0)]) == [True]
    assert node.coverage_path()[-1] == PATH_BREAK


def test_default_clock_drops_wall_clock_stale_state(default_geometry: SonarGeometry) -> None:
    node = SonarCoverageNode(geometry=default_geometry)
    stamp = time.time() - 1.0
    node.on_heading(0.0, stamp)
    node.on_position(0.0, 0.0, stamp)

    assert node.on_depth(10.0) is False
    assert node.dropped_samples == 1
    assert node.coverage.polygons == ()


def test_default_clock_accepts_current_wall_clock_state(default_geometry: SonarGeometry) -> None:
    node = SonarCoverageNode(geometry=default_geometry)
    stamp = time.time()
    node.on_heading(0.0, stamp)
    node.on_position(0.0, 0.0, stamp)

    assert node.on_depth(10.0) is True
    assert node.dropped_samples == 0


def test_merge_failure_leaves_intervals_untouched(
    wide_geometry: SonarGeometry, clock: FakeClock, monkeypatch: pytest.MonkeyPatch
) -> None:
    node = SonarCoverageNode(geometry=wide_geometry, clock=clock)
    _drive(node, clock, track_points(2, 3.0))
    buffered = node.intervals.buffer
    distance = node.intervals.accumulated_distance_m

    def _fail(_footprint):
        raise CoverageMergeError("union failed")

    monkeypatch.setattr(node.coverage, "merge", _fail)
    with pytest.raises(CoverageMergeError):
        _drive(node, clock, [track_points(3, 3.0)[-1]])
    assert node.intervals.buffer == buffered
    assert node.intervals.accumulated_distance_m == distance
    assert node.intervals.pings == ()
