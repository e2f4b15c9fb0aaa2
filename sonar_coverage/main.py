"""Replay a recorded message log and export the resulting sonar coverage."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    ALONGSHIP_BEAMWIDTH_DEG,
    INTERVAL_DISTANCE_M,
    PING_TRACK_ENABLED,
    PORT_ANGLE_DEG,
    SIMPLIFICATION_TOLERANCE_DEG,
    STARBOARD_ANGLE_DEG,
    STATE_MAX_AGE_S,
)
from .errors import SonarCoverageError
from .models import SonarGeometry
from .node import SonarCoverageNode
from .replay import ReplayClock, load_messages, replay_messages
from .reporter import to_geojson
from .visualization import create_coverage_map


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the replay tool."""

    parser = argparse.ArgumentParser(
        description=(
            "Replay depth, heading and position messages and accumulate the"
            " sea-floor area covered by the sonar swath."
        )
    )
    parser.add_argument("log", type=Path, help="CSV or JSON-lines message log")
    parser.add_argument("--geojson", type=Path, help="Write coverage as GeoJSON")
    parser.add_argument("--map", type=Path, help="Write an interactive HTML map")
    parser.add_argument(
        "--ping-track",
        action="store_true",
        default=PING_TRACK_ENABLED,
        help="Include the reduced ping track in the HTML map",
    )
    parser.add_argument("--interval-m", type=float, default=INTERVAL_DISTANCE_M)
    parser.add_argument("--beamwidth", type=float, default=ALONGSHIP_BEAMWIDTH_DEG)
    parser.add_argument("--port-angle", type=float, default=PORT_ANGLE_DEG)
    parser.add_argument("--starboard-angle", type=float, default=STARBOARD_ANGLE_DEG)
    parser.add_argument(
        "--max-age",
        type=float,
        default=STATE_MAX_AGE_S,
        help="Maximum heading/position age in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=SIMPLIFICATION_TOLERANCE_DEG,
        help="Coverage simplification tolerance in degrees (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m sonar_coverage``."""

    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    geometry = SonarGeometry(
        interval_distance_m=args.interval_m,
        alongship_beamwidth_deg=args.beamwidth,
        port_angle_deg=args.port_angle,
        starboard_angle_deg=args.starboard_angle,
        max_state_age_s=args.max_age,
        simplification_tolerance_deg=args.tolerance,
    )
    clock = ReplayClock()
    node = SonarCoverageNode(
        geometry=geometry, clock=clock, ping_track_enabled=args.ping_track
    )

    try:
        messages = load_messages(args.log)
        summary = replay_messages(messages, node, clock)
    except (SonarCoverageError, FileNotFoundError, ValueError) as exc:
        logging.error("Failed to replay '%s': %s", args.log, exc)
        return 1

    polygons = node.coverage.polygons
    logging.info(
        "Coverage: %d polygon(s) from %d depth samples (%d reduced pings)",
        len(polygons),
        summary.depth_samples,
        len(node.intervals.pings),
    )

    if args.geojson is not None:
        args.geojson.parent.mkdir(parents=True, exist_ok=True)
        with args.geojson.open("w", encoding="utf-8") as handle:
            json.dump(to_geojson(polygons), handle, indent=2)
        logging.info("GeoJSON written to %s", args.geojson)

    if args.map is not None:
        if not polygons:
            logging.warning("Coverage is empty; skipping map output")
        else:
            create_coverage_map(
                polygons,
                ping_track=node.ping_track() if args.ping_track else None,
                output_html_path=args.map,
            )
            logging.info("Coverage map written to %s", args.map)
    return 0
