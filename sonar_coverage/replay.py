"""Load recorded sensor message logs and replay them through a coverage node.

Logs are CSV or JSON-lines tables with one message per row:

``time``
    Receipt time in seconds. Rows are replayed in ascending order.
``topic``
    One of ``depth``, ``heading``, ``position`` or ``reset``.
``value``
    Depth in metres, heading in degrees, or the reset flag.
``latitude`` / ``longitude``
    Position fix; only read for ``position`` rows.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .errors import ReplayFormatError
from .node import SonarCoverageNode

__all__ = ["ReplayClock", "ReplaySummary", "load_messages", "replay_messages"]

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

_TIME_COL = "time"
_TOPIC_COL = "topic"
_VALUE_COL = "value"
_LAT_COL = "latitude"
_LON_COL = "longitude"
_REQUIRED_COLS = {_TIME_COL, _TOPIC_COL}
_KNOWN_TOPICS = {"depth", "heading", "position", "reset"}


class ReplayClock:
    """Clock that reports the time of the message currently being replayed."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


@dataclass(slots=True)
class ReplaySummary:
    """Counts collected while replaying a message log."""

    messages: int = 0
    depth_samples: int = 0
    published: int = 0
    dropped: int = 0
    resets: int = 0


def _is_blank(value: object) -> bool:
    return pd.isna(value) or str(value).strip() == ""


def _validate_columns(df: pd.DataFrame, source: PathLike) -> None:
    missing = _REQUIRED_COLS - set(df.columns)
    if missing:
        raise ReplayFormatError(
            f"Missing columns in '{source}': {', '.join(sorted(missing))}. Present: {list(df.columns)}"
        )


def _coerce_bool(value: object) -> bool:
    if _is_blank(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def load_messages(path: PathLike) -> pd.DataFrame:
    """Read a message log into a DataFrame sorted by ``time``."""

    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Message log not found: {source}")
    if source.suffix.lower() in {".jsonl", ".ndjson", ".json"}:
        df = pd.read_json(source, lines=True)
    else:
        df = pd.read_csv(source)
    df.columns = [str(c).strip().lower() for c in df.columns]
    _validate_columns(df, source)
    for column in (_VALUE_COL, _LAT_COL, _LON_COL):
        if column not in df.columns:
            df[column] = pd.NA

    df[_TOPIC_COL] = df[_TOPIC_COL].astype(str).str.strip().str.lower()
    unknown = set(df[_TOPIC_COL]) - _KNOWN_TOPICS
    if unknown:
        raise ReplayFormatError(
            f"Unknown topics in '{source}': {', '.join(sorted(unknown))}"
        )
    df[_TIME_COL] = pd.to_numeric(df[_TIME_COL], errors="coerce")
    if df[_TIME_COL].isna().any():
        bad_rows = [int(i) + 2 for i in df.index[df[_TIME_COL].isna()]]
        raise ReplayFormatError(f"Non-numeric time in '{source}' rows {bad_rows}")
    return df.sort_values(_TIME_COL, kind="stable").reset_index(drop=True)


def _require_float(row: pd.Series, column: str, row_label: str) -> float:
    value = row[column]
    if _is_blank(value):
        raise ReplayFormatError(f"{row_label} ({row[_TOPIC_COL]}) is missing '{column}'")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ReplayFormatError(
            f"{row_label} has non-numeric '{column}' value {value!r}"
        ) from exc


def replay_messages(
    messages: pd.DataFrame, node: SonarCoverageNode, clock: ReplayClock
) -> ReplaySummary:
    """Feed ``messages`` to ``node``; ``clock`` must be the node's clock."""

    summary = ReplaySummary()
    for index, row in messages.iterrows():
        row_label = f"row {int(index) + 1}"
        stamp = float(row[_TIME_COL])
        clock.now = stamp
        topic = row[_TOPIC_COL]
        summary.messages += 1
        if topic == "heading":
            node.on_heading(_require_float(row, _VALUE_COL, row_label), stamp)
        elif topic == "position":
            node.on_position(
                _require_float(row, _LAT_COL, row_label),
                _require_float(row, _LON_COL, row_label),
                stamp,
            )
        elif topic == "reset":
            node.on_reset(_coerce_bool(row[_VALUE_COL]))
            summary.resets += 1
        else:
            summary.depth_samples += 1
            dropped_before = node.dropped_samples
            if node.on_depth(_require_float(row, _VALUE_COL, row_label)):
                summary.published += 1
            summary.dropped += node.dropped_samples - dropped_before
    LOGGER.info(
        "Replayed %d messages: %d depth samples, %d published, %d dropped",
        summary.messages,
        summary.depth_samples,
        summary.published,
        summary.dropped,
    )
    return summary
