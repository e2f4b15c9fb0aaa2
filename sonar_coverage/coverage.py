"""Accumulate footprint polygons into simplified coverage."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Tuple, Union

from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .config import SIMPLIFICATION_TOLERANCE_DEG
from .errors import CoverageMergeError

__all__ = [
    "SimpleCoverage",
    "CollectionCoverage",
    "UnsupportedCoverage",
    "CoverageResult",
    "classify_geometry",
    "union_and_simplify",
    "CoverageAccumulator",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimpleCoverage:
    """Union collapsed to a single simple polygon."""

    polygon: Polygon


@dataclass(frozen=True, slots=True)
class CollectionCoverage:
    """Union made of several disjoint polygons."""

    polygons: Tuple[Polygon, ...]


@dataclass(frozen=True, slots=True)
class UnsupportedCoverage:
    """Any other geometry; coverage is left untouched."""

    geom_type: str


CoverageResult = Union[SimpleCoverage, CollectionCoverage, UnsupportedCoverage]


def classify_geometry(geometry: BaseGeometry) -> CoverageResult:
    """Map a union/simplify result onto the three cases the accumulator handles."""

    if geometry.is_empty:
        return UnsupportedCoverage(geom_type=geometry.geom_type)
    if isinstance(geometry, Polygon):
        return SimpleCoverage(polygon=geometry)
    if isinstance(geometry, MultiPolygon):
        polygons = tuple(p for p in geometry.geoms if not p.is_empty)
        if not polygons:
            return UnsupportedCoverage(geom_type=geometry.geom_type)
        return CollectionCoverage(polygons=polygons)
    return UnsupportedCoverage(geom_type=geometry.geom_type)


def union_and_simplify(polygons: List[Polygon], tolerance: float) -> BaseGeometry:
    """Union ``polygons`` and simplify without collapsing or crossing rings."""

    try:
        merged = unary_union(polygons)
        return merged.simplify(tolerance, preserve_topology=True)
    except (ShapelyError, ValueError) as exc:
        raise CoverageMergeError(f"Failed to merge {len(polygons)} polygons") from exc


class CoverageAccumulator:
    """Own the current coverage as a list of pairwise disjoint polygons."""

    def __init__(self, tolerance: float = SIMPLIFICATION_TOLERANCE_DEG) -> None:
        self.tolerance = tolerance
        self._coverage: List[Polygon] = []
        self.last_result: Optional[CoverageResult] = None

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return tuple(self._coverage)

    @property
    def area(self) -> float:
        """Summed planar area in square degrees."""

        return float(sum(p.area for p in self._coverage))

    def __len__(self) -> int:
        return len(self._coverage)

    def merge(self, footprint: Polygon) -> bool:
        """Merge ``footprint`` into coverage.

        Returns True when coverage was replaced and should be published.
        The live list is only swapped after union, simplification and
        classification all succeed.
        """

        working = list(self._coverage)
        working.append(footprint)
        simplified = union_and_simplify(working, self.tolerance)
        result = classify_geometry(simplified)
        self.last_result = result

        if isinstance(result, SimpleCoverage):
            self._coverage = [result.polygon]
        elif isinstance(result, CollectionCoverage):
            self._coverage = list(result.polygons)
        else:
            LOGGER.warning(
                "Ignoring coverage merge result of type %s", result.geom_type
            )
            return False

        LOGGER.debug(
            "Coverage now %d polygon(s), %d vertices",
            len(self._coverage),
            sum(len(p.exterior.coords) for p in self._coverage),
        )
        return True

    def reset(self) -> None:
        self._coverage = []
        self.last_result = None
