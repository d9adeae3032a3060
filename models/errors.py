"""Failure types raised while turning a skeleton raster into a vertex graph."""

from __future__ import annotations

from typing import Mapping

Pixel = tuple[int, int]


class VertexGraphError(ValueError):
    """Base class for every fatal extraction failure.

    ``point`` is the offending lattice point in local (cropped) coordinates,
    ``counts`` holds whatever totals were involved in the failed check.
    """

    def __init__(
        self,
        message: str,
        *,
        point: Pixel | None = None,
        counts: Mapping[str, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.point = point
        self.counts = dict(counts or {})

    def absolute_point(self, offset: Pixel = (0, 0)) -> Pixel | None:
        if self.point is None:
            return None
        return (self.point[0] + offset[0], self.point[1] + offset[1])


class MalformedSkeletonError(VertexGraphError):
    """The raster is not a locally well-formed 1-pixel skeleton."""


class UndersizedRegionError(VertexGraphError):
    """An enclosed region is at or below the minimum cell size."""


class TopologyInconsistencyError(VertexGraphError):
    """Graph construction produced counts or cycles that cannot be valid."""


class RepairAmbiguityError(VertexGraphError):
    """An isolated terminal could not be reconnected unambiguously."""


__all__ = [
    "VertexGraphError",
    "MalformedSkeletonError",
    "UndersizedRegionError",
    "TopologyInconsistencyError",
    "RepairAmbiguityError",
]
