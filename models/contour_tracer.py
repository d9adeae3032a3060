"""Walk skeleton segments between node pixels.

A *contour* is the ordered list of ``(x, y)`` lattice points between two node
pixels (terminal, junction or four-way). Both endpoints are node pixels and
every point in between is an edge pixel.
"""

from __future__ import annotations

import logging

import numpy as np

from .errors import MalformedSkeletonError, TopologyInconsistencyError
from .neighborhood import FOREGROUND, FOUR_WAY, JUNCTION, NODE_CLASSES, TERMINAL

logger = logging.getLogger(__name__)

Pixel = tuple[int, int]
Contour = list[Pixel]

VISITED = 1
TRACE_WARN_STEPS = 150
TRACE_MAX_STEPS = 200

# Scan priority as (dx, dy): orthogonal moves first, diagonals last.
TRACE_OFFSETS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (-1, 0),
    (1, 0),
    (0, 1),
    (-1, -1),
    (1, -1),
    (-1, 1),
    (1, 1),
)

NODE_DEGREE: dict[str, int] = {TERMINAL: 1, JUNCTION: 3, FOUR_WAY: 4}


def trace_contours(raster: np.ndarray, classes: np.ndarray) -> list[Contour]:
    """Trace every contour of a classified skeleton.

    Nodes are visited in raster order. Walks leave each node until its degree
    quota (1 terminal, 3 junction, 4 four-way) is used up. The input raster is
    not modified; walks run on a private copy in which vacated pixels are
    marked :data:`VISITED`.

    Args:
        raster: Skeleton raster with membrane pixels equal to ``FOREGROUND``.
        classes: Class array from :func:`models.neighborhood.classify_pixels`.

    Returns:
        Contours in discovery order.

    Raises:
        MalformedSkeletonError: A walk dead-ends or runs past the step bound.
        TopologyInconsistencyError: A node receives more walks than its class allows.
    """

    work = np.array(raster, dtype=np.uint8, copy=True)
    height, width = work.shape
    degree = np.zeros((height, width), dtype=np.intp)
    contours: list[Contour] = []

    node_rows, node_cols = np.nonzero(np.isin(classes, list(NODE_CLASSES)))
    for y, x in zip(node_rows.tolist(), node_cols.tolist()):
        quota = NODE_DEGREE[classes[y, x]]
        reached: list[Pixel] = []
        while degree[y, x] < quota:
            contour = _walk(work, classes, (x, y))
            end = contour[-1]
            degree[y, x] += 1
            degree[end[1], end[0]] += 1
            for point in ((x, y), end):
                _check_quota(classes, degree, point)
            contours.append(contour)
            work[end[1], end[0]] = VISITED
            reached.append(end)
        # Far ends stay reachable from their own walks; the start stays visited.
        for rx, ry in reached:
            work[ry, rx] = FOREGROUND

    logger.debug("Traced %d contours from %d node pixels", len(contours), len(node_rows))
    return contours


def _walk(work: np.ndarray, classes: np.ndarray, start: Pixel) -> Contour:
    height, width = work.shape
    sx, sy = start
    x, y = start
    points: Contour = [start]
    steps = 0
    counter = 0
    while True:
        step = _next_step(work, x, y, steps, start)
        if step is None:
            raise MalformedSkeletonError(
                f"Irregular loop while tracing from ({sx}, {sy}) at ({x}, {y})",
                point=(x, y),
                counts={"steps": steps},
            )
        work[y, x] = VISITED
        x, y = step
        steps += 1
        points.append((x, y))
        if counter > TRACE_WARN_STEPS:
            if counter == TRACE_WARN_STEPS + 1:
                logger.warning("Long contour from (%d, %d): passed %d steps", sx, sy, counter)
            if counter > TRACE_MAX_STEPS:
                raise MalformedSkeletonError(
                    f"Unexpected loop while tracing from ({sx}, {sy}) at ({x}, {y})",
                    point=(x, y),
                    counts={"steps": steps},
                )
        counter += 1
        inside = 1 < x < width - 1 and 1 < y < height - 1
        if not inside or classes[y, x] in NODE_CLASSES:
            return points


def _next_step(work: np.ndarray, x: int, y: int, steps: int, start: Pixel) -> Pixel | None:
    below_start = (start[0], start[1] + 1)
    for dx, dy in TRACE_OFFSETS:
        nx, ny = x + dx, y + dy
        if work[ny, nx] != FOREGROUND:
            continue
        if steps == 1 and (nx, ny) == below_start:
            continue
        if dx and dy and (work[y, nx] != 0 or work[ny, x] != 0):
            continue
        return (nx, ny)
    return None


def _check_quota(classes: np.ndarray, degree: np.ndarray, point: Pixel) -> None:
    x, y = point
    symbol = classes[y, x]
    limit = NODE_DEGREE.get(symbol, 2)
    if degree[y, x] > limit:
        raise TopologyInconsistencyError(
            f"Pixel ({x}, {y}) of class '{symbol}' has {degree[y, x]} contours, expected at most {limit}",
            point=(x, y),
            counts={"degree": int(degree[y, x]), "limit": limit},
        )


def contour_degrees(contours: list[Contour]) -> dict[Pixel, int]:
    """Count contour endpoints per lattice point (a closed loop counts twice)."""

    counts: dict[Pixel, int] = {}
    for contour in contours:
        for point in (contour[0], contour[-1]):
            counts[point] = counts.get(point, 0) + 1
    return counts


__all__ = [
    "Contour",
    "NODE_DEGREE",
    "TRACE_MAX_STEPS",
    "TRACE_OFFSETS",
    "TRACE_WARN_STEPS",
    "VISITED",
    "contour_degrees",
    "trace_contours",
]
