"""Pre-extraction cleanup of a skeleton frame.

The conditioner removes the artifacts that appear where a cropped skeleton
meets the outside: dangling terminals and edges touching the outer background,
four-way crossings on the boundary and pairs of junctions sitting next to each
other. It then re-traces the cleaned skeleton and redraws only the contours that
still border an enclosed cell.
"""

from __future__ import annotations

import logging
from itertools import combinations

import numpy as np
from skimage.segmentation import flood_fill

from .contour_tracer import Contour, trace_contours
from .errors import MalformedSkeletonError
from .neighborhood import (
    BACKGROUND,
    EDGE,
    FOREGROUND,
    FOUR_WAY,
    INTERIOR,
    ISOLATED,
    JUNCTION,
    TERMINAL,
    classify_pixels,
    touches,
)

logger = logging.getLogger(__name__)

Pixel = tuple[int, int]

OUTSIDE_MARK = 1
JUNCTION_MERGE_DISTANCE = 1
_OUTSIDE_SEED = (0, 0)


def crop_to_content(raster: np.ndarray) -> tuple[np.ndarray, Pixel]:
    """Crop ``raster`` to the bounding box of its nonzero pixels.

    Returns:
        The cropped copy and the ``(x, y)`` offset of its top-left corner.
    """

    array = np.asarray(raster)
    rows = np.flatnonzero(array.any(axis=1))
    cols = np.flatnonzero(array.any(axis=0))
    if rows.size == 0:
        raise MalformedSkeletonError("Frame contains no membrane pixels")
    top, bottom = int(rows[0]), int(rows[-1])
    left, right = int(cols[0]), int(cols[-1])
    return array[top : bottom + 1, left : right + 1].copy(), (left, top)


def check_four_block(raster: np.ndarray, *, offset: Pixel = (0, 0)) -> None:
    """Reject rasters containing a 2x2 block of membrane pixels."""

    membrane = np.asarray(raster) == FOREGROUND
    blocks = membrane[:-1, :-1] & membrane[1:, :-1] & membrane[:-1, 1:] & membrane[1:, 1:]
    hits = np.argwhere(blocks)
    if not len(hits):
        return
    corners = [(int(x) + offset[0], int(y) + offset[1]) for y, x in hits]
    listed = ", ".join(f"({x}, {y})" for x, y in corners[:10])
    more = f" and {len(corners) - 10} more" if len(corners) > 10 else ""
    y, x = (int(v) for v in hits[0])
    raise MalformedSkeletonError(
        f"Found {len(corners)} 2x2 membrane block(s) at {listed}{more}",
        point=(x, y),
        counts={"blocks": len(corners)},
    )


def condition_boundary(raster: np.ndarray) -> np.ndarray:
    """Return a cleaned copy of ``raster`` ready for graph extraction.

    The outermost ring of pixels is cleared, boundary artifacts are erased,
    the skeleton is re-traced and only contours with at least one endpoint
    next to an enclosed cell are drawn back. This strips the outer layer of
    open cells from the frame.

    Raises:
        MalformedSkeletonError: classification rejects a pixel before or after
            the artifact removal, or the re-trace fails.
    """

    work = np.where(np.asarray(raster) == FOREGROUND, FOREGROUND, BACKGROUND).astype(np.uint8)
    work[0, :] = work[-1, :] = BACKGROUND
    work[:, 0] = work[:, -1] = BACKGROUND

    classes = classify_pixels(work)
    work = flood_fill(work, _OUTSIDE_SEED, OUTSIDE_MARK, connectivity=1)
    erase, junctions = _boundary_artifacts(work, classes)
    for x, y in erase:
        work[y, x] = BACKGROUND
    merged = _near_junction_pairs(junctions)
    for x, y in merged:
        work[y, x] = BACKGROUND
    work[work == OUTSIDE_MARK] = BACKGROUND
    logger.debug(
        "Erased %d boundary pixels and %d adjacent junctions",
        len(erase),
        len(merged),
    )

    classes = classify_pixels(work)
    isolated = classes == ISOLATED
    work[isolated] = BACKGROUND
    classes[isolated] = INTERIOR

    contours = trace_contours(work, classes)
    kept = _contours_touching_cells(work, contours)
    logger.info("Conditioned frame keeps %d of %d contours", len(kept), len(contours))

    conditioned = np.zeros_like(work)
    for contour in kept:
        for x, y in contour:
            conditioned[y, x] = FOREGROUND
    return conditioned


def _boundary_artifacts(filled: np.ndarray, classes: np.ndarray) -> tuple[list[Pixel], list[Pixel]]:
    near_outside = (filled == FOREGROUND) & touches(filled == OUTSIDE_MARK)
    erase: list[Pixel] = []
    junctions: list[Pixel] = []
    for y, x in np.argwhere(near_outside).tolist():
        symbol = classes[y, x]
        if symbol in (TERMINAL, EDGE):
            erase.append((x, y))
        elif symbol == JUNCTION:
            junctions.append((x, y))
        elif symbol == FOUR_WAY:
            erase.extend([(x, y), (x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)])
    return erase, junctions


def _near_junction_pairs(junctions: list[Pixel]) -> list[Pixel]:
    merged: list[Pixel] = []
    for (ax, ay), (bx, by) in combinations(junctions, 2):
        if max(abs(ax - bx), abs(ay - by)) <= JUNCTION_MERGE_DISTANCE:
            merged.extend([(ax, ay), (bx, by)])
    return merged


def _contours_touching_cells(work: np.ndarray, contours: list[Contour]) -> list[Contour]:
    filled = flood_fill(work, _OUTSIDE_SEED, OUTSIDE_MARK, connectivity=1)
    membrane = filled == FOREGROUND
    bordering = membrane & touches(filled == BACKGROUND)
    plain = membrane & ~bordering

    def is_plain(point: Pixel) -> bool:
        return bool(plain[point[1], point[0]])

    return [c for c in contours if not (is_plain(c[0]) and is_plain(c[-1]))]


__all__ = [
    "JUNCTION_MERGE_DISTANCE",
    "OUTSIDE_MARK",
    "check_four_block",
    "condition_boundary",
    "crop_to_content",
]
