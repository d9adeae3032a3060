"""Label the background regions enclosed by the skeleton."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from skimage.measure import label

from .errors import UndersizedRegionError

logger = logging.getLogger(__name__)

MEMBRANE_LABEL = 0
OUTSIDE_LABEL = 1
FIRST_CELL_LABEL = 2
RESERVED_LABELS: frozenset[int] = frozenset({MEMBRANE_LABEL, OUTSIDE_LABEL})
MINIMAL_CELL_SIZE = 4


@dataclass(slots=True)
class RegionLabels:
    """Per-pixel cell labels: 0 membrane, 1 outside, 2.. enclosed cells."""

    labels: np.ndarray
    cell_count: int
    areas: dict[int, int]

    def label_at(self, x: int, y: int) -> int:
        return int(self.labels[y, x])


def label_regions(raster: np.ndarray, *, min_cell_size: int = MINIMAL_CELL_SIZE) -> RegionLabels:
    """Flood-fill the zero pixels of ``raster`` into 4-connected regions.

    Regions are numbered in raster order of their first pixel, so the region
    containing ``(0, 0)`` becomes the outside (label 1) and enclosed regions
    follow from label 2. Any nonzero pixel is membrane.

    Raises:
        UndersizedRegionError: an enclosed region has ``min_cell_size`` pixels
            or fewer. The region's first pixel is reported.
    """

    background = np.asarray(raster) == 0
    raw, count = label(background, connectivity=1, return_num=True)

    flat = raw.ravel()
    values, first_index = np.unique(flat, return_index=True)
    keep = values != 0
    values, first_index = values[keep], first_index[keep]
    order = values[np.argsort(first_index, kind="stable")]

    remap = np.zeros(count + 1, dtype=np.intp)
    remap[order] = np.arange(OUTSIDE_LABEL, OUTSIDE_LABEL + len(order))
    labels = remap[raw]

    sizes = np.bincount(labels.ravel(), minlength=OUTSIDE_LABEL + len(order))
    height, width = labels.shape
    areas: dict[int, int] = {}
    seeds = sorted(first_index.tolist())
    for offset, seed in enumerate(seeds[1:]):
        cell = FIRST_CELL_LABEL + offset
        area = int(sizes[cell])
        if area <= min_cell_size:
            y, x = divmod(int(seed), width)
            raise UndersizedRegionError(
                f"Region seeded at ({x}, {y}) has {area} pixels, at or below the minimum of {min_cell_size}",
                point=(x, y),
                counts={"area": area, "min_cell_size": min_cell_size},
            )
        areas[cell] = area

    cell_count = max(len(order) - 1, 0)
    logger.info("Labelled %d enclosed regions in a %dx%d raster", cell_count, width, height)
    return RegionLabels(labels=labels, cell_count=cell_count, areas=areas)


__all__ = [
    "FIRST_CELL_LABEL",
    "MEMBRANE_LABEL",
    "MINIMAL_CELL_SIZE",
    "OUTSIDE_LABEL",
    "RESERVED_LABELS",
    "RegionLabels",
    "label_regions",
]
