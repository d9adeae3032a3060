"""8-neighbour classification of skeleton pixels.

Every membrane pixel is mapped to a one-letter class by building an 8-bit mask
from its neighbours and looking the mask up in a fixed 256-entry table::

    NW=1   N=2   NE=4
    W=8    .     E=16
    SW=32  S=64  SE=128

The table encodes how many separate runs of membrane neighbours surround the
pixel. Two symbols (``b`` and ``z``) mark patterns that cannot occur in a
well-formed 1-pixel skeleton (2x2 blocks, diagonal-only contacts).
"""

from __future__ import annotations

import logging
from typing import Iterator

import numpy as np

from .errors import MalformedSkeletonError

logger = logging.getLogger(__name__)

FOREGROUND = 255
BACKGROUND = 0

INTERIOR = "i"
ISOLATED = "d"
TERMINAL = "t"
EDGE = "e"
JUNCTION = "j"
FOUR_WAY = "f"
REJECT_CLASSES: frozenset[str] = frozenset({"b", "z"})
NODE_CLASSES: frozenset[str] = frozenset({TERMINAL, JUNCTION, FOUR_WAY})

# (dx, dy, weight) in mask bit order.
NEIGHBOR_WEIGHTS: tuple[tuple[int, int, int], ...] = (
    (-1, -1, 1),
    (0, -1, 2),
    (1, -1, 4),
    (-1, 0, 8),
    (1, 0, 16),
    (-1, 1, 32),
    (0, 1, 64),
    (1, 1, 128),
)

_TABLE_ROWS = (
    "dttttettttebeeez",
    "teeetebeeejeeezz",
    "teeeejeettezeeez",
    "ejjjejzzeejzeezz",
    "teeeejeeeejzjjjz",
    "ejjjejzzjjfzjjzz",
    "teeeejeebzzzzzzz",
    "ejjjejzzzzzzzzzz",
    "teeeejeeeejzjjjz",
    "teeetezzeejzeezz",
    "ejjjjfjjeejzjjjz",
    "ejjjejzzeejzeezz",
    "teeeejeeeejzjjjz",
    "zzzzzzzzzzzzzzzz",
    "teeeejeebzzzzzzz",
    "zzzzzzzzzzzzzzzz",
)
NEIGHBOR_TABLE = "".join(_TABLE_ROWS)
_TABLE_ARRAY = np.array(list(NEIGHBOR_TABLE), dtype="<U1")


def neighbor_mask(membrane: np.ndarray, x: int, y: int) -> int:
    """Return the 8-bit neighbour mask of ``(x, y)`` in a boolean membrane array."""

    mask = 0
    for dx, dy, weight in NEIGHBOR_WEIGHTS:
        if membrane[y + dy, x + dx]:
            mask |= weight
    return mask


def classify_mask(mask: int) -> str:
    if not 0 <= mask < len(NEIGHBOR_TABLE):
        raise ValueError(f"Neighbour mask must be in [0, 255], got {mask}")
    return NEIGHBOR_TABLE[mask]


def classify_pixels(raster: np.ndarray) -> np.ndarray:
    """Classify every pixel of ``raster`` and return a ``<U1`` class array.

    Pixels equal to :data:`FOREGROUND` are membrane. The one-pixel margin is
    always :data:`INTERIOR`.

    Raises:
        MalformedSkeletonError: if any pixel maps to a reject symbol. The first
            offending pixel in raster order is reported.
    """

    membrane = np.asarray(raster) == FOREGROUND
    height, width = membrane.shape
    classes = np.full((height, width), INTERIOR, dtype="<U1")
    if height < 3 or width < 3:
        return classes

    codes = np.zeros((height - 2, width - 2), dtype=np.intp)
    for dx, dy, weight in NEIGHBOR_WEIGHTS:
        shifted = membrane[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
        codes += shifted.astype(np.intp) * weight

    core = membrane[1:-1, 1:-1]
    classes[1:-1, 1:-1] = np.where(core, _TABLE_ARRAY[codes], INTERIOR)

    rejects = np.argwhere(np.isin(classes, list(REJECT_CLASSES)))
    if len(rejects):
        y, x = (int(v) for v in rejects[0])
        mask = int(codes[y - 1, x - 1])
        raise MalformedSkeletonError(
            f"Malformed skeleton pattern at ({x}, {y}):\n{describe_pattern(mask)}",
            point=(x, y),
            counts={"mask": mask, "rejected_pixels": len(rejects)},
        )
    return classes


def touches(mask: np.ndarray) -> np.ndarray:
    """Return a boolean array marking pixels with at least one True 8-neighbour."""

    padded = np.pad(np.asarray(mask, dtype=bool), 1, constant_values=False)
    height, width = padded.shape
    hit = np.zeros((height - 2, width - 2), dtype=bool)
    for dx, dy, _ in NEIGHBOR_WEIGHTS:
        hit |= padded[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
    return hit


def describe_pattern(mask: int) -> str:
    """Render ``mask`` as a 3x3 picture (``#`` membrane, ``.`` background)."""

    cells = ["#" if mask & weight else "." for _, _, weight in NEIGHBOR_WEIGHTS]
    rows = (cells[0:3], [cells[3], "o", cells[4]], cells[5:8])
    return "\n".join("".join(row) for row in rows)


def iter_table() -> Iterator[tuple[int, str]]:
    """Yield ``(mask, symbol)`` for all 256 neighbour configurations."""

    for mask, symbol in enumerate(NEIGHBOR_TABLE):
        yield mask, symbol


__all__ = [
    "FOREGROUND",
    "BACKGROUND",
    "INTERIOR",
    "ISOLATED",
    "TERMINAL",
    "EDGE",
    "JUNCTION",
    "FOUR_WAY",
    "NODE_CLASSES",
    "REJECT_CLASSES",
    "NEIGHBOR_TABLE",
    "NEIGHBOR_WEIGHTS",
    "classify_mask",
    "classify_pixels",
    "describe_pattern",
    "iter_table",
    "neighbor_mask",
    "touches",
]
