"""Synthetic skeleton rasters shared by the test-suite.

All coordinates are ``(x, y)``; membrane pixels are 255.
"""

from __future__ import annotations

import numpy as np
import pytest

MEMBRANE = 255

# Open whiskers leading from the corners of the central square to the outer ring.
WHISKERS = [(4, 2), (4, 3), (11, 4), (12, 4), (10, 11), (10, 12), (2, 10), (3, 10)]
# The same whiskers once the outer ring has been stripped (ring junctions kept).
STUBS = WHISKERS + [(4, 1), (13, 4), (10, 13), (1, 10)]


def draw_skeleton(
    width: int,
    height: int,
    *,
    rects: list[tuple[int, int, int, int]] = (),
    pixels: list[tuple[int, int]] = (),
    shift: int = 0,
) -> np.ndarray:
    raster = np.zeros((height, width), dtype=np.uint8)
    for left, top, right, bottom in rects:
        left, top, right, bottom = left + shift, top + shift, right + shift, bottom + shift
        raster[top, left : right + 1] = MEMBRANE
        raster[bottom, left : right + 1] = MEMBRANE
        raster[top : bottom + 1, left] = MEMBRANE
        raster[top : bottom + 1, right] = MEMBRANE
    for x, y in pixels:
        raster[y + shift, x + shift] = MEMBRANE
    return raster


@pytest.fixture
def ring_tissue() -> np.ndarray:
    """One enclosed cell surrounded by four open cells and an outer ring."""

    return draw_skeleton(15, 15, rects=[(1, 1, 13, 13), (4, 4, 10, 10)], pixels=WHISKERS)


@pytest.fixture
def framed_tissue() -> np.ndarray:
    """``ring_tissue`` shifted by two pixels inside an extra bounding ring."""

    return draw_skeleton(
        19,
        19,
        rects=[(-1, -1, 15, 15), (1, 1, 13, 13), (4, 4, 10, 10)],
        pixels=WHISKERS,
        shift=2,
    )


@pytest.fixture
def conditioned_tissue() -> np.ndarray:
    """What conditioning leaves of ``ring_tissue``: the square and four stubs."""

    return draw_skeleton(15, 15, rects=[(4, 4, 10, 10)], pixels=STUBS)


@pytest.fixture
def spur_tissue() -> np.ndarray:
    """``conditioned_tissue`` with a two-pixel spur hanging into the cell."""

    return draw_skeleton(15, 15, rects=[(4, 4, 10, 10)], pixels=STUBS + [(7, 5), (7, 6)])


@pytest.fixture
def walled_tissue() -> np.ndarray:
    """``conditioned_tissue`` with a wall splitting the square into two cells."""

    wall = [(7, y) for y in range(5, 10)]
    return draw_skeleton(15, 15, rects=[(4, 4, 10, 10)], pixels=STUBS + wall)


@pytest.fixture
def crossed_tissue() -> np.ndarray:
    """``walled_tissue`` with a left arm at y=7 and a one-pixel spur opposite it.

    The wall pixel (7, 7) is a four-way crossing whose east arm is a spur.
    """

    wall = [(7, y) for y in range(5, 10)]
    arms = [(5, 7), (6, 7), (8, 7)]
    return draw_skeleton(15, 15, rects=[(4, 4, 10, 10)], pixels=STUBS + wall + arms)


@pytest.fixture
def plus_skeleton() -> np.ndarray:
    """7x7 plus centred at (3, 3) reaching every border."""

    raster = np.zeros((7, 7), dtype=np.uint8)
    raster[3, :] = MEMBRANE
    raster[:, 3] = MEMBRANE
    return raster
