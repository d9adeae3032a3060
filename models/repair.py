"""Reconnect edges broken by spurious terminal stubs.

A terminal that only sees membrane and a single enclosed cell is a short spur
poking into a cell. Its contour is removed and, when the junction at its far
end is left with exactly two contours, those two contours are spliced into one
edge that runs straight through the former junction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .contour_tracer import Contour
from .errors import RepairAmbiguityError
from .neighborhood import EDGE, ISOLATED, JUNCTION
from .vertex_graph import Vertex

logger = logging.getLogger(__name__)

Pixel = tuple[int, int]


@dataclass(slots=True)
class RepairResult:
    """Contours, pixel classes and vertices after reconnection."""

    contours: list[Contour]
    classes: np.ndarray
    vertices: list[Vertex]
    spliced: int = 0
    dropped: int = 0


def reconnect_contours(
    contours: list[Contour],
    classes: np.ndarray,
    vertices: list[Vertex],
    isolated_terminals: list[Pixel],
) -> RepairResult:
    """Remove spur contours and splice the edges they interrupted.

    The inputs are not modified. Vertex ids in the result are stale; callers
    must rebuild vertices and edges from the returned contours and classes.

    Raises:
        RepairAmbiguityError: a spur endpoint owns several contours, or the
            junction to remove is not among ``vertices``.
    """

    working = [list(contour) for contour in contours]
    updated = classes.copy()
    remaining = list(vertices)
    spliced = dropped = 0

    for terminal in isolated_terminals:
        owners = _contours_by_endpoint(working)
        found = owners.get(terminal)
        if not found:
            continue
        if len(found) > 1:
            raise RepairAmbiguityError(
                f"Isolated terminal at {terminal} ends {len(found)} contours",
                point=terminal,
                counts={"contours": len(found)},
            )
        spur = working[found[0]]
        junction = spur[0] if spur[-1] == terminal else spur[-1]
        junction_class = updated[junction[1], junction[0]]
        for x, y in spur:
            updated[y, x] = ISOLATED

        others = [index for index in owners.get(junction, []) if index != found[0]]
        if len(others) == len(owners.get(junction, [])):
            raise RepairAmbiguityError(
                f"Contour of terminal {terminal} is not registered at {junction}",
                point=junction,
            )

        if len(others) != 2:
            logger.warning(
                "Dropping spur at %s: junction %s keeps %d contours",
                terminal,
                junction,
                len(others),
            )
            if not others:
                updated[junction[1], junction[0]] = ISOLATED
            elif len(others) == 3:
                updated[junction[1], junction[0]] = JUNCTION
            else:
                updated[junction[1], junction[0]] = junction_class
            working.pop(found[0])
            dropped += 1
            continue

        head, tail = working[others[0]], working[others[1]]
        if head[0] == junction:
            head = head[::-1]
        if tail[-1] == junction:
            tail = tail[:-1][::-1]
        else:
            tail = tail[1:]
        joined = head + tail
        updated[junction[1], junction[0]] = EDGE

        gone = {found[0], *others}
        working = [contour for index, contour in enumerate(working) if index not in gone]
        working.append(joined)

        positions = [vertex.position for vertex in remaining]
        if junction not in positions:
            raise RepairAmbiguityError(f"Unrecognized junction at {junction}", point=junction)
        remaining.pop(positions.index(junction))
        spliced += 1
        logger.debug("Spliced two contours through %s after removing spur at %s", junction, terminal)

    if isolated_terminals:
        logger.info(
            "Repair: %d isolated terminals, %d spliced, %d dropped",
            len(isolated_terminals),
            spliced,
            dropped,
        )
    return RepairResult(working, updated, remaining, spliced=spliced, dropped=dropped)


def _contours_by_endpoint(contours: list[Contour]) -> dict[Pixel, list[int]]:
    owners: dict[Pixel, list[int]] = {}
    for index, contour in enumerate(contours):
        owners.setdefault(contour[0], []).append(index)
        if contour[-1] != contour[0]:
            owners.setdefault(contour[-1], []).append(index)
    return owners


__all__ = ["RepairResult", "reconnect_contours"]
