"""Vertex, edge and cell records of an extracted tissue graph."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .errors import TopologyInconsistencyError
from .neighborhood import FOUR_WAY

Pixel = tuple[int, int]


@dataclass(slots=True)
class Vertex:
    """Topological node of the skeleton.

    ``cells`` holds the enclosed-cell labels around the node (reserved labels
    removed); an empty set makes the vertex exterior. ``neighbors`` and
    ``edges`` are filled in angular order by the neighbour orderer.
    """

    id: int
    x: int
    y: int
    ctype: str
    cells: tuple[int, ...]
    neighbors: list[int] = field(default_factory=list)
    edges: list[int] = field(default_factory=list)

    @property
    def exterior(self) -> bool:
        return not self.cells

    @property
    def position(self) -> Pixel:
        return (self.x, self.y)

    @property
    def degree(self) -> int:
        return len(self.neighbors)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "ctype": self.ctype,
            "cells": list(self.cells),
            "exterior": self.exterior,
            "neighbors": list(self.neighbors),
            "edges": list(self.edges),
        }


@dataclass(slots=True)
class Edge:
    """Skeleton segment between two vertices with its traced polyline."""

    id: int
    u: int
    v: int
    points: tuple[Pixel, ...]
    exterior: bool
    length: float
    angle: float

    @property
    def start(self) -> Pixel:
        return self.points[0]

    @property
    def end(self) -> Pixel:
        return self.points[-1]

    def other(self, vertex_id: int) -> int:
        if vertex_id == self.u:
            return self.v
        if vertex_id == self.v:
            return self.u
        raise ValueError(f"Vertex {vertex_id} is not incident to edge {self.id}.")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "source": self.u,
            "target": self.v,
            "exterior": self.exterior,
            "length": float(self.length),
            "angle": float(self.angle),
            "points": [list(point) for point in self.points],
        }


@dataclass(slots=True)
class Cell:
    """Face of the planar graph as a cyclic list of vertex ids."""

    id: int
    vertices: list[int]
    exterior: bool
    label: int | None = None
    edges: list[int] = field(default_factory=list)
    area: float = 0.0
    cx: float = 0.0
    cy: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "vertices": list(self.vertices),
            "edges": list(self.edges),
            "exterior": self.exterior,
            "label": self.label,
            "area": float(self.area),
            "centroid": [float(self.cx), float(self.cy)],
        }


@dataclass(frozen=True, slots=True)
class GraphCounts:
    """Totals used by the consistency relation and the text report.

    ``interior_*`` are the plain splits (total minus exterior). ``core_*`` are
    the quantities the consistency relation is checked on: every exterior cell
    discounts the terminal vertex and exterior edge at each end of its chain.
    """

    vertices: int
    edges: int
    cells: int
    exterior_vertices: int
    exterior_edges: int
    exterior_cells: int
    four_way: int

    @property
    def interior_vertices(self) -> int:
        return self.vertices - self.exterior_vertices

    @property
    def interior_edges(self) -> int:
        return self.edges - self.exterior_edges

    @property
    def interior_cells(self) -> int:
        return self.cells - self.exterior_cells

    @property
    def core_vertices(self) -> int:
        return self.vertices - 2 * self.exterior_cells

    @property
    def core_edges(self) -> int:
        return self.edges - 2 * self.exterior_cells

    @property
    def core_cells(self) -> int:
        return self.cells - self.exterior_cells

    @property
    def is_consistent(self) -> bool:
        tv, te, tc = self.core_vertices, self.core_edges, self.core_cells
        return 2 * te == 3 * tv + self.four_way and tv - te + tc == 1

    def to_dict(self) -> dict[str, int]:
        return {
            "vertices": self.vertices,
            "edges": self.edges,
            "cells": self.cells,
            "exterior_vertices": self.exterior_vertices,
            "exterior_edges": self.exterior_edges,
            "exterior_cells": self.exterior_cells,
            "interior_vertices": self.interior_vertices,
            "interior_edges": self.interior_edges,
            "interior_cells": self.interior_cells,
            "core_vertices": self.core_vertices,
            "core_edges": self.core_edges,
            "core_cells": self.core_cells,
            "four_way": self.four_way,
        }


@dataclass(slots=True)
class VertexGraph:
    """Vertices, edges and cells addressed by their dense ids."""

    vertices: list[Vertex]
    edges: list[Edge]
    cells: list[Cell]

    def counts(self) -> GraphCounts:
        return GraphCounts(
            vertices=len(self.vertices),
            edges=len(self.edges),
            cells=len(self.cells),
            exterior_vertices=sum(1 for vertex in self.vertices if vertex.exterior),
            exterior_edges=sum(1 for edge in self.edges if edge.exterior),
            exterior_cells=sum(1 for cell in self.cells if cell.exterior),
            four_way=sum(1 for vertex in self.vertices if vertex.ctype == FOUR_WAY),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "counts": self.counts().to_dict(),
            "vertices": [vertex.to_dict() for vertex in self.vertices],
            "edges": [edge.to_dict() for edge in self.edges],
            "cells": [cell.to_dict() for cell in self.cells],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_payload(), indent=indent)

    def save(self, output_path: str | Path) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        return path


def check_consistency(counts: GraphCounts) -> GraphCounts:
    """Raise unless ``2*te == 3*tv + f`` and ``tv - te + tc == 1`` hold."""

    if not counts.is_consistent:
        raise TopologyInconsistencyError(
            "Graph counts violate the consistency relation: "
            f"tv={counts.core_vertices} te={counts.core_edges} "
            f"tc={counts.core_cells} f={counts.four_way}",
            counts=counts.to_dict(),
        )
    return counts


__all__ = [
    "Cell",
    "Edge",
    "GraphCounts",
    "Vertex",
    "VertexGraph",
    "check_consistency",
]
