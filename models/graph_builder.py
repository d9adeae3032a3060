"""Build the planar vertex graph from a conditioned skeleton raster."""

from __future__ import annotations

import logging
import math

import numpy as np

from .contour_tracer import Contour, trace_contours
from .errors import TopologyInconsistencyError
from .neighborhood import NEIGHBOR_WEIGHTS, NODE_CLASSES, TERMINAL, classify_pixels
from .regions import FIRST_CELL_LABEL, MEMBRANE_LABEL, MINIMAL_CELL_SIZE, OUTSIDE_LABEL, RESERVED_LABELS, label_regions
from .repair import reconnect_contours
from .vertex_graph import Cell, Edge, Vertex, VertexGraph, check_consistency

logger = logging.getLogger(__name__)

Pixel = tuple[int, int]


def build_vertices(classes: np.ndarray, labels: np.ndarray) -> tuple[list[Vertex], list[Pixel]]:
    """Create one vertex per node pixel.

    A node whose neighbourhood holds only membrane and a single enclosed cell
    is a spur tip: it is returned in the second list instead of becoming a
    vertex. Interior vertices get the lower ids.
    """

    vertices: list[Vertex] = []
    isolated: list[Pixel] = []
    rows, cols = np.nonzero(np.isin(classes, list(NODE_CLASSES)))
    for y, x in zip(rows.tolist(), cols.tolist()):
        around = sorted({int(labels[y + dy, x + dx]) for dx, dy, _ in NEIGHBOR_WEIGHTS})
        if len(around) == 2 and around[0] == MEMBRANE_LABEL and around[1] != OUTSIDE_LABEL:
            isolated.append((x, y))
            continue
        cells = tuple(label for label in around if label not in RESERVED_LABELS)
        vertices.append(Vertex(id=-1, x=x, y=y, ctype=str(classes[y, x]), cells=cells))

    vertices.sort(key=lambda vertex: vertex.exterior)
    for index, vertex in enumerate(vertices):
        vertex.id = index
    return vertices, isolated


def build_edges(contours: list[Contour], classes: np.ndarray, vertices: list[Vertex]) -> list[Edge]:
    """Turn each contour into an edge, exterior edges first.

    Raises:
        TopologyInconsistencyError: a contour ends away from every vertex, or
            the exterior edge count differs from the exterior vertex count.
    """

    by_position = {vertex.position: vertex.id for vertex in vertices}
    edges: list[Edge] = []
    for contour in contours:
        start, end = contour[0], contour[-1]
        ids = []
        for point in (start, end):
            if point not in by_position:
                raise TopologyInconsistencyError(
                    f"Contour endpoint {point} is not a vertex",
                    point=point,
                )
            ids.append(by_position[point])
        exterior = classes[start[1], start[0]] == TERMINAL or classes[end[1], end[0]] == TERMINAL
        angle = -math.atan2(start[1] - end[1], start[0] - end[0])
        if angle < 0:
            angle += math.pi
        edges.append(
            Edge(
                id=-1,
                u=ids[0],
                v=ids[1],
                points=tuple(contour),
                exterior=bool(exterior),
                length=math.dist(start, end),
                angle=angle,
            )
        )

    edges.sort(key=lambda edge: not edge.exterior)
    for index, edge in enumerate(edges):
        edge.id = index

    exterior_vertices = sum(1 for vertex in vertices if vertex.exterior)
    exterior_edges = sum(1 for edge in edges if edge.exterior)
    if exterior_vertices != exterior_edges:
        raise TopologyInconsistencyError(
            f"{exterior_vertices} exterior vertices but {exterior_edges} exterior edges",
            counts={"exterior_vertices": exterior_vertices, "exterior_edges": exterior_edges},
        )
    return edges


def order_neighbors(vertices: list[Vertex], edges: list[Edge]) -> None:
    """Fill ``neighbors``/``edges`` of every vertex sorted by leaving angle.

    Angles are taken in image space (y down), unlike the y-up areas and
    centroids; :func:`build_exterior_cells` relies on this rotation order.
    """

    incident: dict[int, list[tuple[float, int, int]]] = {vertex.id: [] for vertex in vertices}
    for edge in edges:
        for vertex_id in (edge.u, edge.v):
            vertex = vertices[vertex_id]
            step = edge.points[1] if edge.points[0] == vertex.position else edge.points[-2]
            angle = math.atan2(step[1] - vertex.y, step[0] - vertex.x)
            incident[vertex_id].append((angle, edge.other(vertex_id), edge.id))

    for vertex in vertices:
        ordered = sorted(incident[vertex.id], key=lambda item: item[0])
        vertex.neighbors = [neighbor for _, neighbor, _ in ordered]
        vertex.edges = [edge_id for _, _, edge_id in ordered]


def build_exterior_cells(vertices: list[Vertex], edges: list[Edge]) -> list[Cell]:
    """Walk the outer boundary chain leaving each exterior vertex.

    At every vertex the walk continues with the neighbour that follows the
    one it arrived from in angular order, until it meets an exterior vertex.
    """

    max_steps = 2 * len(edges) + 2
    cells: list[Cell] = []
    for start in vertices:
        if not start.exterior:
            continue
        if start.degree != 1:
            raise TopologyInconsistencyError(
                f"Exterior vertex {start.id} at {start.position} has degree {start.degree}",
                point=start.position,
                counts={"degree": start.degree},
            )
        cycle = [start.id]
        previous = start.id
        current = vertices[start.neighbors[0]]
        while True:
            cycle.append(current.id)
            if len(cycle) > max_steps:
                raise TopologyInconsistencyError(
                    f"Exterior walk from vertex {start.id} did not terminate",
                    point=start.position,
                    counts={"steps": len(cycle)},
                )
            if previous not in current.neighbors:
                raise TopologyInconsistencyError(
                    f"Vertex {current.id} does not list {previous} as a neighbour",
                    point=current.position,
                )
            if current.degree == 1:
                raise TopologyInconsistencyError(
                    f"Exterior walk hit interior dead end at vertex {current.id}",
                    point=current.position,
                )
            position = current.neighbors.index(previous)
            previous = current.id
            current = vertices[current.neighbors[(position + 1) % current.degree]]
            if current.exterior:
                break
        cycle.append(current.id)
        cells.append(Cell(id=-1, vertices=cycle, exterior=True))
    return cells


def build_interior_cells(vertices: list[Vertex], edges: list[Edge], cell_count: int) -> list[Cell]:
    """Chain the edges around each enclosed region into a vertex cycle.

    Cycles are oriented counter-clockwise in y-up coordinates and stored
    without the repeated closing vertex.
    """

    groups: list[list[int]] = [[] for _ in range(cell_count)]
    for edge in edges:
        first, second = vertices[edge.u], vertices[edge.v]
        if first.exterior or second.exterior:
            continue
        for label in sorted(set(first.cells) & set(second.cells)):
            index = label - FIRST_CELL_LABEL
            if 0 <= index < cell_count:
                groups[index].append(edge.id)

    cells: list[Cell] = []
    for index, group in enumerate(groups):
        label = FIRST_CELL_LABEL + index
        if not group:
            logger.debug("Region %d has no interior edges", label)
            continue
        cycle = _chain_edges(edges, group)
        if cycle[0] != cycle[-1]:
            head, tail = vertices[cycle[0]], vertices[cycle[-1]]
            raise TopologyInconsistencyError(
                f"Cell {label} does not close: walk runs from {head.position} to {tail.position}",
                point=head.position,
                counts={"label": label, "edges": len(group)},
            )
        if _doubled_area([vertices[v].position for v in cycle]) < 0:
            cycle.reverse()
        cells.append(Cell(id=-1, vertices=cycle[:-1], exterior=False, label=label))
    return cells


def _chain_edges(edges: list[Edge], group: list[int]) -> list[int]:
    first = edges[group[0]]
    cycle = [first.u, first.v]
    tip = first.v
    used = {group[0]}
    for _ in range(len(group) - 1):
        for edge_id in group[1:]:
            if edge_id in used:
                continue
            edge = edges[edge_id]
            if edge.u == tip:
                tip = edge.v
            elif edge.v == tip:
                tip = edge.u
            else:
                continue
            cycle.append(tip)
            used.add(edge_id)
    return cycle


def _doubled_area(points: list[Pixel]) -> float:
    """Shoelace sum on y-flipped coordinates (positive when counter-clockwise)."""

    total = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        total += x1 * -y2 - x2 * -y1
    return total


def finalize_cells(cells: list[Cell], vertices: list[Vertex], edges: list[Edge]) -> list[Cell]:
    """Assign ids, area, centroid and bounding edges to ``cells``.

    Raises:
        TopologyInconsistencyError: a cell has negative area.
    """

    edge_lookup: dict[tuple[int, int], int] = {}
    for edge in edges:
        edge_lookup.setdefault((min(edge.u, edge.v), max(edge.u, edge.v)), edge.id)

    for index, cell in enumerate(cells):
        cell.id = index
        points = [vertices[v].position for v in cell.vertices]
        doubled = _doubled_area(points)
        if doubled < 0:
            raise TopologyInconsistencyError(
                f"Cell {index} has negative area {doubled / 2:.1f}",
                point=points[0],
                counts={"cell": index, "vertices": len(points)},
            )
        cell.area = doubled / 2
        cell.cx, cell.cy = _centroid(points, doubled)

        cell.edges = []
        for a, b in zip(cell.vertices, cell.vertices[1:] + cell.vertices[:1]):
            edge_id = edge_lookup.get((min(a, b), max(a, b)))
            if edge_id is not None:
                cell.edges.append(edge_id)
    return cells


def _centroid(points: list[Pixel], doubled: float) -> tuple[float, float]:
    if doubled == 0:
        return 0.0, 0.0
    sx = sy = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        cross = x1 * -y2 - x2 * -y1
        sx += cross * (x1 + x2)
        sy += cross * (-y1 - y2)
    return sx / (3 * doubled), sy / (3 * doubled)


def extract_vertex_graph(raster: np.ndarray, *, min_cell_size: int = MINIMAL_CELL_SIZE) -> VertexGraph:
    """Run the full extraction on a conditioned skeleton raster.

    Args:
        raster: Conditioned raster, see :func:`models.boundary.condition_boundary`.
        min_cell_size: Enclosed regions with this many pixels or fewer are fatal.

    Returns:
        The consistent :class:`VertexGraph`.

    Raises:
        VertexGraphError: any stage detects a malformed skeleton or an
            inconsistent topology.
    """

    classes = classify_pixels(raster)
    contours = trace_contours(raster, classes)
    regions = label_regions(raster, min_cell_size=min_cell_size)

    vertices, isolated = build_vertices(classes, regions.labels)
    logger.info(
        "Found %d contours, %d vertices and %d isolated terminals",
        len(contours),
        len(vertices),
        len(isolated),
    )
    repaired = reconnect_contours(contours, classes, vertices, isolated)

    # Repair invalidates every id; rebuild from the updated contours.
    vertices, _ = build_vertices(repaired.classes, regions.labels)
    edges = build_edges(repaired.contours, repaired.classes, vertices)
    order_neighbors(vertices, edges)

    cells = build_exterior_cells(vertices, edges)
    cells.extend(build_interior_cells(vertices, edges, regions.cell_count))
    finalize_cells(cells, vertices, edges)

    graph = VertexGraph(vertices=vertices, edges=edges, cells=cells)
    counts = check_consistency(graph.counts())
    logger.info(
        "Extracted %d vertices, %d edges, %d cells (%d exterior)",
        counts.vertices,
        counts.edges,
        counts.cells,
        counts.exterior_cells,
    )
    return graph


__all__ = [
    "build_edges",
    "build_exterior_cells",
    "build_interior_cells",
    "build_vertices",
    "extract_vertex_graph",
    "finalize_cells",
    "order_neighbors",
]
