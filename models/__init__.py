"""Model utilities for the skeleton-to-vertex-graph pipeline."""

from .boundary import check_four_block, condition_boundary, crop_to_content
from .contour_tracer import Contour, trace_contours
from .errors import (
    MalformedSkeletonError,
    RepairAmbiguityError,
    TopologyInconsistencyError,
    UndersizedRegionError,
    VertexGraphError,
)
from .graph_builder import (
    build_edges,
    build_exterior_cells,
    build_interior_cells,
    build_vertices,
    extract_vertex_graph,
    finalize_cells,
    order_neighbors,
)
from .graph_render import render_polygon, render_vertex_overlay
from .neighborhood import classify_pixels
from .regions import MINIMAL_CELL_SIZE, RegionLabels, label_regions
from .repair import RepairResult, reconnect_contours
from .report import format_report, write_report
from .vertex_graph import Cell, Edge, GraphCounts, Vertex, VertexGraph, check_consistency

__all__ = [
    "classify_pixels",
    "trace_contours",
    "Contour",
    "crop_to_content",
    "check_four_block",
    "condition_boundary",
    "MINIMAL_CELL_SIZE",
    "RegionLabels",
    "label_regions",
    "build_vertices",
    "reconnect_contours",
    "RepairResult",
    "build_edges",
    "order_neighbors",
    "build_exterior_cells",
    "build_interior_cells",
    "finalize_cells",
    "extract_vertex_graph",
    "Vertex",
    "Edge",
    "Cell",
    "GraphCounts",
    "VertexGraph",
    "check_consistency",
    "format_report",
    "write_report",
    "render_vertex_overlay",
    "render_polygon",
    "VertexGraphError",
    "MalformedSkeletonError",
    "UndersizedRegionError",
    "TopologyInconsistencyError",
    "RepairAmbiguityError",
]
