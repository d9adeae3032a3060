from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

from .vertex_graph import VertexGraph

Pixel = tuple[int, int]

DEFAULT_HIGHLIGHT = (255, 0, 255)
EXTERIOR_COLOR = (255, 255, 0)


def render_vertex_overlay(
    graph: VertexGraph,
    source: Image.Image | np.ndarray,
    *,
    offset: Pixel = (0, 0),
    edge_color: tuple[int, int, int] = DEFAULT_HIGHLIGHT,
    node_color: tuple[int, int, int] = DEFAULT_HIGHLIGHT,
    exterior_color: tuple[int, int, int] = EXTERIOR_COLOR,
    node_radius: int = 1,
    edge_width: int = 1,
) -> Image.Image:
    """Draw edge chords and vertices over the source frame.

    The frame goes into the green channel only, so the magenta chords stand
    out. Graph coordinates are shifted by ``offset`` to land on the uncropped
    frame.
    """

    gray = np.asarray(source.convert("L") if isinstance(source, Image.Image) else source, dtype=np.uint8)
    base = np.zeros(gray.shape + (3,), dtype=np.uint8)
    base[..., 1] = gray
    overlay = Image.fromarray(base)
    draw = ImageDraw.Draw(overlay)
    ox, oy = offset

    for edge in graph.edges:
        (x0, y0), (x1, y1) = edge.start, edge.end
        draw.line([(x0 + ox, y0 + oy), (x1 + ox, y1 + oy)], fill=edge_color, width=edge_width)

    if node_radius > 0:
        for vertex in graph.vertices:
            x, y = vertex.x + ox, vertex.y + oy
            color = exterior_color if vertex.exterior else node_color
            draw.ellipse([(x - node_radius, y - node_radius), (x + node_radius, y + node_radius)], fill=color)

    return overlay


def render_polygon(
    graph: VertexGraph,
    size: tuple[int, int],
    *,
    edge_color: tuple[int, int, int] = DEFAULT_HIGHLIGHT,
    edge_width: int = 1,
) -> Image.Image:
    """Draw the edge chords alone on a black canvas of ``size`` (width, height)."""

    canvas = Image.new("RGB", size, (0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    for edge in graph.edges:
        draw.line([edge.start, edge.end], fill=edge_color, width=edge_width)
    return canvas


__all__ = [
    "render_polygon",
    "render_vertex_overlay",
]
