"""Plain-text report of an extracted vertex graph."""

from __future__ import annotations

from pathlib import Path

from .vertex_graph import VertexGraph, check_consistency

Pixel = tuple[int, int]


def format_report(graph: VertexGraph, *, offset: Pixel = (0, 0)) -> str:
    """Return the report text; vertex coordinates are absolute with y pointing up."""

    counts = check_consistency(graph.counts())
    lines = [
        f"### C_NUM {counts.cells} ",
        f"###  IN_CNUM {counts.interior_cells} ",
        f"###  EX_CNUM {counts.exterior_cells} ",
        f"### E_NUM {counts.edges} ",
        f"###  IN_E_NUM {counts.interior_edges} ",
        f"###  EX_E_NUM {counts.exterior_edges} ",
        f"### V_NUM {counts.vertices} ",
        f"###  IN_V_NUM {counts.interior_vertices} ",
        f"###  EX_V_NUM {counts.exterior_vertices} ",
    ]
    for vertex in graph.vertices:
        x = float(vertex.x + offset[0])
        y = float(-(vertex.y + offset[1]))
        lines.append(f"V[{vertex.id}] {x:f} {y:f} " + ("Ext" if vertex.exterior else ""))
    lines.append("")
    for edge in graph.edges:
        lines.append(f"E[{edge.id}] {edge.u} {edge.v} " + ("Ext" if edge.exterior else ""))
    lines.append("")
    for cell in graph.cells:
        ids = "".join(f"{vertex_id} " for vertex_id in cell.vertices)
        lines.append(f"C[{cell.id}] {len(cell.vertices)} : {ids}" + (" Ext" if cell.exterior else ""))
    lines.append("")
    return "\n".join(lines) + "\n"


def write_report(graph: VertexGraph, destination: str | Path, *, offset: Pixel = (0, 0)) -> Path:
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_report(graph, offset=offset), encoding="utf-8")
    return path


__all__ = ["format_report", "write_report"]
