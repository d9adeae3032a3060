"""Frame-by-frame skeleton -> vertex graph orchestration.

Each frame of an input stack is normalized, optionally cropped, checked for
2x2 membrane blocks, conditioned and handed to the graph extraction. Frames
share nothing but the :class:`ExtractionConfig`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np
from PIL import Image

from .settings import ExtractionConfig, load_extraction_config
from models.boundary import check_four_block, condition_boundary, crop_to_content
from models.errors import VertexGraphError
from models.graph_builder import extract_vertex_graph
from models.graph_render import render_polygon, render_vertex_overlay
from models.report import write_report
from models.utils import as_skeleton_raster, canonical_sample_name, frame_artifact_name, load_frames, save_png, save_raster
from models.vertex_graph import GraphCounts, VertexGraph

logger = logging.getLogger(__name__)

Pixel = tuple[int, int]


@dataclass(slots=True)
class FrameResult:
    """Everything produced for one successfully processed frame."""

    frame_index: int
    offset: Pixel
    conditioned: np.ndarray
    graph: VertexGraph
    counts: GraphCounts
    artifacts: dict[str, Path]


def process_frame(
    frame: Image.Image | np.ndarray,
    *,
    config: ExtractionConfig | None = None,
    frame_index: int = 0,
) -> FrameResult:
    """Turn one skeleton frame into a consistent vertex graph.

    Args:
        frame: Pillow image or 2-D array; pixels equal to 255 are membrane.
        config: Optional :class:`ExtractionConfig`; defaults are used if omitted.
        frame_index: 0-based position of the frame in its stack, used for
            logging and artifact names.

    Returns:
        FrameResult with the conditioned raster, crop offset and graph. No
        files are written here.

    Raises:
        VertexGraphError: the frame is malformed or its topology is
            inconsistent. Nothing is returned for such a frame.
    """

    cfg = config or ExtractionConfig()
    raster = as_skeleton_raster(frame)
    offset: Pixel = (0, 0)
    try:
        if cfg.crop:
            raster, offset = crop_to_content(raster)
        if cfg.check_four_block:
            check_four_block(raster, offset=offset)
        conditioned = condition_boundary(raster)
        graph = extract_vertex_graph(conditioned, min_cell_size=cfg.min_cell_size)
    except VertexGraphError as exc:
        logger.error(
            "Frame %d failed at %s: %s",
            frame_index + 1,
            exc.absolute_point(offset),
            exc,
        )
        raise

    counts = graph.counts()
    logger.info(
        "Frame %d: %d vertices, %d edges, %d cells",
        frame_index + 1,
        counts.vertices,
        counts.edges,
        counts.cells,
    )
    return FrameResult(
        frame_index=frame_index,
        offset=offset,
        conditioned=conditioned,
        graph=graph,
        counts=counts,
        artifacts={},
    )


def write_frame_artifacts(
    result: FrameResult,
    source: Image.Image | np.ndarray,
    *,
    title: str,
    config: ExtractionConfig,
) -> dict[str, Path]:
    """Persist the conditioned raster, graph JSON, report and overlays of ``result``."""

    out = config.output_dir
    index = result.frame_index
    artifacts = {
        "conditioned": save_raster(result.conditioned, out / frame_artifact_name("conditioned", title, index)),
        "graph": result.graph.save(out / frame_artifact_name("graph", title, index)),
        "report": write_report(
            result.graph,
            out / frame_artifact_name("report", title, index),
            offset=result.offset,
        ),
    }
    if config.render_overlays:
        overlay = render_vertex_overlay(result.graph, as_skeleton_raster(source), offset=result.offset)
        artifacts["vertex"] = save_png(overlay, out / frame_artifact_name("vertex", title, index))
        height, width = result.conditioned.shape
        polygon = render_polygon(result.graph, (width, height))
        artifacts["polygon"] = save_png(polygon, out / frame_artifact_name("polygon", title, index))
    result.artifacts = artifacts
    return artifacts


def process_stack(
    source: Image.Image | str | Path,
    *,
    config: ExtractionConfig | None = None,
    title: str | None = None,
    keep_going: bool = False,
) -> list[FrameResult]:
    """Process every frame of ``source`` in order and write its artifacts.

    Args:
        source: Path to a single- or multi-page image, or an open Pillow image.
        config: Optional :class:`ExtractionConfig` controlling output folder
            and extraction options.
        title: Artifact filename stem. Defaults to the source file stem.
        keep_going: Skip frames that fail instead of stopping at the first
            failure.

    Returns:
        Results for the frames that succeeded.

    Raises:
        VertexGraphError: a frame failed and ``keep_going`` is False.
        ValueError: ``source`` is not a readable image.
    """

    cfg = config or ExtractionConfig()
    cfg.ensure_directories()
    stem = title or _derive_title(source)

    results: list[FrameResult] = []
    for index, frame in enumerate(load_frames(source)):
        try:
            result = process_frame(frame, config=cfg, frame_index=index)
        except VertexGraphError:
            if not keep_going:
                raise
            logger.warning("Skipping frame %d of %s", index + 1, stem)
            continue
        write_frame_artifacts(result, frame, title=stem, config=cfg)
        results.append(result)
    return results


def _derive_title(source: object) -> str:
    if isinstance(source, (str, Path)):
        stem = canonical_sample_name(source).strip()
        if stem:
            return stem
    return "frame"


def _cli(argv: Sequence[str] | None = None) -> int:
    defaults = load_extraction_config()
    parser = argparse.ArgumentParser(
        description="Extract vertex/edge/cell graphs from skeleton image stacks."
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Skeleton image(s); multi-page TIFFs are processed frame by frame.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=defaults.output_dir,
        help=f"Folder for conditioned rasters, graph JSON, reports and overlays (default: {defaults.output_dir}).",
    )
    parser.add_argument(
        "--min-cell-size",
        type=int,
        default=defaults.min_cell_size,
        help=f"Enclosed regions with this many pixels or fewer abort the frame (default: {defaults.min_cell_size}).",
    )
    parser.add_argument("--no-crop", action="store_true", help="Process frames without cropping to their content.")
    parser.add_argument("--no-overlays", action="store_true", help="Skip the vertex/polygon preview images.")
    parser.add_argument("--keep-going", action="store_true", help="Skip failing frames instead of stopping.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = ExtractionConfig(
        min_cell_size=args.min_cell_size,
        crop=defaults.crop and not args.no_crop,
        check_four_block=defaults.check_four_block,
        render_overlays=defaults.render_overlays and not args.no_overlays,
        output_dir=args.output_dir.expanduser(),
    )

    exit_code = 0
    for path in args.inputs:
        try:
            results = process_stack(path, config=cfg, keep_going=args.keep_going)
        except (FileNotFoundError, ValueError) as exc:
            print(f"[error] {path}: {exc}", file=sys.stderr)
            exit_code = 1
            if not args.keep_going:
                return exit_code
            continue
        print(f"[ok] {path} -> {len(results)} frame(s) written to {cfg.output_dir}", file=sys.stderr)
    return exit_code


__all__ = [
    "FrameResult",
    "process_frame",
    "process_stack",
    "write_frame_artifacts",
]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(_cli())
