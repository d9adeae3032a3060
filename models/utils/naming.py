"""Shared helpers to keep per-frame artifact filenames consistent."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# Prefix and suffix for each artifact written per frame. The conditioned
# skeleton and the text report share the bare ``<title>_<frame>`` stem.
@dataclass(frozen=True, slots=True)
class StageSpec:
    """Metadata describing a stage's on-disk representation."""

    name: str
    prefix: str
    suffix: str


STAGE_SPECS: dict[str, StageSpec] = {
    "conditioned": StageSpec("conditioned", "", ".png"),
    "report": StageSpec("report", "", ".txt"),
    "graph": StageSpec("graph", "graph_", ".json"),
    "vertex": StageSpec("vertex", "vertex_", ".png"),
    "polygon": StageSpec("polygon", "polygon_", ".png"),
}


def stage_spec(stage: str) -> StageSpec:
    """Return the stage metadata for ``stage``."""

    spec = STAGE_SPECS.get(stage.strip().lower())
    if spec is None:
        raise KeyError(f"Unknown stage '{stage}'")
    return spec


def frame_stem(title: str, frame_index: int) -> str:
    """Return ``<title>_<NNNN>`` using a 1-based frame number."""

    return f"{title}_{frame_index + 1:04d}"


def frame_artifact_name(stage: str, title: str, frame_index: int) -> str:
    spec = stage_spec(stage)
    return f"{spec.prefix}{frame_stem(title, frame_index)}{spec.suffix}"


def canonical_sample_name(path: Path | str) -> str:
    """Best-effort attempt at deriving the logical sample name from a path."""

    stem = Path(path).stem
    for spec in STAGE_SPECS.values():
        if spec.prefix and stem.startswith(spec.prefix) and len(stem) > len(spec.prefix):
            return stem[len(spec.prefix) :]
    return stem


__all__ = [
    "STAGE_SPECS",
    "StageSpec",
    "canonical_sample_name",
    "frame_artifact_name",
    "frame_stem",
    "stage_spec",
]
