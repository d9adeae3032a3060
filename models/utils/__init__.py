"""Lightweight shared helpers for the models layer."""

from .image_io import SKELETON_VALUE, as_skeleton_raster, encode_png, load_frames, load_image, save_png, save_raster
from .naming import STAGE_SPECS, canonical_sample_name, frame_artifact_name, frame_stem, stage_spec

__all__ = [
    "SKELETON_VALUE",
    "STAGE_SPECS",
    "as_skeleton_raster",
    "canonical_sample_name",
    "encode_png",
    "frame_artifact_name",
    "frame_stem",
    "load_frames",
    "load_image",
    "save_png",
    "save_raster",
    "stage_spec",
]
