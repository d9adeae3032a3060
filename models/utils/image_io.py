"""Thin wrappers around Pillow loading utilities."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterator

import numpy as np
from PIL import Image, ImageSequence, UnidentifiedImageError

SKELETON_VALUE = 255


def _open_image(path: Path) -> Image.Image:
    if not path.exists():
        raise FileNotFoundError(f"Image source {path} does not exist")
    try:
        return Image.open(path)
    except UnidentifiedImageError as exc:
        raise ValueError(f"{path} is not a valid image file.") from exc


def load_image(source: Image.Image | str | Path, *, mode: str | None = None) -> Image.Image:
    """Load an image from ``source`` (path or Image) and optionally convert modes."""

    if isinstance(source, Image.Image):
        image = source.copy()
    else:
        with _open_image(Path(source)) as opened:
            image = opened.copy()
    if mode is not None:
        image = image.convert(mode)
    return image


def load_frames(source: Image.Image | str | Path) -> Iterator[Image.Image]:
    """Yield every frame of a (possibly multi-page) image as mode ``L``."""

    if isinstance(source, Image.Image):
        for frame in ImageSequence.Iterator(source):
            yield frame.convert("L")
        return
    with _open_image(Path(source)) as opened:
        for frame in ImageSequence.Iterator(opened):
            yield frame.convert("L")


def as_skeleton_raster(source: Image.Image | np.ndarray | str | Path) -> np.ndarray:
    """Return a ``uint8`` raster holding 255 on membrane pixels and 0 elsewhere.

    Boolean arrays are taken as membrane masks; for any other input only
    pixels equal to 255 count as membrane.
    """

    if isinstance(source, np.ndarray):
        array = source
    else:
        array = np.asarray(load_image(source, mode="L"))
    if array.ndim != 2:
        raise ValueError("Skeleton raster must be a 2-D array")
    if array.dtype == bool:
        membrane = array
    else:
        membrane = array == SKELETON_VALUE
    return np.where(membrane, SKELETON_VALUE, 0).astype(np.uint8)


def encode_png(image: Image.Image, *, mode: str | None = None) -> bytes:
    """Return PNG-encoded bytes for the provided Pillow image."""

    buffer = io.BytesIO()
    target = image.convert(mode) if mode is not None else image
    target.save(buffer, format="PNG")
    return buffer.getvalue()


def save_png(image: Image.Image, destination: Path, *, mode: str | None = None) -> Path:
    """Persist ``image`` as PNG at ``destination``."""

    destination = destination.expanduser()
    destination.parent.mkdir(parents=True, exist_ok=True)
    data = encode_png(image, mode=mode)
    destination.write_bytes(data)
    return destination


def save_raster(raster: np.ndarray, destination: Path) -> Path:
    """Persist a single-channel ``uint8`` raster as PNG."""

    return save_png(Image.fromarray(np.asarray(raster, dtype=np.uint8)), destination)


__all__ = [
    "SKELETON_VALUE",
    "as_skeleton_raster",
    "encode_png",
    "load_frames",
    "load_image",
    "save_png",
    "save_raster",
]
