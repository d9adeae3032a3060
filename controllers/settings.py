"""Load extraction defaults from config.toml."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import tomllib

CONFIG_FILENAME = "config.toml"
CONFIG_SECTION = "vertex_graph"
DEFAULT_OUTPUT_DIR = "data/vertex"
DEFAULT_MIN_CELL_SIZE = 4


@dataclass(slots=True)
class ExtractionConfig:
    """Per-run options shared by every frame of a stack."""

    min_cell_size: int = DEFAULT_MIN_CELL_SIZE
    crop: bool = True
    check_four_block: bool = True
    render_overlays: bool = True
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))

    def ensure_directories(self) -> None:
        """Create the output folder so downstream saves never fail."""

        self.output_dir.mkdir(parents=True, exist_ok=True)


def load_extraction_config(config_path: Path | None = None) -> ExtractionConfig:
    """Return an :class:`ExtractionConfig` with config.toml overrides applied."""

    section = _read_config_section(config_path or _project_root() / CONFIG_FILENAME)
    cfg = ExtractionConfig()

    min_cell_size = section.get("min_cell_size")
    if isinstance(min_cell_size, int) and not isinstance(min_cell_size, bool):
        if min_cell_size < 0:
            raise ValueError(f"min_cell_size must be non-negative, got {min_cell_size}")
        cfg.min_cell_size = min_cell_size
    for key in ("crop", "check_four_block", "render_overlays"):
        value = section.get(key)
        if isinstance(value, bool):
            setattr(cfg, key, value)
    output_dir = section.get("output_dir")
    if isinstance(output_dir, str) and output_dir.strip():
        cfg.output_dir = _resolve_path(output_dir)
    else:
        cfg.output_dir = _resolve_path(DEFAULT_OUTPUT_DIR)
    return cfg


@lru_cache(maxsize=4)
def _read_config_section(config_path: Path) -> dict[str, object]:
    if not config_path.is_file():
        return {}

    with config_path.open("rb") as handle:
        config = tomllib.load(handle)

    section = config.get(CONFIG_SECTION)
    if isinstance(section, dict):
        return dict(section)
    return {}


def _resolve_path(raw_path: str) -> Path:
    path = Path(raw_path).expanduser()
    if path.is_absolute():
        return path.resolve()
    return (_project_root() / path).resolve()


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


__all__ = ["ExtractionConfig", "load_extraction_config"]
