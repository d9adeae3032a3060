"""Tests for config.toml loading."""

from pathlib import Path

import pytest

from controllers.settings import ExtractionConfig, load_extraction_config


def test_defaults_without_config_file(tmp_path):
    cfg = load_extraction_config(tmp_path / "missing.toml")
    assert cfg.min_cell_size == 4
    assert cfg.crop and cfg.check_four_block and cfg.render_overlays
    assert cfg.output_dir.name == "vertex"


def test_section_overrides(tmp_path):
    config = tmp_path / "config.toml"
    out = tmp_path / "out"
    config.write_text(
        "[vertex_graph]\n"
        "min_cell_size = 12\n"
        "crop = false\n"
        "render_overlays = false\n"
        f'output_dir = "{out.as_posix()}"\n',
        encoding="utf-8",
    )
    cfg = load_extraction_config(config)
    assert cfg.min_cell_size == 12
    assert cfg.crop is False
    assert cfg.check_four_block is True
    assert cfg.render_overlays is False
    assert cfg.output_dir == out.resolve()


def test_negative_min_cell_size(tmp_path):
    config = tmp_path / "config.toml"
    config.write_text("[vertex_graph]\nmin_cell_size = -1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_extraction_config(config)


def test_ensure_directories(tmp_path):
    cfg = ExtractionConfig(output_dir=tmp_path / "a" / "b")
    cfg.ensure_directories()
    assert Path(cfg.output_dir).is_dir()
