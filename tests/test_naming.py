"""Tests for per-frame artifact names."""

import pytest

from models.utils import canonical_sample_name, frame_artifact_name, stage_spec


@pytest.mark.parametrize(
    ("stage", "expected"),
    [
        ("conditioned", "cells_0003.png"),
        ("report", "cells_0003.txt"),
        ("graph", "graph_cells_0003.json"),
        ("Vertex", "vertex_cells_0003.png"),
        ("polygon", "polygon_cells_0003.png"),
    ],
)
def test_frame_artifact_name(stage, expected):
    assert frame_artifact_name(stage, "cells", 2) == expected


def test_unknown_stage():
    with pytest.raises(KeyError):
        stage_spec("overlay")


def test_sample_name_strips_stage_prefix():
    assert canonical_sample_name("out/graph_cells.json") == "cells"
    assert canonical_sample_name("cells.tif") == "cells"
