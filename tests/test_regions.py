"""Tests for background region labelling."""

import numpy as np
import pytest

from models.errors import UndersizedRegionError
from models.regions import OUTSIDE_LABEL, label_regions


class TestLabelRegions:
    def test_single_enclosed_cell(self, conditioned_tissue):
        regions = label_regions(conditioned_tissue)
        assert regions.cell_count == 1
        assert regions.label_at(0, 0) == OUTSIDE_LABEL
        assert regions.label_at(7, 7) == 2
        assert regions.label_at(4, 4) == 0
        assert regions.areas == {2: 25}

    def test_labels_follow_raster_order(self, walled_tissue):
        regions = label_regions(walled_tissue)
        assert regions.cell_count == 2
        assert regions.label_at(5, 5) == 2
        assert regions.label_at(8, 9) == 3
        assert regions.areas == {2: 10, 3: 10}

    def test_open_cells_join_the_outside(self, conditioned_tissue):
        regions = label_regions(conditioned_tissue)
        assert regions.label_at(2, 2) == OUTSIDE_LABEL
        assert regions.label_at(12, 12) == OUTSIDE_LABEL

    def test_undersized_region_reports_seed(self, conditioned_tissue):
        with pytest.raises(UndersizedRegionError) as excinfo:
            label_regions(conditioned_tissue, min_cell_size=25)
        assert excinfo.value.point == (5, 5)
        assert excinfo.value.counts == {"area": 25, "min_cell_size": 25}

    def test_threshold_is_inclusive(self, conditioned_tissue):
        assert label_regions(conditioned_tissue, min_cell_size=24).cell_count == 1

    def test_blank_raster(self):
        regions = label_regions(np.zeros((4, 4), dtype=np.uint8))
        assert regions.cell_count == 0
        assert (regions.labels == OUTSIDE_LABEL).all()
