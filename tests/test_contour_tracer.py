"""Tests for contour tracing between node pixels."""

import numpy as np
import pytest

from models.contour_tracer import NODE_DEGREE, contour_degrees, trace_contours
from models.errors import MalformedSkeletonError, TopologyInconsistencyError
from models.neighborhood import NODE_CLASSES, classify_pixels


def _trace(raster):
    return trace_contours(raster, classify_pixels(raster))


class TestTraceContours:
    """Walks on the conditioned tissue fixtures."""

    def test_contours_in_discovery_order(self, conditioned_tissue):
        contours = _trace(conditioned_tissue)
        assert len(contours) == 8
        assert contours[0] == [(4, 1), (4, 2), (4, 3), (4, 4)]
        assert contours[1] == [(4, 4), (5, 4), (6, 4), (7, 4), (8, 4), (9, 4), (10, 4)]
        assert contours[2][0] == (4, 4) and contours[2][-1] == (4, 10)
        assert [(c[0], c[-1]) for c in contours[3:]] == [
            ((10, 4), (13, 4)),
            ((10, 4), (10, 10)),
            ((1, 10), (4, 10)),
            ((4, 10), (10, 10)),
            ((10, 10), (10, 13)),
        ]

    def test_trace_closure(self, walled_tissue):
        classes = classify_pixels(walled_tissue)
        contours = trace_contours(walled_tissue, classes)
        degrees = contour_degrees(contours)
        nodes = {
            (int(x), int(y)) for y, x in np.argwhere(np.isin(classes, list(NODE_CLASSES)))
        }
        assert set(degrees) == nodes
        for x, y in nodes:
            assert degrees[(x, y)] == NODE_DEGREE[classes[y, x]]

    def test_interior_points_are_edge_pixels(self, walled_tissue):
        classes = classify_pixels(walled_tissue)
        for contour in trace_contours(walled_tissue, classes):
            assert classes[contour[0][1], contour[0][0]] in NODE_CLASSES
            assert classes[contour[-1][1], contour[-1][0]] in NODE_CLASSES
            assert all(classes[y, x] == "e" for x, y in contour[1:-1])

    def test_input_raster_is_not_modified(self, conditioned_tissue):
        before = conditioned_tissue.copy()
        _trace(conditioned_tissue)
        assert np.array_equal(before, conditioned_tissue)

    def test_four_way_collects_four_contours(self, plus_skeleton):
        raster = plus_skeleton.copy()
        raster[0, :] = raster[-1, :] = 0
        raster[:, 0] = raster[:, -1] = 0
        contours = _trace(raster)
        assert len(contours) == 4
        assert all((3, 3) in (c[0], c[-1]) for c in contours)
        assert contour_degrees(contours)[(3, 3)] == 4


class TestTraceFailures:
    """Walks that cannot complete are fatal."""

    def test_overlong_contour(self):
        raster = np.zeros((5, 260), dtype=np.uint8)
        raster[2, 2:256] = 255
        with pytest.raises(MalformedSkeletonError, match="Unexpected loop"):
            _trace(raster)

    def test_parallel_contours_between_two_junctions(self):
        # Both walks leaving the top junction reach the bottom junction, which
        # stays blocked until the top junction is finished.
        raster = np.zeros((11, 13), dtype=np.uint8)
        raster[2, 2:11] = raster[8, 2:11] = 255
        raster[2:9, 2] = raster[2:9, 10] = raster[2:9, 6] = 255
        with pytest.raises(MalformedSkeletonError, match="Irregular loop"):
            _trace(raster)

    def test_terminal_reached_twice_exceeds_quota(self):
        # (4, 3) is forced to terminal in the middle of a straight run, so the
        # walks from both real ends arrive at it.
        raster = np.zeros((7, 9), dtype=np.uint8)
        raster[3, 2:7] = 255
        classes = classify_pixels(raster)
        classes[3, 4] = "t"
        with pytest.raises(TopologyInconsistencyError, match="expected at most 1") as excinfo:
            trace_contours(raster, classes)
        assert excinfo.value.point == (4, 3)
        assert excinfo.value.counts == {"degree": 2, "limit": 1}
