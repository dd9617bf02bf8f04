import numpy as np
import pytest
from shapely.geometry import Polygon

from conftest import make_collection
from citymesh import geometry
from citymesh.builder import CityBuilder
from citymesh.errors import NormalizationError, TriangulationError
from citymesh.geometry import (
    compute_ribbon, extrude_walls, normalize_objects, normalize_ring,
    pitched_roof, ring_centroid, shoelace_area, triangulate,
)
from citymesh.models import BoundingBox, CityObject

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def _box(x_min, x_max, y_min, y_max):
    bbox = BoundingBox()
    bbox.update(x_min, y_min)
    bbox.update(x_max, y_max)
    return bbox


def _triangle_area(points, tri):
    a, b, c = (np.asarray(points[i], dtype=float) for i in tri)
    return 0.5 * abs((b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1]))


class TestRibbon:
    def test_shoelace_unit_square(self):
        assert shoelace_area(UNIT_SQUARE) == pytest.approx(1.0)

    @pytest.mark.parametrize("segment", [
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
        (0.0, 0.0, 1.0, 1.0),
        (0.0, 0.0, 1.0, -1.0),
        (2.0, 3.0, 2.5, 7.0),
    ])
    def test_ribbon_is_simple_quad(self, segment):
        ribbon = compute_ribbon(*segment, 0.1)
        assert len(ribbon) == 4
        quad = Polygon(ribbon)
        assert quad.is_valid
        assert quad.area > 0

    def test_horizontal_segment_offsets_in_y(self):
        ribbon = compute_ribbon(0.0, 0.0, 1.0, 0.0, 0.1)
        assert ribbon == [(1.0, 0.1), (1.0, -0.1), (0.0, -0.1), (0.0, 0.1)]

    def test_vertical_segment_offsets_in_x(self):
        ribbon = compute_ribbon(0.0, 0.0, 0.0, 1.0, 0.1)
        assert ribbon == [(0.1, 1.0), (-0.1, 1.0), (-0.1, 0.0), (0.1, 0.0)]

    def test_anti_diagonal_segment_uses_diagonal_offset(self):
        ribbon = compute_ribbon(0.0, 0.0, 1.0, -1.0, 0.1)
        assert ribbon[0] == pytest.approx((1.1, -0.9))

    def test_tie_prefers_y_offset(self):
        # both axis offsets give the same area on a 45 degree segment
        ribbon = compute_ribbon(0.0, 0.0, 1.0, 1.0, 0.1)
        assert ribbon == [(1.0, 1.1), (1.0, 0.9), (0.0, -0.1), (0.0, 0.1)]


class TestNormalization:
    def test_extremes_map_to_window_edges(self):
        bbox = _box(10.0, 12.0, 45.0, 46.0)
        result = normalize_ring([(10.0, 45.0), (12.0, 46.0)], bbox, 50)
        assert result[0] == pytest.approx((-25.0, -25.0))
        assert result[1] == pytest.approx((25.0, 25.0))

    def test_monotonic(self):
        bbox = _box(0.0, 10.0, 0.0, 10.0)
        xs = [0.5, 1.0, 3.0, 9.9]
        result = normalize_ring([(x, x) for x in xs], bbox, 50)
        assert all(a[0] < b[0] for a, b in zip(result, result[1:]))

    def test_zero_width_box_raises(self):
        bbox = _box(1.0, 1.0, 0.0, 5.0)
        with pytest.raises(NormalizationError):
            normalize_ring([(1.0, 2.0)], bbox, 50)

    def test_normalize_objects_freezes_box(self):
        bbox = _box(0.0, 4.0, 0.0, 4.0)
        obj = CityObject(name="building_a", type="building",
                         outer_ring=[(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)],
                         hole_rings=[[(1.0, 1.0), (2.0, 1.0), (2.0, 2.0)]])
        normalize_objects([obj], bbox, 50)
        assert obj.normalized_outer_ring[1] == pytest.approx((25.0, -25.0))
        assert obj.normalized_hole_rings[0][0] == pytest.approx((-12.5, -12.5))
        assert obj.outer_ring[1] == (4.0, 0.0)
        with pytest.raises(RuntimeError):
            bbox.update(5.0, 5.0)

    def test_bounding_box_only_widens(self):
        bbox = BoundingBox()
        assert bbox.is_empty
        bbox.update(-3.0, 2.0)
        bbox.update(1.0, -4.0)
        bbox.update(0.0, 0.0)
        assert (bbox.x_min, bbox.x_max, bbox.y_min, bbox.y_max) == (-3.0, 1.0, -4.0, 2.0)


class TestTriangulation:
    def test_square_gives_two_triangles(self):
        assert triangulate(UNIT_SQUARE).shape == (2, 3)

    def test_convex_ngon_gives_n_minus_two(self):
        angles = np.linspace(0, 2 * np.pi, 7, endpoint=False)
        ring = [(float(np.cos(a)), float(np.sin(a))) for a in angles]
        assert len(triangulate(ring)) == 5

    def test_square_with_hole_covers_ring_area(self):
        outer = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
        hole = [(1.0, 1.0), (1.0, 3.0), (3.0, 3.0), (3.0, 1.0)]
        triangles = triangulate(outer, [hole])
        # n + 2h - 2 for one hole: the bridge adds two vertices
        assert len(triangles) == 8
        points = outer + hole
        area = sum(_triangle_area(points, tri) for tri in triangles)
        assert area == pytest.approx(12.0)
        assert triangles.max() < len(points)

    def test_index_count_not_multiple_of_three_raises(self, monkeypatch):
        monkeypatch.setattr(geometry.earcut, "triangulate_float64",
                            lambda coords, ring_ends: np.array([0, 1, 2, 3], dtype=np.uint32))
        with pytest.raises(TriangulationError):
            triangulate(UNIT_SQUARE)

    def test_bad_triangulation_fails_build(self, monkeypatch, square_building, config):
        monkeypatch.setattr(geometry.earcut, "triangulate_float64",
                            lambda coords, ring_ends: np.array([0, 1, 2, 3], dtype=np.uint32))
        builder = CityBuilder(config)
        builder.add_collection(make_collection(square_building))
        assert builder.build() is False
        assert builder.scene is None


class TestExtrusion:
    def test_walls_one_quad_per_edge(self):
        verts, quads = extrude_walls(UNIT_SQUARE, 0.5)
        assert verts.shape == (8, 3)
        assert quads.shape == (4, 4)
        assert quads[0].tolist() == [3, 0, 4, 7]
        assert np.allclose(verts[:4, 1], 0.5)
        assert np.allclose(verts[4:, 1], 0.0)

    def test_centroid_is_vertex_average(self):
        assert ring_centroid([(0.0, 0.0), (4.0, 0.0), (4.0, 2.0), (0.0, 2.0)]) == (2.0, 1.0)

    def test_pitched_roof_reaches_apex(self):
        verts, faces = pitched_roof(UNIT_SQUARE, 0.5, 0.1)
        assert faces.shape == (8, 3)
        assert verts[-1].tolist() == pytest.approx([0.5, 0.6, 0.5])
        assert np.allclose(verts[:-1, 1], 0.5)
        assert all(f[2] == len(verts) - 1 for f in faces.tolist())
