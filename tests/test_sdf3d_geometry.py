"""Tests for sdf3d geometry classes."""

import numpy as np
import numpy.testing as npt
import pytest

from sdf3d import (
    Geometry3D,
    Sphere3D, Box3D, Plane3D, Circle3D, Polygon3D, Line3D, Wedge3D,
    Union3D, Intersection3D, Difference3D,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _p(*xyz) -> np.ndarray:
    return np.array([list(xyz)], dtype=float)


def _grid(n: int = 8) -> np.ndarray:
    lin = np.linspace(-1.0, 1.0, n)
    Z, Y, X = np.meshgrid(lin, lin, lin, indexing="ij")
    return np.stack([X, Y, Z], axis=-1)


# ===========================================================================
# Base class
# ===========================================================================

class TestGeometry3D:
    def test_translate_moves_origin(self):
        moved = Sphere3D(0.3).translate(0.5, 0.0, 0.0)
        npt.assert_allclose(moved.sdf(_p(0.5, 0, 0)), [-0.3], atol=1e-10)

    def test_callable(self):
        s = Sphere3D(0.3)
        npt.assert_allclose(s(_p(1, 0, 0)), s.sdf(_p(1, 0, 0)))

    def test_rotate_z_turns_box(self):
        bar = Box3D((1.0, 0.1, 0.1)).rotate_z(90.0)
        assert bar.sdf(_p(0.0, 0.9, 0.0))[0] < 0

    def test_rotate_matches_axis_chain(self):
        box = Box3D((0.5, 0.2, 0.1))
        g = _grid(4)
        npt.assert_allclose(box.rotate(10.0, 20.0, 30.0).sdf(g),
                            box.sdf(g @ _chain(10.0, 20.0, 30.0)))

    def test_onion(self):
        shell = Sphere3D(0.5).onion(0.05)
        npt.assert_allclose(shell.sdf(_p(0.5, 0, 0)), [-0.05], atol=1e-12)
        npt.assert_allclose(shell.sdf(_p(0, 0, 0)), [0.45], atol=1e-12)

    def test_repeat(self):
        tiled = Sphere3D(0.2).repeat(1.0, 1.0, 1.0)
        npt.assert_allclose(tiled.sdf(_p(3.0, -2.0, 5.0)), [-0.2], atol=1e-12)

    def test_union_difference_intersect(self):
        a = Sphere3D(0.5)
        b = Sphere3D(0.5).translate(0.6, 0.0, 0.0)
        g = _grid(5)
        npt.assert_allclose(a.union(b).sdf(g), np.minimum(a.sdf(g), b.sdf(g)))
        npt.assert_allclose(a.intersect(b).sdf(g), np.maximum(a.sdf(g), b.sdf(g)))
        npt.assert_allclose(a.difference(b).sdf(g), np.maximum(a.sdf(g), -b.sdf(g)))

    def test_smooth_variants_zero_k(self):
        a = Sphere3D(0.5)
        b = Box3D((0.3, 0.3, 0.3)).translate(0.4, 0.0, 0.0)
        g = _grid(5)
        npt.assert_allclose(a.smooth_union(b, 0.0).sdf(g), a.union(b).sdf(g))
        npt.assert_allclose(a.smooth_difference(b, 0.0).sdf(g), a.difference(b).sdf(g))
        npt.assert_allclose(a.smooth_intersect(b, 0.0).sdf(g), a.intersect(b).sdf(g))

    def test_smooth_union_fills_seam(self):
        a = Sphere3D(0.5).translate(-0.45, 0.0, 0.0)
        b = Sphere3D(0.5).translate(0.45, 0.0, 0.0)
        p = _p(0.0, 0.3, 0.0)
        assert a.smooth_union(b, 0.2).sdf(p)[0] < a.union(b).sdf(p)[0]


def _chain(ax, ay, az):
    """Matrix applied to row points by ``rotate(ax, ay, az)``."""
    def rz(t):
        c, s = np.cos(t), np.sin(t)
        return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])

    def ry(t):
        c, s = np.cos(t), np.sin(t)
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])

    def rx(t):
        c, s = np.cos(t), np.sin(t)
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])

    return rz(np.radians(az)) @ ry(np.radians(ay)) @ rx(np.radians(ax))


# ===========================================================================
# Primitives
# ===========================================================================

class TestPrimitives:
    def test_sphere(self):
        npt.assert_allclose(Sphere3D(0.4).sdf(_p(0, 0, 0)), [-0.4])

    def test_box(self):
        npt.assert_allclose(Box3D((0.2, 0.3, 0.4)).sdf(_p(0.5, 0, 0)), [0.3])

    def test_plane_offset(self):
        npt.assert_allclose(Plane3D((0.0, 0.0, 1.0), offset=-1.0).sdf(_p(0, 0, 0)), [1.0])

    def test_circle_is_thin(self):
        npt.assert_allclose(Circle3D(0.5).sdf(_p(0, 0, 0.2)), [0.199])

    def test_polygon_prism(self):
        tri = [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]
        assert Polygon3D(tri).sdf(_p(0.2, 0.2, 0.0))[0] < 0

    def test_polygon_rejects_two_vertices(self):
        with pytest.raises(ValueError):
            Polygon3D([(0.0, 0.0), (1.0, 0.0)])

    def test_line(self):
        npt.assert_allclose(Line3D((0, 0, 0), (1, 0, 0), 0.1).sdf(_p(0.5, 0.5, 0)), [0.4])

    def test_wedge(self):
        assert Wedge3D(90.0).sdf(_p(1.0, 0.5, 1.0))[0] < 0
        assert Wedge3D(90.0).sdf(_p(0.0, 0.5, -1.0))[0] > 0


# ===========================================================================
# Boolean classes
# ===========================================================================

class TestBooleans:
    def test_union_many(self):
        spheres = [Sphere3D(0.2).translate(x, 0.0, 0.0) for x in (-1.0, 0.0, 1.0)]
        u = Union3D(*spheres)
        for x in (-1.0, 0.0, 1.0):
            npt.assert_allclose(u.sdf(_p(x, 0, 0)), [-0.2], atol=1e-12)

    def test_intersection(self):
        lens = Intersection3D(Sphere3D(0.5).translate(-0.25, 0, 0), Sphere3D(0.5).translate(0.25, 0, 0))
        assert lens.sdf(_p(0, 0, 0))[0] < 0
        assert lens.sdf(_p(0.6, 0, 0))[0] > 0

    def test_difference(self):
        cut = Difference3D(Box3D((1.0, 1.0, 1.0)), Sphere3D(0.5))
        assert cut.sdf(_p(0, 0, 0))[0] > 0
        assert cut.sdf(_p(0.8, 0.8, 0))[0] < 0

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Union3D()
        with pytest.raises(ValueError):
            Intersection3D()

    def test_is_geometry(self):
        assert isinstance(Union3D(Sphere3D(1.0)), Geometry3D)
