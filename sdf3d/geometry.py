"""3D geometry primitives and boolean operations for signed distance functions."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np
import numpy.typing as npt

from . import sdf_lib as sdf

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
_Array = npt.NDArray[np.floating]
_SDFFunc = Callable[[_Array], _Array]


# ===========================================================================
# Base class
# ===========================================================================

class Geometry3D:
    """Base class for 3D signed-distance-function geometries.

    A ``Geometry3D`` wraps a callable ``func(p) -> distances`` where *p* is
    a ``(..., 3)`` array of 3D points and the return value is a ``(...)``
    array of signed distances.  Every method returns a new geometry; the
    tree is immutable once built.

    Implements:
    - Boolean operations: :meth:`union`, :meth:`difference`, :meth:`intersect`
    - Smooth booleans:    :meth:`smooth_union`, :meth:`smooth_difference`,
                          :meth:`smooth_intersect`
    - Modifiers:          :meth:`onion`, :meth:`repeat`
    - Transforms:         :meth:`translate`, :meth:`rotate`,
                          :meth:`rotate_x`, :meth:`rotate_y`, :meth:`rotate_z`
    """

    def __init__(self, func: _SDFFunc) -> None:
        self._func = func

    def sdf(self, p: _Array) -> _Array:
        """Evaluate signed distance at *p* (shape ``(..., 3)``)."""
        return self._func(p)

    def __call__(self, p: _Array) -> _Array:
        return self._func(p)

    # ------------------------------------------------------------------
    # Boolean operations
    # ------------------------------------------------------------------

    def union(self, other: Geometry3D) -> Geometry3D:
        """Return the union (min) of this shape and *other*."""
        return Geometry3D(lambda p: sdf.opUnion(self.sdf(p), other.sdf(p)))

    def difference(self, other: Geometry3D) -> Geometry3D:
        """Cut *other* out of this shape."""
        return Geometry3D(lambda p: sdf.opDifference(other.sdf(p), self.sdf(p)))

    def intersect(self, other: Geometry3D) -> Geometry3D:
        """Return the intersection (max) of this shape and *other*."""
        return Geometry3D(lambda p: sdf.opIntersection(self.sdf(p), other.sdf(p)))

    def smooth_union(self, other: Geometry3D, k: float) -> Geometry3D:
        """Union blended over radius *k*."""
        return Geometry3D(lambda p: sdf.opSmoothUnion(self.sdf(p), other.sdf(p), k))

    def smooth_difference(self, other: Geometry3D, k: float) -> Geometry3D:
        """Cut *other* out of this shape, blended over radius *k*."""
        return Geometry3D(lambda p: sdf.opSmoothDifference(other.sdf(p), self.sdf(p), k))

    def smooth_intersect(self, other: Geometry3D, k: float) -> Geometry3D:
        """Intersection blended over radius *k*."""
        return Geometry3D(lambda p: sdf.opSmoothIntersection(self.sdf(p), other.sdf(p), k))

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def onion(self, thickness: float) -> Geometry3D:
        """Turn the solid into a hollow shell of *thickness*."""
        return Geometry3D(lambda p: sdf.opOnion(self.sdf(p), thickness))

    def repeat(self, sx: float, sy: float, sz: float) -> Geometry3D:
        """Tile the shape infinitely with cell size ``(sx, sy, sz)``."""
        s = np.array([sx, sy, sz], dtype=float)
        return Geometry3D(lambda p: self.sdf(sdf.opRepetition(p, s)))

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def translate(self, tx: float, ty: float, tz: float) -> Geometry3D:
        """Translate by ``(tx, ty, tz)``."""
        t = np.array([tx, ty, tz], dtype=float)
        return Geometry3D(lambda p: self.sdf(sdf.opTranslate(p, t)))

    def rotate(self, ax: float, ay: float, az: float) -> Geometry3D:
        """Rotate by ``(ax, ay, az)`` degrees (Z, then Y, then X)."""
        rs = (ax, ay, az)
        return Geometry3D(lambda p: self.sdf(sdf.opRotate(p, rs)))

    def rotate_x(self, angle_deg: float) -> Geometry3D:
        """Rotate around the X axis by *angle_deg* degrees."""
        return Geometry3D(lambda p: self.sdf(sdf.opRotateX(p, angle_deg)))

    def rotate_y(self, angle_deg: float) -> Geometry3D:
        """Rotate around the Y axis by *angle_deg* degrees."""
        return Geometry3D(lambda p: self.sdf(sdf.opRotateY(p, angle_deg)))

    def rotate_z(self, angle_deg: float) -> Geometry3D:
        """Rotate around the Z axis by *angle_deg* degrees."""
        return Geometry3D(lambda p: self.sdf(sdf.opRotateZ(p, angle_deg)))


# ===========================================================================
# Primitive shapes
# ===========================================================================

class Sphere3D(Geometry3D):
    """Sphere centred at origin with given *radius*."""

    def __init__(self, radius: float) -> None:
        super().__init__(lambda p: sdf.sdSphere(p, radius))


class Box3D(Geometry3D):
    """Axis-aligned box with *half_size* ``(hx, hy, hz)`` centred at origin."""

    def __init__(self, half_size: Sequence[float]) -> None:
        b = np.array(half_size, dtype=float)
        super().__init__(lambda p: sdf.sdBox(p, b))


class Plane3D(Geometry3D):
    """Half-space ``dot(p, normal) <= offset``."""

    def __init__(self, normal: Sequence[float], offset: float = 0.0) -> None:
        n = np.array(normal, dtype=float)
        super().__init__(lambda p: sdf.sdPlane(p, n, offset))


class Circle3D(Geometry3D):
    """Thin disc of *radius* in the XY plane."""

    def __init__(self, radius: float) -> None:
        super().__init__(lambda p: sdf.sdCircle(p, radius))


class Polygon3D(Geometry3D):
    """Polygon prism in the XY plane, two units tall.

    Parameters
    ----------
    vertices:
        Ordered ``(x, y)`` vertices; any count of three or more.
    """

    def __init__(self, vertices: Sequence[Sequence[float]]) -> None:
        v = np.array(vertices, dtype=float)
        if v.ndim != 2 or v.shape[1] != 2 or v.shape[0] < 3:
            raise ValueError(f"Polygon3D needs at least three (x, y) vertices, got shape {v.shape}")
        super().__init__(lambda p: sdf.sdPolygon(p, v))


class Line3D(Geometry3D):
    """Capsule of *radius* around the segment *start* → *end*."""

    def __init__(self, start: Sequence[float], end: Sequence[float], radius: float) -> None:
        a = np.array(start, dtype=float)
        b = np.array(end, dtype=float)
        super().__init__(lambda p: sdf.sdLine(p, a, b, radius))


class Wedge3D(Geometry3D):
    """Angular wedge of *degrees* around +Y, from ``y = 0`` up to *height*."""

    def __init__(self, degrees: float, height: float = 1000.0) -> None:
        super().__init__(lambda p: sdf.sdWedge(p, degrees, height))


# ===========================================================================
# Boolean operation classes
# ===========================================================================

class Union3D(Geometry3D):
    """Union of two or more 3-D geometries (minimum SDF)."""

    def __init__(self, *geoms: Geometry3D) -> None:
        if not geoms:
            raise ValueError("Union3D needs at least one geometry")

        def _sdf(p: _Array) -> _Array:
            d = geoms[0].sdf(p)
            for g in geoms[1:]:
                d = sdf.opUnion(d, g.sdf(p))
            return d

        super().__init__(_sdf)


class Intersection3D(Geometry3D):
    """Intersection of two or more 3-D geometries (maximum SDF)."""

    def __init__(self, *geoms: Geometry3D) -> None:
        if not geoms:
            raise ValueError("Intersection3D needs at least one geometry")

        def _sdf(p: _Array) -> _Array:
            d = geoms[0].sdf(p)
            for g in geoms[1:]:
                d = sdf.opIntersection(d, g.sdf(p))
            return d

        super().__init__(_sdf)


class Difference3D(Geometry3D):
    """Subtract *cutter* from *base*."""

    def __init__(self, base: Geometry3D, cutter: Geometry3D) -> None:
        super().__init__(
            lambda p: sdf.opDifference(cutter.sdf(p), base.sdf(p))
        )
