"""3-D SDF math primitives for the sdf3d package.

Re-exports all shared helpers from :mod:`_sdf_common`, then adds every
3-D primitive, the 2-D → 3-D lifting operators, and the rigid transforms
used by scene expressions.

All functions accept and return ``numpy.ndarray`` objects and support
broadcasting over arbitrary leading batch dimensions.  A "point array" *p*
has shape ``(..., 3)``; scalar SDF results have shape ``(...,)``.

Naming follows the scene-expression convention: primitives start with
``sd``, operators with ``op``.  Angles given to ``opRotate*`` and
``sdWedge`` are in degrees; :func:`rotation_matrix` takes radians.

Formulas are adapted from Inigo Quilez's distance function reference:
https://iquilezles.org/articles/distfunctions/
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from _sdf_common import *  # noqa: F401, F403  (re-exports shared helpers)
from _sdf_common import _F, clamp, dot, dot2, length, vec2, vec3
from sdf2d.sdf_lib import sdCircle2D, sdPolygon2D, opTranslate2D, opRotate2D  # noqa: F401

_Vec = Union[Sequence[float], _F]


# ===========================================================================
# 3-D primitive SDFs
# ===========================================================================

def sdSphere(p: _F, r: float) -> _F:
    """Sphere of radius *r* centred at the origin."""
    return length(p) - r


def sdBox(p: _F, b: _Vec) -> _F:
    """Axis-aligned box with half-extents *b* ``(bx, by, bz)``."""
    q = np.abs(p) - np.asarray(b, dtype=float)
    return length(np.maximum(q, 0.0)) + np.minimum(np.max(q, axis=-1), 0.0)


def sdPlane(p: _F, n: _Vec, h: float) -> _F:
    """Half-space below the plane ``dot(p, n) == h``; *n* need not be unit."""
    n = np.asarray(n, dtype=float)
    n = n / np.linalg.norm(n)
    return dot(p, n) - h


def sdLine(p: _F, a: _Vec, b: _Vec, r: float) -> _F:
    """Segment from *a* to *b* thickened to radius *r* (a capsule)."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    pa = p - a
    ba = b - a
    h = clamp(dot(pa, ba) / dot2(ba), 0.0, 1.0)
    return length(pa - ba * h[..., None]) - r


def sdWedge(p: _F, deg: float, height: float = 1000.0) -> _F:
    """Angular wedge around +Y spanning ``[0, deg]`` degrees, ``0 <= y <= height``.

    Outside the sector the distance comes from the two bounding half-planes
    alone: that branch ignores *height*, and it reaches zero along the
    diagonal where both half-planes are equally far.  Inside the sector only
    the height cap applies.  The result is therefore neither exact nor a
    conservative bound, and tracers can stop on it early.
    """
    theta = np.arctan2(p[..., 2], p[..., 0])
    theta = np.where(theta < 0.0, theta + 2.0 * np.pi, theta)
    rad = np.radians(deg)

    d1 = -np.sin(rad) * p[..., 0] + np.cos(rad) * p[..., 2]
    d2 = -p[..., 2]
    dcap = np.maximum(-p[..., 1], p[..., 1] - height)

    d = vec2(d1, d2)
    planes = length(np.maximum(d, 0.0)) - length(np.minimum(d, 0.0))
    return np.where(theta > rad, planes, dcap)


# ===========================================================================
# 2-D → 3-D lifting
# ===========================================================================

def opExtrude(p: _F, d2d: _F, h: float) -> _F:
    """Extrude the 2-D distance *d2d* (sampled at ``p.xy``) along Z to half-height *h*."""
    w = vec2(d2d, np.abs(p[..., 2]) - h)
    return np.minimum(np.maximum(w[..., 0], w[..., 1]), 0.0) + length(np.maximum(w, 0.0))


def opRevolve(p: _F) -> _F:
    """Map *p* to the ``(radius, height)`` plane for revolving a 2-D shape about Y."""
    return vec2(length(p[..., [0, 2]]), p[..., 1])


def opSlice(p: _F, h: float) -> _F:
    """Lift a 2-D point into 3-D at height *h*."""
    return vec3(p[..., 0], p[..., 1], h)


def sdCircle(p: _F, r: float) -> _F:
    """Paper-thin disc: :func:`sdCircle2D` extruded to half-height ``0.001``."""
    return opExtrude(p, sdCircle2D(p, r), 0.001)


def sdPolygon(p: _F, v: Sequence[Sequence[float]] | _F) -> _F:
    """Prism: :func:`sdPolygon2D` extruded to half-height ``1.0``."""
    return opExtrude(p, sdPolygon2D(p, v), 1.0)


# ===========================================================================
# Rigid transforms
# ===========================================================================

def _rot_x(theta: float) -> _F:
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rot_y(theta: float) -> _F:
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def _rot_z(theta: float) -> _F:
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def opTranslate(p: _F, d: _Vec) -> _F:
    """Move the shape by *d*."""
    return p - np.asarray(d, dtype=float)


# The ``p @ R`` products below apply the transpose of R to each point,
# which turns the shape itself by +theta.

def opRotateX(p: _F, theta: float) -> _F:
    """Rotate the shape by *theta* degrees about the X axis."""
    return p @ _rot_x(np.radians(theta))


def opRotateY(p: _F, theta: float) -> _F:
    """Rotate the shape by *theta* degrees about the Y axis."""
    return p @ _rot_y(np.radians(theta))


def opRotateZ(p: _F, theta: float) -> _F:
    """Rotate the shape by *theta* degrees about the Z axis."""
    return p @ _rot_z(np.radians(theta))


def opRotate(p: _F, rs: _Vec) -> _F:
    """Rotate by ``rs = (x, y, z)`` degrees, applied Z first, then Y, then X."""
    rx, ry, rz = (float(a) for a in rs)
    p = opRotateZ(p, rz)
    p = opRotateY(p, ry)
    return opRotateX(p, rx)


def rotation_matrix(axis: _Vec, angle: float) -> _F:
    """Right-handed rotation by *angle* radians about the unit vector *axis*."""
    x, y, z = (float(a) for a in axis)
    s = np.sin(angle)
    c = np.cos(angle)
    oc = 1.0 - c
    return np.array([
        [oc * x * x + c,     oc * x * y - z * s, oc * z * x + y * s],
        [oc * x * y + z * s, oc * y * y + c,     oc * y * z - x * s],
        [oc * z * x - y * s, oc * y * z + x * s, oc * z * z + c],
    ])
