"""Shared SDF helpers used by sdf2d, sdf3d and the raymarch renderer.

This module provides:

* **Type alias**: :data:`_F`
* **Vector constructors**: :func:`vec2`, :func:`vec3`
* **Math helpers**: :func:`length`, :func:`dot`, :func:`dot2`, :func:`ndot`,
  :func:`clamp`, :func:`mix`, :func:`smoothstep`, :func:`normalize`
* **Dimension-agnostic operators** (distances or points of any dimension):
  :func:`opUnion`, :func:`opDifference`, :func:`opIntersection`,
  :func:`opSmoothUnion`, :func:`opSmoothDifference`,
  :func:`opSmoothIntersection`, :func:`opOnion`, :func:`opRepetition`

Not meant to be imported directly by end users; import from
``sdf2d.sdf_lib`` or ``sdf3d.sdf_lib`` instead.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------
_F = npt.NDArray[np.floating]

__all__ = [
    "_F",
    "vec2", "vec3",
    "length", "dot", "dot2", "ndot", "clamp", "mix", "smoothstep", "normalize",
    "opUnion", "opDifference", "opIntersection",
    "opSmoothUnion", "opSmoothDifference", "opSmoothIntersection",
    "opOnion", "opRepetition",
]


# ===========================================================================
# Vector constructors
# ===========================================================================

def vec2(x: _F, y: _F) -> _F:
    """Stack *x* and *y* into a ``(..., 2)`` array."""
    x, y = np.broadcast_arrays(x, y)
    return np.stack([x, y], axis=-1).astype(float)


def vec3(x: _F, y: _F, z: _F) -> _F:
    """Stack *x*, *y*, *z* into a ``(..., 3)`` array."""
    x, y, z = np.broadcast_arrays(x, y, z)
    return np.stack([x, y, z], axis=-1).astype(float)


# ===========================================================================
# Math helpers
# ===========================================================================

def length(v: _F) -> _F:
    """Euclidean length along the last axis."""
    return np.linalg.norm(v, axis=-1)


def dot(a: _F, b: _F) -> _F:
    """Dot product along the last axis."""
    return np.sum(a * b, axis=-1)


def dot2(a: _F) -> _F:
    """Squared length: ``dot(a, a)``."""
    return dot(a, a)


def ndot(a: _F, b: _F) -> _F:
    """Negated 2-D dot product: ``a.x*b.x - a.y*b.y``."""
    return a[..., 0] * b[..., 0] - a[..., 1] * b[..., 1]


def clamp(x: _F, lo: float | _F, hi: float | _F) -> _F:
    """Clamp *x* element-wise to ``[lo, hi]``."""
    return np.minimum(np.maximum(x, lo), hi)


def mix(a: _F, b: _F, h: _F) -> _F:
    """Linear blend ``a*(1-h) + b*h``."""
    return a * (1.0 - h) + b * h


def smoothstep(edge0: float, edge1: float, x: _F) -> _F:
    """Hermite step between *edge0* and *edge1*."""
    t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def normalize(v: _F) -> _F:
    """Unit vector along the last axis.

    Zero-length input produces ``nan`` components; callers that can meet
    degenerate vectors check ``np.isfinite`` on the result.
    """
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / length(v)[..., None]


# ===========================================================================
# Boolean operators (hard)
# ===========================================================================

def opUnion(d1: _F, d2: _F) -> _F:
    """Union of two SDFs: ``min(d1, d2)``."""
    return np.minimum(d1, d2)


def opDifference(d1: _F, d2: _F) -> _F:
    """Subtract *d1* from *d2*: ``max(-d1, d2)``."""
    return np.maximum(-d1, d2)


def opIntersection(d1: _F, d2: _F) -> _F:
    """Intersection of two SDFs: ``max(d1, d2)``."""
    return np.maximum(d1, d2)


# ===========================================================================
# Boolean operators (smooth, polynomial blend of radius k)
# ===========================================================================

def opSmoothUnion(d1: _F, d2: _F, k: float) -> _F:
    """Smooth union with blend radius *k*; ``k <= 0`` is the hard union."""
    if k <= 0.0:
        return opUnion(d1, d2)
    h = clamp(0.5 + 0.5 * (d2 - d1) / k, 0.0, 1.0)
    return mix(d2, d1, h) - k * h * (1.0 - h)


def opSmoothDifference(d1: _F, d2: _F, k: float) -> _F:
    """Smoothly subtract *d1* from *d2* with blend radius *k*."""
    if k <= 0.0:
        return opDifference(d1, d2)
    h = clamp(0.5 - 0.5 * (d2 + d1) / k, 0.0, 1.0)
    return mix(d2, -d1, h) + k * h * (1.0 - h)


def opSmoothIntersection(d1: _F, d2: _F, k: float) -> _F:
    """Smooth intersection with blend radius *k*."""
    if k <= 0.0:
        return opIntersection(d1, d2)
    h = clamp(0.5 - 0.5 * (d2 - d1) / k, 0.0, 1.0)
    return mix(d2, d1, h) + k * h * (1.0 - h)


# ===========================================================================
# Modifiers / domain operators
# ===========================================================================

def opOnion(d: _F, thickness: float) -> _F:
    """Turn a solid into a shell of *thickness*."""
    return np.abs(d) - thickness


def opRepetition(p: _F, s: _F) -> _F:
    """Fold *p* into the cell of an infinite lattice with spacing *s*.

    Returns the local point; evaluate a primitive on it to tile that
    primitive through space.
    """
    s = np.asarray(s, dtype=float)
    return p - s * np.round(p / s)
