"""2-D SDF math primitives for the sdf2d package.

Re-exports all shared helpers from :mod:`_sdf_common`, then adds the 2-D
primitives and 2-D transforms.  2-D shapes are rendered by lifting them into
3-D with :func:`sdf3d.sdf_lib.opExtrude`.

All functions accept and return ``numpy.ndarray`` objects and support
broadcasting over arbitrary leading batch dimensions.  A "point array" *p*
has shape ``(..., 2)``; scalar SDF results have shape ``(...,)``.

Formulas are adapted from Inigo Quilez's distance function reference:
https://iquilezles.org/articles/distfunctions2d/
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from _sdf_common import *  # noqa: F401, F403  (re-exports shared helpers)
from _sdf_common import _F, clamp, dot, dot2, length, vec2


# ===========================================================================
# 2-D primitive SDFs
# ===========================================================================

def sdCircle2D(p: _F, r: float) -> _F:
    """2-D circle of radius *r* centred at origin."""
    return length(p[..., :2]) - r


def sdPolygon2D(p: _F, v: Sequence[Sequence[float]] | _F) -> _F:
    """2-D polygon through the vertices *v* (any ``(N, 2)`` sequence, ``N >= 3``).

    Distance is the minimum over all edges; the sign follows the crossing
    rule of the winding number test, so the vertex order does not matter.
    """
    v = np.asarray(v, dtype=float)
    if v.ndim != 2 or v.shape[1] != 2 or v.shape[0] < 3:
        raise ValueError(f"polygon needs an (N, 2) vertex array with N >= 3, got {v.shape}")
    p = p[..., :2]
    d = dot2(p - v[0])
    s = np.ones(p.shape[:-1])
    n = v.shape[0]
    for i in range(n):
        j = i - 1  # previous vertex; v[-1] closes the loop
        e = v[j] - v[i]
        w = p - v[i]
        b = w - e * clamp(dot(w, e) / dot2(e), 0.0, 1.0)[..., None]
        d = np.minimum(d, dot2(b))
        c1 = p[..., 1] >= v[i][1]
        c2 = p[..., 1] < v[j][1]
        c3 = e[0] * w[..., 1] > e[1] * w[..., 0]
        flip = (c1 & c2 & c3) | (~c1 & ~c2 & ~c3)
        s = np.where(flip, -s, s)
    return s * np.sqrt(d)


# ===========================================================================
# 2-D transforms
# ===========================================================================

def opTranslate2D(p: _F, d: Sequence[float] | _F) -> _F:
    """Move the shape by *d*; only the first two components are used."""
    d = np.asarray(d, dtype=float)
    return p - d[:2]


def opRotate2D(p: _F, theta: float) -> _F:
    """Rotate the shape by *theta* degrees about the origin."""
    t = np.radians(theta)
    c, s = np.cos(t), np.sin(t)
    x, y = p[..., 0], p[..., 1]
    # point turns by -theta so the shape turns by +theta
    return vec2(c * x + s * y, -s * x + c * y)
