"""The three shading passes.

Each pass traces the rays it is given on its own and returns a
:class:`PixelSample` whose colour is already weighted by its coverage, so
samples from several passes can simply be added (see
:func:`raymarch.render.composite`).  A ray that misses, or whose shading
produced a non-finite value anywhere along the way, gets the transparent
sample ``color = 0, coverage = 0``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

import numpy as np
import numpy.typing as npt

from _sdf_common import clamp, dot, mix, smoothstep

from . import config
from .camera import Ray
from .tracer import TraceResult, estimate_normal, sphere_trace

_Array = npt.NDArray[np.floating]
_SDFFunc = Callable[[_Array], _Array]


class ShadingMode(enum.Enum):
    """Which colour pass runs; outlines are switched separately."""

    NORMALS = "normals"
    CONTOURS = "contours"
    NONE = "none"


@dataclass(frozen=True)
class PixelSample:
    """Coverage-weighted colour: ``color`` is ``(..., 3)``, ``coverage`` is ``(...)``."""

    color: _Array
    coverage: _Array

    @classmethod
    def transparent(cls, shape: tuple = ()) -> PixelSample:
        return cls(color=np.zeros(shape + (3,)), coverage=np.zeros(shape))

    def rgba(self) -> _Array:
        """Colour and coverage stacked into ``(..., 4)``."""
        return np.concatenate([self.color, self.coverage[..., None]], axis=-1)


def hsv2rgb(h: _Array, s: _Array, v: _Array) -> _Array:
    """HSV → RGB with every channel in ``[0, 1]``; hue wraps every 1.0."""
    h = np.asarray(h, dtype=float)[..., None]
    k = np.array([1.0, 2.0 / 3.0, 1.0 / 3.0])
    p = np.abs(np.mod(h + k, 1.0) * 6.0 - 3.0)
    return np.asarray(v, dtype=float)[..., None] * mix(
        1.0, clamp(p - 1.0, 0.0, 1.0), np.asarray(s, dtype=float)[..., None]
    )


def _scatter(res: TraceResult, color: _Array, coverage: _Array) -> PixelSample:
    """Place per-hit shading back into the full ray batch, dropping non-finite values."""
    out = PixelSample.transparent(res.hit.shape)
    ok = np.isfinite(coverage) & np.all(np.isfinite(color), axis=-1)
    out.color[res.hit] = np.where(ok[:, None], color, 0.0)
    out.coverage[res.hit] = np.where(ok, coverage, 0.0)
    return out


def _hit_directions(ray: Ray, res: TraceResult) -> _Array:
    origin = np.asarray(ray.origin, dtype=float)
    return np.broadcast_to(np.asarray(ray.direction, dtype=float), origin.shape)[res.hit]


# ===========================================================================
# Passes
# ===========================================================================

def normal_color_pass(sdf: _SDFFunc, ray: Ray) -> PixelSample:
    """Colour the surface by its normal, ``n * 0.5 + 0.5``.

    Coverage fades out as the distance field flattens along the ray: the
    change in distance over a short back-step of ``AA_STEP`` is mapped
    through ``1 - smoothstep(0, AA_FALLOFF, ·)``.  This softens silhouettes
    cheaply; it is not true antialiasing.
    """
    res = sphere_trace(sdf, ray, config.DEFAULT_TRACE)
    if not res.hit.any():
        return PixelSample.transparent(res.hit.shape)

    p = res.point[res.hit]
    direction = _hit_directions(ray, res)
    with np.errstate(invalid="ignore", over="ignore"):
        n = estimate_normal(sdf, p)
        col = n * 0.5 + 0.5
        back = np.asarray(sdf(p - direction * config.AA_STEP), dtype=float)
        grad = np.abs(res.distance[res.hit] - back)
        alpha = 1.0 - smoothstep(0.0, config.AA_FALLOFF, grad)
        return _scatter(res, col * alpha[..., None], alpha)


def contour_color_pass(sdf: _SDFFunc, ray: Ray) -> PixelSample:
    """Colour only near-horizontal surfaces, with a hue that follows height.

    Traced with the tighter ``CONTOUR_HIT_EPSILON``.  Where ``|n.z| >
    CONTOUR_NORMAL_Z`` the hue is ``p.z * CONTOUR_HUE_SCALE`` degrees (mod 360),
    full saturation and value, full coverage; every other hit stays
    transparent.
    """
    res = sphere_trace(sdf, ray, config.CONTOUR_TRACE)
    if not res.hit.any():
        return PixelSample.transparent(res.hit.shape)

    p = res.point[res.hit]
    with np.errstate(invalid="ignore", over="ignore"):
        n = estimate_normal(sdf, p)
        flat = np.abs(n[..., 2]) > config.CONTOUR_NORMAL_Z
        hue = np.mod(p[..., 2] * config.CONTOUR_HUE_SCALE, 360.0)
        rgb = hsv2rgb(hue / 360.0, 1.0, 1.0)
        coverage = flat.astype(float)
        return _scatter(res, rgb * coverage[..., None], coverage)


def edge_pass(sdf: _SDFFunc, ray: Ray) -> PixelSample:
    """Solid white wherever the surface folds sharply.

    At the hit point the normal is sampled again ``EDGE_OFFSET`` in front of
    and behind the surface; if those two normals disagree (``dot <
    EDGE_DOT_THRESHOLD``) the pixel is an edge.
    """
    res = sphere_trace(sdf, ray, config.DEFAULT_TRACE)
    if not res.hit.any():
        return PixelSample.transparent(res.hit.shape)

    p = res.point[res.hit]
    with np.errstate(invalid="ignore", over="ignore"):
        n = estimate_normal(sdf, p)
        n1 = estimate_normal(sdf, p + config.EDGE_OFFSET * n)
        n2 = estimate_normal(sdf, p - config.EDGE_OFFSET * n)
        edge = dot(n1, n2) < config.EDGE_DOT_THRESHOLD
        coverage = edge.astype(float)
        return _scatter(res, np.repeat(coverage[..., None], 3, axis=-1), coverage)
