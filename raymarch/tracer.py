"""Sphere tracing and normal estimation.

Both functions take the distance function as an argument and work on whole
batches of rays at once: every array carries the ray batch in its leading
dimensions, and a single ray is the batch of size one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
import numpy.typing as npt

from _sdf_common import normalize

from . import config
from .camera import Ray

_Array = npt.NDArray[np.floating]
_SDFFunc = Callable[[_Array], _Array]


@dataclass(frozen=True)
class TraceResult:
    """Outcome of tracing a ray batch.

    Attributes
    ----------
    hit:
        ``True`` where the ray reached the surface; every other ray missed.
    point:
        Hit position (zeros for misses).
    distance:
        Distance reported at the hit position (zeros for misses).
    t:
        Ray parameter at termination.
    steps:
        Distance evaluations spent on each ray (``<= max_steps``).
    """

    hit: npt.NDArray[np.bool_]
    point: _Array
    distance: _Array
    t: _Array
    steps: npt.NDArray[np.int_]

    @property
    def miss(self) -> npt.NDArray[np.bool_]:
        return ~self.hit


def sphere_trace(
    sdf: _SDFFunc,
    ray: Ray,
    trace: config.TraceConfig = config.DEFAULT_TRACE,
) -> TraceResult:
    """March every ray of *ray* forward by the distance the field reports.

    A ray hits once the distance falls below ``trace.hit_epsilon``, misses once
    ``t`` exceeds ``trace.max_t``, and also misses if the step budget runs out
    or the field returns a non-finite value.  Rays that have terminated are
    dropped from later iterations.
    """
    origin = np.asarray(ray.origin, dtype=float)
    direction = np.broadcast_to(np.asarray(ray.direction, dtype=float), origin.shape)
    shape = origin.shape[:-1]
    o = origin.reshape(-1, 3)
    d = direction.reshape(-1, 3)
    n = o.shape[0]

    t = np.zeros(n)
    hit = np.zeros(n, dtype=bool)
    point = np.zeros((n, 3))
    dist = np.zeros(n)
    steps = np.zeros(n, dtype=int)
    active = np.arange(n)

    with np.errstate(invalid="ignore", over="ignore"):
        for _ in range(trace.max_steps):
            if active.size == 0:
                break
            p = o[active] + d[active] * t[active, None]
            ds = np.broadcast_to(np.asarray(sdf(p), dtype=float), p.shape[:-1])
            steps[active] += 1

            finite = np.isfinite(ds)
            reached = finite & (ds < trace.hit_epsilon)
            idx = active[reached]
            hit[idx] = True
            point[idx] = p[reached]
            dist[idx] = ds[reached]

            marching = finite & ~reached
            t[active[marching]] += ds[marching]
            escaped = marching & (t[active] > trace.max_t)
            active = active[marching & ~escaped]

    return TraceResult(
        hit=hit.reshape(shape),
        point=point.reshape(shape + (3,)),
        distance=dist.reshape(shape),
        t=t.reshape(shape),
        steps=steps.reshape(shape),
    )


def estimate_normal(sdf: _SDFFunc, p: _Array, eps: float = config.NORMAL_EPSILON) -> _Array:
    """Unit surface normal at *p* from central differences of *sdf*.

    Six extra field evaluations per point.  Where the gradient vanishes the
    result is ``nan``.
    """
    p = np.asarray(p, dtype=float)
    grad = np.empty(p.shape)
    with np.errstate(invalid="ignore", over="ignore"):
        for axis in range(3):
            e = np.zeros(3)
            e[axis] = eps
            grad[..., axis] = np.asarray(sdf(p + e), dtype=float) - np.asarray(sdf(p - e), dtype=float)
    return normalize(grad)
