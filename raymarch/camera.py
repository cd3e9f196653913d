"""Orthographic camera and ray generation.

The camera is rebuilt from scratch every frame from a home position, a look-at
target and the interaction angles; nothing is updated incrementally, so the
basis cannot drift.  All rays of an orthographic camera share one direction
and differ only in their origin on the image plane.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
import numpy.typing as npt

from sdf3d.sdf_lib import opRotateZ, rotation_matrix

from . import config
from .errors import DegenerateCamera, InvalidViewport

logger = logging.getLogger(__name__)

_Array = npt.NDArray[np.floating]
_Vec = Union[Sequence[float], _Array]


# ===========================================================================
# Data types
# ===========================================================================

@dataclass(frozen=True)
class OrthoCamera:
    """View basis plus the image-plane extents in world units."""

    position: _Array
    forward: _Array
    up: _Array
    right: _Array
    left: float
    right_extent: float
    bottom: float
    top: float

    @property
    def width(self) -> float:
        return self.right_extent - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


@dataclass(frozen=True)
class Ray:
    """One ray, or a batch of rays sharing leading dimensions.

    ``origin`` has shape ``(..., 3)``; ``direction`` is a unit vector of shape
    ``(3,)`` or ``(..., 3)``.
    """

    origin: _Array
    direction: _Array

    def at(self, t: _Array) -> _Array:
        """Points ``origin + direction * t``."""
        return self.origin + self.direction * np.asarray(t, dtype=float)[..., None]


# ===========================================================================
# Camera construction
# ===========================================================================

def _unit(v: _Array, what: str) -> _Array:
    n = float(np.linalg.norm(v))
    if not np.isfinite(n) or n < 1e-12:
        raise DegenerateCamera(f"{what} has zero length")
    return v / n


def _basis(position: _Array, look_at: _Array) -> tuple:
    up = np.array(config.WORLD_UP, dtype=float)
    forward = _unit(look_at - position, "view direction (position == look_at)")
    right = _unit(np.cross(up, forward), "right vector (view direction parallel to world up)")
    return forward, up, right


def check_viewport(width: int, height: int) -> None:
    """Raise :class:`InvalidViewport` unless both sizes are positive integers."""
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidViewport(f"viewport {name} must be a positive integer, got {value!r}")


def build_camera(
    position: _Vec,
    look_at: _Vec,
    rotation_screen_x: float,
    viewport_width: int,
    viewport_height: int,
    zoom: float,
    base_width: float = config.BASE_VIEW_WIDTH,
) -> OrthoCamera:
    """Build the orthographic camera for one frame.

    The screen-x tilt is clamped to ``[TILT_MIN, TILT_MAX]`` degrees and
    applied by rotating *position* about the initial right vector, after
    which the basis is derived again and ``up`` re-orthogonalised.  The view
    is square in world units: ``base_width / zoom`` on each side.

    Raises
    ------
    DegenerateCamera
        ``zoom <= 0``, non-finite inputs, ``position == look_at``, or a view
        direction parallel to world up.
    InvalidViewport
        Non-positive viewport dimensions.
    """
    check_viewport(viewport_width, viewport_height)
    if not np.isfinite(zoom) or zoom <= 0.0:
        raise DegenerateCamera(f"zoom must be a positive number, got {zoom!r}")
    if not np.isfinite(rotation_screen_x):
        raise DegenerateCamera(f"rotation_screen_x must be finite, got {rotation_screen_x!r}")

    pos = np.asarray(position, dtype=float)
    target = np.asarray(look_at, dtype=float)
    if pos.shape != (3,) or target.shape != (3,):
        raise DegenerateCamera("position and look_at must be 3-vectors")
    if not (np.all(np.isfinite(pos)) and np.all(np.isfinite(target))):
        raise DegenerateCamera("position and look_at must be finite")

    _, _, right = _basis(pos, target)

    tilt = float(np.clip(rotation_screen_x, config.TILT_MIN, config.TILT_MAX))
    pos = pos @ rotation_matrix(right, tilt * config.TILT_DAMPING)

    forward, up, right = _basis(pos, target)
    up = np.cross(forward, right)

    half = base_width / zoom / 2.0
    logger.debug("camera at %s, forward %s, half-width %.4g", pos, forward, half)
    return OrthoCamera(
        position=pos,
        forward=forward,
        up=up,
        right=right,
        left=-half,
        right_extent=half,
        bottom=-half,
        top=half,
    )


def camera_for_params(params, viewport_width: int, viewport_height: int) -> OrthoCamera:
    """Frame camera for a :class:`~raymarch.render.RenderParams` snapshot.

    The home position orbits about world Z by ``params.rotation_z`` degrees
    and always looks at the origin.
    """
    home = opRotateZ(np.array(config.CAMERA_HOME, dtype=float), -params.rotation_z)
    return build_camera(
        home,
        config.LOOK_AT,
        params.rotation_screen_x,
        viewport_width,
        viewport_height,
        params.zoom,
    )


# ===========================================================================
# Rays
# ===========================================================================

def get_ray(camera: OrthoCamera, uv: _Array, pan_x: float = 0.0, pan_y: float = 0.0) -> Ray:
    """Ray for normalised device coordinates *uv* (shape ``(..., 2)``).

    Pan shifts the image plane: ``x`` against, ``y`` along the drag.
    """
    uv = np.asarray(uv, dtype=float)
    u = uv[..., 0] - pan_x * config.PAN_COEFFICIENT
    v = uv[..., 1] + pan_y * config.PAN_COEFFICIENT
    origin = (
        camera.position
        + (u * camera.width)[..., None] * camera.right
        + (v * camera.height)[..., None] * camera.up
    )
    return Ray(origin=origin, direction=camera.forward)


def pixel_uv(width: int, height: int) -> _Array:
    """Normalised coordinates of every pixel centre, shape ``(height, width, 2)``.

    ``uv = (frag - resolution / 2) / min(resolution)`` with ``frag`` measured
    from the bottom-left corner, so the shorter side spans ``[-0.5, 0.5]``.
    Row 0 is the top of the image.
    """
    check_viewport(width, height)
    scale = float(min(width, height))
    xs = (np.arange(width) + 0.5 - width * 0.5) / scale
    ys = ((height - np.arange(height) - 0.5) - height * 0.5) / scale
    Y, X = np.meshgrid(ys, xs, indexing="ij")
    return np.stack([X, Y], axis=-1)
