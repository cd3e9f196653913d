"""Compositing and the per-frame entry points.

A frame is a pure function of ``(scene, params, viewport, shading)``:
:func:`render_frame` builds the camera once, splits the viewport into bands
of rows and renders the bands on a thread pool.  Bands write disjoint rows of
the output buffer, and the scene and camera are only read, so no locking is
involved.  The caller owns any redraw loop.
"""

from __future__ import annotations

import logging
import math
import os
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Union

import numpy as np
import numpy.typing as npt

from .camera import OrthoCamera, camera_for_params, check_viewport, get_ray, pixel_uv
from .errors import FrameSuperseded, InvalidWorkers
from .scene import Scene
from .shading import PixelSample, ShadingMode, contour_color_pass, edge_pass, normal_color_pass

logger = logging.getLogger(__name__)

_Array = npt.NDArray[np.floating]
_Pass = Callable[..., PixelSample]
_SceneLike = Union[Scene, str, Callable[[_Array], _Array]]
PixelCallback = Callable[[int, int, _Array], None]
BandCallback = Callable[[int, int, _Array], None]


@dataclass(frozen=True)
class RenderParams:
    """Interaction state read once per frame.

    Attributes
    ----------
    rotation_z:
        Orbit of the camera about world Z, degrees.
    rotation_screen_x:
        Tilt about the screen's horizontal axis, degrees; clamped to
        ``[-87, 38]`` when the camera is built.
    pan_x, pan_y:
        Image-plane pan in drag units.
    zoom:
        Magnification, must be positive.
    """

    rotation_z: float = 0.0
    rotation_screen_x: float = 0.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0


# ===========================================================================
# Compositor
# ===========================================================================

def enabled_passes(mode: Union[ShadingMode, str], outlines: bool) -> List[_Pass]:
    """Passes to run for *mode* and *outlines*, in compositing order."""
    mode = ShadingMode(mode)
    passes: List[_Pass] = []
    if mode is ShadingMode.NORMALS:
        passes.append(normal_color_pass)
    elif mode is ShadingMode.CONTOURS:
        passes.append(contour_color_pass)
    if outlines:
        passes.append(edge_pass)
    return passes


def composite(samples: Iterable[PixelSample], clamp: bool = False, shape: Sequence[int] = ()) -> _Array:
    """Add up pass samples into RGBA.

    Passes are summed, not alpha-blended, so overlapping passes can push a
    channel above 1.  ``clamp=True`` clips the result to ``[0, 1]``.
    *shape* sizes the transparent result when no pass is enabled.
    """
    rgba = np.zeros(tuple(shape) + (4,))
    for sample in samples:
        rgba = rgba + sample.rgba()
    if clamp:
        rgba = np.clip(rgba, 0.0, 1.0)
    return rgba


def to_rgba8(buffer: _Array) -> npt.NDArray[np.uint8]:
    """Clip a float RGBA buffer to ``[0, 1]`` and quantise it to bytes."""
    return np.round(np.clip(buffer, 0.0, 1.0) * 255.0).astype(np.uint8)


# ===========================================================================
# Per-pixel entry point
# ===========================================================================

def _as_scene(scene: _SceneLike) -> Scene:
    return scene if isinstance(scene, Scene) else Scene(scene)


def render_pixel(
    scene: _SceneLike,
    camera: OrthoCamera,
    params: RenderParams,
    uv: Sequence[float],
    mode: Union[ShadingMode, str] = ShadingMode.NORMALS,
    outlines: bool = False,
    clamp: bool = False,
) -> _Array:
    """RGBA of the single pixel at normalised coordinates *uv*."""
    scene = _as_scene(scene)
    ray = get_ray(camera, np.asarray(uv, dtype=float)[None, :], params.pan_x, params.pan_y)
    passes = enabled_passes(mode, outlines)
    return composite((run(scene, ray) for run in passes), clamp, shape=(1,))[0]


# ===========================================================================
# Per-frame entry points
# ===========================================================================

def _render_into(
    buffer: _Array,
    scene: Scene,
    camera: OrthoCamera,
    params: RenderParams,
    passes: List[_Pass],
    clamp: bool,
    executor: Optional[Executor],
    chunk_rows: int,
    is_current: Callable[[], bool] = lambda: True,
    on_rows: Optional[BandCallback] = None,
) -> bool:
    """Fill *buffer* band by band; return ``False`` if the frame went stale."""
    height, width = buffer.shape[:2]
    uv = pixel_uv(width, height)
    bands = [(r0, min(r0 + chunk_rows, height)) for r0 in range(0, height, chunk_rows)]

    def band(r0: int, r1: int) -> bool:
        if not is_current():
            return False
        ray = get_ray(camera, uv[r0:r1], params.pan_x, params.pan_y)
        buffer[r0:r1] = composite((run(scene, ray) for run in passes), clamp, shape=(r1 - r0, width))
        return True

    if executor is None or len(bands) == 1:
        for r0, r1 in bands:
            if not band(r0, r1):
                return False
            if on_rows is not None:
                on_rows(r0, r1, buffer[r0:r1])
        return True

    futures = {executor.submit(band, r0, r1): (r0, r1) for r0, r1 in bands}
    complete = True
    for future in as_completed(futures):
        if not future.result():
            complete = False
        elif on_rows is not None:
            r0, r1 = futures[future]
            on_rows(r0, r1, buffer[r0:r1])
    return complete


def check_workers(workers: Optional[int], chunk_rows: Optional[int] = None) -> None:
    """Raise :class:`InvalidWorkers` unless each given setting is a positive integer."""
    for name, value in (("workers", workers), ("chunk_rows", chunk_rows)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidWorkers(f"{name} must be a positive integer, got {value!r}")


def _default_chunk_rows(height: int, workers: Optional[int]) -> int:
    n = workers or min(32, (os.cpu_count() or 1) + 4)
    return max(1, math.ceil(height / (4 * n)))


def render_frame(
    scene: _SceneLike,
    params: RenderParams,
    width: int,
    height: int,
    mode: Union[ShadingMode, str] = ShadingMode.NORMALS,
    outlines: bool = False,
    clamp: bool = False,
    workers: Optional[int] = None,
    chunk_rows: Optional[int] = None,
    on_rows: Optional[BandCallback] = None,
) -> _Array:
    """Render one frame into a ``(height, width, 4)`` float RGBA buffer.

    Row 0 is the top of the viewport.  Scene, camera and viewport are all
    validated before any pixel is traced.  ``workers=1`` renders on the
    calling thread; otherwise bands of *chunk_rows* rows are spread over a
    thread pool of *workers* threads.  *on_rows* is called on the calling
    thread with ``(r0, r1, band)`` as each band completes.

    Raises
    ------
    InvalidExpression, DegenerateCamera, InvalidViewport, InvalidWorkers
        Configuration errors; no partial frame is produced.
    """
    check_viewport(width, height)
    check_workers(workers, chunk_rows)
    scene = _as_scene(scene)
    camera = camera_for_params(params, width, height)
    passes = enabled_passes(mode, outlines)
    rows = chunk_rows or _default_chunk_rows(height, workers)

    logger.debug("Rendering %dx%d frame, passes=%s", width, height, [p.__name__ for p in passes])
    start = time.perf_counter()
    buffer = np.zeros((height, width, 4))
    if workers == 1:
        _render_into(buffer, scene, camera, params, passes, clamp, None, rows, on_rows=on_rows)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            _render_into(buffer, scene, camera, params, passes, clamp, executor, rows, on_rows=on_rows)
    logger.info("Rendered %dx%d frame in %.3f s", width, height, time.perf_counter() - start)
    return buffer


def stream_frame(
    scene: _SceneLike,
    params: RenderParams,
    width: int,
    height: int,
    callback: PixelCallback,
    **kwargs,
) -> _Array:
    """Render a frame, handing every pixel to ``callback(x, y, rgba)``.

    Pixels arrive band by band as the bands finish; within a band they are
    delivered in row-major order.  The completed buffer is returned as well.
    """
    def deliver(r0: int, r1: int, band: _Array) -> None:
        for dy in range(r1 - r0):
            for x in range(width):
                callback(x, r0 + dy, band[dy, x])

    return render_frame(scene, params, width, height, on_rows=deliver, **kwargs)


class FrameRenderer:
    """Renders successive frames of one scene on a persistent thread pool.

    Starting a frame (or calling :meth:`supersede`) makes every frame still
    in flight stale: its remaining bands are skipped and its :meth:`render`
    call raises :class:`~raymarch.errors.FrameSuperseded`.

    Usage::

        with FrameRenderer("sdSphere(p, 0.5)", workers=4) as renderer:
            image = renderer.render(RenderParams(zoom=2.0), 320, 240)
    """

    def __init__(self, scene: _SceneLike, workers: Optional[int] = None) -> None:
        check_workers(workers)
        self.scene = _as_scene(scene)
        self.workers = workers
        self._executor = ThreadPoolExecutor(max_workers=workers) if workers != 1 else None
        self._lock = threading.Lock()
        self._frame = 0

    def _next_frame(self) -> int:
        with self._lock:
            self._frame += 1
            return self._frame

    def supersede(self) -> None:
        """Mark every frame currently rendering as stale."""
        self._next_frame()

    def render(
        self,
        params: RenderParams,
        width: int,
        height: int,
        mode: Union[ShadingMode, str] = ShadingMode.NORMALS,
        outlines: bool = False,
        clamp: bool = False,
        chunk_rows: Optional[int] = None,
    ) -> _Array:
        check_viewport(width, height)
        check_workers(self.workers, chunk_rows)
        camera = camera_for_params(params, width, height)
        passes = enabled_passes(mode, outlines)
        rows = chunk_rows or _default_chunk_rows(height, self.workers)

        frame = self._next_frame()
        buffer = np.zeros((height, width, 4))
        done = _render_into(
            buffer, self.scene, camera, params, passes, clamp, self._executor, rows,
            is_current=lambda: self._frame == frame,
        )
        if not done or self._frame != frame:
            logger.info("Frame %d superseded before completion", frame)
            raise FrameSuperseded(f"frame {frame} was replaced by frame {self._frame}")
        return buffer

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> FrameRenderer:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
