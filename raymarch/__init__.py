"""
raymarch: Orthographic SDF sphere tracer
=========================================

Renders any signed distance function built from :mod:`sdf3d` into an RGBA
image with an orthographic orbit camera.

Implemented features
--------------------
- Scene evaluator: SDF source text, :class:`~sdf3d.geometry.Geometry3D`
  trees or plain callables, validated once (:class:`Scene`)
- Camera: orbit about world Z, clamped screen-x tilt, pan and zoom
- Sphere tracing and central-difference normals, vectorised over ray batches
- Shading passes: normal colour, height contours, edge outlines
- Additive compositing, threaded frame rendering, per-pixel streaming and
  frame supersession (:class:`FrameRenderer`)

Quick start
-----------

::

    from raymarch import RenderParams, render_frame, to_rgba8

    image = render_frame("sdSphere(p, 0.5)", RenderParams(zoom=2.0), 160, 120)
    pixels = to_rgba8(image)                  # (120, 160, 4) uint8
"""

from .camera import OrthoCamera, Ray, build_camera, camera_for_params, get_ray, pixel_uv
from .config import TraceConfig
from .errors import (
    DegenerateCamera,
    FrameSuperseded,
    InvalidExpression,
    InvalidViewport,
    InvalidWorkers,
    RenderError,
)
from .render import (
    FrameRenderer,
    RenderParams,
    check_workers,
    composite,
    enabled_passes,
    render_frame,
    render_pixel,
    stream_frame,
    to_rgba8,
)
from .scene import Scene, compile_source, library_namespace
from .shading import PixelSample, ShadingMode, contour_color_pass, edge_pass, hsv2rgb, normal_color_pass
from .tracer import TraceResult, estimate_normal, sphere_trace

__version__ = "0.3.0"

__all__ = [
    # Scene
    "Scene",
    "compile_source",
    "library_namespace",

    # Camera
    "OrthoCamera",
    "Ray",
    "build_camera",
    "camera_for_params",
    "get_ray",
    "pixel_uv",

    # Tracing
    "TraceConfig",
    "TraceResult",
    "sphere_trace",
    "estimate_normal",

    # Shading
    "ShadingMode",
    "PixelSample",
    "hsv2rgb",
    "normal_color_pass",
    "contour_color_pass",
    "edge_pass",

    # Frames
    "RenderParams",
    "FrameRenderer",
    "enabled_passes",
    "composite",
    "check_workers",
    "render_pixel",
    "render_frame",
    "stream_frame",
    "to_rgba8",

    # Errors
    "RenderError",
    "InvalidExpression",
    "DegenerateCamera",
    "InvalidViewport",
    "InvalidWorkers",
    "FrameSuperseded",
]
