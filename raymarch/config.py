"""Numeric constants of the renderer.

Everything the tracer, camera and shading passes tune against lives here so
that a frame driver can read (or override, via :class:`TraceConfig`) a single
source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass

# Sphere tracing
MAX_STEPS: int = 100
MAX_T: float = 1000.0
HIT_EPSILON: float = 1e-4
CONTOUR_HIT_EPSILON: float = 1e-5
NORMAL_EPSILON: float = 1e-4

# Normal-colour pass: back-step for the coverage gradient and its fade width
AA_STEP: float = 0.001
AA_FALLOFF: float = 0.2

# Contour pass
CONTOUR_NORMAL_Z: float = 0.95
CONTOUR_HUE_SCALE: float = 0.125  # degrees of hue per world unit of z

# Outline pass
EDGE_OFFSET: float = 0.0075
EDGE_DOT_THRESHOLD: float = 0.1

# Camera
PAN_COEFFICIENT: float = 0.4
TILT_DAMPING: float = -0.025  # radians per degree of screen-x rotation
TILT_MIN: float = -87.0
TILT_MAX: float = 38.0
BASE_VIEW_WIDTH: float = 8.0
CAMERA_HOME: tuple[float, float, float] = (50.0, 50.0, 50.0)
LOOK_AT: tuple[float, float, float] = (0.0, 0.0, 0.0)
WORLD_UP: tuple[float, float, float] = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class TraceConfig:
    """Limits of one sphere-tracing run."""

    max_steps: int = MAX_STEPS
    max_t: float = MAX_T
    hit_epsilon: float = HIT_EPSILON

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")
        if not self.max_t > 0.0:
            raise ValueError(f"max_t must be positive, got {self.max_t}")
        if not self.hit_epsilon > 0.0:
            raise ValueError(f"hit_epsilon must be positive, got {self.hit_epsilon}")


DEFAULT_TRACE = TraceConfig()
CONTOUR_TRACE = TraceConfig(hit_epsilon=CONTOUR_HIT_EPSILON)
