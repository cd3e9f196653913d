"""Exceptions raised by the renderer.

Configuration problems are reported before any pixel work starts; numerical
trouble inside a frame never raises and is absorbed per pixel instead.
"""


class RenderError(Exception):
    """Base class for every error the renderer raises."""


class InvalidExpression(RenderError, ValueError):
    """The scene description cannot be turned into a distance function."""


class DegenerateCamera(RenderError, ValueError):
    """Camera inputs do not define an orthonormal view basis."""


class InvalidViewport(RenderError, ValueError):
    """Viewport width/height is not a positive integer."""


class FrameSuperseded(RenderError):
    """A newer frame was requested before this one finished."""


class InvalidWorkers(RenderError, ValueError):
    """Thread count or band height is not a positive integer."""
