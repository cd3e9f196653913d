"""
sdf2d: 2D Signed Distance Functions
====================================

Two-dimensional distance functions that the raymarcher lifts into 3-D
with :func:`sdf3d.sdf_lib.opExtrude`.

Implemented features
--------------------
- Primitive shapes: :func:`sdCircle2D`, :func:`sdPolygon2D` (any vertex count)
- Transforms: :func:`opTranslate2D`, :func:`opRotate2D`

Quick start
-----------

::

    import numpy as np
    from sdf2d import sdPolygon2D

    square = [(-1, -1), (1, -1), (1, 1), (-1, 1)]
    d = sdPolygon2D(np.array([[0.0, 0.0], [2.0, 0.0]]), square)   # [-1, 1]
"""

from .sdf_lib import sdCircle2D, sdPolygon2D, opTranslate2D, opRotate2D

__version__ = "0.3.0"

__all__ = [
    "sdCircle2D",
    "sdPolygon2D",
    "opTranslate2D",
    "opRotate2D",
]
