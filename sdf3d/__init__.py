"""
sdf3d: 3D Signed Distance Function Library
============================================

Distance functions and composable geometries for the raymarch renderer,
based on Inigo Quilez's distance function collection.

Implemented features
--------------------
- Primitive shapes: Sphere, Box, Plane, Circle (thin disc), Polygon prism,
  Line (capsule), Wedge
- Boolean operations: Union, Intersection, Difference and their smooth variants
- Transforms: translate, rotate (Z→Y→X), rotate_x/y/z, repeat, onion
- Functional library: :mod:`sdf3d.sdf_lib` (``sd*`` primitives, ``op*`` operators)

Quick start
-----------

::

    from sdf3d import Sphere3D, Box3D, Union3D
    import numpy as np

    sphere = Sphere3D(radius=0.5)
    box    = Box3D(half_size=(0.4, 0.4, 0.4)).translate(0.6, 0.0, 0.0)
    shape  = Union3D(sphere, box)

    d = shape.sdf(np.array([[0.0, 0.0, 0.0]]))   # [-0.5]
"""

from .geometry import (
    Geometry3D,
    Sphere3D,
    Box3D,
    Plane3D,
    Circle3D,
    Polygon3D,
    Line3D,
    Wedge3D,
    Union3D,
    Intersection3D,
    Difference3D,
)

__version__ = "0.3.0"

__all__ = [
    # Base
    "Geometry3D",

    # Primitives
    "Sphere3D",
    "Box3D",
    "Plane3D",
    "Circle3D",
    "Polygon3D",
    "Line3D",
    "Wedge3D",

    # Boolean operations
    "Union3D",
    "Intersection3D",
    "Difference3D",
]
