"""Scene evaluator: one validated distance function per scene.

A :class:`Scene` wraps whatever describes the geometry (SDF source text, a
:class:`~sdf3d.geometry.Geometry3D` tree, or any callable over ``(..., 3)``
point arrays) and exposes :meth:`Scene.evaluate`.  All checking happens once
in the constructor; after that the renderer calls ``evaluate`` millions of
times without further validation.

Source text is either a single expression over ``p``::

    opSmoothUnion(sdSphere(p, 0.5), sdBox(opTranslate(p, (0.6, 0, 0)), (0.3, 0.3, 0.3)), 0.1)

or a block that defines ``sdf(p)`` (``mySdf`` is accepted too)::

    def sdf(p):
        q = opRepetition(p, (2.0, 2.0, 2.0))
        return opOnion(sdSphere(q, 0.5), 0.05)

Only names from :func:`library_namespace`, a few builtins, and names the
source binds itself may appear.  Attribute access is rejected outright, so
the numpy module itself is out of reach; the element-wise math a scene needs
(``abs``, ``min``, ``sqrt``, ``atan2``, ...) is exposed under plain names.
"""

from __future__ import annotations

import ast
import builtins
import logging
from typing import Any, Callable, Dict, Mapping

import numpy as np
import numpy.typing as npt

from sdf3d import sdf_lib

from .errors import InvalidExpression

logger = logging.getLogger(__name__)

_Array = npt.NDArray[np.floating]
_SDFFunc = Callable[[_Array], _Array]

DEFAULT_SOURCE = "sdSphere(p, 0.5)"
ENTRY_POINTS = ("sdf", "mySdf")

_SAFE_BUILTINS = ("range", "len", "float", "int", "tuple", "list", "enumerate", "zip")

# Probe points used to validate a compiled scene: origin, axes, a far point.
_PROBE = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, -1.0, 0.5],
    [0.25, 0.5, -2.0],
    [50.0, 50.0, 50.0],
])


def library_namespace() -> Dict[str, Any]:
    """Names a scene expression may use, mapped to their implementations."""
    ns: Dict[str, Any] = {
        name: getattr(sdf_lib, name)
        for name in dir(sdf_lib)
        if name.startswith(("sd", "op"))
    }
    ns.update(
        vec2=sdf_lib.vec2,
        vec3=sdf_lib.vec3,
        length=sdf_lib.length,
        dot=sdf_lib.dot,
        dot2=sdf_lib.dot2,
        ndot=sdf_lib.ndot,
        clamp=sdf_lib.clamp,
        mix=sdf_lib.mix,
        smoothstep=sdf_lib.smoothstep,
        normalize=sdf_lib.normalize,
        rotation_matrix=sdf_lib.rotation_matrix,
        # scalar math names, element-wise on arrays
        abs=np.abs,
        min=np.minimum,
        max=np.maximum,
        sqrt=np.sqrt,
        sin=np.sin,
        cos=np.cos,
        tan=np.tan,
        atan2=np.arctan2,
        exp=np.exp,
        floor=np.floor,
        mod=np.mod,
        sign=np.sign,
        radians=np.radians,
        pi=np.pi,
    )
    return ns


# ---------------------------------------------------------------------------
# Source validation
# ---------------------------------------------------------------------------

def _bound_names(tree: ast.AST) -> set:
    """Names the source itself binds (assignments, arguments, defs, loop targets)."""
    bound = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Store, ast.Del)):
            bound.add(node.id)
        elif isinstance(node, ast.arg):
            bound.add(node.arg)
        elif isinstance(node, (ast.FunctionDef, ast.ClassDef)):
            bound.add(node.name)
    return bound


def _check_tree(tree: ast.AST, allowed: Mapping[str, Any]) -> None:
    bound = _bound_names(tree) | {"p"}
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom, ast.Global, ast.Nonlocal,
                             ast.ClassDef, ast.AsyncFunctionDef, ast.Await,
                             ast.Yield, ast.YieldFrom)):
            raise InvalidExpression(
                f"line {getattr(node, 'lineno', '?')}: {type(node).__name__} is not allowed in a scene"
            )
        if isinstance(node, ast.Attribute):
            raise InvalidExpression(
                f"line {node.lineno}: attribute access (.{node.attr}) is not allowed in a scene"
            )
        if isinstance(node, ast.Name):
            if node.id.startswith("__"):
                raise InvalidExpression(f"line {node.lineno}: dunder name {node.id!r}")
            if isinstance(node.ctx, ast.Load) and node.id not in allowed and node.id not in bound:
                raise InvalidExpression(f"line {node.lineno}: unknown name {node.id!r}")


def compile_source(source: str) -> _SDFFunc:
    """Turn SDF source text into a callable ``f(p) -> d``.

    Raises
    ------
    InvalidExpression
        On syntax errors, names outside the library, forbidden constructs, or
        a block without an ``sdf(p)`` / ``mySdf(p)`` definition.
    """
    if not isinstance(source, str) or not source.strip():
        raise InvalidExpression("scene source is empty")

    ns = library_namespace()
    allowed = dict(ns)
    env: Dict[str, Any] = dict(ns)
    env["__builtins__"] = {name: getattr(builtins, name) for name in _SAFE_BUILTINS}
    allowed.update(env["__builtins__"])

    text = source.strip()
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError:
        tree = None

    if tree is not None:
        _check_tree(tree, allowed)
        lam = ast.Lambda(
            args=ast.arguments(
                posonlyargs=[], args=[ast.arg(arg="p")], vararg=None,
                kwonlyargs=[], kw_defaults=[], kwarg=None, defaults=[],
            ),
            body=tree.body,
        )
        expr = ast.fix_missing_locations(ast.Expression(body=lam))
        return eval(compile(expr, "<scene>", "eval"), env)

    try:
        module = ast.parse(text, mode="exec")
    except SyntaxError as exc:
        raise InvalidExpression(f"syntax error at line {exc.lineno}: {exc.msg}") from exc
    _check_tree(module, allowed)
    try:
        exec(compile(module, "<scene>", "exec"), env)
    except Exception as exc:
        raise InvalidExpression(f"scene source failed to load: {exc}") from exc

    for name in ENTRY_POINTS:
        func = env.get(name)
        if callable(func):
            return func
    raise InvalidExpression(f"scene source must define one of {', '.join(ENTRY_POINTS)}(p)")


# ===========================================================================
# Scene
# ===========================================================================

class Scene:
    """A validated signed distance function ``ℝ³ → ℝ``.

    Parameters
    ----------
    description:
        SDF source text, a :class:`~sdf3d.geometry.Geometry3D`, or a callable
        mapping ``(..., 3)`` points to ``(...)`` distances.

    Raises
    ------
    InvalidExpression
        If the description cannot be compiled, or does not evaluate to one
        finite-shaped number per point on a small probe batch.
    """

    def __init__(self, description: str | _SDFFunc) -> None:
        if isinstance(description, str):
            self.source = description.strip()
            func = compile_source(description)
        elif callable(description):
            self.source = getattr(description, "__name__", type(description).__name__)
            func = description
        else:
            raise InvalidExpression(
                f"scene must be source text or a callable, got {type(description).__name__}"
            )
        self._func = func
        self._probe()
        logger.debug("Scene ready: %s", self.source)

    @classmethod
    def from_source(cls, source: str) -> Scene:
        """Build a scene from SDF source text."""
        return cls(source)

    @classmethod
    def default(cls) -> Scene:
        """The half-unit sphere shown before any scene is supplied."""
        return cls(DEFAULT_SOURCE)

    def _probe(self) -> None:
        try:
            with np.errstate(all="ignore"):
                d = np.asarray(self._func(_PROBE.copy()))
        except Exception as exc:
            logger.warning("Rejected scene %r: %s", self.source, exc)
            raise InvalidExpression(f"scene failed to evaluate: {type(exc).__name__}: {exc}") from exc
        if d.dtype.kind not in "biuf":
            logger.warning("Rejected scene %r: non-numeric result", self.source)
            raise InvalidExpression(f"scene must return numbers, got {d.dtype} values")
        if d.shape not in ((), (len(_PROBE),)):
            raise InvalidExpression(
                f"scene must return one distance per point, got shape {d.shape} "
                f"for {len(_PROBE)} points"
            )

    def evaluate(self, p: _Array) -> _Array:
        """Signed distance at *p* (shape ``(..., 3)``), as a ``(...)`` float array."""
        p = np.asarray(p, dtype=float)
        d = np.asarray(self._func(p), dtype=float)
        if d.shape != p.shape[:-1]:
            d = np.broadcast_to(d, p.shape[:-1])
        return d

    def __call__(self, p: _Array) -> _Array:
        return self.evaluate(p)

    def __repr__(self) -> str:
        return f"Scene({self.source!r})"
