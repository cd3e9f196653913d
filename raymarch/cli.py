"""Command-line frame driver.

Usage::

    sdf-render "sdSphere(p, 0.5)" --out sphere.png
    sdf-render --file scene.py --mode contours --outlines --zoom 2
    python -m raymarch "opUnion(sdSphere(p, 0.5), sdBox(p, (1, 1, 1)))" -v
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from matplotlib import image as mpimg

from .errors import RenderError
from .logging_config import setup_logging
from .render import RenderParams, render_frame, to_rgba8
from .scene import DEFAULT_SOURCE, Scene
from .shading import ShadingMode

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdf-render",
        description="Raymarch a signed distance function to a PNG.",
    )
    src = parser.add_mutually_exclusive_group()
    src.add_argument("source", nargs="?", help=f"SDF expression over p (default: {DEFAULT_SOURCE!r})")
    src.add_argument("--file", help="Read the scene source from this file")
    parser.add_argument("--width",  type=int, default=320, help="Viewport width in pixels (default 320)")
    parser.add_argument("--height", type=int, default=240, help="Viewport height in pixels (default 240)")
    parser.add_argument("--mode", choices=[m.value for m in ShadingMode], default=ShadingMode.NORMALS.value,
                        help="Colour pass (default normals)")
    parser.add_argument("--outlines", action="store_true", help="Add the white edge pass")
    parser.add_argument("--rotation-z", type=float, default=0.0, help="Orbit about world Z, degrees")
    parser.add_argument("--rotation-x", type=float, default=0.0, help="Screen-x tilt, degrees")
    parser.add_argument("--pan-x", type=float, default=0.0)
    parser.add_argument("--pan-y", type=float, default=0.0)
    parser.add_argument("--zoom", type=float, default=1.0, help="Magnification (default 1)")
    parser.add_argument("--workers", type=int, default=None, help="Render threads (default: executor default)")
    parser.add_argument("--clamp", action="store_true", help="Clip composited colour to [0, 1]")
    parser.add_argument("--out", default="render.png", help="Output PNG path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _read_source(args: argparse.Namespace) -> str:
    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            return fh.read()
    return args.source or DEFAULT_SOURCE


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    params = RenderParams(
        rotation_z=args.rotation_z,
        rotation_screen_x=args.rotation_x,
        pan_x=args.pan_x,
        pan_y=args.pan_y,
        zoom=args.zoom,
    )
    try:
        scene = Scene(_read_source(args))
        buffer = render_frame(
            scene, params, args.width, args.height,
            mode=args.mode, outlines=args.outlines, clamp=args.clamp, workers=args.workers,
        )
    except (RenderError, OSError) as exc:
        print(f"sdf-render: error: {exc}", file=sys.stderr)
        return 2

    mpimg.imsave(args.out, to_rgba8(buffer))
    logger.info("Saved: %s", args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
