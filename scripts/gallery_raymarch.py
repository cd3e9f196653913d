"""Raymarch every sdf_lib 3D primitive and operator on one page.

Each tile is a full frame from :func:`raymarch.render_frame` with the normal
colour pass and outlines, laid out with matplotlib.

Usage::

    python scripts/gallery_raymarch.py                   # saves gallery_raymarch.png
    python scripts/gallery_raymarch.py --out my_file.png
    python scripts/gallery_raymarch.py --res 64          # faster, lower quality
    python scripts/gallery_raymarch.py --mode contours

Requirements: numpy, matplotlib
"""
from __future__ import annotations

import argparse
import os
import sys

# Ensure the repo root (parent of scripts/) is importable regardless of cwd
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np

from sdf3d import sdf_lib as sdf
from raymarch import RenderParams, render_frame, to_rgba8
from raymarch.logging_config import setup_logging


# ---------------------------------------------------------------------------
# Shape catalogue  (label, sdf_func)
# ---------------------------------------------------------------------------

def _make_shapes() -> list[tuple[str, object]]:
    S  = 0.5
    bh = np.array([0.4, 0.3, 0.25])
    square = [(-0.4, -0.4), (0.4, -0.4), (0.4, 0.4), (-0.4, 0.4)]
    star = [(0.5 * np.cos(a) * (1.0 if i % 2 == 0 else 0.45),
             0.5 * np.sin(a) * (1.0 if i % 2 == 0 else 0.45))
            for i, a in enumerate(np.linspace(0.0, 2.0 * np.pi, 10, endpoint=False))]

    base_sphere = lambda p: sdf.sdSphere(p, S)
    base_box    = lambda p: sdf.sdBox(p, bh)

    shapes = [
        # --- primitives ---
        ("sdSphere",
         base_sphere),
        ("sdBox",
         base_box),
        ("sdPlane",
         lambda p: sdf.opIntersection(sdf.sdPlane(p, (1.0, 1.0, 1.0), 0.0), sdf.sdSphere(p, 0.6))),
        ("sdLine",
         lambda p: sdf.sdLine(p, (-0.5, -0.3, 0.0), (0.5, 0.3, 0.2), 0.15)),
        ("sdWedge",
         lambda p: sdf.opIntersection(sdf.sdWedge(p, 120.0, 0.5), sdf.sdSphere(p, 0.6))),
        ("sdCircle",
         lambda p: sdf.sdCircle(p, 0.6)),
        ("sdPolygon",
         lambda p: sdf.sdPolygon(p, square)),
        ("sdPolygon star",
         lambda p: sdf.opExtrude(p, sdf.sdPolygon2D(p, star), 0.15)),

        # --- boolean operations ---
        ("opUnion",
         lambda p: sdf.opUnion(base_sphere(sdf.opTranslate(p, (-0.25, 0, 0))), base_box(sdf.opTranslate(p, (0.3, 0, 0))))),
        ("opDifference",
         lambda p: sdf.opDifference(base_sphere(p), sdf.sdBox(p, (0.45, 0.45, 0.45)))),
        ("opIntersection",
         lambda p: sdf.opIntersection(base_sphere(p), sdf.sdBox(p, (0.4, 0.4, 0.4)))),
        ("opSmoothUnion",
         lambda p: sdf.opSmoothUnion(sdf.sdSphere(sdf.opTranslate(p, (-0.3, 0, 0)), 0.35),
                                     sdf.sdSphere(sdf.opTranslate(p, (0.3, 0, 0)), 0.35), 0.2)),
        ("opSmoothDifference",
         lambda p: sdf.opSmoothDifference(base_sphere(p), sdf.sdBox(p, (0.45, 0.45, 0.45)), 0.1)),
        ("opSmoothIntersection",
         lambda p: sdf.opSmoothIntersection(base_sphere(p), sdf.sdBox(p, (0.4, 0.4, 0.4)), 0.1)),

        # --- domain operations ---
        ("opOnion",
         lambda p: sdf.opIntersection(sdf.opOnion(base_sphere(p), 0.05), sdf.sdPlane(p, (0, 0, 1), 0.1))),
        ("opRepetition",
         lambda p: sdf.opIntersection(sdf.sdSphere(sdf.opRepetition(p, (0.5, 0.5, 0.5)), 0.15),
                                      sdf.sdBox(p, (0.6, 0.6, 0.6)))),
        ("opRevolve",
         lambda p: sdf.sdCircle2D(sdf.opTranslate2D(sdf.opRevolve(p), (0.4, 0.0)), 0.15)),
        ("opExtrude",
         lambda p: sdf.opExtrude(p, sdf.sdCircle2D(p, 0.4), 0.3)),
        ("opRotate",
         lambda p: base_box(sdf.opRotate(p, (30.0, 20.0, 45.0)))),
        ("opRotateZ",
         lambda p: base_box(sdf.opRotateZ(p, 45.0))),
    ]
    return shapes


# ---------------------------------------------------------------------------
# Gallery
# ---------------------------------------------------------------------------

def render_gallery(shapes, out_path: str, ncols: int = 5, res: int = 128,
                   mode: str = "normals", zoom: float = 4.5) -> None:
    nrows = (len(shapes) + ncols - 1) // ncols
    fig, axes = plt.subplots(nrows, ncols, figsize=(ncols * 2.2, nrows * 2.4), facecolor="#111")
    params = RenderParams(zoom=zoom)

    for ax, (label, func) in zip(np.ravel(axes), shapes):
        image = render_frame(func, params, res, res, mode=mode, outlines=True, clamp=True)
        ax.imshow(to_rgba8(image))
        ax.set_facecolor("#111")
        ax.set_title(label, color="white", fontsize=8)
        ax.set_axis_off()
    for ax in np.ravel(axes)[len(shapes):]:
        ax.set_axis_off()

    fig.suptitle("sdf_lib: raymarched 3D Signed Distance Functions", color="white",
                 fontsize=13, y=1.002)
    plt.tight_layout(pad=0.3)
    fig.savefig(out_path, dpi=150, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    print(f"Saved: {out_path}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Raymarch all sdf_lib 3D primitives to a single PNG gallery."
    )
    parser.add_argument("--out",  default="gallery_raymarch.png", help="Output PNG path")
    parser.add_argument("--cols", type=int, default=5, help="Number of columns (default 5)")
    parser.add_argument("--res",  type=int, default=128, help="Pixels per tile side (default 128)")
    parser.add_argument("--mode", choices=["normals", "contours", "none"], default="normals")
    args = parser.parse_args()

    setup_logging()
    render_gallery(_make_shapes(), args.out, ncols=args.cols, res=args.res, mode=args.mode)


if __name__ == "__main__":
    main()
