"""Union of two overlapping spheres, raymarched.

Demonstrates: Union3D, render_frame, render_pixel
Output:       examples/union_example.png

Mathematical identity verified:
    Union(A, B)(p) == min(A(p), B(p))
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np

from sdf3d import Sphere3D, Union3D
from raymarch import RenderParams, camera_for_params, render_frame, render_pixel, to_rgba8

_RES    = 256
_PARAMS = RenderParams(rotation_z=20.0, zoom=3.0)
_OUT    = os.path.join(os.path.dirname(__file__), "union_example.png")


def _save_png(image, out_path, title=""):
    fig = plt.figure(figsize=(5, 5), facecolor="#111")
    ax  = fig.add_subplot(111)
    ax.imshow(to_rgba8(image)); ax.set_axis_off()
    ax.set_title(title, color="white", fontsize=10)
    plt.savefig(out_path, dpi=150, bbox_inches="tight", facecolor="#111")
    plt.close()
    print(f"  Saved: {out_path}")


def main():
    print("=" * 60)
    print("UNION: two overlapping spheres")
    print("  S1: centre (-0.2, 0, 0)  radius 0.3")
    print("  S2: centre (+0.2, 0, 0)  radius 0.3")
    print("=" * 60)

    s1 = Sphere3D(0.3).translate(-0.2, 0.0, 0.0)
    s2 = Sphere3D(0.3).translate( 0.2, 0.0, 0.0)
    geom = Union3D(s1, s2)

    # --- mathematical verification ---
    rng = np.random.default_rng(0)
    pts = rng.uniform(-1.0, 1.0, (4096, 3))
    max_diff = np.abs(geom.sdf(pts) - np.minimum(s1.sdf(pts), s2.sdf(pts))).max()
    print(f"max |Union - min(S1,S2)| = {max_diff:.2e}  (should be 0)")

    # --- spot check: the centre pixel looks at the seam of the two spheres ---
    cam   = camera_for_params(_PARAMS, _RES, _RES)
    rgba  = render_pixel(geom, cam, _PARAMS, (0.0, 0.0), outlines=True)
    print(f"Centre pixel RGBA: {np.round(rgba, 3)}")

    image = render_frame(geom, _PARAMS, _RES, _RES, outlines=True, clamp=True)
    covered = (image[..., 3] > 0.5).mean()
    print(f"Coverage: {covered:.1%} of pixels")

    ok = max_diff == 0.0 and covered > 0.0
    print("\n" + ("PASSED" if ok else "FAILED"))

    _save_png(image, _OUT, "Union: S1 union S2")


if __name__ == "__main__":
    main()
