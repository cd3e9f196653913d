"""
Intersection Example: Two overlapping spheres, shown as height contours

Mathematical expectation:
- Two spheres: S1 at (0, 0, 0) radius 0.35, S2 at (0.2, 0, 0) radius 0.35
- Intersection = max(S1, S2) at each point
- At origin (0,0,0):
  - S1 distance = 0 - 0.35 = -0.35 (inside)
  - S2 distance = sqrt(0.2^2) - 0.35 = 0.2 - 0.35 = -0.15 (inside)
  - Intersection = max(-0.35, -0.15) = -0.15 (inside, but less negative)
- At (0.1, 0, 0) (midpoint):
  - S1 distance = sqrt(0.1^2) - 0.35 = 0.1 - 0.35 = -0.25 (inside)
  - S2 distance = sqrt(0.1^2) - 0.35 = -0.25 (inside)
  - Intersection = max(-0.25, -0.25) = -0.25 (inside)
- Far outside: both positive, intersection = max(positive, positive) = positive
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import matplotlib.pyplot as plt
import numpy as np

from raymarch import RenderParams, Scene, render_frame, to_rgba8

SOURCE = "opIntersection(sdSphere(p, 0.35), sdSphere(opTranslate(p, (0.2, 0, 0)), 0.35))"
OUT = os.path.join(os.path.dirname(__file__), "intersection_example.png")


def main():
    scene = Scene(SOURCE)

    print("=" * 60)
    print("INTERSECTION EXAMPLE: Two overlapping spheres")
    print("=" * 60)
    pts = np.array([[0.0, 0.0, 0.0], [0.1, 0.0, 0.0], [2.0, 2.0, 2.0]])
    phi = scene.evaluate(pts)
    print(f"phi(origin)   = {phi[0]:+.4f}  (expected -0.1500)")
    print(f"phi(midpoint) = {phi[1]:+.4f}  (expected -0.2500)")
    print(f"phi(far)      = {phi[2]:+.4f}  (expected > 0)")
    ok = np.allclose(phi[:2], [-0.15, -0.25]) and phi[2] > 0

    params = RenderParams(rotation_screen_x=30.0, zoom=8.0)
    normals = render_frame(scene, params, 256, 256, outlines=True, clamp=True)
    contours = render_frame(scene, params, 256, 256, mode="contours", outlines=True, clamp=True)
    print("\n" + ("PASSED" if ok else "FAILED"))

    fig, axes = plt.subplots(1, 2, figsize=(8, 4), facecolor="#111")
    for ax, image, title in zip(axes, (normals, contours), ("normals", "contours")):
        ax.imshow(to_rgba8(image)); ax.set_axis_off()
        ax.set_title(title, color="white", fontsize=10)
    fig.savefig(OUT, dpi=150, bbox_inches="tight", facecolor="#111")
    plt.close(fig)
    print(f"Saved: {OUT}")


if __name__ == "__main__":
    main()
