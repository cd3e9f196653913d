"""
Subtraction Example: Sphere with a hole cut out

Mathematical expectation:
- Base sphere at (0, 0, 0) radius 0.4
- Cutter sphere at (0.2, 0, 0) radius 0.25
- Difference = max(-cutter, base)
- At origin (0,0,0):
  - Base distance = 0 - 0.4 = -0.4 (inside)
  - Cutter distance = 0.2 - 0.25 = -0.05 (inside cutter)
  - Difference = max(0.05, -0.4) = 0.05 (outside result)
- At (0.2, 0, 0) (cutter center):
  - Base distance = 0.2 - 0.4 = -0.2 (inside base)
  - Cutter distance = -0.25 (inside cutter)
  - Difference = max(0.25, -0.2) = 0.25 (outside result, hole created)
- At (-0.3, 0, 0) (base only):
  - Base distance = -0.1, Cutter distance = 0.25
  - Difference = max(-0.25, -0.1) = -0.1 (inside)
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import matplotlib.pyplot as plt
import numpy as np

from sdf3d import Difference3D, Sphere3D
from raymarch import RenderParams, render_frame, to_rgba8

OUT = os.path.join(os.path.dirname(__file__), "subtraction_example.png")


def main():
    base = Sphere3D(0.4)
    cutter = Sphere3D(0.25).translate(0.2, 0.0, 0.0)
    sub = Difference3D(base, cutter)

    print("=" * 60)
    print("SUBTRACTION EXAMPLE: Sphere with hole cut out")
    print("=" * 60)

    checks = [
        ((0.0, 0.0, 0.0), 0.05),
        ((0.2, 0.0, 0.0), 0.25),
        ((-0.3, 0.0, 0.0), -0.1),
    ]
    ok = True
    for point, expected in checks:
        value = float(sub.sdf(np.array([point]))[0])
        good = abs(value - expected) < 1e-9
        ok &= good
        print(f"  phi{point} = {value:+.4f}  (expected {expected:+.4f})  {'ok' if good else 'MISMATCH'}")

    # the camera sits on the +x+y side, so the hole faces it
    image = render_frame(sub, RenderParams(zoom=6.0), 256, 256, outlines=True, clamp=True)
    print(f"Coverage: {(image[..., 3] > 0.5).mean():.1%} of pixels")
    print("\n" + ("PASSED" if ok else "FAILED"))

    plt.imsave(OUT, to_rgba8(image))
    print(f"Saved: {OUT}")


if __name__ == "__main__":
    main()
