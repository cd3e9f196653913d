"""Tests for raymarch/render.py: compositing and frame rendering."""

import numpy as np
import numpy.testing as npt
import pytest

from sdf3d import Sphere3D
from sdf3d import sdf_lib as sdf
from raymarch.camera import camera_for_params
from raymarch.errors import (
    DegenerateCamera,
    FrameSuperseded,
    InvalidExpression,
    InvalidViewport,
    InvalidWorkers,
    RenderError,
)
from raymarch.render import (
    FrameRenderer,
    RenderParams,
    composite,
    enabled_passes,
    render_frame,
    render_pixel,
    stream_frame,
    to_rgba8,
)
from raymarch.scene import Scene
from raymarch.shading import PixelSample, ShadingMode, contour_color_pass, edge_pass, normal_color_pass

SPHERE = "sdSphere(p, 0.5)"
# the centre pixel of a 9x9 frame looks straight down the view axis
CENTRE_RGB = np.ones(3) / np.sqrt(3.0) * 0.5 + 0.5


# ===========================================================================
# Compositor
# ===========================================================================

class TestEnabledPasses:
    def test_order(self):
        assert enabled_passes(ShadingMode.NORMALS, True) == [normal_color_pass, edge_pass]
        assert enabled_passes("contours", True) == [contour_color_pass, edge_pass]

    def test_none(self):
        assert enabled_passes("none", False) == []
        assert enabled_passes(ShadingMode.NONE, True) == [edge_pass]

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            enabled_passes("phong", False)


class TestComposite:
    def test_additive(self):
        a = PixelSample(color=np.array([0.6, 0.2, 0.0]), coverage=np.array(0.7))
        b = PixelSample(color=np.array([1.0, 1.0, 1.0]), coverage=np.array(1.0))
        npt.assert_allclose(composite([a, b]), [1.6, 1.2, 1.0, 1.7])

    def test_clamp(self):
        a = PixelSample(color=np.array([0.6, 0.2, 0.0]), coverage=np.array(0.7))
        b = PixelSample(color=np.array([1.0, 1.0, 1.0]), coverage=np.array(1.0))
        npt.assert_allclose(composite([a, b], clamp=True), [1.0, 1.0, 1.0, 1.0])

    def test_empty_is_transparent(self):
        npt.assert_array_equal(composite([], shape=(2, 3)), np.zeros((2, 3, 4)))

    def test_to_rgba8(self):
        out = to_rgba8(np.array([0.0, 0.5, 1.2, -1.0]))
        assert out.dtype == np.uint8
        npt.assert_array_equal(out, [0, 128, 255, 0])


# ===========================================================================
# Frames
# ===========================================================================

class TestRenderFrame:
    def test_sphere_centre_and_corner(self):
        image = render_frame(SPHERE, RenderParams(), 9, 9, workers=1)
        assert image.shape == (9, 9, 4)
        npt.assert_allclose(image[4, 4, :3], CENTRE_RGB, atol=1e-3)
        assert image[4, 4, 3] == pytest.approx(1.0, abs=1e-3)
        npt.assert_array_equal(image[0, 0], np.zeros(4))

    def test_non_square_viewport(self):
        image = render_frame(SPHERE, RenderParams(zoom=4.0), 7, 5, workers=1)
        assert image.shape == (5, 7, 4)
        assert image[2, 3, 3] > 0.99

    def test_threaded_matches_inline(self):
        params = RenderParams(rotation_z=30.0, rotation_screen_x=-20.0, zoom=3.0)
        scene = "opSmoothUnion(sdSphere(p, 0.5), sdBox(opTranslate(p, (0.6, 0, 0)), (0.3, 0.3, 0.3)), 0.1)"
        inline = render_frame(scene, params, 16, 12, outlines=True, workers=1)
        threaded = render_frame(scene, params, 16, 12, outlines=True, workers=4, chunk_rows=2)
        npt.assert_allclose(inline, threaded, atol=1e-12)

    def test_mode_none_is_empty(self):
        image = render_frame(SPHERE, RenderParams(), 6, 6, mode="none", workers=1)
        npt.assert_array_equal(image, np.zeros((6, 6, 4)))

    def test_clamped_frame_in_unit_range(self):
        image = render_frame(SPHERE, RenderParams(zoom=6.0), 12, 12, outlines=True, clamp=True)
        assert image.min() >= 0.0
        assert image.max() <= 1.0

    def test_accepts_geometry_and_callables(self):
        params = RenderParams(zoom=4.0)
        a = render_frame(Sphere3D(0.5), params, 5, 5, workers=1)
        b = render_frame(lambda p: sdf.sdSphere(p, 0.5), params, 5, 5, workers=1)
        c = render_frame(Scene(SPHERE), params, 5, 5, workers=1)
        npt.assert_allclose(a, b)
        npt.assert_allclose(a, c)

    def test_nan_scene_renders_transparent(self):
        image = render_frame(lambda p: np.full(p.shape[:-1], np.nan), RenderParams(), 4, 4, workers=1)
        npt.assert_array_equal(image, np.zeros((4, 4, 4)))

    def test_bad_viewport(self):
        with pytest.raises(InvalidViewport):
            render_frame(SPHERE, RenderParams(), 0, 10)

    def test_bad_scene(self):
        with pytest.raises(InvalidExpression):
            render_frame("sdTorus(p)", RenderParams(), 4, 4)

    def test_bad_zoom(self):
        with pytest.raises(DegenerateCamera):
            render_frame(SPHERE, RenderParams(zoom=0.0), 4, 4)

    @pytest.mark.parametrize("workers", [0, -2, 1.5, True])
    def test_bad_workers(self, workers):
        with pytest.raises(InvalidWorkers):
            render_frame(SPHERE, RenderParams(), 4, 4, workers=workers)

    @pytest.mark.parametrize("chunk_rows", [-1, 2.0])
    def test_bad_chunk_rows(self, chunk_rows):
        with pytest.raises(InvalidWorkers):
            render_frame(SPHERE, RenderParams(), 4, 4, workers=2, chunk_rows=chunk_rows)

    def test_worker_errors_share_base(self):
        assert issubclass(InvalidWorkers, RenderError)
        assert issubclass(InvalidWorkers, ValueError)


class TestRenderPixel:
    def test_matches_frame_centre(self):
        params = RenderParams(rotation_z=15.0)
        cam = camera_for_params(params, 9, 9)
        pixel = render_pixel(SPHERE, cam, params, (0.0, 0.0), outlines=True)
        image = render_frame(SPHERE, params, 9, 9, outlines=True, workers=1)
        npt.assert_allclose(pixel, image[4, 4])
        assert pixel.shape == (4,)


class TestStreamFrame:
    def test_every_pixel_delivered_once(self):
        seen = {}

        def callback(x, y, rgba):
            assert (x, y) not in seen
            seen[(x, y)] = np.array(rgba)

        image = stream_frame(SPHERE, RenderParams(zoom=3.0), 6, 5, callback, workers=2, chunk_rows=2)
        assert len(seen) == 30
        for (x, y), rgba in seen.items():
            npt.assert_array_equal(rgba, image[y, x])

    def test_inline_order_is_row_major(self):
        order = []
        stream_frame(SPHERE, RenderParams(), 3, 2, lambda x, y, c: order.append((x, y)), workers=1)
        assert order == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]


# ===========================================================================
# Persistent renderer
# ===========================================================================

class TestFrameRenderer:
    def test_matches_render_frame(self):
        params = RenderParams(zoom=2.0, pan_x=0.1)
        with FrameRenderer(SPHERE, workers=2) as renderer:
            image = renderer.render(params, 8, 6, chunk_rows=2)
        npt.assert_allclose(image, render_frame(SPHERE, params, 8, 6, workers=1), atol=1e-12)

    def test_superseded_frame_raises(self):
        holder = {}
        calls = {"n": 0}

        def scene(p):
            calls["n"] += 1
            if calls["n"] == 3:
                holder["renderer"].supersede()
            return sdf.sdSphere(p, 0.5)

        with FrameRenderer(scene, workers=1) as renderer:
            holder["renderer"] = renderer
            with pytest.raises(FrameSuperseded):
                renderer.render(RenderParams(zoom=4.0), 6, 6, chunk_rows=1)
            image = renderer.render(RenderParams(zoom=4.0), 6, 6, chunk_rows=1)
        assert image.shape == (6, 6, 4)

    def test_validates_before_rendering(self):
        with FrameRenderer(SPHERE, workers=1) as renderer:
            with pytest.raises(InvalidViewport):
                renderer.render(RenderParams(), 5, 0)

    def test_rejects_zero_workers(self):
        with pytest.raises(InvalidWorkers):
            FrameRenderer(SPHERE, workers=0)
