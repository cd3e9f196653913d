"""Tests for raymarch/tracer.py: sphere tracing and normal estimation."""

import numpy as np
import numpy.testing as npt
import pytest

from sdf3d import sdf_lib as sdf
from raymarch.camera import Ray
from raymarch.config import MAX_STEPS, TraceConfig
from raymarch.tracer import estimate_normal, sphere_trace


def _sphere(p):
    return sdf.sdSphere(p, 0.5)


def _ray(origin, direction) -> Ray:
    return Ray(origin=np.array([origin], dtype=float), direction=np.array(direction, dtype=float))


# ===========================================================================
# Sphere tracing
# ===========================================================================

class TestSphereTrace:
    def test_hits_sphere(self):
        res = sphere_trace(_sphere, _ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert res.hit[0]
        assert abs(res.distance[0]) < 1e-4
        npt.assert_allclose(res.point[0], [0.0, 0.0, 0.5], atol=1e-4)
        assert res.t[0] == pytest.approx(4.5, abs=1e-4)
        assert 1 <= res.steps[0] <= MAX_STEPS

    def test_misses_sphere(self):
        res = sphere_trace(_sphere, _ray((5.0, 5.0, 5.0), (0.0, 0.0, 1.0)))
        assert res.miss[0]
        npt.assert_allclose(res.point[0], [0.0, 0.0, 0.0])

    def test_batch_shape(self):
        origin = np.zeros((2, 3, 3))
        origin[..., 2] = 5.0
        origin[0, :, 0] = [0.0, 0.2, 3.0]
        res = sphere_trace(_sphere, Ray(origin=origin, direction=np.array([0.0, 0.0, -1.0])))
        assert res.hit.shape == (2, 3)
        assert res.point.shape == (2, 3, 3)
        npt.assert_array_equal(res.hit[0], [True, True, False])

    def test_step_budget_bounds_work(self):
        # parallel to the plane z = -1: the distance never shrinks
        res = sphere_trace(lambda p: p[..., 2] + 1.0, _ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert res.miss[0]
        assert res.steps[0] == MAX_STEPS

    def test_max_t_escape(self):
        trace = TraceConfig(max_t=10.0)
        res = sphere_trace(lambda p: p[..., 2] + 1.0, _ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)), trace)
        assert res.miss[0]
        assert res.steps[0] == 11

    def test_nan_distance_is_miss(self):
        res = sphere_trace(lambda p: np.full(p.shape[:-1], np.nan), _ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)))
        assert res.miss[0]
        assert res.steps[0] == 1

    def test_scalar_distance_broadcasts(self):
        res = sphere_trace(lambda p: 0.0, _ray((1.0, 2.0, 3.0), (0.0, 0.0, -1.0)))
        assert res.hit[0]
        npt.assert_allclose(res.point[0], [1.0, 2.0, 3.0])

    def test_tighter_epsilon(self):
        res = sphere_trace(_sphere, _ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)), TraceConfig(hit_epsilon=1e-5))
        assert res.hit[0]
        assert abs(res.distance[0]) < 1e-5


class TestTraceConfig:
    @pytest.mark.parametrize("kwargs", [
        {"max_steps": 0},
        {"max_t": 0.0},
        {"hit_epsilon": -1e-4},
        {"hit_epsilon": float("nan")},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            TraceConfig(**kwargs)


# ===========================================================================
# Normals
# ===========================================================================

class TestEstimateNormal:
    def test_sphere_axis(self):
        npt.assert_allclose(estimate_normal(_sphere, np.array([[0.5, 0.0, 0.0]])), [[1.0, 0.0, 0.0]],
                            atol=1e-6)

    def test_sphere_random(self):
        rng = np.random.default_rng(5)
        d = rng.normal(size=(50, 3))
        d /= np.linalg.norm(d, axis=-1, keepdims=True)
        n = estimate_normal(_sphere, 0.5 * d)
        npt.assert_allclose(np.linalg.norm(n, axis=-1), 1.0, atol=1e-9)
        npt.assert_allclose(n, d, atol=1e-6)

    def test_box_face(self):
        n = estimate_normal(lambda p: sdf.sdBox(p, (1.0, 1.0, 1.0)), np.array([[0.2, 0.3, 1.0]]))
        npt.assert_allclose(n, [[0.0, 0.0, 1.0]], atol=1e-9)

    def test_flat_field_is_nan(self):
        n = estimate_normal(lambda p: np.zeros(p.shape[:-1]), np.zeros((2, 3)))
        assert np.all(np.isnan(n))
