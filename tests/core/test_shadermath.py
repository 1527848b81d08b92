"""Tests for the shading-language vector helpers."""

import numpy as np
import pytest

from noisegrade.core.shadermath import (
    clamp,
    dot,
    fract,
    length,
    mix,
    smoothstep,
    step,
    swizzle,
    vec,
)


class TestFract:
    def test_positive(self):
        np.testing.assert_allclose(fract([1.25, 3.5]), [0.25, 0.5])

    def test_negative_wraps_upward(self):
        np.testing.assert_allclose(fract([-0.25, -3.75]), [0.75, 0.25], atol=1e-6)

    def test_tiny_negative_stays_below_one(self):
        f = fract(np.float32(-1e-9))
        assert 0.0 <= f < 1.0

    def test_dtype(self):
        assert fract([0.5]).dtype == np.float32


class TestStepSmoothstep:
    def test_step_threshold_inclusive(self):
        np.testing.assert_array_equal(step(0.5, [0.4, 0.5, 0.6]), [0.0, 1.0, 1.0])

    def test_smoothstep_endpoints_and_mid(self):
        np.testing.assert_allclose(smoothstep(0.0, 1.0, [-1.0, 0.0, 0.5, 1.0, 2.0]), [0, 0, 0.5, 1, 1])

    def test_smoothstep_equal_edges_finite(self):
        assert np.isfinite(smoothstep(0.3, 0.3, 0.5))


class TestVectorOps:
    def test_mix(self):
        np.testing.assert_allclose(mix(2.0, 4.0, 0.25), 2.5)

    def test_clamp(self):
        np.testing.assert_array_equal(clamp([-1.0, 0.5, 2.0], 0.0, 1.0), [0.0, 0.5, 1.0])

    def test_dot_and_length(self):
        assert dot([1.0, 2.0], [3.0, 4.0]) == pytest.approx(11.0)
        assert length([3.0, 4.0]) == pytest.approx(5.0)

    def test_dot_batched(self):
        a = np.ones((4, 5, 3))
        assert dot(a, a).shape == (4, 5)

    def test_swizzle(self):
        np.testing.assert_array_equal(swizzle([1.0, 2.0], "yxy"), [2.0, 1.0, 2.0])
        np.testing.assert_array_equal(swizzle([1.0, 2.0, 3.0], "bgr"), [3.0, 2.0, 1.0])

    def test_vec_checks_components(self):
        with pytest.raises(ValueError):
            vec([1.0, 2.0, 3.0], 2)
        with pytest.raises(ValueError):
            vec(1.0, 2)
