"""Tests for 2D simplex noise."""

import numpy as np

from noisegrade.core.noise import K1, K2, simplex2d


class TestSimplex2d:
    def test_skew_constants(self):
        assert abs(K1 - (np.sqrt(3.0) - 1.0) / 2.0) < 1e-7
        assert abs(K2 - (3.0 - np.sqrt(3.0)) / 6.0) < 1e-8

    def test_bounded(self, sample_points):
        n = simplex2d(sample_points)
        assert n.min() >= -1.05
        assert n.max() <= 1.05

    def test_not_flat(self, sample_points):
        assert simplex2d(sample_points).std() > 0.1

    def test_zero_at_lattice_origin(self):
        assert abs(float(simplex2d((0.0, 0.0)))) < 1e-6

    def test_deterministic(self, sample_points):
        np.testing.assert_array_equal(simplex2d(sample_points), simplex2d(sample_points))

    def test_continuous(self, sample_points):
        p = sample_points[:2000]
        nudged = p + np.float32([6e-5, -6e-5])
        diff = np.abs(simplex2d(p) - simplex2d(nudged))
        assert diff.max() < 1e-2

    def test_shape_and_dtype(self):
        n = simplex2d(np.zeros((3, 4, 2)))
        assert n.shape == (3, 4)
        assert n.dtype == np.float32

    def test_batch_matches_single(self, sample_points):
        batch = simplex2d(sample_points[:20])
        singles = np.array([simplex2d(p) for p in sample_points[:20]])
        np.testing.assert_allclose(batch, singles, atol=1e-6)
