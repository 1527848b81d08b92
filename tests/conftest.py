"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from noisegrade.pipeline import pixel_centers

RED = (1.0, 0.0, 0.0)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so sampled points are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_points(rng) -> np.ndarray:
    """10,000 random 2D points spread over [-100, 100]^2."""
    return rng.uniform(-100.0, 100.0, size=(10_000, 2)).astype(np.float32)


@pytest.fixture
def red() -> tuple[float, float, float]:
    return RED


@pytest.fixture
def small_frame() -> tuple[np.ndarray, int, int]:
    """
    Pixel-center positions of a 32x16 view.

    Returns:
        Tuple of (positions, width, height).
    """
    width, height = 32, 16
    return pixel_centers(width, height), width, height
