"""
Domain-warped fractal Brownian motion over simplex noise.

Octave count and gain are fixed; the field is a pure function of
position and time.
"""

import numpy as np

from noisegrade.core.noise import simplex2d
from noisegrade.core.shadermath import vec

OCTAVES = 5
GAIN = 0.5
START_AMPLITUDE = 0.5
LACUNARITY = 2.0
OCTAVE_SHIFT = np.float32([100.0, 100.0])

# Time rates of the two warp samples and the spatial phase of the second
WARP_RATES = (0.3, 0.36)
WARP_PHASE = 5.2
WARP_STRENGTH = 0.5


def domain_warp(p, time: float) -> np.ndarray:
    """Return the (..., 2) warp vector applied before octave accumulation."""
    p = vec(p, 2)
    t = np.float32(time)
    offset_a = np.float32([0.0, t * np.float32(WARP_RATES[0])])
    offset_b = np.float32([WARP_PHASE, t * np.float32(WARP_RATES[1])])
    return np.stack(
        [simplex2d(p + offset_a), simplex2d(p + offset_b)],
        axis=-1,
    )


def fbm(p, time: float = 0.0) -> np.ndarray:
    """
    Sample the warped multi-octave field at (..., 2) positions.

    Args:
        p: Positions in noise space.
        time: Seconds; the warp drifts continuously with it.

    Returns:
        (...) float32 array, typically within [-1, 1].
    """
    p = vec(p, 2)
    p = p + domain_warp(p, time) * np.float32(WARP_STRENGTH)

    value = np.zeros(p.shape[:-1], dtype=np.float32)
    amplitude = np.float32(START_AMPLITUDE)
    for _ in range(OCTAVES):
        value += amplitude * simplex2d(p)
        p = p * np.float32(LACUNARITY) + OCTAVE_SHIFT
        amplitude *= np.float32(GAIN)

    return value
