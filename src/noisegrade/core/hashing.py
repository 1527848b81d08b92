"""
Deterministic pseudo-random hashes of 2D coordinates.

Stateless: the same coordinate always maps to the same value. Outputs
are in [0, 1) for every finite input, negative coordinates included.
"""

import numpy as np

from noisegrade.core.shadermath import dot, fract, swizzle, vec

HASH_SCALE3 = np.array([0.1031, 0.1030, 0.0973], dtype=np.float32)
HASH_SCALE1 = np.float32(0.1031)
DECORRELATE = np.float32(33.33)


def _fold(p3: np.ndarray) -> np.ndarray:
    # Self-dot perturbation against a rotated copy
    return p3 + dot(p3, swizzle(p3, "yzx") + DECORRELATE)[..., np.newaxis]


def hash22(p) -> np.ndarray:
    """Map (..., 2) coordinates to (..., 2) values in [0, 1)."""
    p = vec(p, 2)
    p3 = _fold(fract(swizzle(p, "xyx") * HASH_SCALE3))
    return fract((swizzle(p3, "xx") + swizzle(p3, "yz")) * swizzle(p3, "zy"))


def hash21(p) -> np.ndarray:
    """Map (..., 2) coordinates to (...) values in [0, 1)."""
    p = vec(p, 2)
    p3 = _fold(fract(swizzle(p, "xyx") * HASH_SCALE1))
    return fract((p3[..., 0] + p3[..., 1]) * p3[..., 2])
