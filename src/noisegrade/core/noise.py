"""
2D simplex noise.

Lattice gradients come from ``hash22`` rather than a permutation table,
so the field is seedless and identical on every call.
"""

import numpy as np

from noisegrade.core.hashing import hash22
from noisegrade.core.shadermath import dot, vec

K1 = np.float32(0.366025404)  # (sqrt(3) - 1) / 2
K2 = np.float32(0.211324865)  # (3 - sqrt(3)) / 6
AMPLITUDE = np.float32(70.0)
FALLOFF = np.float32(0.5)


def _gradient(cell: np.ndarray) -> np.ndarray:
    return hash22(cell) * 2.0 - 1.0


def simplex2d(p) -> np.ndarray:
    """
    Sample simplex noise at (..., 2) positions.

    Returns a (...) float32 array, approximately in [-1, 1], C1-smooth.
    """
    p = vec(p, 2)

    # Skew into the triangular lattice and find the cell origin
    skew = (p[..., 0] + p[..., 1]) * K1
    i = np.floor(p + skew[..., np.newaxis])
    unskew = (i[..., 0] + i[..., 1]) * K2
    a = p - i + unskew[..., np.newaxis]

    # Lower or upper triangle of the unit cell
    upper = (a[..., 0] > a[..., 1])[..., np.newaxis]
    o = np.where(upper, np.float32([1.0, 0.0]), np.float32([0.0, 1.0])).astype(np.float32)

    b = a - o + K2
    c = a - 1.0 + 2.0 * K2

    h = np.maximum(
        FALLOFF - np.stack([dot(a, a), dot(b, b), dot(c, c)], axis=-1),
        0.0,
    )
    h = h * h * h * h

    n = h * np.stack(
        [
            dot(_gradient(i), a),
            dot(_gradient(i + o), b),
            dot(_gradient(i + 1.0), c),
        ],
        axis=-1,
    )
    return (np.sum(n, axis=-1) * AMPLITUDE).astype(np.float32)
