"""
RGB <-> HSV conversion on (..., 3) float arrays.

Hue is a fraction of a full turn in [0, 1). Both directions are
branchless so whole frames convert in one pass.
"""

import numpy as np

from noisegrade.core.shadermath import clamp, fract, mix, step, vec

EPSILON = np.float32(1.0e-10)

_HSV_K = np.float32([1.0, 2.0 / 3.0, 1.0 / 3.0, 3.0])
_RGB_K = np.float32([0.0, -1.0 / 3.0, 2.0 / 3.0, -1.0])


def hsv2rgb(hsv) -> np.ndarray:
    """Convert (..., 3) HSV to RGB. Hue wraps, so 1.25 equals 0.25."""
    c = vec(hsv, 3)
    h = c[..., 0:1]
    s = c[..., 1:2]
    v = c[..., 2:3]
    p = np.abs(fract(h + _HSV_K[:3]) * 6.0 - _HSV_K[3])
    return (v * mix(_HSV_K[0], clamp(p - _HSV_K[0], 0.0, 1.0), s)).astype(np.float32)


def rgb2hsv(rgb) -> np.ndarray:
    """
    Convert (..., 3) RGB to HSV.

    The max channel is selected with two mix/step passes (blue vs green,
    then the winner vs red). Divisions carry a 1e-10 guard, so greys and
    black come out with saturation 0 and a finite hue instead of NaN.
    """
    c = vec(rgb, 3)
    r = c[..., 0]
    g = c[..., 1]
    b = c[..., 2]
    kx, ky, kz, kw = (np.broadcast_to(k, r.shape) for k in _RGB_K)

    p = mix(
        np.stack([b, g, kw, kz], axis=-1),
        np.stack([g, b, kx, ky], axis=-1),
        step(b, g)[..., np.newaxis],
    )
    q = mix(
        np.stack([p[..., 0], p[..., 1], p[..., 3], r], axis=-1),
        np.stack([r, p[..., 1], p[..., 2], p[..., 0]], axis=-1),
        step(p[..., 0], r)[..., np.newaxis],
    )

    d = q[..., 0] - np.minimum(q[..., 3], q[..., 1])
    hue = np.abs(q[..., 2] + (q[..., 3] - q[..., 1]) / (6.0 * d + EPSILON))
    sat = d / (q[..., 0] + EPSILON)
    return np.stack([hue, sat, q[..., 0]], axis=-1).astype(np.float32)
