"""
Vector helpers with GPU shading-language semantics.

Vectors are numpy arrays whose last axis holds the components, so the
same call evaluates one pixel or a whole frame. Everything is float32.
"""

import numpy as np

DTYPE = np.float32


def vec(x, n: int | None = None) -> np.ndarray:
    """Coerce ``x`` to a float32 array, optionally checking the component count."""
    arr = np.asarray(x, dtype=DTYPE)
    if n is not None and (arr.ndim == 0 or arr.shape[-1] != n):
        raise ValueError(f"expected {n} components, got shape {arr.shape}")
    return arr


def scalar(x) -> np.ndarray:
    return np.asarray(x, dtype=DTYPE)


def fract(x) -> np.ndarray:
    """Fractional part, always in [0, 1) including for negative inputs."""
    x = scalar(x)
    f = x - np.floor(x)
    # -1e-9 - floor(-1e-9) rounds to exactly 1.0 in float32
    return np.where(f >= 1.0, DTYPE(0.0), f).astype(DTYPE)


def mix(a, b, t) -> np.ndarray:
    a = scalar(a)
    return a + (scalar(b) - a) * scalar(t)


def step(edge, x) -> np.ndarray:
    return (scalar(x) >= scalar(edge)).astype(DTYPE)


def clamp(x, lo, hi) -> np.ndarray:
    return np.minimum(np.maximum(scalar(x), lo), hi).astype(DTYPE)


def smoothstep(edge0, edge1, x) -> np.ndarray:
    """Hermite interpolation between two edges."""
    edge0 = scalar(edge0)
    span = scalar(edge1) - edge0
    span = np.where(span == 0, DTYPE(1e-10), span)
    t = clamp((scalar(x) - edge0) / span, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def dot(a, b) -> np.ndarray:
    return np.sum(scalar(a) * scalar(b), axis=-1)


def length(v) -> np.ndarray:
    return np.sqrt(dot(v, v))


def swizzle(v, components: str) -> np.ndarray:
    """Reorder components by name, e.g. ``swizzle(p, "xyx")``."""
    index = ["xyzw".index(c) if c in "xyzw" else "rgba".index(c) for c in components]
    return scalar(v)[..., index]
