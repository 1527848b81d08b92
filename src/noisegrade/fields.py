"""
Luminance fields that feed the pipeline between setup and finalize.

Each builder takes a PipelineSetupResult and a time in seconds and
returns a (...) float32 luminance in [0, 1]. The order of ``FIELDS``
matches the overlay's numbered shader modes.
"""

import math
from typing import Callable

import numpy as np

from noisegrade.core.fractal import fbm
from noisegrade.core.hashing import hash21, hash22
from noisegrade.core.shadermath import clamp, fract, length, smoothstep
from noisegrade.pipeline import PipelineSetupResult

TAU = np.float32(2.0 * math.pi)

FieldFn = Callable[[PipelineSetupResult, float], np.ndarray]


def organic_flow(setup: PipelineSetupResult, time: float) -> np.ndarray:
    """Slow warped turbulence, fading toward the edges."""
    n = fbm(setup.centered * np.float32(1.6), time)
    falloff = 1.0 - smoothstep(0.6, 1.8, setup.dist) * 0.6
    return clamp((n * 0.9 + 0.35) * falloff, 0.0, 1.0)


def mandala(setup: PipelineSetupResult, time: float, segments: int = 8) -> np.ndarray:
    """Turbulence folded into mirrored angular segments."""
    c = setup.centered
    angle = np.arctan2(c[..., 1], c[..., 0]) / TAU
    folded = np.abs(fract(angle * np.float32(segments)) - 0.5)
    polar = np.stack([folded * 1.5, setup.dist * 2.0 - np.float32(time * 0.2)], axis=-1)
    n = fbm(polar, time)
    ring = 1.0 - smoothstep(0.2, 1.4, setup.dist)
    return clamp((n * 0.8 + 0.4) * ring, 0.0, 1.0)


def point_cloud(setup: PipelineSetupResult, time: float, density: float = 9.0) -> np.ndarray:
    """One jittered, twinkling point per cell."""
    p = setup.centered * np.float32(density)
    cell = np.floor(p)
    point = hash22(cell) * 0.8 + 0.1
    d = length(fract(p) - point)
    phase = hash21(cell) * TAU
    twinkle = 0.5 + 0.5 * np.sin(np.float32(time * 1.7) + phase)
    return clamp((1.0 - smoothstep(0.0, 0.22, d)) * twinkle, 0.0, 1.0)


def aurora(setup: PipelineSetupResult, time: float) -> np.ndarray:
    """Wavering curtain bands."""
    c = setup.centered
    ribbon_pos = np.stack([c[..., 0] * 1.2, np.full_like(c[..., 0], time * 0.1)], axis=-1)
    ribbon = fbm(ribbon_pos, time) * 0.7
    curtain = np.exp(-((c[..., 1] - ribbon) ** 2) * 5.0)
    streaks = fbm(c * np.float32([3.0, 0.4]), time * 0.5) * 0.5 + 0.6
    return clamp(curtain * streaks, 0.0, 1.0)


def pulse_grid(setup: PipelineSetupResult, time: float, cells: float = 12.0) -> np.ndarray:
    """Grid cells pulsing out of phase."""
    cell = np.floor(setup.centered * np.float32(cells * 0.5))
    phase = hash21(cell) * TAU
    pulse = 0.5 + 0.5 * np.sin(np.float32(time * 2.0) + phase)
    return clamp(pulse ** 3 * (1.0 - setup.dist * 0.35), 0.0, 1.0)


def combined(setup: PipelineSetupResult, time: float) -> np.ndarray:
    return np.maximum.reduce([
        organic_flow(setup, time),
        aurora(setup, time) * 0.8,
        pulse_grid(setup, time) * 0.6,
    ])


FIELDS: list[tuple[str, FieldFn]] = [
    ("organic_flow", organic_flow),
    ("mandala", mandala),
    ("point_cloud", point_cloud),
    ("aurora", aurora),
    ("pulse_grid", pulse_grid),
    ("combined", combined),
]

FIELD_NAMES = [name for name, _ in FIELDS]


def get_field(key: int | str) -> FieldFn:
    """Look up a field by mode index or name ("Organic Flow", "organic-flow", ...)."""
    if isinstance(key, int):
        if 0 <= key < len(FIELDS):
            return FIELDS[key][1]
    else:
        name = key.strip().lower().replace("-", "_").replace(" ", "_")
        for field_name, fn in FIELDS:
            if field_name == name:
                return fn
    raise KeyError(f"Unknown field {key!r}; available: {', '.join(FIELD_NAMES)}")
