"""Hashing, simplex noise and fractal fields."""

from noisegrade.core.fractal import fbm
from noisegrade.core.hashing import hash21, hash22
from noisegrade.core.noise import simplex2d
