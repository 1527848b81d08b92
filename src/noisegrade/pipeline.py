"""
Per-pixel pipeline: coordinate setup and contrast/colorize finalize.

The luminance that sits between the two stages is the caller's business
(see ``noisegrade.fields``). Both stages are pure and accept whole
frames of pixels at once.
"""

import enum
from dataclasses import dataclass, field

import numpy as np

from noisegrade.color.palette import RICH_PALETTE, PaletteConfig
from noisegrade.core.shadermath import clamp, fract, length, scalar, smoothstep, step, vec

ALPHA_GAIN = 1.5
ALPHA_CEILING = 0.85
MIN_VIEW_SIZE = 1.0
UNPREMULTIPLY_EPSILON = 1e-6


class PipelineMode(enum.Enum):
    """
    INLINE colorizes, pixelates and draws grid lines inside the pipeline.
    DEFERRED emits contrast-boosted grayscale plus alpha and leaves
    color, pixelation and grid to ``noisegrade.postfx``.
    """
    INLINE = "inline"
    DEFERRED = "deferred"


CONTRAST_EDGES = {
    PipelineMode.INLINE: 0.55,
    PipelineMode.DEFERRED: 0.45,
}


@dataclass
class PipelineConfig:
    """Configuration for a PixelPipeline."""
    mode: PipelineMode = PipelineMode.INLINE
    posterize_levels: float = 0.0  # < 2 means flat theme tint
    pixel_size: float = 0.0  # <= 1 disables pixelation
    grid_opacity: float = 0.0
    palette: PaletteConfig = field(default_factory=lambda: RICH_PALETTE)


@dataclass
class PipelineSetupResult:
    """Derived geometry for a batch of pixels."""
    uv: np.ndarray  # (..., 2) in [0, 1]
    centered: np.ndarray  # (..., 2), x scaled by aspect
    dist: np.ndarray  # (...)
    grid_darken: np.ndarray  # (...) in [0, 1]


@dataclass
class PipelineOutput:
    """Final half-precision sample with premultiplied color."""
    color: np.ndarray  # (..., 3) float16
    alpha: np.ndarray  # (...) float16

    @property
    def rgba(self) -> np.ndarray:
        """(..., 4) premultiplied RGBA in float16."""
        return np.concatenate([self.color, self.alpha[..., np.newaxis]], axis=-1)

    def to_uint8(self) -> np.ndarray:
        """
        (..., 4) straight-alpha uint8 RGBA, as PNG readers expect.

        Color is divided by alpha. Channels brighter than alpha (additive
        glow a straight-alpha image cannot hold) clip to full value, and
        fully transparent pixels come out black.
        """
        color = self.color.astype(np.float32)
        alpha = np.clip(self.alpha.astype(np.float32), 0.0, 1.0)[..., np.newaxis]
        safe = np.maximum(alpha, np.float32(UNPREMULTIPLY_EPSILON))
        straight = np.where(alpha > UNPREMULTIPLY_EPSILON, color / safe, 0.0)
        rgba = np.concatenate([np.clip(straight, 0.0, 1.0), alpha], axis=-1)
        return np.round(rgba * 255.0).astype(np.uint8)


def pixel_centers(width: int, height: int) -> np.ndarray:
    """(height, width, 2) positions of pixel centers, x then y."""
    x = np.arange(width, dtype=np.float32) + 0.5
    y = np.arange(height, dtype=np.float32) + 0.5
    xg, yg = np.meshgrid(x, y)
    return np.stack([xg, yg], axis=-1)


def _view_dims(view_width, view_height) -> tuple[np.float32, np.float32]:
    return (
        np.float32(max(float(view_width), MIN_VIEW_SIZE)),
        np.float32(max(float(view_height), MIN_VIEW_SIZE)),
    )


def grid_darken(position, pixel_size: float, grid_opacity: float) -> np.ndarray:
    """
    Grid-line mask for pixelation cells.

    A pixel is on a line when its cell-local coordinate in either axis is
    within ``1 / pixel_size``. Returns zeros when ``pixel_size <= 1``.
    """
    position = vec(position, 2)
    if pixel_size <= 1.0:
        return np.zeros(position.shape[:-1], dtype=np.float32)

    ps = np.float32(pixel_size)
    cell = fract(position / ps)
    thickness = np.float32(1.0) / ps
    on_line = np.maximum(step(cell[..., 0], thickness), step(cell[..., 1], thickness))
    return (on_line * np.float32(grid_opacity)).astype(np.float32)


def pipeline_setup(
    position,
    view_width: float,
    view_height: float,
    pixel_size: float = 0.0,
    grid_opacity: float = 0.0,
) -> PipelineSetupResult:
    """
    Normalize pixel positions and derive centered coordinates.

    Args:
        position: (..., 2) pixel positions.
        view_width, view_height: View size in pixels (clamped to >= 1).
        pixel_size: Pixelation cell size; <= 1 disables snapping and grid.
        grid_opacity: Strength of the grid lines.

    Returns:
        PipelineSetupResult.
    """
    position = vec(position, 2)
    w, h = _view_dims(view_width, view_height)
    view = np.float32([w, h])

    uv = position / view
    if pixel_size > 1.0:
        grid_count = view / np.float32(pixel_size)
        uv = (np.floor(uv * grid_count) + 0.5) / grid_count
    darken = grid_darken(position, pixel_size, grid_opacity)

    centered = uv * 2.0 - 1.0
    centered = centered * np.float32([w / h, 1.0])

    return PipelineSetupResult(
        uv=uv.astype(np.float32),
        centered=centered.astype(np.float32),
        dist=length(centered),
        grid_darken=darken,
    )


def contrast_curve(luminance, edge: float) -> np.ndarray:
    """Smoothstep to ``edge`` followed by a cubic S-curve."""
    lum = smoothstep(0.0, edge, luminance)
    return lum * lum * (3.0 - 2.0 * lum)


def pipeline_finalize(
    luminance,
    intensity: float,
    theme,
    posterize_levels: float,
    grid_darken=0.0,
    palette: PaletteConfig = RICH_PALETTE,
    mode: PipelineMode = PipelineMode.INLINE,
) -> PipelineOutput:
    """
    Contrast-boost luminance, colorize and compute alpha.

    Args:
        luminance: (...) raw luminance.
        intensity: Overall opacity, clamped to [0, 1].
        theme: (3,) RGB theme color.
        posterize_levels: Band count; below 2 tints flatly by the theme.
        grid_darken: (...) grid mask from setup.
        palette: Posterize tuning.
        mode: INLINE colorizes here; DEFERRED emits grayscale.

    Returns:
        PipelineOutput in float16.
    """
    intensity = np.float32(min(max(float(intensity), 0.0), 1.0))
    lum = contrast_curve(luminance, CONTRAST_EDGES[mode])
    darken = np.broadcast_to(scalar(grid_darken), lum.shape)
    keep = (1.0 - darken)[..., np.newaxis]

    if mode is PipelineMode.DEFERRED:
        color = np.repeat(lum[..., np.newaxis], 3, axis=-1)
    elif posterize_levels >= 2.0:
        color = palette.apply(lum, theme, posterize_levels)
    else:
        color = vec(theme, 3) * lum[..., np.newaxis]
    color = clamp(color * keep, 0.0, 1.0)

    alpha = clamp(intensity * lum * np.float32(ALPHA_GAIN), 0.0, intensity * np.float32(ALPHA_CEILING))
    if mode is PipelineMode.INLINE:
        alpha = alpha * keep[..., 0]

    return PipelineOutput(color=color.astype(np.float16), alpha=alpha.astype(np.float16))


class PixelPipeline:
    """
    Two-stage per-pixel pipeline bound to a PipelineConfig.

    In DEFERRED mode setup never pixelates or draws grid lines; the
    post-process stage does.
    """

    def __init__(self, config: PipelineConfig | None = None):
        self.cfg = config or PipelineConfig()

    @property
    def mode(self) -> PipelineMode:
        return self.cfg.mode

    def setup(self, position, view_width: float, view_height: float) -> PipelineSetupResult:
        if self.cfg.mode is PipelineMode.DEFERRED:
            return pipeline_setup(position, view_width, view_height)
        return pipeline_setup(
            position,
            view_width,
            view_height,
            pixel_size=self.cfg.pixel_size,
            grid_opacity=self.cfg.grid_opacity,
        )

    def finalize(self, luminance, intensity: float, theme, grid_darken=0.0) -> PipelineOutput:
        return pipeline_finalize(
            luminance,
            intensity,
            theme,
            self.cfg.posterize_levels,
            grid_darken,
            palette=self.cfg.palette,
            mode=self.cfg.mode,
        )
