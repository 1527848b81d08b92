"""
Post-process stage and compositing.

Colorize, pixelation and grid lines for DEFERRED pipeline output, plus
the dim layer and premultiplied-over compositing used for every frame.
"""

import numpy as np

from noisegrade.color.palette import RICH_PALETTE, PaletteConfig
from noisegrade.core.shadermath import clamp, vec
from noisegrade.pipeline import PipelineOutput, grid_darken, pixel_centers


def colorize(
    output: PipelineOutput,
    theme,
    levels: float,
    palette: PaletteConfig = RICH_PALETTE,
) -> PipelineOutput:
    """
    Color a grayscale sample the way INLINE finalize would.

    Args:
        output: DEFERRED pipeline output (R = G = B = luminance).
        theme: (3,) RGB theme color.
        levels: Posterize band count; below 2 tints flatly.
        palette: Posterize tuning.

    Returns:
        PipelineOutput with the same alpha.
    """
    lum = output.color[..., 0].astype(np.float32)
    if levels >= 2.0:
        color = palette.apply(lum, theme, levels)
    else:
        color = vec(theme, 3) * lum[..., np.newaxis]
    color = clamp(color, 0.0, 1.0)
    return PipelineOutput(color=color.astype(np.float16), alpha=output.alpha.copy())


def _snap_indices(n: int, pixel_size: float) -> np.ndarray:
    # Index of the pixel nearest each cell center
    centers = (np.floor((np.arange(n) + 0.5) / pixel_size) + 0.5) * pixel_size
    return np.clip(np.floor(centers).astype(np.intp), 0, n - 1)


def pixelate(image: np.ndarray, pixel_size: float) -> np.ndarray:
    """
    Replace each pixel_size block with the value at its center.

    Args:
        image: (H, W) or (H, W, C) array of any dtype.
        pixel_size: Cell size in pixels; <= 1 returns the input unchanged.

    Returns:
        Array of the same shape and dtype.
    """
    if pixel_size <= 1.0:
        return image

    h, w = image.shape[:2]
    rows = _snap_indices(h, pixel_size)
    cols = _snap_indices(w, pixel_size)
    return image[rows][:, cols]


def pixelate_output(output: PipelineOutput, pixel_size: float) -> PipelineOutput:
    return PipelineOutput(
        color=pixelate(output.color, pixel_size),
        alpha=pixelate(output.alpha, pixel_size),
    )


def apply_grid(
    output: PipelineOutput,
    pixel_size: float,
    grid_opacity: float,
) -> PipelineOutput:
    """Darken color and alpha along pixelation cell boundaries."""
    if pixel_size <= 1.0 or grid_opacity <= 0:
        return output

    h, w = output.alpha.shape[:2]
    keep = 1.0 - grid_darken(pixel_centers(w, h), pixel_size, grid_opacity)
    color = output.color.astype(np.float32) * keep[..., np.newaxis]
    alpha = output.alpha.astype(np.float32) * keep
    return PipelineOutput(color=color.astype(np.float16), alpha=alpha.astype(np.float16))


def dim_layer(
    background: np.ndarray,
    intensity: float,
    strength: float = 0.3,
) -> np.ndarray:
    """
    Darken the content under the overlay.

    Args:
        background: (H, W, 3) uint8.
        intensity: Overlay intensity (0-1).
        strength: Dim opacity at full intensity.

    Returns:
        (H, W, 3) uint8.
    """
    opacity = min(max(intensity * strength, 0.0), 1.0)
    if opacity <= 0:
        return background
    return (background.astype(np.float32) * (1.0 - opacity)).astype(np.uint8)


def composite_over(background: np.ndarray, output: PipelineOutput) -> np.ndarray:
    """
    Premultiplied-over composite of a pipeline sample onto a background.

    Args:
        background: (H, W, 3) uint8.
        output: PipelineOutput of the same height and width.

    Returns:
        (H, W, 3) uint8.
    """
    bg = background.astype(np.float32) / 255.0
    color = output.color.astype(np.float32)
    alpha = output.alpha.astype(np.float32)[..., np.newaxis]
    result = np.clip(color + bg * (1.0 - alpha), 0.0, 1.0)
    return np.round(result * 255.0).astype(np.uint8)
