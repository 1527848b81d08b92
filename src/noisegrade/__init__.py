"""Noisegrade - animated procedural noise fields with posterized color grading."""

from noisegrade.color import PaletteConfig, PaletteVariant, hsv2rgb, posterize, rgb2hsv
from noisegrade.core import fbm, hash21, hash22, simplex2d
from noisegrade.pipeline import (
    PipelineConfig,
    PipelineMode,
    PipelineOutput,
    PipelineSetupResult,
    PixelPipeline,
    pipeline_finalize,
    pipeline_setup,
)
from noisegrade.renderer import FrameRenderer, RenderConfig
from noisegrade.themes import parse_theme

__version__ = "0.1.0"
__all__ = [
    "FrameRenderer",
    "PaletteConfig",
    "PaletteVariant",
    "PipelineConfig",
    "PipelineMode",
    "PipelineOutput",
    "PipelineSetupResult",
    "PixelPipeline",
    "RenderConfig",
    "fbm",
    "hash21",
    "hash22",
    "hsv2rgb",
    "pipeline_finalize",
    "pipeline_setup",
    "posterize",
    "render",
    "rgb2hsv",
    "simplex2d",
]


def render(time=0.0, width=640, height=360, **kwargs):
    """Render one straight-alpha RGBA overlay frame.

    Args:
        time: Seconds into the animation.
        width: Frame width in pixels.
        height: Frame height in pixels.
        **kwargs: Additional RenderConfig parameters (theme, field,
            posterize_levels, pixel_size, mode, etc.). ``theme`` may be an
            RGB tuple or any string ``parse_theme`` accepts.

    Returns:
        (height, width, 4) uint8 RGBA array.
    """
    if isinstance(kwargs.get("theme"), str):
        kwargs["theme"] = parse_theme(kwargs["theme"])
    config = RenderConfig(width=width, height=height, **kwargs)
    return FrameRenderer(config).render_rgba(time)
