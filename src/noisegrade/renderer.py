"""
Frame orchestrator.

Runs setup -> luminance field -> finalize -> post-process -> composite
for every pixel of a frame at once, and yields frames as a generator
for memory-efficient piping to the encoder.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterator

import numpy as np

from noisegrade.color.palette import PaletteConfig, PaletteVariant
from noisegrade.fields import get_field
from noisegrade.pipeline import (
    PipelineConfig,
    PipelineMode,
    PipelineOutput,
    PixelPipeline,
    pixel_centers,
)
from noisegrade.postfx import (
    apply_grid,
    colorize,
    composite_over,
    dim_layer,
    pixelate_output,
)
from noisegrade.themes import DEFAULT_THEME


@dataclass
class RenderConfig:
    """Configuration for the overlay renderer."""

    width: int = 1920
    height: int = 1080
    fps: int = 60

    # Animation
    speed: float = 1.0
    intensity: float = 1.0
    field: str = "combined"

    # Color
    theme: tuple[float, float, float] = DEFAULT_THEME
    posterize_levels: float = 0.0
    palette: str = "rich"  # "rich" or "simple"
    hue_spread: float = 0.10
    complement_mix: float = 0.0

    # Pixelation
    mode: str = "inline"  # "inline" or "deferred"
    pixel_size: float = 0.0
    grid_opacity: float = 0.0

    # Compositing
    background: tuple[int, int, int] = (12, 12, 16)
    dim_strength: float = 0.3

    def palette_config(self) -> PaletteConfig:
        return PaletteConfig(
            variant=PaletteVariant(self.palette),
            hue_spread=self.hue_spread,
            complement_mix=self.complement_mix,
        )

    def pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            mode=PipelineMode(self.mode),
            posterize_levels=self.posterize_levels,
            pixel_size=self.pixel_size,
            grid_opacity=self.grid_opacity,
            palette=self.palette_config(),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class FrameRenderer:
    """
    Renders overlay frames from a RenderConfig.

    Holds no animation state: every frame is a pure function of its time.
    """

    def __init__(self, config: RenderConfig | None = None):
        self.cfg = config or RenderConfig()
        self.pipeline = PixelPipeline(self.cfg.pipeline_config())
        self.field_fn = get_field(self.cfg.field)
        self.positions = pixel_centers(self.cfg.width, self.cfg.height)
        self._background = np.empty((self.cfg.height, self.cfg.width, 3), dtype=np.uint8)
        self._background[:] = self.cfg.background

    def render_frame(self, time: float) -> PipelineOutput:
        """Evaluate the pipeline for every pixel at ``time`` seconds."""
        cfg = self.cfg
        t = time * cfg.speed

        setup = self.pipeline.setup(self.positions, cfg.width, cfg.height)
        luminance = self.field_fn(setup, t)
        output = self.pipeline.finalize(luminance, cfg.intensity, cfg.theme, setup.grid_darken)

        if self.pipeline.mode is PipelineMode.DEFERRED:
            output = colorize(output, cfg.theme, cfg.posterize_levels, self.pipeline.cfg.palette)
            output = pixelate_output(output, cfg.pixel_size)
            output = apply_grid(output, cfg.pixel_size, cfg.grid_opacity)

        return output

    def render_rgba(self, time: float) -> np.ndarray:
        """(H, W, 4) uint8 overlay with straight-from-pipeline alpha."""
        return self.render_frame(time).to_uint8()

    def render_composite(self, time: float) -> np.ndarray:
        """(H, W, 3) uint8 overlay composited over the dimmed background."""
        base = dim_layer(self._background, self.cfg.intensity, self.cfg.dim_strength)
        return composite_over(base, self.render_frame(time))

    def render_sequence(
        self,
        n_frames: int,
        start_time: float = 0.0,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Iterator[np.ndarray]:
        """
        Yield composited RGB frames.

        Args:
            n_frames: Number of frames to render.
            start_time: Time of the first frame in seconds.
            progress_callback: Optional callback(current_frame, total_frames).

        Yields:
            (H, W, 3) uint8 numpy arrays.
        """
        for i in range(n_frames):
            yield self.render_composite(start_time + i / self.cfg.fps)
            if progress_callback:
                progress_callback(i + 1, n_frames)
