"""Tests for the post-process stage and compositing."""

import numpy as np
import pytest

from noisegrade.color.palette import RICH_PALETTE
from noisegrade.pipeline import PipelineMode, PipelineOutput, pipeline_finalize
from noisegrade.postfx import (
    apply_grid,
    colorize,
    composite_over,
    dim_layer,
    pixelate,
    pixelate_output,
)

THEME = (0.3, 0.6, 1.0)


def _gray_output(h: int = 8, w: int = 8, seed: int = 0) -> PipelineOutput:
    lum = np.random.default_rng(seed).uniform(0, 1, (h, w))
    return pipeline_finalize(lum, 1.0, THEME, 0, mode=PipelineMode.DEFERRED)


class TestColorize:
    def test_flat_tint(self):
        out = _gray_output()
        colored = colorize(out, THEME, 0)
        gray = out.color[..., 0].astype(np.float32)
        np.testing.assert_allclose(
            colored.color.astype(np.float32),
            gray[..., np.newaxis] * np.float32(THEME),
            atol=2e-3,
        )
        np.testing.assert_array_equal(colored.alpha, out.alpha)

    def test_posterize(self):
        out = _gray_output()
        colored = colorize(out, THEME, 4, RICH_PALETTE)
        expected = RICH_PALETTE.apply(out.color[..., 0].astype(np.float32), THEME, 4)
        np.testing.assert_allclose(colored.color.astype(np.float32), np.clip(expected, 0, 1), atol=1e-3)
        assert colored.color.dtype == np.float16


class TestPixelate:
    def test_blocks_take_center_value(self):
        image = np.arange(64, dtype=np.float32).reshape(8, 8)
        out = pixelate(image, 4.0)
        np.testing.assert_array_equal(out[:4, :4], image[2, 2])
        np.testing.assert_array_equal(out[4:, 4:], image[6, 6])

    def test_passthrough(self):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        assert pixelate(image, 1.0) is image

    def test_partial_edge_cell(self):
        image = np.arange(30, dtype=np.float32).reshape(5, 6)
        out = pixelate(image, 4.0)
        assert out.shape == image.shape
        # The trailing partial cell clamps to the last row/column
        assert out[4, 5] == image[4, 5]

    def test_output_planes(self):
        out = pixelate_output(_gray_output(), 4.0)
        assert out.color.shape == (8, 8, 3)
        assert np.all(out.alpha[:4, :4] == out.alpha[2, 2])


class TestApplyGrid:
    def test_lines_darkened(self):
        out = _gray_output()
        gridded = apply_grid(out, 4.0, 1.0)
        np.testing.assert_array_equal(gridded.alpha[0], 0.0)
        np.testing.assert_array_equal(gridded.alpha[:, 0], 0.0)
        assert gridded.alpha[2, 2] == out.alpha[2, 2]

    def test_disabled(self):
        out = _gray_output()
        assert apply_grid(out, 4.0, 0.0) is out
        assert apply_grid(out, 1.0, 1.0) is out


class TestDimLayer:
    def test_dims(self):
        bg = np.full((4, 4, 3), 200, dtype=np.uint8)
        np.testing.assert_array_equal(dim_layer(bg, 1.0, 0.3), 140)

    def test_zero_intensity_passthrough(self):
        bg = np.full((4, 4, 3), 200, dtype=np.uint8)
        assert dim_layer(bg, 0.0) is bg


class TestCompositeOver:
    def test_transparent_keeps_background(self):
        bg = np.random.default_rng(1).integers(0, 255, (6, 6, 3), dtype=np.uint8)
        clear = PipelineOutput(
            color=np.zeros((6, 6, 3), dtype=np.float16),
            alpha=np.zeros((6, 6), dtype=np.float16),
        )
        np.testing.assert_array_equal(composite_over(bg, clear), bg)

    def test_opaque_white(self):
        bg = np.zeros((2, 2, 3), dtype=np.uint8)
        white = PipelineOutput(
            color=np.ones((2, 2, 3), dtype=np.float16),
            alpha=np.ones((2, 2), dtype=np.float16),
        )
        np.testing.assert_array_equal(composite_over(bg, white), 255)

    @pytest.mark.parametrize("alpha", [0.25, 0.5, 0.85])
    def test_premultiplied(self, alpha):
        bg = np.full((1, 1, 3), 100, dtype=np.uint8)
        sample = PipelineOutput(
            color=np.full((1, 1, 3), 0.2, dtype=np.float16),
            alpha=np.full((1, 1), alpha, dtype=np.float16),
        )
        expected = (0.2 + 100 / 255.0 * (1 - alpha)) * 255
        assert abs(int(composite_over(bg, sample)[0, 0, 0]) - expected) <= 1.0
