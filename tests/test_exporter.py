"""Tests for the FrameExporter module."""

import json

import numpy as np
import pytest
from PIL import Image

from noisegrade.io.exporter import FrameExporter
from noisegrade.renderer import FrameRenderer, RenderConfig


@pytest.fixture
def renderer():
    return FrameRenderer(RenderConfig(width=24, height=12, fps=10, posterize_levels=4))


class TestSavePng:
    def test_rgba_roundtrip(self, tmp_path, renderer):
        rgba = renderer.render_rgba(0.5)
        path = FrameExporter().save_png(rgba, tmp_path / "nested" / "frame.png")

        assert path.exists()
        with Image.open(path) as img:
            assert img.mode == "RGBA"
            np.testing.assert_array_equal(np.asarray(img), rgba)

    def test_rgb(self, tmp_path):
        image = np.full((4, 6, 3), 99, dtype=np.uint8)
        path = FrameExporter().save_png(image, tmp_path / "rgb.png")
        with Image.open(path) as img:
            assert img.mode == "RGB"
            assert img.size == (6, 4)

    @pytest.mark.parametrize("image", [
        np.zeros((4, 4, 3), dtype=np.float32),
        np.zeros((4, 4), dtype=np.uint8),
        np.zeros((4, 4, 2), dtype=np.uint8),
    ])
    def test_rejects_bad_input(self, tmp_path, image):
        with pytest.raises(ValueError):
            FrameExporter().save_png(image, tmp_path / "bad.png")


class TestExportSequence:
    def test_writes_frames_and_sidecar(self, tmp_path, renderer):
        calls = []
        sidecar_path = FrameExporter().export_sequence(
            renderer, tmp_path / "seq", 3,
            start_time=1.0,
            progress_callback=lambda c, t: calls.append(c),
        )

        assert sidecar_path.name == "render.json"
        with open(sidecar_path) as f:
            sidecar = json.load(f)

        assert sidecar["frames"] == ["frame_00000.png", "frame_00001.png", "frame_00002.png"]
        assert sidecar["metadata"]["n_frames"] == 3
        assert sidecar["metadata"]["width"] == 24
        assert sidecar["metadata"]["start_time"] == 1.0
        assert sidecar["config"]["posterize_levels"] == 4
        assert calls == [1, 2, 3]
        for name in sidecar["frames"]:
            assert (tmp_path / "seq" / name).exists()

    def test_sidecar_metadata_fields(self, renderer):
        sidecar = FrameExporter().build_sidecar(renderer, 2, 0.5, ["a.png", "b.png"])
        assert sidecar["metadata"] == {
            "width": 24,
            "height": 12,
            "fps": 10,
            "n_frames": 2,
            "start_time": 0.5,
            "schema_version": "1.0",
        }

    def test_frames_match_renderer(self, tmp_path, renderer):
        exporter = FrameExporter()
        out_dir = tmp_path / "seq"
        exporter.export_sequence(renderer, out_dir, 2)
        sidecar = exporter.load_sidecar(out_dir)
        paths = FrameExporter.frame_paths(out_dir, sidecar)

        with Image.open(paths[1]) as img:
            np.testing.assert_array_equal(np.asarray(img), renderer.render_rgba(0.1))

    def test_config_rounded(self, tmp_path):
        cfg = RenderConfig(width=8, height=8, fps=10, hue_spread=0.123456789)
        exporter = FrameExporter(precision=3)
        sidecar = exporter.load_sidecar(exporter.export_sequence(FrameRenderer(cfg), tmp_path, 1))
        assert sidecar["config"]["hue_spread"] == 0.123
        assert sidecar["config"]["theme"] == [0.3, 0.6, 1.0]


class TestExportNumpy:
    def test_half_precision_planes(self, tmp_path, renderer):
        out = renderer.render_frame(0.0)
        path = FrameExporter().export_numpy(out, tmp_path / "frame.npz")

        with np.load(path) as data:
            assert data["color"].dtype == np.float16
            assert data["alpha"].shape == (12, 24)
            np.testing.assert_array_equal(data["color"], out.color)


class TestPngCompositing:
    """Exported PNGs are straight alpha and composite like the renderer does."""

    BACKGROUND = (12, 12, 16)

    def _composite_png(self, path, width, height):
        bg = Image.new("RGBA", (width, height), (*self.BACKGROUND, 255))
        with Image.open(path) as img:
            return np.asarray(Image.alpha_composite(bg, img.convert("RGBA")))[..., :3]

    def test_matches_render_composite(self, tmp_path):
        # A theme no brighter than the alpha ceiling keeps color <= alpha,
        # which straight alpha represents exactly
        cfg = RenderConfig(
            width=32, height=16, theme=(0.85, 0.85, 0.85),
            background=self.BACKGROUND, dim_strength=0.0,
        )
        renderer = FrameRenderer(cfg)
        path = FrameExporter().save_png(renderer.render_rgba(1.0), tmp_path / "frame.png")

        from_png = self._composite_png(path, 32, 16).astype(np.int16)
        expected = renderer.render_composite(1.0).astype(np.int16)
        assert np.abs(from_png - expected).max() <= 3

    def test_glow_never_overshoots(self, tmp_path):
        cfg = RenderConfig(
            width=32, height=16, intensity=0.3,
            background=self.BACKGROUND, dim_strength=0.0,
        )
        renderer = FrameRenderer(cfg)
        path = FrameExporter().save_png(renderer.render_rgba(1.0), tmp_path / "frame.png")

        from_png = self._composite_png(path, 32, 16).astype(np.int16)
        expected = renderer.render_composite(1.0).astype(np.int16)
        assert np.all(from_png <= expected + 3)
        # Color is divided back out of alpha, not left premultiplied
        rgba = renderer.render_rgba(1.0)
        visible = rgba[..., 3] > 0
        assert rgba[..., 2][visible].max() == 255
