"""
Frame export.

Writes rendered frames as PNG files, raw half-precision samples as
.npz archives, and a JSON sidecar describing how a sequence was made.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np
from PIL import Image

from noisegrade.pipeline import PipelineOutput
from noisegrade.renderer import FrameRenderer


@dataclass
class SequenceMetadata:
    """Header of the render.json sidecar."""

    width: int
    height: int
    fps: int
    n_frames: int
    start_time: float
    schema_version: str = "1.0"


class FrameExporter:
    """
    Writes frames produced by a FrameRenderer to disk.
    """

    SIDECAR_NAME = "render.json"

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values in the sidecar.
        """
        self.precision = precision

    def _round(self, value: Any) -> Any:
        if isinstance(value, float):
            return round(value, self.precision)
        if isinstance(value, (list, tuple)):
            return [self._round(v) for v in value]
        return value

    def save_png(self, image: np.ndarray, output_path: Union[str, Path]) -> Path:
        """
        Save an (H, W, 3) or (H, W, 4) uint8 array as PNG.

        Returns:
            Path to written file.
        """
        if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ValueError(
                f"Expected (H, W, 3|4) uint8 image, got {image.shape} {image.dtype}"
            )
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(image).save(output_path)
        return output_path

    def export_numpy(self, output: PipelineOutput, output_path: Union[str, Path]) -> Path:
        """Save the raw float16 color and alpha planes as a .npz archive."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        np.savez_compressed(output_path, color=output.color, alpha=output.alpha)
        return output_path

    def build_sidecar(
        self,
        renderer: FrameRenderer,
        n_frames: int,
        start_time: float,
        files: list[str],
    ) -> dict[str, Any]:
        cfg = renderer.cfg
        metadata = SequenceMetadata(
            width=cfg.width,
            height=cfg.height,
            fps=cfg.fps,
            n_frames=n_frames,
            start_time=self._round(float(start_time)),
        )
        return {
            "metadata": asdict(metadata),
            "config": {k: self._round(v) for k, v in cfg.to_dict().items()},
            "frames": files,
        }

    def export_sequence(
        self,
        renderer: FrameRenderer,
        output_dir: Union[str, Path],
        n_frames: int,
        start_time: float = 0.0,
        progress_callback=None,
        indent: int = 2,
    ) -> Path:
        """
        Render ``n_frames`` RGBA overlays into numbered PNGs plus a sidecar.

        Args:
            renderer: Source of frames.
            output_dir: Directory to write into (created if missing).
            n_frames: Number of frames.
            start_time: Time of the first frame in seconds.
            progress_callback: Optional callback(current_frame, total_frames).
            indent: JSON indentation level.

        Returns:
            Path to the sidecar JSON file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        files = []
        for i in range(n_frames):
            name = f"frame_{i:05d}.png"
            time = start_time + i / renderer.cfg.fps
            self.save_png(renderer.render_rgba(time), output_dir / name)
            files.append(name)
            if progress_callback:
                progress_callback(i + 1, n_frames)

        sidecar = self.build_sidecar(renderer, n_frames, start_time, files)
        sidecar_path = output_dir / self.SIDECAR_NAME
        with open(sidecar_path, "w", encoding="utf-8") as f:
            json.dump(sidecar, f, indent=indent)

        return sidecar_path

    def load_sidecar(self, path: Union[str, Path]) -> dict[str, Any]:
        path = Path(path)
        if path.is_dir():
            path = path / self.SIDECAR_NAME
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def frame_paths(output_dir: Union[str, Path], sidecar: dict[str, Any]) -> list[Path]:
        output_dir = Path(output_dir)
        return [output_dir / name for name in sidecar["frames"]]
