"""
FFmpeg video encoder.

Pipes raw RGB frames to ffmpeg via stdin, optionally muxing an audio
track. No intermediate files: frames go straight from numpy arrays to
the encoder.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterator


# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "high",
    audio_path: Path | None = None,
    duration: float | None = None,
) -> list[str]:
    """Assemble the ffmpeg argument list."""
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])

    cmd = [
        "ffmpeg", "-y",
        "-loglevel", "error",
        # Raw video input from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
    ]
    if audio_path is not None:
        cmd += ["-i", str(audio_path)]

    cmd += [
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
    ]
    if audio_path is not None:
        cmd += ["-c:a", "aac", "-b:a", "192k", "-shortest"]
    if duration is not None:
        cmd += ["-t", str(duration)]

    cmd.append(str(output_path))
    return cmd


def encode_video(
    frame_iterator: Iterator,
    output_path: Path,
    width: int = 1920,
    height: int = 1080,
    fps: int = 60,
    quality: str = "high",
    audio_path: Path | None = None,
    duration: float | None = None,
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Encode frames to MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width: Frame width.
        height: Frame height.
        fps: Frames per second.
        quality: "high", "medium", or "fast".
        audio_path: Optional audio file to mux in.
        duration: Optional output duration limit in seconds.
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.

    Raises:
        RuntimeError: If ffmpeg is missing or exits with an error.
    """
    if not ffmpeg_available():
        raise RuntimeError("ffmpeg not found on PATH")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_command(
        output_path, width, height, fps,
        quality=quality,
        audio_path=audio_path,
        duration=duration,
    )

    proc = subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
    )

    frame_count = 0
    try:
        for frame in frame_iterator:
            proc.stdin.write(frame.tobytes())
            frame_count += 1

            if progress_callback and total_frames:
                progress_callback(frame_count, total_frames)

    except BrokenPipeError:
        # ffmpeg died early; its exit code and stderr are reported below
        pass
    finally:
        if proc.stdin:
            proc.stdin.close()

    stderr = proc.stderr.read().decode("utf-8", errors="replace")
    proc.wait()

    if proc.returncode != 0:
        error_lines = [
            line for line in stderr.split("\n")
            if "error" in line.lower() or "invalid" in line.lower()
        ]
        error_msg = "\n".join(error_lines[-5:]) if error_lines else stderr[-500:]
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {error_msg}"
        )

    return output_path
