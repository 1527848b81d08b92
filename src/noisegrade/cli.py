"""
CLI entry point for the overlay renderer.

Usage:
    noisegrade-render <output> [options]
    python -m noisegrade <output> [options]

The output suffix picks the format: .png renders one frame at --time,
.mp4 encodes --duration seconds, anything else is treated as a
directory and receives a numbered PNG sequence plus render.json.
"""

import argparse
import sys
import time
from pathlib import Path

from noisegrade.encoder import encode_video
from noisegrade.fields import FIELD_NAMES
from noisegrade.io.exporter import FrameExporter
from noisegrade.renderer import FrameRenderer, RenderConfig
from noisegrade.themes import THEME_PRESETS, parse_theme

PROFILES = {
    "low": {"width": 640, "height": 360, "fps": 30, "quality": "fast"},
    "medium": {"width": 1280, "height": 720, "fps": 30, "quality": "medium"},
    "high": {"width": 1920, "height": 1080, "fps": 60, "quality": "high"},
}


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="noisegrade-render",
        description="Animated procedural noise overlay renderer",
    )

    parser.add_argument(
        "output",
        type=Path,
        help="Output path: .png (single frame), .mp4 (video) or a directory (PNG sequence)",
    )

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=sorted(PROFILES),
        help="Target profile (low: 360p 30fps, medium: 720p 30fps, high: 1080p 60fps)",
    )
    parser.add_argument("--width", type=int, default=None, help="Frame width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Frame height (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")

    # Timing
    parser.add_argument("-t", "--time", type=float, default=0.0, help="Start time in seconds (default: 0)")
    parser.add_argument(
        "-d", "--duration", type=float, default=5.0,
        help="Length of video or sequence in seconds (default: 5)",
    )
    parser.add_argument("--speed", type=float, default=1.0, help="Animation speed multiplier (default: 1.0)")

    # Visual
    parser.add_argument(
        "--field", type=str, default="combined", choices=FIELD_NAMES,
        help="Luminance field (default: combined)",
    )
    parser.add_argument(
        "--theme", type=str, default="blue",
        help=f"Preset ({', '.join(sorted(THEME_PRESETS))}), #rrggbb or r,g,b (default: blue)",
    )
    parser.add_argument(
        "--intensity", type=float, default=1.0,
        help="Overlay opacity 0-1 (default: 1.0)",
    )

    # Palette
    parser.add_argument(
        "-l", "--levels", type=float, default=0.0,
        help="Posterize bands; below 2 tints flatly by the theme (default: 0)",
    )
    parser.add_argument(
        "--palette", type=str, default="rich", choices=["rich", "simple"],
        help="Posterize ramp (default: rich)",
    )
    parser.add_argument("--hue-spread", type=float, default=0.10, help="Rich ramp hue spread (default: 0.10)")
    parser.add_argument(
        "--complement-mix", type=float, default=0.0,
        help="Complementary hue bleed into highlights (default: 0)",
    )

    # Pixelation
    parser.add_argument(
        "--mode", type=str, default="inline", choices=["inline", "deferred"],
        help="Color and pixelate in the pipeline or in a post pass (default: inline)",
    )
    parser.add_argument("--pixel-size", type=float, default=0.0, help="Pixelation cell size (default: off)")
    parser.add_argument("--grid-opacity", type=float, default=0.0, help="Grid line opacity (default: 0)")

    # Encoding
    parser.add_argument(
        "-q", "--quality", type=str, default=None,
        choices=["high", "medium", "fast"],
        help="Encoding quality (defaults to profile quality)",
    )
    parser.add_argument("--audio", type=Path, default=None, help="Optional audio track to mux into .mp4 output")

    return parser


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    """Build a RenderConfig, raising ValueError on bad user input."""
    p_cfg = PROFILES[args.profile]
    width = args.width if args.width is not None else p_cfg["width"]
    height = args.height if args.height is not None else p_cfg["height"]
    fps = args.fps if args.fps is not None else p_cfg["fps"]
    if width <= 0 or height <= 0 or fps <= 0:
        raise ValueError("width, height and fps must be positive")
    if not 0.0 <= args.intensity <= 1.0:
        raise ValueError(f"intensity must be in [0, 1], got {args.intensity}")

    return RenderConfig(
        width=width,
        height=height,
        fps=fps,
        speed=args.speed,
        intensity=args.intensity,
        field=args.field,
        theme=parse_theme(args.theme),
        posterize_levels=args.levels,
        palette=args.palette,
        hue_spread=args.hue_spread,
        complement_mix=args.complement_mix,
        mode=args.mode,
        pixel_size=args.pixel_size,
        grid_opacity=args.grid_opacity,
    )


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.audio is not None and not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        sys.exit(1)

    renderer = FrameRenderer(config)
    exporter = FrameExporter()
    output = args.output
    suffix = output.suffix.lower()
    n_frames = max(1, int(round(args.duration * config.fps)))

    print(f"Rendering {config.field} at {config.width}x{config.height}")
    print(f"  Theme: {tuple(round(c, 3) for c in config.theme)}, Mode: {config.mode}, Levels: {config.posterize_levels}")
    t0 = time.time()

    if suffix == ".png":
        exporter.save_png(renderer.render_rgba(args.time), output)
        print(f"\nDone! Frame at t={args.time:.2f}s took {time.time() - t0:.2f}s")
        print(f"  Output: {output}")
        return

    if suffix == ".mp4":
        quality = args.quality or PROFILES[args.profile]["quality"]
        print(f"  {n_frames} frames @ {config.fps}fps, quality={quality}")
        frame_gen = renderer.render_sequence(
            n_frames, start_time=args.time, progress_callback=_progress_bar,
        )
        try:
            encode_video(
                frame_iterator=frame_gen,
                output_path=output,
                width=config.width,
                height=config.height,
                fps=config.fps,
                quality=quality,
                audio_path=args.audio,
                duration=args.duration,
            )
        except RuntimeError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        file_size_mb = output.stat().st_size / 1024 / 1024
        print(f"\nDone! {file_size_mb:.1f} MB")
    else:
        print(f"  {n_frames} PNG frames @ {config.fps}fps")
        output = exporter.export_sequence(
            renderer, output, n_frames,
            start_time=args.time, progress_callback=_progress_bar,
        )
        print("\nDone!")

    elapsed = time.time() - t0
    print(f"  Render took {elapsed:.1f}s ({n_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")


if __name__ == "__main__":
    main()
