#!/usr/bin/env python3
"""Render a preset sphere scene.

This script renders one of the preset scenes (a single sphere, or a sphere
resting on a ground sphere) with the multi-sample camera and writes the
result as a plain-text PPM or an 8-bit PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH               Image width in pixels (default: 400)
    --aspect-ratio RATIO        Ideal width over height (default: 16/9)
    --samples SAMPLES           Samples per pixel (default: 100)
    --seed SEED                 Sample generator seed (default: 0)
    --scene {single,ground}     Preset scene (default: ground)
    --output OUTPUT             Output file, .ppm or .png (default: image.ppm)
    --arch {cpu,gpu,cuda,vulkan}  Taichi backend (default: cpu)
    --quiet                     Suppress progress output
    --verbose                   Enable debug logging

Example:
    python -m examples.render_spheres --width 200 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

SUPPORTED_SUFFIXES = (".ppm", ".png")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Ideal ratio of image width over height (default: 16/9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the sample offset generator (default: 0)",
    )
    parser.add_argument(
        "--scene",
        choices=("single", "ground"),
        default="ground",
        help="Preset scene to render (default: ground)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path, .ppm or .png (default: image.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu", "cuda", "vulkan"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 400,
    aspect_ratio: float = 16.0 / 9.0,
    num_samples: int = 100,
    seed: int = 0,
    scene: str = "ground",
    output_path: str = "image.ppm",
    quiet: bool = False,
) -> Path:
    """Render a preset scene and save it to a file.

    Taichi must already be initialized.

    Args:
        width: Image width in pixels.
        aspect_ratio: Ideal image aspect ratio.
        num_samples: Number of samples per pixel.
        seed: Sample generator seed.
        scene: Preset scene name ("single" or "ground").
        output_path: Output file path (.ppm streams pixels, .png via Pillow).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the output extension or scene name is not supported.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.preview.export import PPMWriter, save_png_from_array
    from raycaster.scene.presets import SCENES, PresetParams

    output_file = Path(output_path)
    suffix = output_file.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported output extension {output_file.suffix!r}; "
            f"expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )
    if scene not in SCENES:
        raise ValueError(f"Unknown scene {scene!r}; expected one of {', '.join(SCENES)}")

    params = PresetParams(
        aspect_ratio=aspect_ratio,
        image_width=width,
        samples_per_pixel=num_samples,
        seed=seed,
    )
    world, camera = SCENES[scene](params)

    def progress_callback(rows_remaining: int) -> None:
        print(f"\rScanlines remaining: {rows_remaining} ", end="", file=sys.stderr, flush=True)

    progress = None if quiet else progress_callback

    if suffix == ".ppm":
        with open(output_file, "w", encoding="ascii") as f:
            camera.render(world, sink=PPMWriter(f), progress=progress)
    else:
        image = camera.render(world, progress=progress)
        save_png_from_array(image, output_file)

    if not quiet:
        print("\rDone.                 ", file=sys.stderr)
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        from raycaster.core.runtime import init_taichi

        init_taichi(args.arch)
        if not args.quiet:
            print(f"Using {args.arch} backend", file=sys.stderr)

        render_spheres(
            width=args.width,
            aspect_ratio=args.aspect_ratio,
            num_samples=args.samples,
            seed=args.seed,
            scene=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
