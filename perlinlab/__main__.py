"""CLI entry point for perlinlab."""

import argparse
import logging
import random
from pathlib import Path

from .animation import FRAME_STEP, Animator, save_animation
from .palettes import ColorMode
from .renderer import ConfigError, RenderConfig, render

MAX_RANDOM_SEED = 100000


def _seed(value):
    if value == "random":
        return random.randrange(MAX_RANDOM_SEED)
    try:
        seed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"seed must be a number or 'random', got {value!r}") from None
    return int(seed) if seed.is_integer() else seed


def _add_render_options(parser, default_output):
    defaults = RenderConfig()
    parser.add_argument(
        "--width", "-W", type=int, default=defaults.width,
        help=f"Image width in pixels (default: {defaults.width})"
    )
    parser.add_argument(
        "--height", "-H", type=int, default=defaults.height,
        help=f"Image height in pixels (default: {defaults.height})"
    )
    parser.add_argument(
        "--scale", type=float, default=defaults.scale,
        help=f"Pixels per noise unit; larger zooms in (default: {defaults.scale:g})"
    )
    parser.add_argument(
        "--octaves", type=int, default=defaults.octaves,
        help=f"Number of fbm layers (default: {defaults.octaves})"
    )
    parser.add_argument(
        "--persistence", "-p", type=float, default=defaults.persistence,
        help=f"Amplitude decay per octave (default: {defaults.persistence})"
    )
    parser.add_argument(
        "--seed", "-s", type=_seed, default=defaults.seed,
        help=f"Seed number, or 'random' (default: {defaults.seed})"
    )
    parser.add_argument(
        "--mode", "-m", choices=[mode.value for mode in ColorMode],
        default=defaults.color_mode,
        help=f"Color palette (default: {defaults.color_mode})"
    )
    parser.add_argument(
        "--offset", type=float, default=0.0,
        help="Starting z offset (default: 0)"
    )
    parser.add_argument(
        "--output", "-o", default=default_output,
        help=f"Output file path (default: {default_output})"
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="perlinlab",
        description="Render seeded Perlin noise with color palettes"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log render timings"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render_parser = sub.add_parser("render", help="Render a single image")
    _add_render_options(render_parser, "noise.png")

    animate_parser = sub.add_parser("animate", help="Render an animated GIF")
    _add_render_options(animate_parser, "noise.gif")
    animate_parser.add_argument(
        "--frames", "-n", type=int, default=60,
        help="Number of frames (default: 60)"
    )
    animate_parser.add_argument(
        "--fps", type=int, default=30,
        help="Playback frames per second (default: 30)"
    )
    animate_parser.add_argument(
        "--step", type=float, default=FRAME_STEP,
        help=f"Z offset advance per frame (default: {FRAME_STEP})"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = RenderConfig(
        width=args.width,
        height=args.height,
        scale=args.scale,
        octaves=args.octaves,
        persistence=args.persistence,
        seed=args.seed,
        color_mode=args.mode,
    )
    try:
        config.validate()
    except ConfigError as exc:
        parser.error(str(exc))

    if args.command == "animate":
        if args.frames < 1:
            parser.error(f"--frames must be at least 1, got {args.frames}")
        if args.fps < 1:
            parser.error(f"--fps must be at least 1, got {args.fps}")

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    if args.command == "render":
        image = render(config, z_offset=args.offset)
        image.save(str(output))
        print(f"Saved noise ({config.width}x{config.height}, "
              f"seed {config.seed}) to {output}")
    else:
        animator = Animator(config, z_offset=args.offset, step=args.step)
        count = save_animation(animator.frames(args.frames), output,
                               fps=args.fps)
        print(f"Saved {count} frames ({config.width}x{config.height}, "
              f"seed {config.seed}) to {output}")


if __name__ == "__main__":
    main()
