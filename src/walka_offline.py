"""Walka offline render: run the walk headless and save the canvas as a PNG.

    python src/walka_offline.py [--source pi] [--frames 3000] [--output walka.png]
    python src/walka_offline.py --source lucky --trail persistent --color angle --speed 4
"""

import argparse
import os
import sys
import time

# surfaces only, no window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from PIL import Image

from walka_config import HEIGHT, WIDTH
from walka_errors import InvalidConfiguration, SurfaceUnavailable
from walka_engine import WalkEngine
from walka_realtime import build_config
from walka_render import ColorPolicy, TrailMode
from walka_sources import DEFAULT_DIGITS, resolve_source

FRAMES = 3000


def render(engine, num_frames, report_every=500):
    """Tick the engine num_frames times, printing progress. Returns total steps."""
    t_start = time.time()
    total_steps = 0
    for frame in range(num_frames):
        total_steps += engine.tick()

        if (frame + 1) % report_every == 0 or frame + 1 == num_frames:
            elapsed = time.time() - t_start
            rate = total_steps / elapsed if elapsed > 0 else 0.0
            print(
                f"  frame {frame + 1}/{num_frames}  "
                f"steps={total_steps}  "
                f"({elapsed:.1f}s elapsed, {rate:.0f} steps/s)"
            )
    return total_steps


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Walka offline renderer")
    parser.add_argument(
        "--source", default="pi", help="pi, e, phi, sqrt2, lucky or a text file (default: pi)"
    )
    parser.add_argument(
        "--digits",
        type=int,
        default=DEFAULT_DIGITS,
        help=f"Digits to compute for constants (default: {DEFAULT_DIGITS})",
    )
    parser.add_argument(
        "--frames", type=int, default=FRAMES, help=f"Animation frames to run (default: {FRAMES})"
    )
    parser.add_argument("--config", default=None, help="JSON or TOML settings file")
    parser.add_argument("--width", type=int, default=None, help=f"Canvas width (default: {WIDTH})")
    parser.add_argument("--height", type=int, default=None, help=f"Canvas height (default: {HEIGHT})")
    parser.add_argument("--speed", type=float, default=None, help="Target speed 0-4 (default: 1)")
    parser.add_argument("--budget", type=int, default=None, help="Steps before the counter rolls over")
    parser.add_argument("--trail", choices=[m.value for m in TrailMode], default=None)
    parser.add_argument("--color", choices=[p.value for p in ColorPolicy], default=None)
    parser.add_argument(
        "--output",
        type=str,
        default="walka_render.png",
        help="Output filename (default: walka_render.png)",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        config = build_config(args)
        label, digits = resolve_source(args.source, args.digits)
    except (InvalidConfiguration, OSError, KeyError) as err:
        print(f"Error: {err}")
        sys.exit(1)

    try:
        engine = WalkEngine(config, digits)
    except SurfaceUnavailable as err:
        print(f"Cannot create render surfaces: {err}")
        sys.exit(1)

    print(f"{args.output}")
    print(f"{len(digits)} digits from {label}")
    print(
        f"trail={config.trail_mode.value}  color={config.color_policy.value}  "
        f"speed={config.target_speed}  budget={config.step_budget}"
    )
    print()

    t_start = time.time()
    total_steps = render(engine, args.frames)
    print()
    print(f"Walk complete: {total_steps} steps, {engine.soft_resets} rollovers, "
          f"{time.time() - t_start:.1f}s")

    Image.fromarray(engine.snapshot(), "RGB").save(args.output)
    width, height = engine.size
    print(f"Saved: {args.output} ({width}x{height})")


if __name__ == "__main__":
    main()
