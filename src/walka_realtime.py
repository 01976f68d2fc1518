"""Walka: a realtime random walk steered by the digits of a number.

Every step reads the next digit d, turns toward d * 36 degrees and moves a
short distance. The path is drawn as a fading or persistent trail.

    python src/walka_realtime.py [--source pi|e|phi|sqrt2|lucky|FILE] [--trail fade|persistent]
    python src/walka_realtime.py --source e --color rainbow --speed 3
    python src/walka_realtime.py --config walka.toml

Keys:
  SPACE play/pause   R reset        T trail mode    C color mode
  UP/DOWN speed      [ ] step budget 1-4 pi/e/phi/sqrt2   L lucky sqrt
  S save PNG         G start/stop GIF capture        ESC quit
Drop a text file onto the window to walk its digits.
"""

import argparse
import sys
import time
from collections import deque
from dataclasses import replace

import imageio
import pygame
from PIL import Image

from walka_clock import MAX_SPEED
from walka_config import HEIGHT, WIDTH, WalkConfig, load_config
from walka_engine import WalkEngine
from walka_errors import InvalidConfiguration, SurfaceUnavailable
from walka_render import ColorPolicy, TrailMode
from walka_sources import DEFAULT_DIGITS, lucky_digits, resolve_source

# --- Display ---
FPS = 60

# --- Controls ---
SPEED_STEP = 0.25
BUDGET_STEP = 1000
MIN_BUDGET = 1000

SOURCE_KEYS = {
    pygame.K_1: "pi",
    pygame.K_2: "e",
    pygame.K_3: "phi",
    pygame.K_4: "sqrt2",
}

# --- GIF capture ---
GIF_FPS = 30
GIF_MAX_FRAMES = 300

frames = deque(maxlen=GIF_MAX_FRAMES)


def load_source(engine, name, count):
    try:
        label, digits = resolve_source(name, count)
    except (OSError, KeyError) as err:
        print(f"Failed to load digits from '{name}': {err}")
        return None
    engine.load_digits(digits)
    print(f"Loaded {len(digits)} digits from {label}.")
    return label


def load_lucky(engine, count):
    number, digits = lucky_digits(count=count)
    engine.load_digits(digits)
    print(f"Lucky number: {number}, {len(digits)} digits of its square root.")
    return f"sqrt({number})"


def save_snapshot(engine):
    path = f"walka_snapshot_{time.strftime('%Y%m%d-%H%M%S')}.png"
    Image.fromarray(engine.snapshot(), "RGB").save(path)
    print(f"Saved: {path} ({engine.size[0]}x{engine.size[1]})")


def save_gif():
    if not frames:
        return
    path = f"walka_{time.strftime('%Y%m%d-%H%M%S')}.gif"
    imageio.mimsave(path, list(frames), duration=1000 / GIF_FPS, loop=0)
    print(f"Saved: {path} ({len(frames)} frames)")
    frames.clear()


def change_speed(engine, delta):
    speed = min(MAX_SPEED, max(0.0, engine.config.target_speed + delta))
    engine.configure(target_speed=speed)


def change_budget(engine, delta):
    budget = max(MIN_BUDGET, engine.config.step_budget + delta)
    engine.configure(step_budget=budget)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Walka realtime digit walk")
    parser.add_argument(
        "--source", default="pi", help="pi, e, phi, sqrt2, lucky or a text file (default: pi)"
    )
    parser.add_argument(
        "--digits",
        type=int,
        default=DEFAULT_DIGITS,
        help=f"Digits to compute for constants (default: {DEFAULT_DIGITS})",
    )
    parser.add_argument("--config", default=None, help="JSON or TOML settings file")
    parser.add_argument("--width", type=int, default=None, help=f"Canvas width (default: {WIDTH})")
    parser.add_argument("--height", type=int, default=None, help=f"Canvas height (default: {HEIGHT})")
    parser.add_argument("--speed", type=float, default=None, help="Target speed 0-4 (default: 1)")
    parser.add_argument("--budget", type=int, default=None, help="Steps before the counter rolls over")
    parser.add_argument("--trail", choices=[m.value for m in TrailMode], default=None)
    parser.add_argument("--color", choices=[p.value for p in ColorPolicy], default=None)
    parser.add_argument("--fps", type=int, default=FPS, help=f"Frames per second (default: {FPS})")
    return parser.parse_args(argv)


def build_config(args):
    """Start from the config file (or defaults) and apply command-line overrides."""
    config = load_config(args.config) if args.config else WalkConfig()
    changes = {}
    if args.width is not None or args.height is not None:
        width, height = config.canvas_size
        changes["canvas_size"] = (args.width or width, args.height or height)
    if args.speed is not None:
        changes["target_speed"] = args.speed
    if args.budget is not None:
        changes["step_budget"] = args.budget
    if args.trail is not None:
        changes["trail_mode"] = TrailMode(args.trail)
    if args.color is not None:
        changes["color_policy"] = ColorPolicy(args.color)
    return replace(config, **changes).validate()


def handle_key(engine, key, count):
    """Apply one key press. Returns a new source label when digits changed."""
    if key == pygame.K_SPACE:
        engine.toggle_playback()
    elif key == pygame.K_r:
        engine.reset()
    elif key == pygame.K_t:
        engine.toggle_trail_mode()
    elif key == pygame.K_c:
        engine.cycle_color_policy()
    elif key == pygame.K_UP:
        change_speed(engine, SPEED_STEP)
    elif key == pygame.K_DOWN:
        change_speed(engine, -SPEED_STEP)
    elif key == pygame.K_RIGHTBRACKET:
        change_budget(engine, BUDGET_STEP)
    elif key == pygame.K_LEFTBRACKET:
        change_budget(engine, -BUDGET_STEP)
    elif key in SOURCE_KEYS:
        return load_source(engine, SOURCE_KEYS[key], count)
    elif key == pygame.K_l:
        return load_lucky(engine, count)
    elif key == pygame.K_s:
        save_snapshot(engine)
    return None


def main(argv=None):
    args = parse_args(argv)
    try:
        config = build_config(args)
    except (InvalidConfiguration, OSError) as err:
        print(f"Invalid configuration: {err}")
        sys.exit(1)

    pygame.init()
    screen = pygame.display.set_mode(config.canvas_size, pygame.RESIZABLE)
    clock = pygame.time.Clock()

    try:
        engine = WalkEngine(config)
    except SurfaceUnavailable as err:
        print(f"Cannot create render surfaces: {err}")
        pygame.quit()
        sys.exit(1)

    source = load_source(engine, args.source, args.digits) or "none"
    capturing = False

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                engine.resize(event.size)
            elif event.type == pygame.DROPFILE:
                source = load_source(engine, event.file, args.digits) or source
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_g:
                    capturing = not capturing
                    print("GIF capture started." if capturing else "GIF capture stopped.")
                    if not capturing:
                        save_gif()
                else:
                    source = handle_key(engine, event.key, args.digits) or source

        start = time.time()
        engine.tick()
        screen.blit(engine.canvas, (0, 0))
        pygame.display.flip()

        if capturing and engine.playing:
            frames.append(engine.snapshot())

        elapsed = (time.time() - start) * 1000
        state = engine.state
        pygame.display.set_caption(
            f"Walka — {source}  |  "
            f"{'playing' if engine.playing else 'paused'}  "
            f"steps={state.steps_taken}/{engine.config.step_budget}  "
            f"digit#{state.cursor}  "
            f"speed={engine.clock.speed:.2f}x  "
            f"trail={engine.config.trail_mode.value}  "
            f"color={engine.config.color_policy.value}  "
            f"{elapsed:.0f}ms  [SPACE T C R L S G]"
        )

        clock.tick(args.fps)

    pygame.quit()

    if capturing:
        save_gif()


if __name__ == "__main__":
    main()
