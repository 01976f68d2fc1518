"""The walk engine: one object that owns the walk state, the digit stream,
the trail renderer and the simulation clock.

The host calls tick() once per animation frame and shows engine.canvas.
Everything else (loading digits, toggles, resize) happens between ticks.

    engine = WalkEngine(WalkConfig(canvas_size=(640, 480)), parse_digits(text))
    while running:
        engine.tick()
        screen.blit(engine.canvas, (0, 0))
"""

from dataclasses import replace

import walka_walk
from walka_clock import SimulationClock
from walka_config import WalkConfig
from walka_render import TrailRenderer
from walka_sources import as_digit_stream


class WalkEngine:
    def __init__(self, config=None, digits=()):
        self.config = (config or WalkConfig()).validate()
        self.renderer = TrailRenderer(
            self.config.canvas_size, self.config.trail_mode, self.config.color_policy
        )
        self.clock = SimulationClock(self.config.target_speed)
        self.state = walka_walk.WalkState()
        self.digits = as_digit_stream(digits)
        self.segments_drawn = 0
        self.frames_rendered = 0
        self.soft_resets = 0
        self.reset()

    @property
    def canvas(self):
        return self.renderer.canvas

    @property
    def size(self):
        return self.renderer.size

    @property
    def playing(self):
        return self.clock.playing

    # --- Configuration ---

    def configure(self, **changes):
        """Apply option changes; nothing changes if any of them is rejected."""
        config = replace(self.config, **changes).validate()
        if tuple(config.canvas_size) != tuple(self.config.canvas_size):
            self.resize(config.canvas_size)
        self.renderer.set_mode(config.trail_mode)
        self.renderer.policy = config.color_policy
        self.clock.target_speed = config.target_speed
        if self.state.steps_taken >= config.step_budget:
            self.state.steps_taken = 0
            self.soft_resets += 1
        self.config = config
        return config

    def toggle_trail_mode(self):
        return self.configure(trail_mode=self.config.trail_mode.toggled()).trail_mode

    def cycle_color_policy(self):
        return self.configure(color_policy=self.config.color_policy.next()).color_policy

    def toggle_playback(self):
        return self.clock.toggle()

    def resize(self, size):
        """Recreate the render surfaces for a new canvas size.

        The persistent buffer keeps its pixels at the origin; raises
        SurfaceUnavailable when the surfaces cannot be created.
        """
        size = tuple(int(v) for v in size)
        self.renderer.resize(size)
        self.config = replace(self.config, canvas_size=size)

    # --- Digit stream ---

    def load_digits(self, digits):
        self.digits = as_digit_stream(digits)
        self.reset()

    # --- Simulation ---

    def reset(self):
        """Hard reset: recenter, clear heading, cursor, step count and both surfaces."""
        width, height = self.size
        walka_walk.hard_reset(self.state, width, height)
        self.renderer.clear()

    def step(self):
        width, height = self.size
        result = walka_walk.step(
            self.state,
            self.digits,
            self.config.step_length,
            self.config.step_budget,
            width,
            height,
        )
        if result is None:
            return None

        if result.soft_reset:
            self.soft_resets += 1
        if result.drawn:
            color = self.renderer.segment_color(result.heading)
            self.renderer.draw_segment(result.start, result.end, color)
            self.segments_drawn += 1
        return result

    def run_frame(self):
        """Run one animation frame and return the number of steps taken.

        Frames with no steps (stopped, or throttled below 1x) draw nothing.
        """
        steps = self.clock.advance()
        if steps == 0:
            return 0

        self.renderer.begin_frame()
        for _ in range(steps):
            self.step()
        self.renderer.composite_to_screen()
        self.frames_rendered += 1
        return steps

    def tick(self, delta_frames=1):
        return sum(self.run_frame() for _ in range(delta_frames))

    def snapshot(self):
        return self.renderer.snapshot()
