"""Walk state, heading smoothing and the per-step position update.

Each step reads one digit d from the stream and turns it into a target
heading of d * 36 degrees. The current heading eases 15% of the way toward
the target along the shorter arc, then the walker moves STEP_LENGTH units.
A move that leaves the canvas snaps to the opposite edge and is marked as
wrapped, so the caller skips drawing the segment that would cross the canvas.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

TWO_PI = 2 * math.pi

# --- Walk parameters ---
DEGREES_PER_DIGIT = 36
HEADING_EASING = 0.15
STEP_LENGTH = 2.0


@dataclass
class WalkState:
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    cursor: int = 0
    steps_taken: int = 0

    @property
    def position(self):
        return self.x, self.y


class StepResult(NamedTuple):
    start: tuple
    end: tuple
    heading: float
    digit: int
    wrapped: bool
    soft_reset: bool

    @property
    def drawn(self):
        return not self.wrapped


# --- Heading smoother ---


def target_heading(digit):
    """Map a digit 0-9 to a heading in radians (0, 36, ..., 324 degrees)."""
    return math.radians(digit * DEGREES_PER_DIGIT)


def shortest_turn(target, heading):
    """Signed angle from heading to target, normalized into (-pi, pi]."""
    diff = target - heading
    while diff <= -math.pi:
        diff += TWO_PI
    while diff > math.pi:
        diff -= TWO_PI
    return diff


def ease_heading(heading, digit, easing=HEADING_EASING):
    return heading + shortest_turn(target_heading(digit), heading) * easing


# --- Walk stepper ---


def wrap_axis(value, dimension):
    """Snap a coordinate that left [0, dimension] to the opposite edge.

    Both edges are closed: a value below 0 lands exactly on ``dimension``,
    which is still inside, so the walker can sit on the far edge.
    """
    if value < 0:
        return float(dimension), True
    if value > dimension:
        return 0.0, True
    return value, False


def advance(x, y, heading, step_length, width, height):
    nx, wrapped_x = wrap_axis(x + math.cos(heading) * step_length, width)
    ny, wrapped_y = wrap_axis(y + math.sin(heading) * step_length, height)
    return nx, ny, wrapped_x or wrapped_y


def step(state, digits, step_length, step_budget, width, height):
    """Advance the walk by one digit.

    Returns a StepResult, or None when the stream is empty (the state is left
    untouched). When steps_taken reaches step_budget it goes back to 0 (soft
    reset); position, heading and trail are kept.
    """
    if len(digits) == 0:
        return None

    cursor = state.cursor % len(digits)
    digit = int(digits[cursor])
    state.heading = ease_heading(state.heading, digit)

    start = state.position
    state.x, state.y, wrapped = advance(
        state.x, state.y, state.heading, step_length, width, height
    )

    state.cursor = (cursor + 1) % len(digits)
    state.steps_taken += 1
    soft_reset = state.steps_taken >= step_budget
    if soft_reset:
        state.steps_taken = 0

    return StepResult(start, state.position, state.heading, digit, wrapped, soft_reset)


def hard_reset(state, width, height):
    """Recenter the walker and clear heading, cursor and step count."""
    state.x = width / 2
    state.y = height / 2
    state.heading = 0.0
    state.cursor = 0
    state.steps_taken = 0
