import math

import numpy as np
import pygame
import pytest

from walka_errors import SurfaceUnavailable
from walka_render import (
    BACKGROUND,
    FIXED_COLOR,
    ColorPolicy,
    TrailMode,
    TrailRenderer,
    heading_hue,
    hsl_color,
)

SIZE = (40, 30)
WHITE = (255, 255, 255)
ORANGE = (200, 100, 50)


def rgb(surface):
    return pygame.surfarray.array3d(surface)


def alpha(surface):
    return pygame.surfarray.array_alpha(surface)


def has_color(surface, color):
    return bool((rgb(surface) == color).all(axis=2).any())


def draw_frame(renderer, segments, color=WHITE):
    renderer.begin_frame()
    for start, end in segments:
        renderer.draw_segment(start, end, color)
    renderer.composite_to_screen()


def test_fixed_policy_ignores_heading():
    assert ColorPolicy.FIXED.color_for(0.0) == FIXED_COLOR
    assert ColorPolicy.FIXED.color_for(2.0, 120.0) == FIXED_COLOR


def test_heading_hue_maps_full_turn_to_360_degrees():
    assert heading_hue(0.0) == 0
    assert heading_hue(math.pi) == pytest.approx(180)
    assert heading_hue(-math.pi / 2) == pytest.approx(270)
    assert heading_hue(2 * math.pi + 0.1) == pytest.approx(math.degrees(0.1))
    for heading in np.linspace(-20, 20, 97):
        assert 0 <= heading_hue(heading) < 360


def test_heading_policy_uses_hsl_of_heading():
    assert ColorPolicy.HEADING.color_for(math.pi) == hsl_color(180)
    red = hsl_color(0)
    assert red[0] > red[1] and red[0] > red[2]


def test_cycling_policy_advances_half_a_degree_per_segment():
    renderer = TrailRenderer(SIZE, policy=ColorPolicy.CYCLING)
    colors = [renderer.segment_color(1.0) for _ in range(3)]
    assert renderer.hue == pytest.approx(1.5)
    assert colors[-1] == hsl_color(1.5)

    renderer.hue = 359.75
    renderer.segment_color(0.0)
    assert renderer.hue == pytest.approx(0.25)


def test_only_cycling_policy_moves_the_hue():
    renderer = TrailRenderer(SIZE, policy=ColorPolicy.HEADING)
    renderer.segment_color(1.0)
    assert renderer.hue == 0.0


def test_policies_cycle_in_order():
    assert ColorPolicy.FIXED.next() is ColorPolicy.HEADING
    assert ColorPolicy.HEADING.next() is ColorPolicy.CYCLING
    assert ColorPolicy.CYCLING.next() is ColorPolicy.FIXED


def test_new_renderer_starts_blank():
    renderer = TrailRenderer(SIZE)
    assert renderer.size == SIZE
    assert (rgb(renderer.canvas) == BACKGROUND).all()
    assert alpha(renderer.buffer).max() == 0


def test_fade_mode_draws_on_canvas():
    renderer = TrailRenderer(SIZE)
    draw_frame(renderer, [((5, 5), (30, 5))])
    assert has_color(renderer.canvas, WHITE)
    assert alpha(renderer.buffer).max() == 0


def test_fade_mode_dims_older_strokes():
    renderer = TrailRenderer(SIZE)
    draw_frame(renderer, [((5, 5), (30, 5))])
    drawn = (rgb(renderer.canvas) == WHITE).all(axis=2)

    renderer.begin_frame()
    faded = rgb(renderer.canvas)[drawn]
    assert (faded < 255).all()
    assert (faded > 200).all()


def test_persistent_mode_composites_buffer_after_segments():
    renderer = TrailRenderer(SIZE, mode=TrailMode.PERSISTENT)
    renderer.begin_frame()
    renderer.draw_segment((5, 5), (30, 20), ORANGE)
    assert has_color(renderer.buffer, ORANGE)
    assert not has_color(renderer.canvas, ORANGE)

    renderer.composite_to_screen()
    assert has_color(renderer.canvas, ORANGE)


def test_persistent_buffer_survives_frames():
    renderer = TrailRenderer(SIZE, mode=TrailMode.PERSISTENT)
    draw_frame(renderer, [((5, 5), (30, 20))], ORANGE)
    for _ in range(50):
        draw_frame(renderer, [])
    assert has_color(renderer.buffer, ORANGE)
    assert has_color(renderer.canvas, ORANGE)


def test_switch_to_persistent_keeps_the_visible_trail():
    renderer = TrailRenderer(SIZE)
    for i in range(10):
        draw_frame(renderer, [((2, 2 + i), (35, 2 + 2 * i))], hsl_color(i * 30))
    before = rgb(renderer.canvas).copy()

    renderer.set_mode(TrailMode.PERSISTENT)
    assert (rgb(renderer.buffer) == before).all()
    assert (alpha(renderer.buffer) == 255).all()

    renderer.begin_frame()
    assert (rgb(renderer.canvas) == BACKGROUND).all()
    renderer.composite_to_screen()
    assert (rgb(renderer.canvas) == before).all()


def test_switch_back_to_fade_moves_nothing():
    renderer = TrailRenderer(SIZE, mode=TrailMode.PERSISTENT)
    draw_frame(renderer, [((5, 5), (30, 20))], ORANGE)
    canvas = rgb(renderer.canvas).copy()
    buffer = rgb(renderer.buffer).copy()

    renderer.set_mode(TrailMode.FADE)
    assert renderer.mode is TrailMode.FADE
    assert (rgb(renderer.canvas) == canvas).all()
    assert (rgb(renderer.buffer) == buffer).all()

    draw_frame(renderer, [((1, 25), (10, 25))])
    assert has_color(renderer.canvas, WHITE)
    assert not has_color(renderer.buffer, WHITE)


def test_resize_keeps_buffer_at_origin():
    renderer = TrailRenderer(SIZE, mode=TrailMode.PERSISTENT)
    draw_frame(renderer, [((5, 5), (35, 25))], ORANGE)
    pixels = rgb(renderer.buffer).copy()
    opacity = alpha(renderer.buffer).copy()

    renderer.resize((60, 50))
    assert renderer.size == (60, 50)
    assert renderer.canvas.get_size() == (60, 50)
    assert (rgb(renderer.buffer)[:40, :30] == pixels).all()
    assert (alpha(renderer.buffer)[:40, :30] == opacity).all()
    assert alpha(renderer.buffer)[40:, :].max() == 0
    assert alpha(renderer.buffer)[:, 30:].max() == 0

    renderer.resize((20, 10))
    assert (rgb(renderer.buffer) == pixels[:20, :10]).all()


def test_resize_rejects_empty_surfaces():
    renderer = TrailRenderer(SIZE)
    with pytest.raises(SurfaceUnavailable):
        renderer.resize((0, 10))
    with pytest.raises(SurfaceUnavailable):
        TrailRenderer((10, -1))
    assert renderer.size == SIZE


def test_clear_blanks_both_surfaces():
    renderer = TrailRenderer(SIZE)
    draw_frame(renderer, [((5, 5), (30, 5))])
    renderer.set_mode(TrailMode.PERSISTENT)
    draw_frame(renderer, [((5, 15), (30, 15))], ORANGE)

    renderer.clear()
    assert (rgb(renderer.canvas) == BACKGROUND).all()
    assert alpha(renderer.buffer).max() == 0


def test_snapshot_is_rows_by_columns():
    renderer = TrailRenderer(SIZE)
    image = renderer.snapshot()
    assert image.shape == (30, 40, 3)
    assert image.dtype == np.uint8
