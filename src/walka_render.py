"""Trail rendering into pygame surfaces.

Two surfaces of canvas size are kept:
  - the canvas: what the host shows on screen
  - the buffer: an off-screen SRCALPHA surface that is never cleared between
    frames, only on hard reset

Fade mode draws straight onto the canvas and dims it every frame with a
low-alpha background overlay, so old strokes fade out exponentially.
Persistent mode draws into the buffer, clears the canvas to the background
and composites the whole buffer on top once all segments are in.
"""

import math
from enum import Enum

import pygame

from walka_errors import SurfaceUnavailable

TWO_PI = 2 * math.pi

# --- Colors ---
BACKGROUND = (11, 15, 26)
TRANSPARENT = (0, 0, 0, 0)
FIXED_COLOR = (56, 189, 248)  # cyan
SATURATION = 70
LIGHTNESS = 60
HUE_INCREMENT = 0.5  # degrees per segment in rainbow mode

# --- Strokes ---
FADE_ALPHA = 20
STROKE_WIDTH = 2


class TrailMode(Enum):
    FADE = "fade"
    PERSISTENT = "persistent"

    def toggled(self):
        if self is TrailMode.FADE:
            return TrailMode.PERSISTENT
        return TrailMode.FADE


# --- Color policies ---


def hsl_color(hue):
    color = pygame.Color(0, 0, 0)
    color.hsla = (int(hue) % 360, SATURATION, LIGHTNESS, 100)
    return color.r, color.g, color.b


def heading_hue(heading):
    """Map heading mod 2*pi linearly onto a hue in degrees."""
    hue = math.degrees(math.fmod(heading, TWO_PI))
    if hue < 0:
        hue += 360
    return hue % 360


def fixed_color(heading, hue):
    return FIXED_COLOR


def heading_color(heading, hue):
    return hsl_color(heading_hue(heading))


def cycling_color(heading, hue):
    return hsl_color(hue)


class ColorPolicy(Enum):
    FIXED = "single"
    HEADING = "angle"
    CYCLING = "rainbow"

    def color_for(self, heading, hue=0.0):
        return COLOR_FUNCTIONS[self](heading, hue)

    def next(self):
        members = list(ColorPolicy)
        return members[(members.index(self) + 1) % len(members)]


COLOR_FUNCTIONS = {
    ColorPolicy.FIXED: fixed_color,
    ColorPolicy.HEADING: heading_color,
    ColorPolicy.CYCLING: cycling_color,
}


# --- Surfaces ---


def create_surface(size, flags=0):
    width, height = size
    if width <= 0 or height <= 0:
        raise SurfaceUnavailable(f"cannot create a {width}x{height} render surface")
    try:
        return pygame.Surface((width, height), flags)
    except (pygame.error, ValueError) as err:
        raise SurfaceUnavailable(f"cannot create a {width}x{height} render surface") from err


def copy_pixels(source, dest):
    """Copy source into dest anchored at the origin, cropped to the overlap.

    dest must be a SRCALPHA surface. Pixels of a source without per-pixel
    alpha land fully opaque.
    """
    width = min(source.get_width(), dest.get_width())
    height = min(source.get_height(), dest.get_height())

    rgb = pygame.surfarray.pixels3d(dest)
    rgb[:width, :height] = pygame.surfarray.array3d(source)[:width, :height]
    del rgb

    alpha = pygame.surfarray.pixels_alpha(dest)
    if source.get_flags() & pygame.SRCALPHA:
        alpha[:width, :height] = pygame.surfarray.array_alpha(source)[:width, :height]
    else:
        alpha[:width, :height] = 255
    del alpha


class DrawTarget:
    """A surface that receives segments, plus its per-frame bookkeeping."""

    def __init__(self, surface):
        self.surface = surface

    def draw_segment(self, start, end, color):
        pygame.draw.line(self.surface, color, start, end, STROKE_WIDTH)
        # round caps
        for point in (start, end):
            pygame.draw.circle(self.surface, color, point, STROKE_WIDTH / 2)

    def begin_frame(self):
        raise NotImplementedError

    def composite(self):
        raise NotImplementedError


class VisibleSurface(DrawTarget):
    def __init__(self, canvas):
        super().__init__(canvas)
        self.overlay = pygame.Surface(canvas.get_size())
        self.overlay.fill(BACKGROUND)
        self.overlay.set_alpha(FADE_ALPHA)

    def begin_frame(self):
        self.surface.blit(self.overlay, (0, 0))

    def composite(self):
        pass


class BufferedSurface(DrawTarget):
    def __init__(self, canvas, buffer):
        super().__init__(buffer)
        self.canvas = canvas

    def begin_frame(self):
        self.canvas.fill(BACKGROUND)

    def composite(self):
        self.canvas.blit(self.surface, (0, 0))


class TrailRenderer:
    def __init__(self, size, mode=TrailMode.FADE, policy=ColorPolicy.FIXED):
        self.mode = mode
        self.policy = policy
        self.hue = 0.0
        self.canvas = None
        self.buffer = None
        self.resize(size)

    @property
    def size(self):
        return self.canvas.get_size()

    @property
    def target(self):
        if self.mode is TrailMode.FADE:
            return self.visible
        return self.buffered

    def resize(self, size):
        """Recreate both surfaces, keeping the old buffer at the origin."""
        canvas = create_surface(size)
        buffer = create_surface(size, pygame.SRCALPHA)
        canvas.fill(BACKGROUND)
        buffer.fill(TRANSPARENT)
        if self.buffer is not None:
            copy_pixels(self.buffer, buffer)

        self.canvas = canvas
        self.buffer = buffer
        self.visible = VisibleSurface(canvas)
        self.buffered = BufferedSurface(canvas, buffer)
        self._active = self.target

    def set_mode(self, mode):
        if mode is self.mode:
            return
        if mode is TrailMode.PERSISTENT:
            # seed the buffer with what is on screen so the trail carries over
            copy_pixels(self.canvas, self.buffer)
        self.mode = mode
        self._active = self.target

    def clear(self):
        self.canvas.fill(BACKGROUND)
        self.buffer.fill(TRANSPARENT)

    def segment_color(self, heading):
        if self.policy is ColorPolicy.CYCLING:
            self.hue = (self.hue + HUE_INCREMENT) % 360
        return self.policy.color_for(heading, self.hue)

    # --- Per-frame protocol ---

    def begin_frame(self):
        self._active = self.target
        self._active.begin_frame()

    def draw_segment(self, start, end, color):
        self._active.draw_segment(start, end, color)

    def composite_to_screen(self):
        self._active.composite()

    def snapshot(self):
        """Visible image as an (H, W, 3) uint8 array."""
        return pygame.surfarray.array3d(self.canvas).transpose(1, 0, 2)
