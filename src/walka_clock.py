"""Frame pacing: how many walk steps run on each animation frame.

The speed multiplier eases toward its target by 8% per frame. At 1x and
above, floor(speed) steps run every frame. Below 1x one step runs only on
frames where frame_index % floor(1 / speed) == 0; the other frames are
skipped entirely.
"""

import math
from enum import Enum

SPEED_EASING = 0.08
SPEED_SNAP = 1e-4  # close enough to the target to stop easing
MAX_SPEED = 4.0


class Playback(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


class SimulationClock:
    def __init__(self, target_speed=1.0, speed=1.0):
        self.target_speed = target_speed
        self.speed = speed
        self.frame_index = 0
        self.playback = Playback.PLAYING

    @property
    def playing(self):
        return self.playback is Playback.PLAYING

    def toggle(self):
        if self.playing:
            self.playback = Playback.STOPPED
        else:
            self.playback = Playback.PLAYING
        return self.playback

    def ease_speed(self):
        self.speed += (self.target_speed - self.speed) * SPEED_EASING
        if abs(self.target_speed - self.speed) < SPEED_SNAP:
            self.speed = self.target_speed
        return self.speed

    def steps_for_frame(self):
        if self.speed >= 1:
            return math.floor(self.speed)
        if self.speed <= 0:
            return 0
        interval = math.floor(1 / self.speed)
        return 1 if self.frame_index % interval == 0 else 0

    def advance(self):
        """Move to the next frame and return the number of steps to run.

        A stopped clock does not count frames or ease its speed.
        """
        if not self.playing:
            return 0
        self.frame_index += 1
        self.ease_speed()
        return self.steps_for_frame()
