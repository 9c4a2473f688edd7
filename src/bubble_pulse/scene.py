import math
import random
import logging

from .config import (
    BACKGROUND_BUBBLES,
    INTERACTIVE_BUBBLES,
    STAR_COUNT,
    ZOOM_CLICKABLE,
)
from .entities import Bubble, Star
from .mathutil import ease_in_out_cubic
from .state import DisplayMode
from .waveform import EcgWaveform

log = logging.getLogger(__name__)


class Scene:
    """Owns every entity of the sketch plus the viewport size they live in."""

    def __init__(self, width, height, avatar_count=0, rng=None):
        self.width = width
        self.height = height
        self.avatar_count = avatar_count
        self.stars = [Star(width, height) for _ in range(STAR_COUNT)]
        self.bubbles = spawn_bubbles(width, height, avatar_count)
        self.ecg = EcgWaveform(width, height, rng=rng)
        log.debug("Scene created: %d stars, %d bubbles", len(self.stars), len(self.bubbles))

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.ecg.resize(width, height)

    def bubbles_far_to_near(self):
        # sorted copy; self.bubbles keeps creation order so selections stay valid
        return sorted(self.bubbles, key=lambda b: b.z)

    def update(self, state, loudness=0.0):
        """Advance the entities visible in the current mode by one tick."""
        if state.mode is DisplayMode.ECG_INTRO:
            self.ecg.advance(loudness, state.frame_count)
        elif state.mode is DisplayMode.NORMAL:
            for s in self.stars:
                s.update()
            for b in self.bubbles:
                b.update(self.bubbles, self.width, self.height)
        elif state.mode is DisplayMode.ZOOM:
            bubble = state.bubble(self)
            if bubble is not None and ease_in_out_cubic(state.zoom_progress) > ZOOM_CLICKABLE:
                for r in bubble.records:
                    r.update()


def spawn_bubbles(width, height, avatar_count=0):
    """Interactive bubbles first, then the decorative far ones."""
    bubbles = []
    size = min(width, height) / 2.5

    for _ in range(INTERACTIVE_BUBBLES):
        a = random.uniform(0, 2 * math.pi)
        d = random.uniform(width * 0.2, width * 0.6)
        z = random.uniform(-300, 300)
        bubbles.append(Bubble(math.cos(a) * d, math.sin(a) * d, z, size, True, avatar_count))

    for _ in range(BACKGROUND_BUBBLES):
        a = random.uniform(0, 2 * math.pi)
        d = random.uniform(width * 0.5, width * 1.5)
        z = random.uniform(-1500, -600)
        bubbles.append(Bubble(math.cos(a) * d, math.sin(a) * d, z, size * random.uniform(0.8, 1.5), False))

    return bubbles
