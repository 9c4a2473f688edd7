import math
import random
from dataclasses import dataclass
from enum import Enum

from pygame.math import Vector2

from .config import (
    BUBBLE_BOUND_X,
    BUBBLE_PULSE_STEP,
    DEPTH_ALPHA_RANGE,
    DEPTH_FAR,
    DEPTH_NEAR,
    DEPTH_SCALE_RANGE,
    MAX_BUBBLE_SPEED,
    RECORD_DISK_RADIUS,
    RECORD_SPEED,
    RECORD_SPIN,
    RECORDS_PER_BUBBLE,
    SEPARATION_DEPTH,
    SEPARATION_PUSH,
)
from .mathutil import map_range

TITLES = ("Midnight Dreams", "Summer Breeze", "Electric Soul", "Neon Lights", "Ocean Waves", "City Pulse")
ARTISTS = ("The Dreamers", "Soul Collective", "Digital Hearts", "Night Riders", "Wave Makers", "Urban Sound")
ALBUMS = ("Night Sessions", "Golden Hour", "Future Sounds", "Endless Journey", "Deep Blue", "Metropolitan")


def depth_scale(z):
    """Size multiplier for a bubble at depth z (no camera, just a linear map)."""
    return map_range(z, DEPTH_FAR, DEPTH_NEAR, DEPTH_SCALE_RANGE[0], DEPTH_SCALE_RANGE[1])


def depth_alpha(z):
    return map_range(z, DEPTH_FAR, DEPTH_NEAR, DEPTH_ALPHA_RANGE[0], DEPTH_ALPHA_RANGE[1])


def random_direction(magnitude=1.0):
    a = random.uniform(0, 2 * math.pi)
    return Vector2(math.cos(a) * magnitude, math.sin(a) * magnitude)


def random_rgb(lo, hi):
    return (random.randint(lo, hi), random.randint(lo, hi), random.randint(lo, hi))


class BubbleTint(Enum):
    """Soap film colour families as (r, g, b) channel ranges."""
    SKY = ((80, 150), (150, 220), (200, 255))
    ORCHID = ((180, 255), (100, 180), (200, 255))
    AMBER = ((220, 255), (150, 200), (80, 140))
    MINT = ((100, 180), (200, 255), (150, 200))
    ROSE = ((220, 255), (100, 150), (140, 200))
    AQUA = ((80, 150), (200, 255), (200, 255))
    LAVENDER = ((150, 200), (100, 160), (220, 255))
    LIME = ((180, 230), (220, 255), (100, 160))

    def sample(self):
        return tuple(random.randint(lo, hi) for lo, hi in self.value)


@dataclass(frozen=True)
class MusicInfo:
    title: str
    artist: str
    album: str
    album_color: tuple

    @classmethod
    def random(cls):
        return cls(
            title=random.choice(TITLES),
            artist=random.choice(ARTISTS),
            album=random.choice(ALBUMS),
            album_color=random_rgb(100, 255),
        )


class Star:
    """A fixed point of the backdrop; only its twinkle phase moves."""

    def __init__(self, width, height):
        self.x = random.uniform(-width * 2, width * 2)
        self.y = random.uniform(-height * 2, height * 2)
        self.z = random.uniform(200, 2400)
        self.brightness = random.uniform(100, 255)
        self.twinkle_speed = random.uniform(0.01, 0.03)
        self.twinkle_phase = random.uniform(0, 2 * math.pi)

    def update(self):
        self.twinkle_phase += self.twinkle_speed

    def project(self, width, height):
        """Return (screen_x, screen_y, size, alpha)."""
        f = min(width, height) * 0.9
        sx = width / 2 + (self.x / self.z) * f
        sy = height / 2 + (self.y / self.z) * f
        size = map_range(self.z, 200, 2400, 2.8, 0.6)
        alpha = self.brightness * (0.7 + 0.3 * math.sin(self.twinkle_phase))
        return sx, sy, size, alpha


class MusicRecord:
    """A small vinyl drifting inside its bubble, bouncing off a circular wall."""

    def __init__(self, info=None):
        a = random.uniform(0, 2 * math.pi)
        d = random.uniform(40, 80)
        self.pos = Vector2(math.cos(a) * d, math.sin(a) * d)
        self.vel = random_direction(RECORD_SPEED)
        self.size = random.uniform(18, 30)
        self.rotation = random.uniform(0, 2 * math.pi)
        self.color = random_rgb(40, 80)
        self.info = info if info is not None else MusicInfo.random()

    def update(self):
        self.pos += self.vel
        self.rotation += RECORD_SPIN

        if self.pos.length() > RECORD_DISK_RADIUS:
            normal = self.pos.normalize()
            self.vel -= normal * (2 * self.vel.dot(normal))
            self.pos = normal * RECORD_DISK_RADIUS


class Bubble:
    def __init__(self, x, y, z, size, interactive, avatar_count=0):
        self.pos = Vector2(x, y)
        self.z = z
        self.vel = random_direction(random.uniform(0.15, 0.4))
        self.size = size
        self.rotation = random.uniform(0, 2 * math.pi)
        self.rot_speed = random.uniform(-0.005, 0.005)
        self.interactive = interactive

        self.tint = random.choice(list(BubbleTint))
        self.color = self.tint.sample()
        self.alpha = random.uniform(0.16, 0.30)
        self.pulse_phase = random.uniform(0, 2 * math.pi)

        self.avatar = None
        self.records = []
        if interactive:
            if avatar_count > 0:
                self.avatar = random.randrange(avatar_count)
            self.records = [MusicRecord() for _ in range(RECORDS_PER_BUBBLE)]

    @property
    def depth_scale(self):
        return depth_scale(self.z)

    @property
    def depth_alpha(self):
        return depth_alpha(self.z)

    def bounds(self, width, height):
        return width * BUBBLE_BOUND_X, float(height)

    def update(self, bubbles, width, height):
        self.pos += self.vel
        self.rotation += self.rot_speed
        self.pulse_phase += BUBBLE_PULSE_STEP

        for r in self.records:
            r.update()

        bx, by = self.bounds(width, height)
        if self.pos.x < -bx or self.pos.x > bx:
            self.vel.x *= -1
            self.pos.x = max(-bx, min(bx, self.pos.x))
        if self.pos.y < -by or self.pos.y > by:
            self.vel.y *= -1
            self.pos.y = max(-by, min(by, self.pos.y))

        if self.interactive:
            self.separate(bubbles)

    def separate(self, bubbles):
        # approximate: nudges apart, never resolves the overlap
        for other in bubbles:
            if other is self or not other.interactive:
                continue
            if abs(self.z - other.z) >= SEPARATION_DEPTH:
                continue
            offset = self.pos - other.pos
            d = offset.length()
            if d == 0 or d >= (self.size + other.size) / 2:
                continue
            self.vel += offset.normalize() * SEPARATION_PUSH
            if self.vel.length() > MAX_BUBBLE_SPEED:
                self.vel.scale_to_length(MAX_BUBBLE_SPEED)
