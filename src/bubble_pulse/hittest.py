"""
Screen-space hit tests.

Bubble coordinates are relative to the canvas centre, while pointer events are
top-left based, so every test converts entity positions to screen space first.
"""
from pygame.math import Vector2

from .config import (
    DETAIL_OFFSET_Y,
    RECORD_SHIFT,
    ZOOM_CLICKABLE,
    ZOOM_SCALE_MAX,
)
from .mathutil import ease_in_out_cubic, lerp


def screen_center(width, height):
    return Vector2(width / 2, height / 2)


def detail_center(width, height):
    """Where the enlarged record sits on the music detail screen."""
    return Vector2(width / 2, height / 2 - DETAIL_OFFSET_Y)


def zoom_scale(zoom_progress):
    return lerp(1.0, ZOOM_SCALE_MAX, ease_in_out_cubic(zoom_progress))


def bubble_screen_pos(bubble, width, height):
    return screen_center(width, height) + bubble.pos


def bubble_screen_radius(bubble):
    return bubble.size * bubble.depth_scale / 2


def record_screen_pos(bubble, record, scale, width, height):
    """Screen position of a record while its bubble is zoomed in at `scale`."""
    shift = Vector2(0, bubble.size * RECORD_SHIFT * scale)
    return screen_center(width, height) + record.pos * scale + shift


def bubble_at(bubbles, pos, width, height):
    """Index of the first interactive bubble under `pos`, in creation order."""
    pos = Vector2(pos)
    for i, b in enumerate(bubbles):
        if not b.interactive:
            continue
        if pos.distance_to(bubble_screen_pos(b, width, height)) < bubble_screen_radius(b):
            return i
    return None


def record_at(bubble, pos, zoom_progress, width, height):
    """Index of the first record under `pos`, or None while the zoom is still settling."""
    if bubble is None or zoom_progress <= ZOOM_CLICKABLE:
        return None
    pos = Vector2(pos)
    scale = zoom_scale(zoom_progress)
    for i, r in enumerate(bubble.records):
        if pos.distance_to(record_screen_pos(bubble, r, scale, width, height)) < r.size * scale / 2:
            return i
    return None
