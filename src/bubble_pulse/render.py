"""
Per-mode drawing on top of pygame.

Nothing here mutates the scene or the session state: every function reads the
current values and issues draw calls. Translucent shapes are drawn on small
SRCALPHA layers and blitted, since pygame.draw overwrites alpha instead of
blending it.
"""
import math

import pygame
import pygame.gfxdraw

from .config import (
    BG_COLOR,
    ECG_BG_COLOR,
    FONT_NAME,
    PANEL_COLOR,
    RECORD_SCALE_MAX,
    WHITE,
    ZOOM_CLICKABLE,
)
from .hittest import detail_center, record_screen_pos, screen_center, zoom_scale
from .mathutil import clamp, ease_in_out_cubic, lerp, lerp_color, map_range
from .state import DisplayMode

RIM_COLORS = (((120, 220, 255), (255, 180, 230)), ((150, 255, 150), (255, 240, 150)))
LIGHT_DIR = (-0.35, -0.45)


def _a(value):
    return int(clamp(value, 0, 255))


def blend_circle(surf, rgb, alpha, center, radius, width=0):
    radius = max(1, int(round(radius)))
    pad = width + 2
    size = radius * 2 + pad * 2
    layer = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(layer, (*rgb, _a(alpha)), (size // 2, size // 2), radius, int(width))
    surf.blit(layer, (int(center[0]) - size // 2, int(center[1]) - size // 2))


def blend_rect(surf, rgb, alpha, rect, width=0, radius=-1):
    rect = pygame.Rect(rect)
    layer = pygame.Surface(rect.size, pygame.SRCALPHA)
    pygame.draw.rect(layer, (*rgb, _a(alpha)), layer.get_rect(), int(width), border_radius=int(radius))
    surf.blit(layer, rect.topleft)


def centered_rect(cx, cy, w, h):
    r = pygame.Rect(0, 0, int(w), int(h))
    r.center = (int(cx), int(cy))
    return r


def veil(surf, alpha, rgb=BG_COLOR):
    layer = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
    layer.fill((*rgb, _a(alpha)))
    surf.blit(layer, (0, 0))


def _overlay(sprite):
    return pygame.Surface(sprite.get_size(), pygame.SRCALPHA)


def draw_soap_bubble(surf, center, radius, color, alpha, depth_alpha, frame, wobble=0.0):
    """Translucent sphere: tinted body, soft light falloff, specular spot and two rims.

    Each translucent fill goes on its own layer which is then blitted onto the
    sprite, so the alpha values stack instead of being overwritten.
    """
    r = max(2, int(radius))
    size = int(r * 2.2) + 6
    c = size // 2
    sprite = pygame.Surface((size, size), pygame.SRCALPHA)

    body = 255 * alpha * depth_alpha * 0.85
    pygame.draw.circle(sprite, (*color, _a(body)), (c, c), r)

    # light falloff towards the upper-left key light
    for i in range(1, 5):
        f = i / 5.0
        rr = int(r * (1.0 - f * 0.55))
        ox = int(LIGHT_DIR[0] * r * f * 0.6)
        oy = int(LIGHT_DIR[1] * r * f * 0.6 * math.cos(wobble))
        tone = lerp_color(color, WHITE, 0.25 + f * 0.3)
        layer = _overlay(sprite)
        pygame.draw.circle(layer, (*tone, _a(body * 0.18)), (c + ox, c + oy), max(1, rr))
        sprite.blit(layer, (0, 0))

    hx = c + int(LIGHT_DIR[0] * r * 0.8)
    hy = c + int(LIGHT_DIR[1] * r * 0.8)
    rx, ry = max(1, int(r * 0.16)), max(1, int(r * 0.1))
    layer = _overlay(sprite)
    pygame.draw.ellipse(layer, (255, 255, 255, _a(90 * depth_alpha)), (hx - rx, hy - ry, rx * 2, ry * 2))
    sprite.blit(layer, (0, 0))

    hue_t = math.sin(frame * 0.008) * 0.5 + 0.5
    rim1 = lerp_color(RIM_COLORS[0][0], RIM_COLORS[0][1], hue_t)
    rim2 = lerp_color(RIM_COLORS[1][0], RIM_COLORS[1][1], 1 - hue_t)
    for k in range(2):
        pygame.gfxdraw.aacircle(sprite, c, c, int(r * 1.01) + k, (*rim1, _a(38 * depth_alpha)))
    for k in range(3):
        pygame.gfxdraw.aacircle(sprite, c, c, int(r * 1.035) + k, (*rim2, _a(18 * depth_alpha)))

    surf.blit(sprite, (int(center[0]) - c, int(center[1]) - c))


def draw_record(surf, center, size, scale, color, alpha=1.0, grooves=4, groove_gap=2.5):
    """Vinyl of `size` record units drawn `scale` times larger."""
    r = max(2, int(size * scale / 2))
    side = r * 2 + 4
    c = side // 2
    sprite = pygame.Surface((side, side), pygame.SRCALPHA)
    pygame.draw.circle(sprite, (*color, _a(alpha * 220)), (c, c), r)
    pygame.gfxdraw.aacircle(sprite, c, c, r, (0, 0, 0, _a(alpha * 120)))
    for i in range(1, grooves + 1):
        gr = int((size * 0.4 + i * groove_gap) * scale / 2)
        if gr < r:
            pygame.gfxdraw.aacircle(sprite, c, c, gr, (0, 0, 0, _a(alpha * 60)))
    hub = _overlay(sprite)
    pygame.draw.circle(hub, (100, 100, 100, _a(alpha * 180)), (c, c), max(1, int(r * 0.3)))
    sprite.blit(hub, (0, 0))
    surf.blit(sprite, (int(center[0]) - c, int(center[1]) - c))


class Renderer:
    """Draws the active screen of a SessionState onto a pygame surface."""

    def __init__(self, screen, avatars=()):
        self.screen = screen
        self.avatars = list(avatars)
        self.fonts = {}

    def font(self, size):
        if size not in self.fonts:
            self.fonts[size] = pygame.font.SysFont(FONT_NAME, size)
        return self.fonts[size]

    def text(self, msg, size, rgb, alpha, pos, anchor="midbottom"):
        label = self.font(size).render(msg, True, rgb)
        label.set_alpha(_a(alpha))
        rect = label.get_rect(**{anchor: (int(pos[0]), int(pos[1]))})
        self.screen.blit(label, rect)

    def avatar(self, index, center, size, alpha):
        if index is None or not self.avatars:
            return
        img = self.avatars[index % len(self.avatars)]
        side = max(1, int(size))
        img = pygame.transform.smoothscale(img, (side, side))
        img.set_alpha(_a(alpha))
        self.screen.blit(img, img.get_rect(center=(int(center[0]), int(center[1]))))

    def draw(self, state, scene, loudness=0.0):
        mode = state.mode
        if mode is DisplayMode.ECG_INTRO:
            self.draw_ecg(scene, loudness)
        elif mode is DisplayMode.MESSAGE:
            self.draw_message(state, scene)
        elif mode is DisplayMode.PHONE_PROMPT:
            self.draw_phone_prompt(state, scene)
        elif mode is DisplayMode.MUSIC_DETAIL:
            self.draw_music_detail(state, scene)
        elif mode is DisplayMode.ZOOM:
            self.draw_zoom(state, scene)
        else:
            self.draw_normal(state, scene)

    # ECG intro

    def draw_ecg(self, scene, loudness):
        w, h = scene.width, scene.height
        self.screen.fill(ECG_BG_COLOR)

        pts = [(float(x), float(y)) for x, y in scene.ecg.visible_points()]
        if len(pts) > 1:
            for alpha, width in ((40, 10), (70, 6), (220, 3)):
                layer = pygame.Surface((w, h), pygame.SRCALPHA)
                pygame.draw.lines(layer, (255, 255, 255, alpha), False, pts, width)
                self.screen.blit(layer, (0, 0))

        size, circle_alpha = scene.ecg.pulse(loudness)
        cx, cy = w / 2, h / 2 + 100
        for i in range(3, 0, -1):
            blend_circle(self.screen, WHITE, circle_alpha / (i + 1), (cx, cy), (size + i * 30) / 2, i * 3)
        blend_circle(self.screen, WHITE, circle_alpha, (cx, cy), size / 2, 4)

        self.text("Hold your smartphone on the screen.", 32, WHITE, 230, (w / 2, h / 2 + 250))
        self.text("Tap the screen to continue", 18, WHITE, 180, (w / 2, h - 50))

    def draw_message(self, state, scene):
        w, h = scene.width, scene.height
        self.screen.fill(BG_COLOR)
        alpha = min(255, state.intro_timer * 100)
        self.text("Let's discover songs you don't know from others' perspectives.", 28, WHITE, alpha,
                  (w / 2, h / 2), anchor="center")
        self.text("Tap to skip", 18, WHITE, alpha * 0.75, (w / 2, h - 50), anchor="center")

    # Bubble scene

    def draw_normal(self, state, scene):
        self.screen.fill(BG_COLOR)
        w, h = scene.width, scene.height

        for s in scene.stars:
            sx, sy, size, alpha = s.project(w, h)
            if not (0 <= sx < w and 0 <= sy < h):
                continue
            col = (255, 255, 255, _a(alpha))
            if size < 1.5:
                pygame.gfxdraw.pixel(self.screen, int(sx), int(sy), col)
            else:
                pygame.gfxdraw.filled_circle(self.screen, int(sx), int(sy), int(size / 2), col)

        center = screen_center(w, h)
        for b in scene.bubbles_far_to_near():
            pulse = 1 + math.sin(b.pulse_phase) * 0.04
            radius = b.size * pulse / 2 * b.depth_scale
            draw_soap_bubble(self.screen, center + b.pos, radius, b.color, b.alpha, b.depth_alpha,
                             state.frame_count, wobble=math.sin(b.pulse_phase) * 0.08)

        for b in scene.bubbles:
            if not b.interactive or b.avatar is None:
                continue
            self.avatar(b.avatar, center + b.pos, b.size * 0.36 * b.depth_scale, 180 * b.depth_alpha)

    def draw_zoom(self, state, scene):
        t = ease_in_out_cubic(state.zoom_progress)
        w, h = scene.width, scene.height
        self.draw_normal(state, scene)
        veil(self.screen, 200 * t)

        bubble = state.bubble(scene)
        if bubble is None:
            return
        scale = zoom_scale(state.zoom_progress)
        center = screen_center(w, h)
        draw_soap_bubble(self.screen, center, bubble.size * 0.5 * scale, bubble.color, bubble.alpha, 1.0,
                         state.frame_count)

        if t > ZOOM_CLICKABLE:
            for r in bubble.records:
                draw_record(self.screen, record_screen_pos(bubble, r, scale, w, h), r.size, scale, r.color)

        if t > 0.05:
            self.avatar(bubble.avatar, (w / 2, h / 4), bubble.size * 0.42 * lerp(1, 1.2, t), 220 * t)

        if t > 0.9:
            self.text("Tap the record to play the song", 20, WHITE, 200, (w / 2, h - 80))

    # Music detail

    def draw_music_detail(self, state, scene):
        t = ease_in_out_cubic(state.music_detail_progress)
        w, h = scene.width, scene.height
        if state.zoom_progress > 0:
            self.draw_zoom(state, scene)
        else:
            self.screen.fill(BG_COLOR)
        veil(self.screen, 240 * t)

        record = state.record(scene)
        if record is not None:
            self.draw_big_record(record, detail_center(w, h), lerp(1, RECORD_SCALE_MAX, t), state.frame_count)

        if t > 0.5:
            self.draw_music_player(record.info if record is not None else None, t, w, h)

        if t > 0.7:
            self.text("if you like it, lets tap the record", 18, WHITE, 200 * (t - 0.7) / 0.3, (w / 2, h - 60))

    def draw_big_record(self, record, center, scale, frame):
        draw_record(self.screen, center, record.size, scale, record.color, grooves=7, groove_gap=3)

        # rotating sheen wedge
        r = record.size * scale * 0.4
        angle = record.rotation + frame * 0.01
        pts = [(center[0], center[1])]
        for i in range(13):
            a = angle - math.pi / 3 + (i / 12.0) * (2 * math.pi / 3)
            pts.append((center[0] + math.cos(a) * r, center[1] + math.sin(a) * r))
        layer = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        pygame.draw.polygon(layer, (255, 255, 255, 60), pts)
        self.screen.blit(layer, (0, 0))

    def draw_music_player(self, info, t, w, h):
        alpha = map_range(t, 0.5, 1.0, 0, 255)
        cx, cy = w / 2, h * 0.78
        blend_rect(self.screen, PANEL_COLOR, alpha, centered_rect(cx, cy, w * 0.62, 210), radius=18)

        top = cy - 60
        self.text(info.title if info else "-", 24, WHITE, alpha, (cx, top))
        self.text(info.artist if info else "", 18, (210, 210, 210), alpha, (cx, top + 28))
        self.text(info.album if info else "", 15, (170, 170, 170), alpha, (cx, top + 52))

        by = cy + 62
        blend_circle(self.screen, WHITE, alpha, (cx, by), 32)
        layer = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        pygame.draw.polygon(layer, (*PANEL_COLOR, _a(alpha)),
                            [(cx - 10, by - 12), (cx - 10, by + 12), (cx + 16, by)])
        self.screen.blit(layer, (0, 0))

    # Phone prompt

    def draw_phone_prompt(self, state, scene):
        t = ease_in_out_cubic(state.phone_prompt_progress)
        w, h = scene.width, scene.height
        self.screen.fill(BG_COLOR)

        self.text("Hold your smartphone on the screen.", 32, WHITE, 255 * t, (w / 2, h / 2 - 200))

        blink = 150 + 105 * math.sin(state.frame_count * 0.05)
        cx, cy = w / 2, h / 2
        blend_rect(self.screen, WHITE, blink * t, centered_rect(cx, cy + 50, 180, 320), radius=20)
        blend_rect(self.screen, (200, 220, 255), blink * 0.6 * t, centered_rect(cx, cy + 40, 160, 280), radius=10)
        blend_circle(self.screen, WHITE, blink * t, (cx, cy + 190), 20)
        blend_circle(self.screen, (50, 50, 50), blink * t, (cx, cy - 140), 6)

        for i in range(1, 4):
            blend_rect(self.screen, WHITE, blink * 0.3 * t / i,
                       centered_rect(cx, cy + 50, 180 + i * 20, 320 + i * 20), width=i * 4, radius=20 + i * 5)

        self.text("Tap the black area to return to the previous screen.", 16, WHITE, 150 * t, (w / 2, h - 40))
