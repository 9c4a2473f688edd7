"""
Headless smoke tests for drawing and the application shell.

Uses the SDL dummy video driver, so no window is opened.
"""

import dataclasses
import random
import unittest

import numpy as np
import pygame
from pygame.math import Vector2

from bubble_pulse.__main__ import config_from_args, parse_args
from bubble_pulse.app import BubblePulseApp
from bubble_pulse.audio import MicState
from bubble_pulse.config import SketchConfig
from bubble_pulse.render import Renderer, draw_record, draw_soap_bubble
from bubble_pulse.scene import Scene
from bubble_pulse.state import DisplayMode, SessionState

WIDTH, HEIGHT = 640, 480


def snapshot(scene):
    return [(Vector2(b.pos), b.rotation, [Vector2(r.pos) for r in b.records]) for b in scene.bubbles]


class TestRenderer(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        pygame.font.init()

    def setUp(self):
        random.seed(4)
        self.screen = pygame.Surface((WIDTH, HEIGHT))
        avatars = []
        for color in ((255, 150, 190), (120, 200, 255), (170, 235, 150)):
            img = pygame.Surface((64, 64), pygame.SRCALPHA)
            img.fill((*color, 255))
            avatars.append(img)
        self.scene = Scene(WIDTH, HEIGHT, avatar_count=len(avatars), rng=np.random.default_rng(1))
        self.renderer = Renderer(self.screen, avatars)

    def states(self):
        base = SessionState(selected_bubble=0, selected_record=2, frame_count=42, intro_timer=1.5)
        yield dataclasses.replace(base, mode=DisplayMode.ECG_INTRO)
        yield dataclasses.replace(base, mode=DisplayMode.MESSAGE)
        yield dataclasses.replace(base, mode=DisplayMode.NORMAL, selected_bubble=None, selected_record=None)
        yield dataclasses.replace(base, mode=DisplayMode.ZOOM, selected_record=None, zoom_progress=1.0)
        yield dataclasses.replace(base, mode=DisplayMode.MUSIC_DETAIL, zoom_progress=0.4, music_detail_progress=1.0)
        yield dataclasses.replace(base, mode=DisplayMode.PHONE_PROMPT, phone_prompt_progress=0.6)

    def test_every_mode_draws(self):
        for state in self.states():
            self.screen.fill((0, 0, 0))
            self.renderer.draw(state, self.scene, loudness=0.5)
            # something besides the clear colour was drawn
            self.assertNotEqual(pygame.transform.average_color(self.screen)[:3], (0, 0, 0), state.mode)

    def test_drawing_does_not_move_entities(self):
        before = snapshot(self.scene)
        for state in self.states():
            self.renderer.draw(state, self.scene)
        self.assertEqual(snapshot(self.scene), before)

    def test_soap_bubble_is_translucent(self):
        target = pygame.Surface((200, 200), pygame.SRCALPHA)
        draw_soap_bubble(target, (100, 100), 60, (120, 200, 255), 0.2, 1.0, frame=0)
        alpha = target.get_at((100, 100)).a
        self.assertGreater(alpha, 0)
        self.assertLess(alpha, 255)
        self.assertEqual(target.get_at((2, 2)).a, 0)

    def test_soap_bubble_body_tints_an_opaque_screen(self):
        bg = (5, 10, 20)
        target = pygame.Surface((300, 300))
        target.fill(bg)
        draw_soap_bubble(target, (150, 150), 100, (120, 200, 255), 0.3, 1.0, frame=0)
        # lower-right of the body, away from the highlight and the rims
        for x, y in ((170, 190), (200, 150), (150, 220)):
            px = target.get_at((x, y))
            self.assertGreater(max(abs(px[i] - bg[i]) for i in range(3)), 15, (x, y))
        self.assertEqual(tuple(target.get_at((5, 5)))[:3], bg)

    def test_record_hub_is_drawn_over_the_vinyl(self):
        bg = (5, 10, 20)
        target = pygame.Surface((200, 200))
        target.fill(bg)
        draw_record(target, (100, 100), 24, 6.0, (60, 60, 60))
        hub = target.get_at((100, 100))
        vinyl = target.get_at((100, 100 + 55))
        self.assertGreater(hub.r, vinyl.r + 15)
        self.assertGreater(hub.r, 70)


class TestApp(unittest.TestCase):

    def setUp(self):
        self.app = BubblePulseApp(SketchConfig(width=WIDTH, height=HEIGHT, enable_mic=False, seed=9))

    def tearDown(self):
        pygame.quit()

    def test_loads_three_avatars(self):
        self.assertEqual(len(self.app.avatars), 3)
        self.assertTrue(any(b.avatar is not None for b in self.app.scene.bubbles))

    def test_press_walks_through_intro(self):
        self.app.step()
        self.app.on_press((10, 10))
        self.assertIs(self.app.state.mode, DisplayMode.MESSAGE)
        self.assertIs(self.app.mic.state, MicState.DISABLED)
        self.app.on_press((10, 10))
        self.assertIs(self.app.state.mode, DisplayMode.NORMAL)
        for _ in range(5):
            self.app.step()
        self.assertEqual(self.app.state.frame_count, 6)
        self.assertEqual(self.app.loudness, 0.0)

    def test_escape_stops_the_loop(self):
        self.app.running = True
        self.app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        self.assertFalse(self.app.running)

    def test_left_click_event_is_a_press(self):
        self.app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 5)))
        self.assertIs(self.app.state.mode, DisplayMode.MESSAGE)
        self.app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(5, 5)))
        self.assertIs(self.app.state.mode, DisplayMode.MESSAGE)


class TestCli(unittest.TestCase):

    def test_flags_map_onto_config(self):
        cfg = config_from_args(parse_args(["--width", "800", "--height", "600", "--no-mic", "--seed", "3"]))
        self.assertEqual((cfg.width, cfg.height), (800, 600))
        self.assertFalse(cfg.enable_mic)
        self.assertFalse(cfg.simulate_mic)
        self.assertEqual(cfg.seed, 3)
        self.assertEqual(len(cfg.avatar_paths()), 3)

    def test_mic_flags_are_exclusive(self):
        with self.assertRaises(SystemExit):
            parse_args(["--no-mic", "--simulate-mic"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
