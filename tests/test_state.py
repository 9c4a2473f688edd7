"""
Tests for the display-mode state machine and pointer hit-testing.
"""

import dataclasses
import random
import unittest

import numpy as np
from pygame.math import Vector2

from bubble_pulse import hittest
from bubble_pulse.scene import Scene
from bubble_pulse.state import DisplayMode, SessionState, press, tick

WIDTH, HEIGHT = 800, 600


def make_scene():
    random.seed(21)
    scene = Scene(WIDTH, HEIGHT, avatar_count=3, rng=np.random.default_rng(0))
    # lay interactive bubbles on a non-overlapping grid at the same depth
    for i, b in enumerate(b for b in scene.bubbles if b.interactive):
        row, col = divmod(i, 5)
        b.pos = Vector2(-520 + col * 260, -130 + row * 260)
        b.z = 0.0
    return scene


def bubble_center(scene, index):
    return tuple(hittest.bubble_screen_pos(scene.bubbles[index], WIDTH, HEIGHT))


def zoomed_on(scene, index, progress=1.0):
    return SessionState(mode=DisplayMode.ZOOM, selected_bubble=index, zoom_progress=progress)


class TestIntroFlow(unittest.TestCase):

    def setUp(self):
        self.scene = make_scene()

    def test_starts_on_ecg(self):
        state = SessionState()
        self.assertIs(state.mode, DisplayMode.ECG_INTRO)
        self.assertIsNone(state.selected_bubble)
        self.assertIsNone(state.selected_record)

    def test_press_on_ecg_shows_message(self):
        state = press(SessionState(intro_timer=1.2), self.scene, (10, 10))
        self.assertIs(state.mode, DisplayMode.MESSAGE)
        self.assertEqual(state.intro_timer, 0.0)

    def test_message_advances_after_three_seconds(self):
        state = press(SessionState(), self.scene, (10, 10))
        ticks = 0
        while state.mode is DisplayMode.MESSAGE:
            state = tick(state)
            ticks += 1
            self.assertLess(ticks, 400)
        self.assertIs(state.mode, DisplayMode.NORMAL)
        self.assertGreaterEqual(ticks * 0.016, 3.0)
        self.assertLess(ticks, 190)
        self.assertEqual(state.intro_timer, 0.0)

    def test_press_skips_message(self):
        state = press(SessionState(mode=DisplayMode.MESSAGE, intro_timer=0.5), self.scene, (10, 10))
        self.assertIs(state.mode, DisplayMode.NORMAL)
        self.assertEqual(state.intro_timer, 0.0)

    def test_intro_timer_only_runs_on_message(self):
        state = tick(SessionState(mode=DisplayMode.NORMAL))
        self.assertEqual(state.intro_timer, 0.0)
        self.assertEqual(state.frame_count, 1)


class TestBubbleSelection(unittest.TestCase):

    def setUp(self):
        self.scene = make_scene()
        self.normal = SessionState(mode=DisplayMode.NORMAL)

    def test_press_on_bubble_three_selects_it(self):
        state = press(self.normal, self.scene, bubble_center(self.scene, 3))
        self.assertIs(state.mode, DisplayMode.ZOOM)
        self.assertEqual(state.selected_bubble, 3)
        self.assertIs(state.bubble(self.scene), self.scene.bubbles[3])

    def test_every_interactive_bubble_is_reachable(self):
        for i in range(10):
            state = press(self.normal, self.scene, bubble_center(self.scene, i))
            self.assertEqual(state.selected_bubble, i)

    def test_overlap_resolves_to_creation_order(self):
        self.scene.bubbles[7].pos = Vector2(self.scene.bubbles[3].pos)
        state = press(self.normal, self.scene, bubble_center(self.scene, 3))
        self.assertEqual(state.selected_bubble, 3)

    def test_drawing_order_does_not_change_selection(self):
        self.scene.bubbles[3].z = 250.0
        self.scene.bubbles_far_to_near()
        state = press(self.normal, self.scene, bubble_center(self.scene, 3))
        self.assertEqual(state.selected_bubble, 3)

    def test_background_bubbles_are_not_clickable(self):
        bg = next(i for i, b in enumerate(self.scene.bubbles) if not b.interactive)
        self.scene.bubbles[bg].pos = Vector2(0, 400)
        state = press(self.normal, self.scene, (WIDTH / 2, HEIGHT / 2 + 400))
        self.assertIs(state, self.normal)

    def test_radius_scales_with_depth(self):
        b = self.scene.bubbles[0]
        center = Vector2(bubble_center(self.scene, 0))
        edge = b.size * b.depth_scale / 2
        self.assertEqual(press(self.normal, self.scene, center + (edge - 1, 0)).selected_bubble, 0)
        self.assertIs(press(self.normal, self.scene, center + (edge + 1, 0)), self.normal)

    def test_zoom_progress_grows_strictly_to_one(self):
        state = press(self.normal, self.scene, bubble_center(self.scene, 3))
        self.assertLess(state.zoom_progress, 1.0)
        values = [state.zoom_progress]
        while state.zoom_progress < 1.0:
            state = tick(state)
            values.append(state.zoom_progress)
            self.assertLess(len(values), 100)
        self.assertTrue(all(b > a for a, b in zip(values, values[1:])))
        self.assertEqual(tick(state).zoom_progress, 1.0)


class TestZoom(unittest.TestCase):

    def setUp(self):
        self.scene = make_scene()
        self.bubble = self.scene.bubbles[2]
        # park every record but one on the far side of the disk
        for r in self.bubble.records:
            r.pos = Vector2(-60, 0)
        self.target = 6
        self.bubble.records[self.target].pos = Vector2(60, 0)

    def record_center(self, progress=1.0):
        r = self.bubble.records[self.target]
        scale = hittest.zoom_scale(progress)
        return tuple(hittest.record_screen_pos(self.bubble, r, scale, WIDTH, HEIGHT))

    def test_press_on_record_opens_detail(self):
        state = press(zoomed_on(self.scene, 2), self.scene, self.record_center())
        self.assertIs(state.mode, DisplayMode.MUSIC_DETAIL)
        self.assertEqual(state.selected_record, self.target)
        self.assertIs(state.record(self.scene), self.bubble.records[self.target])
        self.assertEqual(state.music_detail_progress, 0.0)

    def test_zoom_progress_decays_after_opening_detail(self):
        state = press(zoomed_on(self.scene, 2), self.scene, self.record_center())
        values = [state.zoom_progress]
        for _ in range(12):
            state = tick(state)
            values.append(state.zoom_progress)
        decreasing = [v for v in values if v > 0]
        self.assertTrue(all(b < a for a, b in zip(decreasing, decreasing[1:])))
        self.assertEqual(values[-1], 0.0)

    def test_records_ignored_while_zoom_settles(self):
        state = zoomed_on(self.scene, 2, progress=0.5)
        self.assertIs(press(state, self.scene, self.record_center(0.5)), state)

    def test_press_far_away_returns_to_bubbles(self):
        state = zoomed_on(self.scene, 2)
        state = press(state, self.scene, (WIDTH / 2 + 401, HEIGHT / 2))
        self.assertIs(state.mode, DisplayMode.NORMAL)
        self.assertIsNone(state.selected_bubble)
        self.assertIsNone(state.selected_record)
        self.assertEqual(state.zoom_progress, 0.0)

    def test_press_near_centre_keeps_zoom(self):
        state = zoomed_on(self.scene, 2)
        self.assertIs(press(state, self.scene, (WIDTH / 2 + 300, HEIGHT / 2 - 250)), state)


class TestDetailAndPhone(unittest.TestCase):

    def setUp(self):
        self.scene = make_scene()
        self.detail = SessionState(mode=DisplayMode.MUSIC_DETAIL, selected_bubble=1, selected_record=4,
                                   music_detail_progress=1.0)
        self.center = hittest.detail_center(WIDTH, HEIGHT)

    def test_press_on_record_shows_phone_prompt(self):
        state = press(self.detail, self.scene, self.center + (40, 40))
        self.assertIs(state.mode, DisplayMode.PHONE_PROMPT)
        self.assertEqual(state.phone_prompt_progress, 0.0)
        self.assertEqual(state.selected_record, 4)

    def test_press_outside_returns_to_zoom(self):
        state = press(self.detail, self.scene, self.center + (0, 201))
        self.assertIs(state.mode, DisplayMode.ZOOM)
        self.assertEqual(state.selected_bubble, 1)
        self.assertIsNone(state.selected_record)

    def test_press_in_dead_ring_does_nothing(self):
        self.assertIs(press(self.detail, self.scene, self.center + (150, 0)), self.detail)

    def test_any_press_leaves_phone_prompt(self):
        phone = dataclasses.replace(self.detail, mode=DisplayMode.PHONE_PROMPT, phone_prompt_progress=0.7)
        state = press(phone, self.scene, (0, 0))
        self.assertIs(state.mode, DisplayMode.MUSIC_DETAIL)
        self.assertEqual(state.selected_record, 4)

    def test_phone_prompt_grows_slower(self):
        state = press(self.detail, self.scene, self.center)
        state = tick(state)
        self.assertAlmostEqual(state.phone_prompt_progress, 0.03)
        self.assertEqual(state.music_detail_progress, 0.9)


class TestProgressScalars(unittest.TestCase):

    def test_inactive_progress_decays(self):
        state = SessionState(mode=DisplayMode.NORMAL, zoom_progress=0.5, music_detail_progress=0.05,
                             phone_prompt_progress=1.0)
        state = tick(state)
        self.assertAlmostEqual(state.zoom_progress, 0.4)
        self.assertEqual(state.music_detail_progress, 0.0)
        self.assertAlmostEqual(state.phone_prompt_progress, 0.9)

    def test_progress_is_clamped(self):
        state = SessionState(mode=DisplayMode.MUSIC_DETAIL, music_detail_progress=0.98)
        state = tick(state)
        self.assertEqual(state.music_detail_progress, 1.0)
        for _ in range(30):
            state = tick(state)
        for value in (state.zoom_progress, state.music_detail_progress, state.phone_prompt_progress):
            self.assertTrue(0.0 <= value <= 1.0)

    def test_state_is_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            SessionState().mode = DisplayMode.NORMAL

    def test_tick_does_not_touch_the_input_state(self):
        state = SessionState(mode=DisplayMode.ZOOM, selected_bubble=0)
        tick(state)
        self.assertEqual(state.zoom_progress, 0.0)
        self.assertEqual(state.frame_count, 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
