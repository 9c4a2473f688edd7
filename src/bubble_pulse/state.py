"""
Display-mode state machine.

SessionState is immutable; `tick` and `press` return a new state and never
touch the scene. Each animated mode owns a progress scalar: the active one
grows towards 1, every other one decays towards 0, which gives the
overlapping cross-fades between screens.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .config import (
    DETAIL_ENTER_RADIUS,
    DETAIL_EXIT_RADIUS,
    MESSAGE_SECONDS,
    MUSIC_DETAIL_STEP,
    PHONE_PROMPT_STEP,
    PROGRESS_DECAY,
    TICK_SECONDS,
    ZOOM_EXIT_RADIUS,
    ZOOM_STEP,
)
from .hittest import bubble_at, detail_center, record_at, screen_center
from .mathutil import clamp


class DisplayMode(Enum):
    ECG_INTRO = "ecg_intro"
    MESSAGE = "message"
    NORMAL = "normal"
    ZOOM = "zoom"
    MUSIC_DETAIL = "music_detail"
    PHONE_PROMPT = "phone_prompt"


# mode -> (progress field, growth per tick)
PROGRESS_FIELDS = {
    DisplayMode.ZOOM: ("zoom_progress", ZOOM_STEP),
    DisplayMode.MUSIC_DETAIL: ("music_detail_progress", MUSIC_DETAIL_STEP),
    DisplayMode.PHONE_PROMPT: ("phone_prompt_progress", PHONE_PROMPT_STEP),
}


@dataclass(frozen=True)
class SessionState:
    """
    Runtime state of the sketch.
    Independent of the pygame window and of the entities it points at.
    """
    mode: DisplayMode = DisplayMode.ECG_INTRO
    intro_timer: float = 0.0

    # Transition progress, 0..1
    zoom_progress: float = 0.0
    music_detail_progress: float = 0.0
    phone_prompt_progress: float = 0.0

    # Selection, as indices into scene.bubbles and bubble.records
    selected_bubble: Optional[int] = None
    selected_record: Optional[int] = None

    frame_count: int = 0

    def progress(self, mode):
        name = PROGRESS_FIELDS[mode][0]
        return getattr(self, name)

    def bubble(self, scene):
        if self.selected_bubble is None:
            return None
        return scene.bubbles[self.selected_bubble]

    def record(self, scene):
        bubble = self.bubble(scene)
        if bubble is None or self.selected_record is None:
            return None
        return bubble.records[self.selected_record]


def enter(state, mode, **changes):
    """Switch to `mode`, restarting its own progress from 0."""
    if mode in PROGRESS_FIELDS:
        changes[PROGRESS_FIELDS[mode][0]] = 0.0
    return replace(state, mode=mode, **changes)


def tick(state):
    """Advance one frame: progress scalars and the message auto-advance."""
    changes = {"frame_count": state.frame_count + 1}
    for mode, (name, step) in PROGRESS_FIELDS.items():
        value = getattr(state, name)
        if mode is state.mode:
            changes[name] = clamp(value + step)
        else:
            changes[name] = clamp(value - PROGRESS_DECAY)

    if state.mode is DisplayMode.MESSAGE:
        timer = state.intro_timer + TICK_SECONDS
        if timer > MESSAGE_SECONDS:
            return enter(replace(state, **changes), DisplayMode.NORMAL, intro_timer=0.0)
        changes["intro_timer"] = timer

    return replace(state, **changes)


def press(state, scene, pos):
    """Apply a pointer press at screen position `pos`."""
    width, height = scene.width, scene.height
    mode = state.mode

    if mode is DisplayMode.ECG_INTRO:
        return enter(state, DisplayMode.MESSAGE, intro_timer=0.0)

    if mode is DisplayMode.MESSAGE:
        return enter(state, DisplayMode.NORMAL, intro_timer=0.0)

    if mode is DisplayMode.PHONE_PROMPT:
        return enter(state, DisplayMode.MUSIC_DETAIL)

    if mode is DisplayMode.MUSIC_DETAIL:
        d = detail_center(width, height).distance_to(pos)
        if d < DETAIL_ENTER_RADIUS:
            return enter(state, DisplayMode.PHONE_PROMPT)
        if d > DETAIL_EXIT_RADIUS:
            return enter(state, DisplayMode.ZOOM, selected_record=None)
        return state

    if mode is DisplayMode.ZOOM:
        idx = record_at(state.bubble(scene), pos, state.zoom_progress, width, height)
        if idx is not None:
            return enter(state, DisplayMode.MUSIC_DETAIL, selected_record=idx)
        if screen_center(width, height).distance_to(pos) > ZOOM_EXIT_RADIUS:
            return enter(state, DisplayMode.NORMAL, selected_bubble=None, selected_record=None, zoom_progress=0.0)
        return state

    idx = bubble_at(scene.bubbles, pos, width, height)
    if idx is not None:
        return enter(state, DisplayMode.ZOOM, selected_bubble=idx)
    return state
