import os
from dataclasses import dataclass
from typing import Optional


WIDTH, HEIGHT = 1280, 720
FPS = 60
# intro/message timers advance by a fixed amount per tick, not by wall clock
TICK_SECONDS = 0.016

BG_COLOR = (5, 10, 20)
ECG_BG_COLOR = (10, 15, 25)
PANEL_COLOR = (20, 25, 35)
WHITE = (255, 255, 255)

ASSETS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets")
AVATAR_FILES = ("avatar1.bmp", "avatar2.bmp", "avatar3.bmp")

# Audio
SR = 22050
HOP_LENGTH = 512
MIC_BUFFER = 2048
MIC_GAIN = 7.0
MIC_SMOOTHING = 0.08

# ECG
ECG_STEP = 3
ECG_BASELINE_OFFSET = 120
ECG_AMPLITUDE_BASE = 1.0
ECG_WAVELENGTH_BASE = 520
ECG_AMP_RANGE = (0.9, 1.45)
ECG_NOISE_RANGE = (0.6, 2.2)
ECG_WAVELENGTH_RANGE = (1.05, 0.85)
ECG_NOISE_SPAN = 2.0
ECG_DRIFT_AMPLITUDE = 4.0
ECG_DRIFT_FREQ = 0.002
ECG_DRIFT_STEP = 0.015
ECG_SCROLL_STEP = 2.0
ECG_REGEN_INTERVAL = (16, 8)
ECG_VISIBLE_MARGIN = 50
PULSE_STEP = 0.05

# Scene population
STAR_COUNT = 280
INTERACTIVE_BUBBLES = 10
BACKGROUND_BUBBLES = 10
RECORDS_PER_BUBBLE = 10

# Physics
RECORD_DISK_RADIUS = 70.0
RECORD_SPEED = 0.3
RECORD_SPIN = 0.02
BUBBLE_PULSE_STEP = 0.02
BUBBLE_BOUND_X = 1.2
SEPARATION_DEPTH = 200.0
SEPARATION_PUSH = 0.1
MAX_BUBBLE_SPEED = 0.6

# Depth mapping
DEPTH_NEAR, DEPTH_FAR = 500.0, -1500.0
DEPTH_SCALE_RANGE = (0.3, 1.2)
DEPTH_ALPHA_RANGE = (0.25, 1.0)

# Transitions
MESSAGE_SECONDS = 3.0
ZOOM_STEP = 0.05
MUSIC_DETAIL_STEP = 0.05
PHONE_PROMPT_STEP = 0.03
PROGRESS_DECAY = 0.1
ZOOM_CLICKABLE = 0.8
ZOOM_SCALE_MAX = 1.8
ZOOM_EXIT_RADIUS = 400.0
RECORD_SHIFT = 0.15
DETAIL_OFFSET_Y = 50
DETAIL_ENTER_RADIUS = 100.0
DETAIL_EXIT_RADIUS = 200.0
RECORD_SCALE_MAX = 12.0

FONT_NAME = None


@dataclass
class SketchConfig:
    """Launch-time overrides for the module defaults above."""
    width: int = WIDTH
    height: int = HEIGHT
    fps: int = FPS
    fullscreen: bool = False
    enable_mic: bool = True
    simulate_mic: bool = False
    seed: Optional[int] = None
    assets_dir: str = ASSETS_DIR
    verbose: bool = False

    def avatar_paths(self):
        return [os.path.join(self.assets_dir, name) for name in AVATAR_FILES]
