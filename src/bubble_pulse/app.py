import time
import random
import logging

import numpy as np
import pygame

from .audio import MicrophoneLevel, SimulatedMicrophoneLevel
from .config import SketchConfig
from .render import Renderer
from .scene import Scene
from .state import SessionState, press, tick

log = logging.getLogger(__name__)


def load_avatars(paths):
    """Load the avatar images once. A missing file is fatal."""
    images = [pygame.image.load(p).convert_alpha() for p in paths]
    log.info("Loaded %d avatar images", len(images))
    return images


class BubblePulseApp:
    def __init__(self, config=None):
        self.config = config or SketchConfig()
        cfg = self.config

        rng = None
        if cfg.seed is not None:
            random.seed(cfg.seed)
            rng = np.random.default_rng(cfg.seed)

        pygame.init()
        flags = pygame.FULLSCREEN if cfg.fullscreen else pygame.RESIZABLE
        self.screen = pygame.display.set_mode((cfg.width, cfg.height), flags)
        pygame.display.set_caption("Bubble Pulse")
        self.clock = pygame.time.Clock()

        self.avatars = load_avatars(cfg.avatar_paths())
        width, height = self.screen.get_size()
        self.scene = Scene(width, height, avatar_count=len(self.avatars), rng=rng)
        self.renderer = Renderer(self.screen, self.avatars)
        self.state = SessionState()

        if cfg.simulate_mic:
            self.mic = SimulatedMicrophoneLevel()
        else:
            self.mic = MicrophoneLevel(enabled=cfg.enable_mic)
        self.loudness = 0.0
        self.running = False

    def set_state(self, new_state):
        if new_state.mode is not self.state.mode:
            log.info("Mode %s -> %s", self.state.mode.name, new_state.mode.name)
        self.state = new_state

    def on_press(self, pos):
        # audio may only start from a user gesture
        self.mic.ensure_started()
        self.set_state(press(self.state, self.scene, pos))

    def on_resize(self, width, height):
        self.screen = pygame.display.get_surface()
        self.renderer.screen = self.screen
        self.scene.resize(width, height)
        log.debug("Window resized to %dx%d", width, height)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.on_resize(event.w, event.h)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.on_press(event.pos)

    def step(self):
        """One frame: sample audio, advance state and entities, draw."""
        self.loudness = self.mic.sample()
        self.set_state(tick(self.state))
        self.scene.update(self.state, self.loudness)
        self.renderer.draw(self.state, self.scene, self.loudness)

    def run(self):
        self.running = True
        last_dbg = 0.0
        try:
            while self.running:
                self.clock.tick(self.config.fps)
                for event in pygame.event.get():
                    self.handle_event(event)
                if not self.running:
                    break
                self.step()
                pygame.display.flip()

                if time.time() - last_dbg > 1.0:
                    last_dbg = time.time()
                    log.debug("mode=%s loudness=%.3f mic=%s fps=%.1f", self.state.mode.name,
                              self.loudness, self.mic.state.value, self.clock.get_fps())
        finally:
            self.mic.stop()
            pygame.quit()
