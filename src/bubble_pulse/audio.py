"""
Microphone loudness for the ECG intro.

The stream is opened only from a user gesture (the first press). The input
callback just appends samples to a bounded buffer; the render loop polls the
most recent window, measures its RMS and smooths it into a 0..1 level.
"""
import math
import random
import threading
import time
import logging
from collections import deque
from enum import Enum

import numpy as np
import librosa
try:
    import sounddevice as sd
except Exception:
    sd = None

from .config import HOP_LENGTH, MIC_BUFFER, MIC_GAIN, MIC_SMOOTHING, SR
from .mathutil import clamp, lerp

log = logging.getLogger(__name__)


class MicState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DISABLED = "disabled"


class MicrophoneLevel:
    """Smoothed microphone loudness with a one-way start capability."""

    def __init__(self, sr=SR, blocksize=HOP_LENGTH, buffer_size=MIC_BUFFER,
                 gain=MIC_GAIN, smoothing=MIC_SMOOTHING, enabled=True):
        self.sr = sr
        self.blocksize = blocksize
        self.gain = gain
        self.smoothing = smoothing
        self.buffer = deque(maxlen=buffer_size)
        self.lock = threading.Lock()
        self.stream = None
        self.state = MicState.UNINITIALIZED if enabled else MicState.DISABLED
        self.smoothed = 0.0

    @property
    def ready(self):
        return self.state is MicState.ACTIVE

    def ensure_started(self):
        """Open the input stream once. Failure disables audio for the session."""
        if self.state is not MicState.UNINITIALIZED:
            return self.state
        try:
            self.start()
        except Exception as e:
            log.warning("Microphone unavailable, continuing without audio: %s", e)
            self.stop()
            self.state = MicState.DISABLED
        else:
            log.info("Microphone started (%d Hz, block %d)", self.sr, self.blocksize)
            self.state = MicState.ACTIVE
        return self.state

    def start(self):
        if sd is None:
            raise RuntimeError("sounddevice is not installed or PortAudio is missing")

        def callback(indata, frames, time_info, status):
            if status:
                log.debug("Input stream status: %s", status)
            with self.lock:
                self.buffer.extend(indata[:, 0].tolist())

        self.stream = sd.InputStream(samplerate=self.sr, channels=1, dtype="float32",
                                     blocksize=self.blocksize, callback=callback)
        self.stream.start()

    def level(self):
        """Instantaneous loudness in 0..1 (0 until the stream is active)."""
        if self.state is not MicState.ACTIVE:
            return 0.0
        with self.lock:
            if not self.buffer:
                return 0.0
            buf = np.array(self.buffer, dtype=np.float32)
        n = len(buf)
        rms = librosa.feature.rms(y=buf, frame_length=n, hop_length=n, center=False)
        return clamp(float(rms[0, 0]) * self.gain)

    def sample(self):
        """Poll once per tick; returns the smoothed level."""
        self.smoothed = lerp(self.smoothed, self.level(), self.smoothing)
        return self.smoothed

    def stop(self):
        if self.stream is None:
            return
        try:
            self.stream.stop()
            self.stream.close()
        except Exception as e:
            log.debug("Error while closing input stream: %s", e)
        self.stream = None


class SimulatedMicrophoneLevel:
    """Stand-in source for offline runs. Produces a slow breathing level."""

    def __init__(self, smoothing=MIC_SMOOTHING):
        self.smoothing = smoothing
        self.state = MicState.UNINITIALIZED
        self.smoothed = 0.0
        self.start_time = time.time()

    @property
    def ready(self):
        return self.state is MicState.ACTIVE

    def ensure_started(self):
        if self.state is MicState.UNINITIALIZED:
            self.start_time = time.time()
            self.state = MicState.ACTIVE
        return self.state

    def level(self):
        if self.state is not MicState.ACTIVE:
            return 0.0
        t = time.time() - self.start_time
        v = max(0.0, 0.5 + 0.5 * math.sin(t * 0.9)) * 0.7
        v += (random.random() - 0.5) * 0.05
        return clamp(v)

    def sample(self):
        self.smoothed = lerp(self.smoothed, self.level(), self.smoothing)
        return self.smoothed

    def stop(self):
        return
