"""
Procedural ECG trace for the intro screen.

The trace is a baseline with slow drift, loudness-scaled noise and a repeating
P / QRS / T heartbeat. Louder input shortens the beat wavelength and raises
the amplitude, so the heart appears to beat faster and harder.
"""
import math
import logging

import numpy as np

from .config import (
    ECG_AMP_RANGE,
    ECG_AMPLITUDE_BASE,
    ECG_BASELINE_OFFSET,
    ECG_DRIFT_AMPLITUDE,
    ECG_DRIFT_FREQ,
    ECG_DRIFT_STEP,
    ECG_NOISE_RANGE,
    ECG_NOISE_SPAN,
    ECG_REGEN_INTERVAL,
    ECG_SCROLL_STEP,
    ECG_STEP,
    ECG_VISIBLE_MARGIN,
    ECG_WAVELENGTH_BASE,
    ECG_WAVELENGTH_RANGE,
    PULSE_STEP,
)
from .mathutil import lerp

log = logging.getLogger(__name__)

# beat windows, as fractions of one wavelength
P_END = 0.06
QRS_START, QRS_END = 0.17, 0.28
Q_END, R_END = 0.28, 0.52
T_START, T_END = 0.43, 0.54

P_HEIGHT = 10.0
Q_DEPTH = 22.0
R_HEIGHT = 150.0
S_DEPTH = 40.0
T_HEIGHT = 18.0


def beat_params(loudness):
    """Return (amplitude, noise factor, wavelength) for a 0..1 loudness."""
    amp = ECG_AMPLITUDE_BASE * lerp(ECG_AMP_RANGE[0], ECG_AMP_RANGE[1], loudness)
    noise = lerp(ECG_NOISE_RANGE[0], ECG_NOISE_RANGE[1], loudness)
    wavelength = ECG_WAVELENGTH_BASE * lerp(ECG_WAVELENGTH_RANGE[0], ECG_WAVELENGTH_RANGE[1], loudness)
    return amp, noise, wavelength


def _half_sine(progress):
    return np.sin(progress * math.pi)


def generate_ecg(loudness, width, height, drift=0.0, rng=None):
    """Build one ECG sweep spanning twice the viewport width.

    Returns an (n, 2) float array of (x, y) screen samples. Screen y grows
    downward, so upward deflections subtract from the baseline.
    """
    if rng is None:
        rng = np.random.default_rng()
    amp, noise_amt, wavelength = beat_params(loudness)

    x = np.arange(0, width * 2, ECG_STEP, dtype=np.float64)
    y = np.full_like(x, height / 2 + ECG_BASELINE_OFFSET)

    y += np.sin(x * ECG_DRIFT_FREQ + drift) * ECG_DRIFT_AMPLITUDE
    y += rng.uniform(-ECG_NOISE_SPAN, ECG_NOISE_SPAN, size=x.shape) * amp * noise_amt

    p = np.mod(x, wavelength) / wavelength

    # P wave
    mask = p < P_END
    y[mask] -= _half_sine(p[mask] / P_END) * P_HEIGHT * amp

    # QRS complex
    qrs = (p > QRS_START) & (p < QRS_END)
    q = (p - QRS_START) / (QRS_END - QRS_START)
    mask = qrs & (q < Q_END)
    y[mask] += _half_sine(q[mask] / Q_END) * Q_DEPTH * amp
    mask = qrs & (q >= Q_END) & (q < R_END)
    y[mask] -= _half_sine((q[mask] - Q_END) / (R_END - Q_END)) * R_HEIGHT * amp
    mask = qrs & (q >= R_END)
    y[mask] += _half_sine((q[mask] - R_END) / (1.0 - R_END)) * S_DEPTH * amp

    # T wave
    mask = (p > T_START) & (p < T_END)
    y[mask] -= _half_sine((p[mask] - T_START) / (T_END - T_START)) * T_HEIGHT * amp

    return np.column_stack((x, y))


def regen_interval(loudness):
    """Ticks between two full regenerations; louder input regenerates more often."""
    return max(1, int(math.floor(lerp(ECG_REGEN_INTERVAL[0], ECG_REGEN_INTERVAL[1], loudness))))


class EcgWaveform:
    """Scrolling state of the intro trace and its pulse circle."""

    def __init__(self, width, height, rng=None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()
        self.offset = 0.0
        self.drift = 0.0
        self.pulse_phase = 0.0
        self.points = generate_ecg(0.0, width, height, self.drift, self.rng)

    def regenerate(self, loudness):
        self.points = generate_ecg(loudness, self.width, self.height, self.drift, self.rng)

    def advance(self, loudness, frame):
        """Scroll one tick. Returns True when the trace was rebuilt."""
        self.offset -= ECG_SCROLL_STEP
        if self.offset < -self.width:
            self.offset = 0.0
        self.drift += ECG_DRIFT_STEP
        self.pulse_phase += PULSE_STEP

        if frame % regen_interval(loudness) == 0:
            self.regenerate(loudness)
            return True
        return False

    def visible_points(self):
        """Scrolled samples that land on (or just beside) the screen."""
        xs = self.points[:, 0] + self.offset
        mask = (xs > -ECG_VISIBLE_MARGIN) & (xs < self.width + ECG_VISIBLE_MARGIN)
        return np.column_stack((xs[mask], self.points[mask, 1]))

    def pulse(self, loudness):
        """Size and alpha of the breathing circle under the trace."""
        s = math.sin(self.pulse_phase)
        size = (100 + 50 * s) * lerp(1.0, 1.6, loudness)
        alpha = (150 + 105 * s) * lerp(0.9, 1.3, loudness)
        return size, alpha

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.offset = 0.0
        self.points = generate_ecg(0.0, width, height, self.drift, self.rng)
        log.debug("ECG trace resized to %dx%d", width, height)
