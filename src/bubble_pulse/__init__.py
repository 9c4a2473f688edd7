"""Bubble Pulse: a microphone-reactive ECG intro leading into a floating bubble scene."""

__version__ = "0.1.0"
