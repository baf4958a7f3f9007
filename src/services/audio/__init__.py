"""
Audio module - Capture device handling and clip accumulation.
"""

from .capture import AudioCaptureSession
from .device import AudioDevice, BrowserAudioDevice
from .recorder import ClipAccumulator

__all__ = ["AudioCaptureSession", "AudioDevice", "BrowserAudioDevice", "ClipAccumulator"]
