"""
Sound clip loading and playback for the rpsgame engine.

This package provides the audio bank holding the game's named clips and the
backends that decode and play them.
"""

from rpsgame.audio.backend import (
    AudioBackend,
    PygameAudioBackend,
    DummyAudioBackend,
    AudioError,
    AudioBackendError,
    AudioDecodeError,
)
from rpsgame.audio.bank import AudioBank, ClipName, ClipSlot, ClipStatus

__all__ = [
    "AudioBackend",
    "PygameAudioBackend",
    "DummyAudioBackend",
    "AudioError",
    "AudioBackendError",
    "AudioDecodeError",
    "AudioBank",
    "ClipName",
    "ClipSlot",
    "ClipStatus",
]
