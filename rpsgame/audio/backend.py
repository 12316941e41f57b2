"""
Audio backends for the rpsgame engine.

A backend is the host audio facility: it turns raw clip bytes into a playable
buffer and starts independent playback instances of such buffers. The audio
bank only ever talks to this interface, so the real mixer can be swapped for a
recording dummy in tests and simulations.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Tuple
import io
import logging

import pygame

logger = logging.getLogger("rpsgame.audio")


class AudioError(Exception):
    """Base class for audio backend failures."""

    pass


class AudioBackendError(AudioError):
    """Raised when the audio device is not available."""

    pass


class AudioDecodeError(AudioError):
    """Raised when clip bytes cannot be decoded into a playable buffer."""

    pass


class AudioBackend(ABC):
    """
    Base interface for audio backends.

    decode() is called once per clip while the bank loads; play() is called
    for every playback and must return without waiting for the sound to end.
    """

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """
        Decode clip bytes into a buffer that play() accepts.

        Args:
            data: Contents of a WAV file

        Returns:
            Backend-specific playable buffer

        Raises:
            AudioDecodeError: If the data is not a decodable clip
            AudioBackendError: If the backend is not available
        """
        pass

    @abstractmethod
    def play(self, buffer: Any, volume: float = 1.0) -> None:
        """
        Start an independent playback of a decoded buffer.

        Args:
            buffer: A value previously returned by decode()
            volume: Gain for this playback instance, between 0.0 and 1.0
        """
        pass

    async def initialize(self) -> None:
        """Acquire the audio device."""
        pass

    async def shutdown(self) -> None:
        """Release the audio device."""
        pass


class PygameAudioBackend(AudioBackend):
    """
    Backend playing clips through pygame's mixer.

    Each play() gets its own mixer channel, so overlapping plays of the same
    clip neither queue nor cut each other off and each keeps its own volume.
    If the mixer cannot be opened the backend stays disabled and every decode
    fails, which leaves all clips silent.
    """

    def __init__(self, frequency: int = 44100, channels: int = 16):
        self.frequency = frequency
        self.channels = channels
        self.enabled = False

    async def initialize(self) -> None:
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=self.frequency)
            pygame.mixer.set_num_channels(self.channels)
            self.enabled = True
        except pygame.error as e:
            logger.warning(f"Audio mixer unavailable, sounds disabled: {e}")
            self.enabled = False

    async def shutdown(self) -> None:
        if self.enabled:
            pygame.mixer.quit()
            self.enabled = False

    def decode(self, data: bytes) -> "pygame.mixer.Sound":
        if not self.enabled:
            raise AudioBackendError("Audio mixer is not initialized")
        try:
            return pygame.mixer.Sound(file=io.BytesIO(data))
        except pygame.error as e:
            raise AudioDecodeError(str(e)) from e

    def play(self, buffer: "pygame.mixer.Sound", volume: float = 1.0) -> None:
        channel = buffer.play()
        if channel is None:
            # All channels busy
            logger.debug("No free mixer channel, dropping playback")
            return
        channel.set_volume(volume)


class DummyAudioBackend(AudioBackend):
    """
    Non-audible backend for testing and simulation.

    Decoding only checks the RIFF/WAVE header; every play() call is recorded
    in ``plays`` as a (buffer, volume) pair for later inspection.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.plays: List[Tuple[Any, float]] = []
        self.initialized = False

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.initialized = False

    def decode(self, data: bytes) -> bytes:
        if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
            raise AudioDecodeError("Not a RIFF/WAVE file")
        return bytes(data)

    def play(self, buffer: Any, volume: float = 1.0) -> None:
        self.plays.append((buffer, volume))
        if self.verbose:
            print(f"Playing {len(buffer)} byte clip at volume {volume:.2f}")
