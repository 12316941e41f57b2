"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the rules, engine, audio and
store tests.
"""

import asyncio
import io
import wave

import pytest

from rpsgame.audio import AudioBank, ClipName, DummyAudioBackend
from rpsgame.engine import ManualScheduler
from rpsgame.events import EventBus, EventEmitter


def build_wav(frame_count: int = 100) -> bytes:
    """Build a short silent mono WAV file in memory."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(8000)
        wav_file.writeframes(b"\x00\x00" * frame_count)
    return buffer.getvalue()


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


@pytest.fixture
def event_bus():
    """A private emitter so tests never share listeners."""
    return EventEmitter()


@pytest.fixture
def clip_sources():
    """In-memory WAV data for every clip."""
    return {clip: build_wav(100 + i) for i, clip in enumerate(ClipName)}


@pytest.fixture
def backend():
    return DummyAudioBackend()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def loaded_bank(clip_sources, backend, event_bus):
    """An AudioBank with every clip already loaded."""
    bank = AudioBank(clip_sources, backend, event_bus)
    asyncio.run(bank.load())
    return bank


@pytest.fixture
def make_wav():
    """Factory for in-memory WAV files."""
    return build_wav
