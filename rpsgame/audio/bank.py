"""
Named sound clips, loaded concurrently and played fire-and-forget.

Every clip the game uses is named by ClipName and gets one ClipSlot when the
bank is built. Loading fills each slot exactly once, either with a decoded
buffer or with the error that stopped it; after that the slot is only read.
All of this assumes a single event loop thread: slots are written by load
tasks and read by play() on the same loop, so no locking is needed. A host
that loads and plays from different threads would have to add it.
"""

from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional, Union
import asyncio
import logging
import os
import time

import aiofiles

from rpsgame.audio.backend import AudioBackend, AudioError
from rpsgame.events import EventBus, EventEmitter, EngineEventType

logger = logging.getLogger("rpsgame.audio")

ClipSource = Union[str, "os.PathLike[str]", bytes]


class ClipName(Enum):
    """Every clip the game can play."""

    WIN = "win"
    LOSE = "lose"
    TIE = "tie"
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class ClipStatus(Enum):
    PENDING = auto()
    READY = auto()
    FAILED = auto()


class ClipSlot:
    """
    Write-once holder for one clip.

    Attributes:
        name: Clip this slot belongs to
        source: Path or raw bytes the clip is loaded from
        status: PENDING until the load finishes, then READY or FAILED
        buffer: Decoded buffer once READY
        error: Exception that made the load fail
    """

    def __init__(self, name: ClipName, source: ClipSource):
        self.name = name
        self.source = source
        self.status = ClipStatus.PENDING
        self.buffer: Any = None
        self.error: Optional[Exception] = None

    @property
    def ready(self) -> bool:
        return self.status == ClipStatus.READY

    def fill(self, buffer: Any) -> None:
        if self.status != ClipStatus.PENDING:
            raise RuntimeError(f"Clip {self.name.value} was already loaded")
        self.buffer = buffer
        self.status = ClipStatus.READY

    def fail(self, error: Exception) -> None:
        if self.status != ClipStatus.PENDING:
            raise RuntimeError(f"Clip {self.name.value} was already loaded")
        self.error = error
        self.status = ClipStatus.FAILED


class AudioBank:
    """
    Fixed set of named clips with non-blocking playback.

    Example:
        ```python
        bank = AudioBank({ClipName.WIN: "sounds/win.wav"}, PygameAudioBackend())
        await bank.backend.initialize()
        await bank.load()
        bank.play(ClipName.WIN, volume=0.5)
        ```
    """

    def __init__(
        self,
        sources: Mapping[Union[ClipName, str], ClipSource],
        backend: AudioBackend,
        event_bus: Optional[EventEmitter] = None,
    ):
        """
        Initialize the bank. Nothing is loaded until load() runs.

        Args:
            sources: Path or bytes for every clip the game will need
            backend: Audio facility used to decode and play clips
            event_bus: Emitter for load and play events

        Raises:
            ValueError: If a key is not a known clip name
        """
        self.backend = backend
        self.event_bus = event_bus or EventBus.get_instance()
        self._slots: Dict[ClipName, ClipSlot] = {}
        for name, source in sources.items():
            clip = ClipName(name)
            self._slots[clip] = ClipSlot(clip, source)
        self._load_task: Optional[asyncio.Task] = None

    @property
    def names(self) -> List[ClipName]:
        return list(self._slots)

    def is_ready(self, name: Union[ClipName, str]) -> bool:
        slot = self._get_slot(name)
        return slot is not None and slot.ready

    def ready_clips(self) -> List[ClipName]:
        return [name for name, slot in self._slots.items() if slot.ready]

    def status(self, name: Union[ClipName, str]) -> Optional[ClipStatus]:
        slot = self._get_slot(name)
        return slot.status if slot else None

    async def load(self) -> None:
        """
        Load every clip concurrently and wait until all have finished.

        Clips finish in whatever order their reads and decodes complete. A
        failing clip is logged and left FAILED; it never stops the others.
        A load already running in the background is joined, not repeated.
        """
        await asyncio.shield(self.start_loading())

    def start_loading(self) -> asyncio.Task:
        """
        Start loading in the background on the running loop.

        Returns:
            The load task; repeated calls return the same task
        """
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(
                self._load_pending()
            )
        return self._load_task

    async def _load_pending(self) -> None:
        pending = [
            slot for slot in self._slots.values() if slot.status == ClipStatus.PENDING
        ]
        await asyncio.gather(*(self._load_slot(slot) for slot in pending))

    async def _load_slot(self, slot: ClipSlot) -> None:
        try:
            data = await self._read_source(slot.source)
            buffer = self.backend.decode(data)
        except (OSError, AudioError) as e:
            logger.warning(f"Failed to load clip {slot.name.value}: {e}")
            self._fail_slot(slot, e)
            return
        except Exception as e:
            logger.error(f"Error loading clip {slot.name.value}: {e}", exc_info=True)
            self._fail_slot(slot, e)
            return

        slot.fill(buffer)
        logger.debug(f"Clip {slot.name.value} ready")
        self.event_bus.emit(
            EngineEventType.CLIP_LOADED,
            {"clip": slot.name.value, "timestamp": time.time()},
        )

    def _fail_slot(self, slot: ClipSlot, error: Exception) -> None:
        slot.fail(error)
        self.event_bus.emit(
            EngineEventType.CLIP_LOAD_FAILED,
            {"clip": slot.name.value, "error": str(error), "timestamp": time.time()},
        )

    @staticmethod
    async def _read_source(source: ClipSource) -> bytes:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        async with aiofiles.open(source, mode="rb") as clip_file:
            return await clip_file.read()

    def play(self, name: Union[ClipName, str], volume: float = 1.0) -> bool:
        """
        Play a clip if it is loaded.

        Unknown names and clips that are still loading or failed to load are
        ignored. This never blocks and never raises.

        Args:
            name: Clip to play
            volume: Gain for this playback, clamped to 0.0 - 1.0

        Returns:
            True if playback was started
        """
        slot = self._get_slot(name)
        if slot is None or not slot.ready:
            return False

        volume = max(0.0, min(1.0, volume))
        try:
            self.backend.play(slot.buffer, volume)
        except Exception as e:
            logger.error(f"Error playing clip {slot.name.value}: {e}", exc_info=True)
            return False

        self.event_bus.emit(
            EngineEventType.CLIP_PLAYED,
            {"clip": slot.name.value, "volume": volume, "timestamp": time.time()},
        )
        return True

    def _get_slot(self, name: Union[ClipName, str]) -> Optional[ClipSlot]:
        try:
            clip = ClipName(name)
        except ValueError:
            logger.debug(f"Unknown clip name: {name!r}")
            return None
        return self._slots.get(clip)
