"""
Game store for rpsgame.

This module provides the GameStore, the single object presentation code
talks to. It builds the audio bank and the round engine, forwards player input
to the engine and exposes the state for rendering.
"""

import os
import random
import time
from typing import Any, Callable, Dict, Optional, Union

from rpsgame.audio import AudioBackend, AudioBank, ClipName, PygameAudioBackend
from rpsgame.engine import LoopScheduler, RoundStateMachine, Scheduler
from rpsgame.events import EventBus, EventEmitter, EngineEventType, EventPriority
from rpsgame.rps import GameState, Move, RoundState, Score


class GameStore:
    """
    Composition root for one game session.

    Create one store per session and hand it to the presentation layer; there
    is no global instance.

    Example:
        ```python
        store = GameStore({"sounds_dir": "assets/sounds"})
        await store.initialize()
        store.on(EngineEventType.UI_UPDATE_NEEDED, render)
        store.play_move("paper")
        ...
        store.reset()
        await store.shutdown()
        ```

    Attributes:
        config: Merged configuration
        event_bus: Emitter shared by the bank and the engine
        backend: Audio backend the bank plays through
        audio: AudioBank holding every game clip
        machine: RoundStateMachine owning state and score
        event_handlers: Unsubscribe functions for handlers registered via on(),
            once() and on_any()
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        backend: Optional[AudioBackend] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventEmitter] = None,
    ):
        """
        Initialize a new game store.

        Args:
            config: Configuration options; see below
            backend: Audio backend. If None, pygame's mixer is used.
            scheduler: Scheduler for delayed round steps. If None, the running
                asyncio loop is used.
            rng: Random source for the opponent
            event_bus: Emitter for all game events

        Config options:
            sounds_dir: Directory holding <clip>.wav files
            sounds: Mapping of clip name to path or bytes, overriding sounds_dir
            move_volume: Volume of the move sound played on commit
            outcome_volume: Volume of the win/lose/tie sound
        """
        default_config = {
            "sounds_dir": os.path.join("assets", "sounds"),
            "sounds": {},
            "move_volume": 1.0,
            "outcome_volume": 1.0,
        }

        if config:
            default_config.update(config)

        self.config = default_config
        self.event_bus = event_bus or EventBus.get_instance()
        self.event_handlers = {}

        self.backend = backend or PygameAudioBackend()
        self.audio = AudioBank(self._clip_sources(), self.backend, self.event_bus)
        self.machine = RoundStateMachine(
            scheduler or LoopScheduler(),
            audio=self.audio,
            rng=rng,
            event_bus=self.event_bus,
            move_volume=self.config["move_volume"],
            outcome_volume=self.config["outcome_volume"],
        )

    def _clip_sources(self) -> Dict[ClipName, Any]:
        sources = {
            clip: os.path.join(self.config["sounds_dir"], f"{clip.value}.wav")
            for clip in ClipName
        }
        for name, source in self.config["sounds"].items():
            sources[ClipName(name)] = source
        return sources

    async def initialize(self, wait_for_sounds: bool = True) -> None:
        """
        Open the audio device and load the clips.

        Args:
            wait_for_sounds: If False, clips load in the background and the
                game is playable at once; sounds start working as each clip
                becomes ready
        """
        await self.backend.initialize()

        if wait_for_sounds:
            await self.audio.load()
        else:
            self.audio.start_loading()

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "rps",
                "game_id": self.machine.state.id,
                "clips_ready": [clip.value for clip in self.audio.ready_clips()],
                "timestamp": time.time(),
            },
        )

    async def shutdown(self) -> None:
        """
        Release handlers and the audio device.
        """
        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})

        for event_type, handlers in self.event_handlers.items():
            for handler in handlers:
                # Each handler is an unsubscribe function returned by the event bus
                if callable(handler):
                    handler()
        self.event_handlers.clear()

        await self.backend.shutdown()

    # Player input

    def play_move(self, move: Union[Move, str]) -> bool:
        """
        Commit the player's move.

        Args:
            move: Move or its name ("rock", "paper", "scissors")

        Returns:
            True if a round started, False if the round was not in CHANT

        Raises:
            ValueError: If move is a string that names no move
        """
        return self.machine.play_move(Move(move))

    def reset(self) -> None:
        """Return to CHANT for the next round."""
        self.machine.reset()

    def new_game(self) -> None:
        """Return to CHANT and zero the score."""
        self.machine.new_game()

    # State access

    @property
    def state(self) -> GameState:
        return self.machine.state

    @property
    def round_state(self) -> RoundState:
        return self.machine.round_state

    @property
    def score(self) -> Score:
        return self.machine.score

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current state in presentation format.

        Returns:
            Dictionary with stage, hands, outcome, score and allowed input
        """
        return self.machine.state.to_adapter_format()

    # Events

    def on(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler.

        Args:
            event_type: Type of event to listen for
            handler: Event handler function
            priority: Priority level for the handler

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._resolve_event_type(event_type)
        unsubscribe_func = self.event_bus.on(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def once(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler that will be called only once.

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._resolve_event_type(event_type)
        unsubscribe_func = self.event_bus.once(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def on_any(
        self, handler: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """
        Register a handler for every event, called with (event_type, data).

        Returns:
            Function to call to unsubscribe the handler
        """
        unsubscribe_func = self.event_bus.on_any(handler, priority)
        self.event_handlers.setdefault("*", []).append(unsubscribe_func)
        return unsubscribe_func

    @staticmethod
    def _resolve_event_type(
        event_type: Union[str, EngineEventType]
    ) -> Union[str, EngineEventType]:
        # Convert string event types to enum if possible
        if isinstance(event_type, str):
            try:
                event_type = getattr(EngineEventType, event_type.upper())
            except AttributeError:
                pass
        return event_type
