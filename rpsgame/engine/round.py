"""
Round engine for rock-paper-scissors.

This module provides the RoundStateMachine, which owns the game state, drives
a round through its timed stages and triggers sounds as stages are entered:

    CHANT --play_move--> SUSPENSE --800ms--> REVEALED --500ms--> EVALUATED

reset() returns to CHANT from any stage. Delayed steps are never cancelled;
each carries the generation it was scheduled for and does nothing if the
state has moved on to another generation or stage by the time it fires.
"""

from functools import partial
from typing import Optional
import logging
import random
import time

from rpsgame.audio.bank import AudioBank, ClipName
from rpsgame.engine.scheduler import Scheduler
from rpsgame.events import EventBus, EventEmitter, EngineEventType
from rpsgame.rps.constants import Move, Outcome
from rpsgame.rps.state import GameState, RoundStage, RoundState, Score
from rpsgame.rps.transitions import StateTransitionEngine

logger = logging.getLogger("rpsgame.engine")

SUSPENSE_DELAY_MS = 800
REVEAL_DELAY_MS = 500

MOVES = tuple(Move)

MOVE_CLIPS = {
    Move.ROCK: ClipName.ROCK,
    Move.PAPER: ClipName.PAPER,
    Move.SCISSORS: ClipName.SCISSORS,
}

OUTCOME_CLIPS = {
    Outcome.WIN: ClipName.WIN,
    Outcome.LOSE: ClipName.LOSE,
    Outcome.TIE: ClipName.TIE,
}


class RoundStateMachine:
    """
    Owner of the round state and the score.

    Nothing else replaces self.state; presentation code reads it after each
    change, or listens for UI_UPDATE_NEEDED.

    Attributes:
        scheduler: Runs the delayed reveal and evaluation steps
        audio: Bank the stage sounds are played from, or None for silence
        rng: Random source for the opponent's move
        event_bus: Emitter for round events
        state: Current immutable GameState
    """

    def __init__(
        self,
        scheduler: Scheduler,
        audio: Optional[AudioBank] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventEmitter] = None,
        move_volume: float = 1.0,
        outcome_volume: float = 1.0,
    ):
        self.scheduler = scheduler
        self.audio = audio
        self.rng = rng or random.Random()
        self.event_bus = event_bus or EventBus.get_instance()
        self.move_volume = move_volume
        self.outcome_volume = outcome_volume
        self.state = GameState()

    @property
    def round_state(self) -> RoundState:
        return self.state.round_state

    @property
    def stage(self) -> RoundStage:
        return self.state.stage

    @property
    def score(self) -> Score:
        return self.state.score

    def play_move(self, move: Move) -> bool:
        """
        Commit the player's move and start the reveal sequence.

        Only accepted in CHANT; anywhere else the call is ignored and the
        state is left exactly as it was.

        Args:
            move: Move chosen by the player

        Returns:
            True if the move started a round
        """
        new_state = StateTransitionEngine.commit_move(self.state, move, self.event_bus)
        if new_state is self.state:
            logger.debug(f"Ignoring move {move.value} during {self.stage.name}")
            self.event_bus.emit(
                EngineEventType.MOVE_IGNORED,
                {
                    "game_id": self.state.id,
                    "player_move": move.value,
                    "stage": self.stage.name,
                    "timestamp": time.time(),
                },
            )
            return False

        self._set_state(new_state)
        self._play(MOVE_CLIPS[move], self.move_volume)
        self.scheduler.call_later(
            SUSPENSE_DELAY_MS, partial(self._reveal, new_state.generation)
        )
        return True

    def reset(self) -> None:
        """Go back to CHANT from any stage. The score is kept."""
        self._set_state(StateTransitionEngine.reset_round(self.state, self.event_bus))

    def new_game(self) -> None:
        """Go back to CHANT with the score set to zero."""
        self._set_state(StateTransitionEngine.new_game(self.state, self.event_bus))

    def _reveal(self, generation: int) -> None:
        if not self._is_current(generation, RoundStage.SUSPENSE):
            return

        opponent_move = self.rng.choice(MOVES)
        new_state = StateTransitionEngine.reveal(
            self.state, opponent_move, self.event_bus
        )
        self._set_state(new_state)
        logger.debug(
            f"Round {new_state.rounds_played}: {new_state.player_move.value} vs "
            f"{opponent_move.value} -> {new_state.outcome.value}"
        )
        self.scheduler.call_later(
            REVEAL_DELAY_MS, partial(self._evaluate, generation)
        )

    def _evaluate(self, generation: int) -> None:
        if not self._is_current(generation, RoundStage.REVEALED):
            return

        self._play(OUTCOME_CLIPS[self.state.outcome], self.outcome_volume)
        self._set_state(StateTransitionEngine.evaluate(self.state, self.event_bus))

    def _is_current(self, generation: int, expected: RoundStage) -> bool:
        """Staleness guard for delayed steps."""
        if self.state.generation == generation and self.stage == expected:
            return True

        logger.debug(
            f"Skipping stale {expected.name} step from generation {generation}, "
            f"now {self.stage.name} at generation {self.state.generation}"
        )
        self.event_bus.emit(
            EngineEventType.STALE_TIMER_SKIPPED,
            {
                "game_id": self.state.id,
                "expected_stage": expected.name,
                "stage": self.stage.name,
                "scheduled_generation": generation,
                "generation": self.state.generation,
                "timestamp": time.time(),
            },
        )
        return False

    def _play(self, clip: ClipName, volume: float) -> None:
        if self.audio is not None:
            self.audio.play(clip, volume)

    def _set_state(self, new_state: GameState) -> None:
        self.state = new_state
        self.event_bus.emit(
            EngineEventType.UI_UPDATE_NEEDED,
            {"game_id": new_state.id, "state": new_state.to_adapter_format()},
        )
