"""
State transition functions for a rock-paper-scissors round.

This module provides pure functions for moving between round stages, without
modifying the original state objects. A transition that is not valid for the
current stage returns the state it was given, unchanged.
"""

from typing import Optional
from dataclasses import replace
import time

from rpsgame.events import EventBus, EventEmitter, EngineEventType
from rpsgame.rps.constants import Move, get_outcome
from rpsgame.rps.state import (
    GameState,
    RoundStage,
    Score,
    Chant,
    Suspense,
    Revealed,
    Evaluated,
)


class StateTransitionEngine:
    """
    Pure functions for state transitions in rock-paper-scissors.

    This class contains static methods that implement game state transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def commit_move(
        state: GameState, move: Move, event_bus: Optional[EventEmitter] = None
    ) -> GameState:
        """
        Commit the player's move and enter suspense.

        Args:
            state: Current game state
            move: Move chosen by the player
            event_bus: Emitter to announce the transition on

        Returns:
            New game state in SUSPENSE, or the original state if the round is
            not in CHANT
        """
        if state.stage != RoundStage.CHANT:
            return state

        new_state = replace(
            state,
            round_state=Suspense(player_move=move),
            generation=state.generation + 1,
            timestamp=time.time(),
        )

        event_bus = event_bus or EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played + 1,
                "generation": new_state.generation,
                "timestamp": new_state.timestamp,
            },
        )
        event_bus.emit(
            EngineEventType.MOVE_COMMITTED,
            {
                "game_id": state.id,
                "player_move": move.value,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def reveal(
        state: GameState,
        opponent_move: Move,
        event_bus: Optional[EventEmitter] = None,
    ) -> GameState:
        """
        Reveal the opponent's move, decide the outcome and update the score.

        The score change and the stage change land in the same new state, so
        no observer can see one without the other.

        Args:
            state: Current game state
            opponent_move: Move drawn for the opponent

        Returns:
            New game state in REVEALED, or the original state if the round is
            not in SUSPENSE
        """
        if state.stage != RoundStage.SUSPENSE:
            return state

        player_move = state.round_state.player_move
        outcome = get_outcome(player_move, opponent_move)
        new_score = state.score.apply(outcome)

        new_state = replace(
            state,
            round_state=Revealed(
                player_move=player_move,
                opponent_move=opponent_move,
                outcome=outcome,
            ),
            score=new_score,
            rounds_played=state.rounds_played + 1,
            timestamp=time.time(),
        )

        event_bus = event_bus or EventBus.get_instance()
        event_bus.emit(
            EngineEventType.MOVE_REVEALED,
            {
                "game_id": state.id,
                "player_move": player_move.value,
                "opponent_move": opponent_move.value,
                "outcome": outcome.value,
                "timestamp": new_state.timestamp,
            },
        )
        if new_score != state.score:
            event_bus.emit(
                EngineEventType.SCORE_UPDATED,
                {
                    "game_id": state.id,
                    "score_player": new_score.player,
                    "score_opponent": new_score.opponent,
                    "timestamp": new_state.timestamp,
                },
            )

        return new_state

    @staticmethod
    def evaluate(
        state: GameState, event_bus: Optional[EventEmitter] = None
    ) -> GameState:
        """
        Finish the round: move from REVEALED to EVALUATED.

        Returns:
            New game state in EVALUATED, or the original state if the round is
            not in REVEALED
        """
        if state.stage != RoundStage.REVEALED:
            return state

        revealed = state.round_state
        new_state = replace(
            state,
            round_state=Evaluated(
                player_move=revealed.player_move,
                opponent_move=revealed.opponent_move,
                outcome=revealed.outcome,
            ),
            timestamp=time.time(),
        )

        event_bus = event_bus or EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "outcome": revealed.outcome.value,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def reset_round(
        state: GameState, event_bus: Optional[EventEmitter] = None
    ) -> GameState:
        """
        Return to CHANT from any stage, keeping the score.

        The generation is bumped so callbacks scheduled for the abandoned
        round recognise themselves as stale.
        """
        new_state = replace(
            state,
            round_state=Chant(),
            generation=state.generation + 1,
            timestamp=time.time(),
        )

        event_bus = event_bus or EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_RESET,
            {
                "game_id": state.id,
                "previous_stage": state.stage.name,
                "generation": new_state.generation,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def new_game(
        state: GameState, event_bus: Optional[EventEmitter] = None
    ) -> GameState:
        """
        Start over with a zero score.

        Returns:
            New game state in CHANT with a zeroed score and round count
        """
        new_state = replace(
            state,
            round_state=Chant(),
            score=Score(),
            rounds_played=0,
            generation=state.generation + 1,
            timestamp=time.time(),
        )

        event_bus = event_bus or EventBus.get_instance()
        event_bus.emit(
            EngineEventType.GAME_CREATED,
            {
                "game_id": state.id,
                "generation": new_state.generation,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state
