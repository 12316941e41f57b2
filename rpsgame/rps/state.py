"""
Immutable state models for a rock-paper-scissors round.

This module provides dataclasses for representing the state of the game in an
immutable manner. The round itself is a tagged union of four variants, one per
stage; transition functions build new instances instead of modifying existing
ones.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Union
from enum import Enum, auto
import uuid
import time

from rpsgame.rps.constants import Move, Outcome


class RoundStage(Enum):
    """Possible stages of a round."""

    CHANT = auto()
    SUSPENSE = auto()
    REVEALED = auto()
    EVALUATED = auto()


@dataclass(frozen=True)
class Chant:
    """Idle stage: waiting for the player to commit a move."""

    stage: ClassVar[RoundStage] = RoundStage.CHANT


@dataclass(frozen=True)
class Suspense:
    """The player has committed a move; the opponent has not been drawn yet."""

    player_move: Move
    stage: ClassVar[RoundStage] = RoundStage.SUSPENSE


@dataclass(frozen=True)
class Revealed:
    """
    Both moves are known and the score already counts this round.

    Attributes:
        player_move: Move committed by the player
        opponent_move: Move drawn for the opponent
        outcome: Result for the player
    """

    player_move: Move
    opponent_move: Move
    outcome: Outcome
    stage: ClassVar[RoundStage] = RoundStage.REVEALED


@dataclass(frozen=True)
class Evaluated:
    """Final display stage of a round; the outcome sound has been triggered."""

    player_move: Move
    opponent_move: Move
    outcome: Outcome
    stage: ClassVar[RoundStage] = RoundStage.EVALUATED


RoundState = Union[Chant, Suspense, Revealed, Evaluated]


@dataclass(frozen=True)
class Score:
    """Cumulative score as a (player, opponent) pair."""

    player: int = 0
    opponent: int = 0

    def apply(self, outcome: Outcome) -> "Score":
        """
        Return the score after a round with the given outcome.

        A win counts for the player, a loss for the opponent, a tie for nobody.
        """
        if outcome == Outcome.WIN:
            return Score(self.player + 1, self.opponent)
        if outcome == Outcome.LOSE:
            return Score(self.player, self.opponent + 1)
        return self

    def as_tuple(self):
        return (self.player, self.opponent)


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of the whole game.

    Attributes:
        id: Unique identifier for this game
        round_state: Current round variant
        score: Cumulative score
        rounds_played: Number of rounds that reached the reveal
        generation: Counter bumped on every new round and every reset; delayed
            callbacks compare against it to detect that they are stale
        timestamp: Time when this state was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    round_state: RoundState = field(default_factory=Chant)
    score: Score = field(default_factory=Score)
    rounds_played: int = 0
    generation: int = 0
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def stage(self) -> RoundStage:
        return self.round_state.stage

    @property
    def player_move(self) -> Optional[Move]:
        return getattr(self.round_state, "player_move", None)

    @property
    def opponent_move(self) -> Optional[Move]:
        return getattr(self.round_state, "opponent_move", None)

    @property
    def outcome(self) -> Optional[Outcome]:
        return getattr(self.round_state, "outcome", None)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "stage": self.stage.name,
            "player_move": self.player_move.value if self.player_move else None,
            "opponent_move": (
                self.opponent_move.value if self.opponent_move else None
            ),
            "outcome": self.outcome.value if self.outcome else None,
            "score": {"player": self.score.player, "opponent": self.score.opponent},
            "rounds_played": self.rounds_played,
            "generation": self.generation,
            "timestamp": self.timestamp,
        }

    def to_adapter_format(self) -> Dict[str, Any]:
        """
        Convert the game state to a format suitable for presentation code.

        Returns:
            Dictionary in adapter-friendly format
        """
        return {
            "stage": self.stage.name.lower(),
            "player_hand": self.player_move.value if self.player_move else None,
            "opponent_hand": (
                self.opponent_move.value if self.opponent_move else None
            ),
            "outcome": self.outcome.value if self.outcome else None,
            "score_player": self.score.player,
            "score_opponent": self.score.opponent,
            "can_play": self.stage == RoundStage.CHANT,
            "can_reset": self.stage == RoundStage.EVALUATED,
        }
