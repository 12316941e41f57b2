"""
Rock-paper-scissors rules and immutable round state.

This package provides the move and outcome enumerations, the rule table,
immutable state classes and pure transition functions for a round.
"""

from rpsgame.rps.constants import Move, Outcome, BEATS, RULES, get_outcome
from rpsgame.rps.state import (
    RoundStage,
    RoundState,
    Chant,
    Suspense,
    Revealed,
    Evaluated,
    Score,
    GameState,
)
from rpsgame.rps.transitions import StateTransitionEngine

__all__ = [
    "Move",
    "Outcome",
    "BEATS",
    "RULES",
    "get_outcome",
    "RoundStage",
    "RoundState",
    "Chant",
    "Suspense",
    "Revealed",
    "Evaluated",
    "Score",
    "GameState",
    "StateTransitionEngine",
]
