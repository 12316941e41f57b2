"""
rpsgame: a rock-paper-scissors round engine with timed reveals and audio cues.

The package is split the same way as a card engine: the game rules and
immutable state live in ``rpsgame.rps``, the timed round engine in
``rpsgame.engine``, sound loading and playback in ``rpsgame.audio`` and the
presentation-facing facade in ``rpsgame.api``.
"""

from rpsgame.rps import Move, Outcome, RoundStage, Score, get_outcome
from rpsgame.api import GameStore

__all__ = ["Move", "Outcome", "RoundStage", "Score", "get_outcome", "GameStore"]
