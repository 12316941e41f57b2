"""Rock-paper-scissors moves, outcomes and the rule table."""

from enum import Enum


class Move(Enum):
    """A hand sign the player or the opponent can show."""

    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    def __str__(self) -> str:
        return self.value


class Outcome(Enum):
    """Result of a round, always from the player's point of view."""

    WIN = "win"
    LOSE = "lose"
    TIE = "tie"

    def __str__(self) -> str:
        return self.value


# Each move defeats exactly one other move
BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}

# RULES[player_move][opponent_move] -> outcome for the player
RULES = {
    Move.ROCK: {
        Move.ROCK: Outcome.TIE,
        Move.PAPER: Outcome.LOSE,
        Move.SCISSORS: Outcome.WIN,
    },
    Move.PAPER: {
        Move.ROCK: Outcome.WIN,
        Move.PAPER: Outcome.TIE,
        Move.SCISSORS: Outcome.LOSE,
    },
    Move.SCISSORS: {
        Move.ROCK: Outcome.LOSE,
        Move.PAPER: Outcome.WIN,
        Move.SCISSORS: Outcome.TIE,
    },
}


def get_outcome(player_move: Move, opponent_move: Move) -> Outcome:
    """Get the outcome of player_move against opponent_move."""
    return RULES[player_move][opponent_move]
