#!/usr/bin/env python3
"""
Example demonstrating the GameStore driving a few rounds on an asyncio loop.

The store is used the way a presentation layer would use it: it subscribes to
UI_UPDATE_NEEDED to redraw, picks a move while the round is in CHANT and
resets once the round is evaluated.
"""

import asyncio
import argparse
import random

from rpsgame.api import GameStore
from rpsgame.audio import DummyAudioBackend
from rpsgame.events import EngineEventType
from rpsgame.rps import Move


def render(data):
    state = data["state"]
    stage = state["stage"]
    if stage == "chant":
        line = "Rock! Paper! Scissors!"
    elif stage == "suspense":
        line = f"{state['player_hand'].upper()}  vs  ..."
    else:
        line = f"{state['player_hand'].upper()}  vs  {state['opponent_hand'].upper()}"
        if stage == "evaluated":
            line += f"  ({state['outcome']})"
    print(f"[{stage:>9}] {line:<40} Player {state['score_player']} - Opponent {state['score_opponent']}")


async def main():
    parser = argparse.ArgumentParser(description="Play rock-paper-scissors rounds.")
    parser.add_argument(
        "-r",
        "--rounds",
        type=int,
        default=5,
        help="number of rounds to play (default: 5)",
    )
    parser.add_argument(
        "-s", "--silent", action="store_true", help="do not open the audio device"
    )
    parser.add_argument(
        "--sounds-dir",
        default="assets/sounds",
        help="directory with win/lose/tie/rock/paper/scissors .wav files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="print every engine event"
    )
    args = parser.parse_args()

    backend = DummyAudioBackend(verbose=args.verbose) if args.silent else None
    store = GameStore({"sounds_dir": args.sounds_dir}, backend=backend)
    store.on(EngineEventType.UI_UPDATE_NEEDED, render)
    if args.verbose:
        store.on_any(lambda event: print(f"  event: {event[0]}"))

    evaluated = asyncio.Event()
    store.on(EngineEventType.ROUND_ENDED, lambda data: evaluated.set())

    await store.initialize()

    for _ in range(args.rounds):
        evaluated.clear()
        store.play_move(random.choice(list(Move)))
        await evaluated.wait()
        await asyncio.sleep(0.5)
        store.reset()

    score = store.score
    print(f"\nFinal score: Player {score.player} - Opponent {score.opponent}")
    await store.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
