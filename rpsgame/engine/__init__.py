"""
Round engine for rpsgame.

This package provides the timed round state machine and the schedulers that
run its delayed steps.
"""

from rpsgame.engine.round import (
    RoundStateMachine,
    SUSPENSE_DELAY_MS,
    REVEAL_DELAY_MS,
)
from rpsgame.engine.scheduler import Scheduler, LoopScheduler, ManualScheduler

__all__ = [
    "RoundStateMachine",
    "SUSPENSE_DELAY_MS",
    "REVEAL_DELAY_MS",
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
]
