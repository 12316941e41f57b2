"""
Event system for the rpsgame engine.

This package provides the event emitter used by the round engine, the audio
bank and the game store to notify presentation code of state changes.
"""

from rpsgame.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
