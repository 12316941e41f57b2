"""
API module for rpsgame.

This module provides the presentation-facing game store.
"""

from rpsgame.api.store import GameStore

__all__ = ["GameStore"]
