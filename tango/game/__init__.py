"""Player-side state for a generated puzzle."""

from .session import GameSession, Move, next_cycle

__all__ = ["GameSession", "Move", "next_cycle"]
