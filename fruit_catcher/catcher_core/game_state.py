"""
Game State
==========

The mutable record a game session owns: score, lives, live items and phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.items import FallingItem


class Phase(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """
    Score, lives, falling items (spawn order) and phase.

    Only the game loop and the owning session mutate this.
    """
    score: int = 0
    lives: int = 3
    items: List[FallingItem] = field(default_factory=list)
    phase: Phase = Phase.PLAYING

    @classmethod
    def initial(cls, config: Optional[GameConfig] = None) -> "GameState":
        """Fresh state for a new game."""
        if config is None:
            config = get_config()
        return cls(score=0, lives=config.rules.initial_lives, items=[], phase=Phase.PLAYING)

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def reset(self, config: Optional[GameConfig] = None) -> None:
        """Reset in place to the starting state."""
        fresh = GameState.initial(config)
        self.score = fresh.score
        self.lives = fresh.lives
        self.items = fresh.items
        self.phase = fresh.phase
