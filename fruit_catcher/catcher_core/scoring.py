"""
Scoring System
==============

Applies the effect of each catch to the game state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.game_state import GameState
from fruit_catcher.catcher_core.items import FallingItem, ItemKind


@dataclass
class CatchEvent:
    """Record of one item caught by the basket."""
    item_id: int
    kind: ItemKind
    score_after: int
    lives_after: int

    def __repr__(self) -> str:
        if self.kind is ItemKind.BOMB:
            return f"CatchEvent(bomb {self.item_id}, lives={self.lives_after})"
        return f"CatchEvent(fruit {self.item_id}, score={self.score_after})"


class ScoreTracker:
    """
    Applies catch effects and keeps per-game catch counts.

    - Fruit catch: +1 score, lives unchanged
    - Bomb catch: -1 life (never below zero), score unchanged
    """

    FRUIT_POINTS = 1
    BOMB_DAMAGE = 1

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._fruits_caught: int = 0
        self._bombs_caught: int = 0
        self._missed: int = 0

    @property
    def fruits_caught(self) -> int:
        return self._fruits_caught

    @property
    def bombs_caught(self) -> int:
        return self._bombs_caught

    @property
    def missed(self) -> int:
        """Items that fell past the bottom edge."""
        return self._missed

    def apply_catch(self, state: GameState, item: FallingItem) -> CatchEvent:
        """
        Apply the effect of a caught item and return the event.

        Args:
            state: State to update.
            item: The item that hit the basket.

        Returns:
            CatchEvent with score and lives after the catch.
        """
        if item.kind is ItemKind.BOMB:
            state.lives = max(0, state.lives - self.BOMB_DAMAGE)
            self._bombs_caught += 1
        else:
            state.score += self.FRUIT_POINTS
            self._fruits_caught += 1

        return CatchEvent(
            item_id=item.id,
            kind=item.kind,
            score_after=state.score,
            lives_after=state.lives
        )

    def record_miss(self) -> None:
        self._missed += 1

    def reset(self) -> None:
        """Reset catch counts."""
        self._fruits_caught = 0
        self._bombs_caught = 0
        self._missed = 0
