"""
Game Loop
=========

One tick of the game: every item falls a fixed step, is tested against the
basket, and is either caught, kept, or dropped off the bottom edge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.game_state import GameState, Phase
from fruit_catcher.catcher_core.items import FallingItem, ItemKind
from fruit_catcher.catcher_core.scoring import CatchEvent, ScoreTracker


@dataclass
class TickResult:
    """Result of a single game tick."""
    tick: int
    caught: List[CatchEvent] = field(default_factory=list)
    missed: List[int] = field(default_factory=list)
    game_over: bool = False
    final_score: Optional[int] = None

    @property
    def fruits_caught(self) -> int:
        return sum(1 for e in self.caught if e.kind is ItemKind.FRUIT)

    @property
    def bombs_caught(self) -> int:
        return sum(1 for e in self.caught if e.kind is ItemKind.BOMB)


def collides(item: FallingItem, basket_x: float, config: GameConfig) -> bool:
    """
    Axis-aligned overlap between an item and the basket.

    The item must overlap the basket horizontally and its bottom edge must
    have reached the basket band at the bottom of the screen.
    """
    item_w = config.items.width
    item_h = config.items.height
    return (
        item.x < basket_x + config.basket.width
        and item.x + item_w > basket_x
        and item.y + item_h > config.catch_line_y
    )


class GameLoop:
    """
    Tick engine.

    Each tick is a single pass over the items in spawn order. Items never
    affect one another, so the order only determines the order of events.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scorer: Optional[ScoreTracker] = None
    ):
        """
        Initialize game loop.

        Args:
            config: Game configuration. Uses default if None.
            scorer: Score tracker. A new one is created if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scorer = scorer if scorer is not None else ScoreTracker(config)
        self._fall_step = config.items.fall_step
        self._bottom = float(config.board.height)
        self._ticks: int = 0

    @property
    def ticks(self) -> int:
        """Ticks processed since the last reset."""
        return self._ticks

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    def tick(self, state: GameState, basket_x: float) -> TickResult:
        """
        Advance the game by one tick.

        Args:
            state: Game state, updated in place.
            basket_x: Basket position, read once for the whole tick.

        Returns:
            TickResult listing catches, misses and any game-over transition.
        """
        if state.phase is Phase.GAME_OVER:
            return TickResult(tick=self._ticks)

        self._ticks += 1
        result = TickResult(tick=self._ticks)
        kept: List[FallingItem] = []

        for item in state.items:
            item.y += self._fall_step

            if collides(item, basket_x, self._config):
                result.caught.append(self._scorer.apply_catch(state, item))
            elif item.y < self._bottom:
                kept.append(item)
            else:
                self._scorer.record_miss()
                result.missed.append(item.id)

        state.items = kept

        # Final score includes every catch resolved in this tick
        if state.lives <= 0:
            state.lives = 0
            state.phase = Phase.GAME_OVER
            result.game_over = True
            result.final_score = state.score

        return result

    def reset(self) -> None:
        """Reset tick counter and catch statistics."""
        self._ticks = 0
        self._scorer.reset()
