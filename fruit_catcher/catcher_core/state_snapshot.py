"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional
import numpy as np

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.items import FallingItem

# Padding value for unused item slots
EMPTY_KIND = -1


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Item arrays are fixed-size with masking for variable item counts.
    Items beyond capacity are dropped from the arrays (oldest first kept).
    """
    # Core state
    basket_x: float
    score: int
    lives: int
    items_count: int
    game_over: bool

    # Board info (for normalization)
    board_width: float
    board_height: float

    # Derived features
    nearest_item_x: float             # X of the lowest live item, -1 if none
    nearest_item_y: float             # Y of the lowest live item, -1 if none
    nearest_item_kind: int            # Kind of the lowest live item, -1 if none

    # Item arrays (fixed size, padded)
    item_x: np.ndarray                # (MAX_ITEMS,) float32
    item_y: np.ndarray                # (MAX_ITEMS,) float32
    item_kind: np.ndarray             # (MAX_ITEMS,) int8
    item_mask: np.ndarray             # (MAX_ITEMS,) bool

    # Optional image
    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "basket_x": np.array(self.basket_x, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "items_count": np.array(self.items_count, dtype=np.int32),

            "board_width": np.array(self.board_width, dtype=np.float32),
            "board_height": np.array(self.board_height, dtype=np.float32),

            "nearest_item_x": np.array(self.nearest_item_x, dtype=np.float32),
            "nearest_item_y": np.array(self.nearest_item_y, dtype=np.float32),
            "nearest_item_kind": np.array(self.nearest_item_kind, dtype=np.int32),

            "item_x": self.item_x,
            "item_y": self.item_y,
            "item_kind": self.item_kind,
            "item_mask": self.item_mask,
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_items = config.observation.max_items
        self._board_width = float(config.board.width)
        self._board_height = float(config.board.height)

        # Pre-allocate arrays
        self._item_x = np.zeros(self._max_items, dtype=np.float32)
        self._item_y = np.zeros(self._max_items, dtype=np.float32)
        self._item_kind = np.full(self._max_items, EMPTY_KIND, dtype=np.int8)
        self._item_mask = np.zeros(self._max_items, dtype=bool)

    @property
    def max_items(self) -> int:
        return self._max_items

    def build(
        self,
        basket_x: float,
        items: List[FallingItem],
        score: int,
        lives: int,
        game_over: bool,
        board_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """
        Build a snapshot from the current state.

        Args:
            basket_x: Basket position.
            items: Live items in spawn order.
            score: Current score.
            lives: Remaining lives.
            game_over: True once the game has ended.
            board_rgb: Optional rendered image.

        Returns:
            GameSnapshot with copies of the item arrays.
        """
        self._item_x.fill(0.0)
        self._item_y.fill(0.0)
        self._item_kind.fill(EMPTY_KIND)
        self._item_mask.fill(False)

        visible = items[:self._max_items]
        for i, item in enumerate(visible):
            self._item_x[i] = item.x
            self._item_y[i] = item.y
            self._item_kind[i] = item.kind.value
            self._item_mask[i] = True

        nearest_x, nearest_y, nearest_kind = -1.0, -1.0, EMPTY_KIND
        if items:
            nearest = max(items, key=lambda it: it.y)
            nearest_x, nearest_y = nearest.x, nearest.y
            nearest_kind = nearest.kind.value

        return GameSnapshot(
            basket_x=basket_x,
            score=score,
            lives=lives,
            items_count=len(items),
            game_over=game_over,
            board_width=self._board_width,
            board_height=self._board_height,
            nearest_item_x=nearest_x,
            nearest_item_y=nearest_y,
            nearest_item_kind=nearest_kind,
            item_x=self._item_x.copy(),
            item_y=self._item_y.copy(),
            item_kind=self._item_kind.copy(),
            item_mask=self._item_mask.copy(),
            board_rgb=board_rgb
        )

