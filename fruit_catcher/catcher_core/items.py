"""
Falling Items
=============

Runtime representation of the fruit and bombs that fall toward the basket.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config


class ItemKind(Enum):
    """What a caught item does. Glyphs carry no gameplay meaning."""
    FRUIT = 0
    BOMB = 1


@dataclass
class FallingItem:
    """
    A single falling item.

    ``x`` is fixed at spawn; ``y`` is advanced by the game loop every tick.
    """
    id: int
    x: float
    y: float
    kind: ItemKind
    glyph: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict for renderers."""
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "kind": self.kind.name.lower(),
            "glyph": self.glyph,
        }

    def __repr__(self) -> str:
        return f"FallingItem({self.id}: {self.kind.name} @ {self.x:.1f},{self.y:.1f})"


class ItemIdSource:
    """
    Hands out unique, strictly increasing item IDs.

    One source is shared by everything that creates items for a session so
    that IDs never repeat, even across restarts.
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)
        self._last: Optional[int] = None

    def next_id(self) -> int:
        self._last = next(self._counter)
        return self._last

    def reserve(self, item_id: int) -> None:
        """Make sure future IDs are greater than an externally chosen one."""
        if self._last is None or item_id > self._last:
            self._counter = itertools.count(item_id + 1)
            self._last = item_id

    @property
    def last_id(self) -> Optional[int]:
        return self._last


class GlyphCatalog:
    """Display glyphs for each item kind, loaded from config."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._fruit_glyphs: Tuple[str, ...] = config.items.fruit_glyphs
        self._bomb_glyph = config.items.bomb_glyph

    @property
    def fruit_glyphs(self) -> Tuple[str, ...]:
        return self._fruit_glyphs

    @property
    def bomb_glyph(self) -> str:
        return self._bomb_glyph

    def __len__(self) -> int:
        return len(self._fruit_glyphs)

    def __getitem__(self, index: int) -> str:
        if 0 <= index < len(self._fruit_glyphs):
            return self._fruit_glyphs[index]
        raise IndexError(f"Glyph index {index} out of range [0, {len(self._fruit_glyphs)})")
