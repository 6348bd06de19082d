"""
Spawner
=======

Creates falling items with a seeded RNG: uniform horizontal position just
above the visible area, and a weighted fruit/bomb coin flip.
"""

from __future__ import annotations

import random
from typing import Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.items import (
    FallingItem,
    GlyphCatalog,
    ItemIdSource,
    ItemKind,
)


class SpawnScheduler:
    """
    Spawns one item per call to ``spawn()``.

    The period (``spawn.interval_ms``) is enforced by whoever drives the
    scheduler; the session registers ``spawn`` on its own timer so spawning
    runs independently of the game tick.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        id_source: Optional[ItemIdSource] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            id_source: Shared ID source. A private one is created if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._glyphs = GlyphCatalog(config)
        self._ids = id_source if id_source is not None else ItemIdSource()

        self._spawn_span = float(config.board.width - config.items.width)
        self._spawn_y = -float(config.items.height)
        self._bomb_probability = config.spawn.bomb_probability
        self._spawned: int = 0

    @property
    def interval_ms(self) -> float:
        """Spawn period in milliseconds."""
        return self._config.spawn.interval_ms

    @property
    def spawned(self) -> int:
        """Number of items spawned since the last reset."""
        return self._spawned

    @property
    def id_source(self) -> ItemIdSource:
        return self._ids

    def spawn(self) -> FallingItem:
        """
        Create one new item.

        Returns:
            FallingItem with x in [0, width - item_width) and y just above
            the top edge.
        """
        x = self._rng.random() * self._spawn_span

        if self._rng.random() < self._bomb_probability:
            kind = ItemKind.BOMB
            glyph = self._glyphs.bomb_glyph
        else:
            kind = ItemKind.FRUIT
            glyph = self._glyphs[self._rng.randrange(len(self._glyphs))]

        self._spawned += 1
        return FallingItem(
            id=self._ids.next_id(),
            x=x,
            y=self._spawn_y,
            kind=kind,
            glyph=glyph
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawner with optional new seed.

        Args:
            seed: New random seed. Keeps current RNG state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._spawned = 0
