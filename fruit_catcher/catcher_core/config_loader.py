"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Screen geometry, fixed for the lifetime of one game."""
    width: int                   # Screen width in pixels
    height: int                  # Screen height in pixels


@dataclass(frozen=True)
class BasketConfig:
    """Basket hitbox size."""
    width: int
    height: int


@dataclass(frozen=True)
class ItemConfig:
    """Falling item hitbox, fall speed and display glyphs."""
    width: int
    height: int
    fall_step: float             # Pixels advanced per tick
    fruit_glyphs: Tuple[str, ...]
    bomb_glyph: str


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn timing and item mix."""
    interval_ms: float
    bomb_probability: float


@dataclass(frozen=True)
class TimingConfig:
    """Game loop timing."""
    tick_ms: float


@dataclass(frozen=True)
class RulesConfig:
    """Life and score rules."""
    initial_lives: int


@dataclass(frozen=True)
class InputConfig:
    """Basket input tuning."""
    tilt_sensitivity: float      # Pixels moved per unit of tilt reading
    tilt_interval_ms: float      # Accelerometer sampling period


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for headless play."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_items: int
    image_width: int
    image_height: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    basket: BasketConfig
    items: ItemConfig
    spawn: SpawnConfig
    timing: TimingConfig
    rules: RulesConfig
    input: InputConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def max_basket_x(self) -> float:
        """Rightmost allowed basket position."""
        return float(self.board.width - self.basket.width)

    @property
    def center_basket_x(self) -> float:
        """Basket position that centres it on screen."""
        return (self.board.width - self.basket.width) / 2

    @property
    def catch_line_y(self) -> float:
        """Y coordinate of the top of the basket band."""
        return float(self.board.height - self.basket.height)

    def with_board_size(self, width: int, height: int) -> "GameConfig":
        """
        Derive a config for a different screen size.

        Args:
            width: Screen width in pixels.
            height: Screen height in pixels.

        Returns:
            Validated GameConfig with the new board geometry.
        """
        config = replace(self, board=BoardConfig(width=int(width), height=int(height)))
        _validate_config(config)
        return config


def _parse_glyphs(glyph_data: List) -> Tuple[str, ...]:
    """Parse the fruit glyph list from YAML."""
    if not isinstance(glyph_data, (list, tuple)):
        raise ValueError(f"fruit_glyphs must be a list, got {glyph_data!r}")
    return tuple(str(g) for g in glyph_data)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board

    if board.width <= 0 or board.height <= 0:
        raise ValueError(f"Board size must be positive, got {board.width}x{board.height}")

    if config.basket.width <= 0 or config.basket.height <= 0:
        raise ValueError(
            f"Basket size must be positive, got {config.basket.width}x{config.basket.height}"
        )

    if config.basket.width > board.width:
        raise ValueError(
            f"basket.width ({config.basket.width}) exceeds board.width ({board.width})"
        )

    if config.items.width <= 0 or config.items.height <= 0:
        raise ValueError(
            f"Item size must be positive, got {config.items.width}x{config.items.height}"
        )

    if config.items.width >= board.width:
        raise ValueError(
            f"items.width ({config.items.width}) must be smaller than board.width ({board.width})"
        )

    if config.items.fall_step <= 0:
        raise ValueError(f"items.fall_step must be positive, got {config.items.fall_step}")

    if not config.items.fruit_glyphs:
        raise ValueError("items.fruit_glyphs must not be empty")

    if not 0.0 <= config.spawn.bomb_probability <= 1.0:
        raise ValueError(
            f"spawn.bomb_probability must be in [0, 1], got {config.spawn.bomb_probability}"
        )

    # Validate all periods
    for name, value in (
        ("spawn.interval_ms", config.spawn.interval_ms),
        ("timing.tick_ms", config.timing.tick_ms),
        ("input.tilt_interval_ms", config.input.tilt_interval_ms),
    ):
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if config.rules.initial_lives < 1:
        raise ValueError(f"rules.initial_lives must be at least 1, got {config.rules.initial_lives}")

    if config.caps.max_ticks < 1:
        raise ValueError(f"caps.max_ticks must be at least 1, got {config.caps.max_ticks}")

    if config.observation.max_items < 1:
        raise ValueError(
            f"observation.max_items must be at least 1, got {config.observation.max_items}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    basket_data = raw["basket"]
    basket = BasketConfig(
        width=int(basket_data["width"]),
        height=int(basket_data["height"])
    )

    items_data = raw["items"]
    items = ItemConfig(
        width=int(items_data["width"]),
        height=int(items_data["height"]),
        fall_step=float(items_data.get("fall_step", 5)),
        fruit_glyphs=_parse_glyphs(items_data["fruit_glyphs"]),
        bomb_glyph=str(items_data.get("bomb_glyph", "💣"))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        interval_ms=float(spawn_data.get("interval_ms", 1500)),
        bomb_probability=float(spawn_data.get("bomb_probability", 0.2))
    )

    timing_data = raw.get("timing", {})
    timing = TimingConfig(
        tick_ms=float(timing_data.get("tick_ms", 40))
    )

    rules_data = raw.get("rules", {})
    rules = RulesConfig(
        initial_lives=int(rules_data.get("initial_lives", 3))
    )

    input_data = raw.get("input", {})
    input_config = InputConfig(
        tilt_sensitivity=float(input_data.get("tilt_sensitivity", 80)),
        tilt_interval_ms=float(input_data.get("tilt_interval_ms", 100))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 15000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_items=int(obs_data.get("max_items", 32)),
        image_width=int(obs_data.get("image_width", 195)),
        image_height=int(obs_data.get("image_height", 422))
    )

    config = GameConfig(
        board=board,
        basket=basket,
        items=items,
        spawn=spawn,
        timing=timing,
        rules=rules,
        input=input_config,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
