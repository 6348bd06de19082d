"""
Catcher Core - The heart of the game.

This module provides the game session, tick engine, spawner and input
sources, plus a Gymnasium wrapper for headless play.

Main exports:
- GameSession: One running game with timers and input (start/restart/dispose)
- GameLoop: Per-tick fall, collision and catch resolution
- SpawnScheduler: Random fruit/bomb spawning
- TiltSource / PointerSource: Basket position sources
- CatcherEnv: Gymnasium environment, one step per tick
- GameConfig: Configuration loaded from game_config.yaml
"""

from fruit_catcher.catcher_core.config_loader import GameConfig, load_config
from fruit_catcher.catcher_core.items import FallingItem, ItemKind
from fruit_catcher.catcher_core.game_state import GameState, Phase
from fruit_catcher.catcher_core.game_loop import GameLoop, TickResult, collides
from fruit_catcher.catcher_core.spawner import SpawnScheduler
from fruit_catcher.catcher_core.input_source import (
    PositionSource,
    TiltSource,
    PointerSource,
    make_source,
)
from fruit_catcher.catcher_core.session import GameSession
from fruit_catcher.catcher_core.env_gym import CatcherEnv

__all__ = [
    "GameConfig",
    "load_config",
    "FallingItem",
    "ItemKind",
    "GameState",
    "Phase",
    "GameLoop",
    "TickResult",
    "collides",
    "SpawnScheduler",
    "PositionSource",
    "TiltSource",
    "PointerSource",
    "make_source",
    "GameSession",
    "CatcherEnv",
]
