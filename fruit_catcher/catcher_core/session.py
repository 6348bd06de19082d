"""
Game Session
============

Owns one running game: basket position, game state, spawner, game loop,
the three periodic timers and the input subscription.

Lifecycle: construct, ``start()``, feed time with ``advance()`` and input
through the position source, ``restart()`` after game over, ``dispose()``
when the view goes away.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config
from fruit_catcher.catcher_core.game_loop import GameLoop, TickResult
from fruit_catcher.catcher_core.game_state import GameState, Phase
from fruit_catcher.catcher_core.input_source import (
    PointerSource,
    PositionSource,
    Subscription,
    clamp_basket_x,
)
from fruit_catcher.catcher_core.items import FallingItem, ItemIdSource
from fruit_catcher.catcher_core.spawner import SpawnScheduler
from fruit_catcher.catcher_core.timers import PeriodicTimer, Scheduler


class GameSession:
    """
    Main game session class.

    Orchestrates:
    - Basket position (fed by a PositionSource)
    - Item spawning on its own timer
    - The game tick on its own timer
    - Input sampling for polled sources
    - Game-over notification and teardown
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        source: Optional[PositionSource] = None,
        seed: Optional[int] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
        on_tick: Optional[Callable[[TickResult], None]] = None,
        debug: bool = False
    ):
        """
        Initialize session.

        Args:
            config: Game configuration. Uses default if None.
            source: Basket input. A PointerSource is used if None.
            seed: Random seed for reproducible spawns.
            on_game_over: Called once per game with the final score.
            on_tick: Called after every tick with its TickResult.
            debug: If True, prints lifecycle diagnostics.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._on_game_over = on_game_over
        self._on_tick = on_tick
        self._debug = debug

        self._source = source if source is not None else PointerSource(config)
        self._ids = ItemIdSource()
        self._spawner = SpawnScheduler(config, seed=seed, id_source=self._ids)
        self._loop = GameLoop(config)
        self._scheduler = Scheduler()

        self._state = GameState.initial(config)
        self._basket_x: float = config.center_basket_x

        self._timers: List[PeriodicTimer] = []
        self._subscription: Optional[Subscription] = None
        self._running = False
        self._disposed = False
        self._game_over_reported = False
        self._final_score: Optional[int] = None
        self._games_played = 0

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def source(self) -> PositionSource:
        return self._source

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def basket_x(self) -> float:
        """Current basket X, always within [0, width - basket_width]."""
        return self._basket_x

    @property
    def items(self) -> List[FallingItem]:
        """Live items in spawn order."""
        return self._state.items

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def lives(self) -> int:
        return self._state.lives

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def is_over(self) -> bool:
        return self._state.is_over

    @property
    def is_running(self) -> bool:
        """True while timers are scheduled."""
        return self._running

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def final_score(self) -> Optional[int]:
        """Score reported at game over, or None while playing."""
        return self._final_score

    @property
    def ticks(self) -> int:
        return self._loop.ticks

    @property
    def now_ms(self) -> float:
        """Simulated time since the session was created."""
        return self._scheduler.now_ms

    @property
    def timers(self) -> List[PeriodicTimer]:
        """Active timers."""
        return self._scheduler.timers

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Schedule the timers and subscribe to input. No-op if already running."""
        if self._disposed:
            raise RuntimeError("Cannot start a disposed session")
        if self._running or self.is_over:
            return

        self._timers = [
            self._scheduler.schedule(self._config.timing.tick_ms, self.tick, name="tick"),
            self._scheduler.schedule(self._spawner.interval_ms, self.spawn, name="spawn"),
        ]

        sample_interval = self._source.sample_interval_ms
        if sample_interval is not None:
            self._timers.append(
                self._scheduler.schedule(sample_interval, self._source.sample, name="input")
            )

        self._subscription = self._source.subscribe(self.handle_input)
        self._running = True
        self._games_played += 1

    def advance(self, elapsed_ms: float) -> int:
        """
        Let simulated time pass, firing due ticks, spawns and input samples.

        Args:
            elapsed_ms: Milliseconds since the last call.

        Returns:
            Number of timer callbacks fired.
        """
        if self._disposed:
            return 0
        return self._scheduler.advance(elapsed_ms)

    def restart(self, seed: Optional[int] = None) -> None:
        """
        Start a new game: fresh state, centred basket, timers rescheduled.

        Args:
            seed: New spawn seed. Keeps the spawner's RNG running if None.
        """
        if self._disposed:
            raise RuntimeError("Cannot restart a disposed session")

        self._teardown()
        self._state.reset(self._config)
        self._basket_x = self._config.center_basket_x
        self._loop.reset()
        self._spawner.reset(seed)
        self._game_over_reported = False
        self._final_score = None

        if self._debug:
            print(f"[DEBUG] Session restarted (game #{self._games_played + 1})")

        self.start()

    def dispose(self) -> None:
        """Cancel timers and input subscription. Further advances are ignored."""
        if self._disposed:
            return
        self._teardown()
        self._disposed = True
        if self._debug:
            print(f"[DEBUG] Session disposed at {self._scheduler.now_ms:.0f}ms")

    def _teardown(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []
        if self._subscription is not None:
            self._subscription.remove()
            self._subscription = None
        self._running = False

    # =========================================================================
    # Timer and input entry points
    # =========================================================================

    def tick(self) -> TickResult:
        """Run one game-loop step against the current basket position."""
        result = self._loop.tick(self._state, self._basket_x)

        if self._on_tick is not None:
            self._on_tick(result)

        if result.game_over and not self._game_over_reported:
            self._game_over_reported = True
            self._final_score = result.final_score
            self._teardown()
            if self._debug:
                print(f"[DEBUG] GAME OVER after {self._loop.ticks} ticks - "
                      f"score {result.final_score}")
            if self._on_game_over is not None:
                self._on_game_over(result.final_score)

        return result

    def spawn(self) -> Optional[FallingItem]:
        """Spawn one item at the tail of the item list."""
        if self.is_over:
            return None
        item = self._spawner.spawn()
        self._state.items.append(item)
        return item

    def add_item(self, item: FallingItem) -> FallingItem:
        """
        Append an externally built item.

        Raises:
            ValueError: If an item with the same ID is already live.
        """
        if any(existing.id == item.id for existing in self._state.items):
            raise ValueError(f"Duplicate item ID: {item.id}")
        self._ids.reserve(item.id)
        self._state.items.append(item)
        return item

    def handle_input(self, signal: float) -> float:
        """
        Apply one input signal to the basket.

        Args:
            signal: Raw value from the position source.

        Returns:
            Basket X after the update.
        """
        if not self.is_over and not self._disposed:
            self._basket_x = self._source.resolve(self._basket_x, signal)
        return self._basket_x

    def move_basket(self, x: float) -> float:
        """Place the basket directly (clamped). Used by headless drivers."""
        if not self.is_over and not self._disposed:
            self._basket_x = clamp_basket_x(x, self._config)
        return self._basket_x

    # =========================================================================
    # Presentation helpers
    # =========================================================================

    def get_info(self) -> Dict[str, Any]:
        """Summary counters."""
        scorer = self._loop.scorer
        return {
            "score": self._state.score,
            "lives": self._state.lives,
            "phase": self._state.phase.value,
            "ticks": self._loop.ticks,
            "items_count": len(self._state.items),
            "fruits_caught": scorer.fruits_caught,
            "bombs_caught": scorer.bombs_caught,
            "missed": scorer.missed,
            "spawned": self._spawner.spawned,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with board geometry, basket, items and counters.
        """
        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "basket_x": self._basket_x,
            "basket_width": self._config.basket.width,
            "basket_height": self._config.basket.height,
            "item_width": self._config.items.width,
            "item_height": self._config.items.height,
            "items": [item.to_dict() for item in self._state.items],
            "score": self._state.score,
            "lives": self._state.lives,
            "game_over": self._state.is_over,
        }
