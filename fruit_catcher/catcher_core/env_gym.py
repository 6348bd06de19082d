"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Fruit Catcher game.
One step is one game tick; the action places the basket like a pointer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from fruit_catcher.catcher_core.config_loader import GameConfig, load_config
from fruit_catcher.catcher_core.game_state import Phase
from fruit_catcher.catcher_core.session import GameSession
from fruit_catcher.catcher_core.state_snapshot import EMPTY_KIND, SnapshotBuilder


class CatcherEnv(gym.Env):
    """
    Fruit Catcher as a Gymnasium environment.

    Action Space:
        Box(low=-1.0, high=1.0, shape=(), dtype=float32)
        Basket position from the left edge (-1) to the right edge (+1).

    Observation Space:
        Dict containing basket, score, lives and padded item arrays.

    Reward:
        Fruits caught minus lives lost during the step.

    Info:
        Contains score, lives, delta_score, caught, missed, etc.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 25,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize Fruit Catcher environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Preloaded configuration; takes precedence over config_path.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(
                f"render_mode must be one of {self.metadata['render_modes']} or None, "
                f"got '{render_mode}'"
            )

        self._config = config if config is not None else load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._debug = debug

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._session = GameSession(config=self._config, debug=debug)
        self._snapshots = SnapshotBuilder(self._config)
        self._renderer = None

        self.action_space = spaces.Box(
            low=-1.0,
            high=1.0,
            shape=(),
            dtype=np.float32
        )

        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatcherEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Tick: {self._config.timing.tick_ms}ms, "
                  f"spawn every {self._config.spawn.interval_ms}ms")
            print(f"[DEBUG]   Max items: {self._config.observation.max_items}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_items = self._config.observation.max_items
        board = self._config.board
        lives = self._config.rules.initial_lives

        obs_dict = {
            "basket_x": spaces.Box(low=0, high=board.width, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=lives, shape=(), dtype=np.int32),
            "items_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            "board_width": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),
            "board_height": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),

            "nearest_item_x": spaces.Box(low=-1, high=board.width, shape=(), dtype=np.float32),
            "nearest_item_y": spaces.Box(low=-np.inf, high=board.height, shape=(), dtype=np.float32),
            "nearest_item_kind": spaces.Box(low=EMPTY_KIND, high=1, shape=(), dtype=np.int32),

            "item_x": spaces.Box(low=0, high=board.width, shape=(max_items,), dtype=np.float32),
            "item_y": spaces.Box(low=-np.inf, high=board.height, shape=(max_items,), dtype=np.float32),
            "item_kind": spaces.Box(low=EMPTY_KIND, high=1, shape=(max_items,), dtype=np.int8),
            "item_mask": spaces.MultiBinary(max_items),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducible spawns.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._session.restart(seed=seed)

        obs = self._build_obs()
        info = self._session.get_info()
        info["delta_score"] = 0
        info["caught"] = 0
        info["missed"] = 0

        return obs, info

    def step(
        self,
        action: Union[float, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one game tick.

        Args:
            action: Basket position in [-1, 1].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            if action.size != 1:
                raise ValueError(f"Expected a single action value, got shape {action.shape}")
            action = float(action.reshape(-1)[0])

        action = max(-1.0, min(1.0, float(action)))

        session = self._session
        score_before = session.score
        lives_before = session.lives
        missed_before = session.get_info()["missed"]
        caught_before = self._caught_total()

        if not session.is_over:
            t = (action + 1.0) / 2.0
            session.move_basket(t * self._config.max_basket_x)
            session.advance(self._config.timing.tick_ms)

        delta_score = session.score - score_before
        lives_lost = lives_before - session.lives
        reward = float(delta_score - lives_lost)

        terminated = session.phase is Phase.GAME_OVER
        truncated = (not terminated) and session.ticks >= self._config.caps.max_ticks

        obs = self._build_obs()
        info = session.get_info()
        info["delta_score"] = delta_score
        info["lives_lost"] = lives_lost
        info["caught"] = self._caught_total() - caught_before
        info["missed"] = info["missed"] - missed_before
        info["final_score"] = session.final_score

        if self._debug:
            print(f"[DEBUG] Step: action={action:.3f}, basket_x={session.basket_x:.1f}, "
                  f"delta_score={delta_score}, lives={session.lives}, "
                  f"items={len(session.items)}")
            if terminated:
                print(f"[DEBUG] TERMINATED: final score {session.final_score}")

        return obs, reward, terminated, truncated, info

    def _caught_total(self) -> int:
        info = self._session.get_info()
        return info["fruits_caught"] + info["bombs_caught"]

    def _build_obs(self) -> Dict[str, np.ndarray]:
        """Build the observation dict from the session."""
        board_rgb = self._render_to_array() if self._image_obs else None
        snapshot = self._snapshots.build(
            basket_x=self._session.basket_x,
            items=self._session.items,
            score=self._session.score,
            lives=self._session.lives,
            game_over=self._session.is_over,
            board_rgb=board_rgb
        )
        return snapshot.to_obs_dict()

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            from fruit_catcher.catcher_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        render_data = self._session.get_render_data()
        return self._renderer.render(
            render_data,
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None
        self._session.dispose()

    @property
    def session(self) -> GameSession:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
