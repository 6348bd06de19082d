"""
Solid Renderer
==============

Fast numpy-based renderer that draws items and the basket as solid-color
rectangles, with a lives strip along the top edge.
"""

from __future__ import annotations

from typing import Dict, Any, Optional, Tuple
import numpy as np

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the play field as solid-color hitboxes.

    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Navy background, same as the mobile app
        self._bg_color = np.array([0, 31, 63], dtype=np.uint8)
        self._fruit_color = np.array([255, 140, 40], dtype=np.uint8)
        self._bomb_color = np.array([20, 20, 20], dtype=np.uint8)
        self._basket_color = np.array([160, 110, 60], dtype=np.uint8)
        self._life_color = np.array([230, 60, 60], dtype=np.uint8)
        self._lost_life_color = np.array([70, 70, 90], dtype=np.uint8)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from GameSession.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        scale_x = width / render_data["board_width"]
        scale_y = height / render_data["board_height"]

        item_w = render_data["item_width"]
        item_h = render_data["item_height"]

        for item in render_data["items"]:
            color = self._bomb_color if item["kind"] == "bomb" else self._fruit_color
            self._fill_rect(
                img, item["x"], item["y"], item_w, item_h, scale_x, scale_y, color
            )

        # Basket sits on the bottom edge
        basket_y = render_data["board_height"] - render_data["basket_height"]
        self._fill_rect(
            img,
            render_data["basket_x"],
            basket_y,
            render_data["basket_width"],
            render_data["basket_height"],
            scale_x,
            scale_y,
            self._basket_color
        )

        self._draw_lives(img, render_data["lives"])
        return img

    def _fill_rect(
        self,
        img: np.ndarray,
        x: float,
        y: float,
        w: float,
        h: float,
        scale_x: float,
        scale_y: float,
        color: np.ndarray
    ) -> None:
        """Fill a board-space rectangle, clipped to the image."""
        height, width = img.shape[:2]
        x0, x1 = self._clip_span(x * scale_x, (x + w) * scale_x, width)
        y0, y1 = self._clip_span(y * scale_y, (y + h) * scale_y, height)
        if x0 < x1 and y0 < y1:
            img[y0:y1, x0:x1] = color

    @staticmethod
    def _clip_span(start: float, end: float, limit: int) -> Tuple[int, int]:
        return max(0, int(start)), min(limit, int(np.ceil(end)))

    def _draw_lives(self, img: np.ndarray, lives: int) -> None:
        """One square per starting life; lost lives are greyed out."""
        size = max(2, img.shape[1] // 40)
        gap = size // 2 + 1
        for i in range(self._config.rules.initial_lives):
            x0 = gap + i * (size + gap)
            color = self._life_color if i < lives else self._lost_life_color
            img[gap:gap + size, x0:x0 + size] = color

    def close(self) -> None:
        """Clean up resources."""
        pass
