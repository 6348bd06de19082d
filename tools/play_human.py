"""
Human Play Mode
================

Play Fruit Catcher interactively.

Controls:
    - Mouse: Move basket (pointer input)
    - Left/Right arrows: Tilt the basket (tilt input, --input tilt)
    - R / Click on game over screen: Play again
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT] [--input pointer|tilt]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

import pygame

from fruit_catcher.catcher_core.config_loader import load_config, GameConfig
from fruit_catcher.catcher_core.input_source import PositionSource, make_source
from fruit_catcher.catcher_core.session import GameSession


# Arrow keys are read as a steady accelerometer reading of this magnitude
KEY_TILT = 0.25

FRUIT_COLORS = [
    (255, 140, 0),    # orange
    (230, 40, 70),    # strawberry
    (200, 20, 30),    # apple
    (140, 60, 170),   # grapes
    (170, 0, 40),     # cherries
    (255, 190, 50),   # mango
]


class CatcherRenderer:
    """Draws the play field, HUD and game over overlay."""

    def __init__(self, config: GameConfig):
        self._config = config
        self._glyph_index = {g: i for i, g in enumerate(config.items.fruit_glyphs)}

        self._bg = (0, 31, 63)
        self._text = (255, 255, 255)
        self._basket = (160, 110, 60)
        self._basket_rim = (120, 80, 40)
        self._bomb = (25, 25, 25)
        self._fuse = (255, 200, 60)
        self._overlay = (0, 0, 0, 150)
        self._game_over = (255, 77, 77)
        self._button = (76, 175, 80)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 64)
        self._font_large = pygame.font.Font(None, 42)
        self._font_medium = pygame.font.Font(None, 30)

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        screen.fill(self._bg)

        self._draw_title(screen)
        self._draw_stats(screen, render_data)

        for item in render_data["items"]:
            self._draw_item(screen, item, render_data)

        self._draw_basket(screen, render_data)

        if render_data["game_over"]:
            self._draw_game_over(screen, render_data["score"])

    def _draw_title(self, screen: pygame.Surface) -> None:
        title = self._font_huge.render("Fruit Catcher", True, self._text)
        screen.blit(title, title.get_rect(center=(screen.get_width() // 2, 60)))

    def _draw_stats(self, screen: pygame.Surface, render_data: dict) -> None:
        width = screen.get_width()
        score = self._font_medium.render(f"Score: {render_data['score']}", True, self._text)
        lives = self._font_medium.render(f"Lives: {render_data['lives']}", True, self._text)
        screen.blit(score, (int(width * 0.05), 110))
        screen.blit(lives, lives.get_rect(topright=(int(width * 0.95), 110)))

    def _draw_item(self, screen: pygame.Surface, item: dict, render_data: dict) -> None:
        w = render_data["item_width"]
        h = render_data["item_height"]
        center = (int(item["x"] + w / 2), int(item["y"] + h / 2))
        radius = int(min(w, h) / 2)

        if item["kind"] == "bomb":
            pygame.draw.circle(screen, self._bomb, center, radius)
            pygame.draw.line(
                screen, self._fuse,
                (center[0], center[1] - radius),
                (center[0] + radius // 2, center[1] - radius - 6), 3
            )
        else:
            index = self._glyph_index.get(item["glyph"], 0)
            color = FRUIT_COLORS[index % len(FRUIT_COLORS)]
            pygame.draw.circle(screen, color, center, radius)

    def _draw_basket(self, screen: pygame.Surface, render_data: dict) -> None:
        rect = pygame.Rect(
            int(render_data["basket_x"]),
            render_data["board_height"] - render_data["basket_height"],
            render_data["basket_width"],
            render_data["basket_height"]
        )
        pygame.draw.rect(screen, self._basket, rect, border_radius=10)
        pygame.draw.rect(screen, self._basket_rim, rect, width=3, border_radius=10)

    def _draw_game_over(self, screen: pygame.Surface, score: int) -> None:
        w, h = screen.get_size()
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill(self._overlay)
        screen.blit(overlay, (0, 0))

        text = self._font_huge.render("Game Over", True, self._game_over)
        screen.blit(text, text.get_rect(center=(w // 2, h // 2 - 70)))

        final = self._font_large.render(f"Your Score: {score}", True, self._text)
        screen.blit(final, final.get_rect(center=(w // 2, h // 2)))

        label = self._font_medium.render("Play Again", True, self._text)
        button = label.get_rect(center=(w // 2, h // 2 + 70)).inflate(50, 24)
        pygame.draw.rect(screen, self._button, button, border_radius=15)
        screen.blit(label, label.get_rect(center=button.center))


class HumanPlayer:
    """Human-playable Fruit Catcher driven by the pygame clock."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        input_kind: str = "pointer",
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps
        self._input_kind = input_kind

        pygame.init()
        self._screen = pygame.display.set_mode((config.board.width, config.board.height))
        pygame.display.set_caption("Fruit Catcher")
        self._clock = pygame.time.Clock()

        self._source: PositionSource = make_source(input_kind, config, reader=self._read_keys)
        self._session = GameSession(
            config=config,
            source=self._source,
            seed=seed,
            on_game_over=self._on_game_over
        )
        self._renderer = CatcherRenderer(config)
        self._running = True

    def _read_keys(self) -> Optional[float]:
        """Keyboard stand-in for an accelerometer."""
        keys = pygame.key.get_pressed()
        tilt = 0.0
        if keys[pygame.K_LEFT]:
            tilt -= KEY_TILT
        if keys[pygame.K_RIGHT]:
            tilt += KEY_TILT
        return tilt if tilt else None

    def _on_game_over(self, final_score: int) -> None:
        print(f"\nGAME OVER - Score: {final_score}")

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        print("=== Fruit Catcher ===")
        if self._input_kind == "pointer":
            print("Move the mouse to steer the basket")
        else:
            print("Hold Left/Right to tilt the basket")
        print("Catch fruit, avoid bombs. R to restart, ESC to quit")
        print()

        self._session.start()
        self._clock.tick(self._target_fps)

        while self._running:
            self._handle_events()
            elapsed_ms = self._clock.tick(self._target_fps)
            self._session.advance(elapsed_ms)
            self._render()

        score = self._session.score
        self._session.dispose()
        pygame.quit()
        return score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()

            elif event.type == pygame.MOUSEMOTION:
                if self._input_kind == "pointer":
                    self._source.push(event.pos[0])

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1 and self._session.is_over:
                    self._restart()

    def _restart(self) -> None:
        """Restart the game."""
        self._session.restart()
        print("\n=== Game Restarted ===\n")

    def _render(self) -> None:
        self._renderer.render(self._screen, self._session.get_render_data())
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Fruit Catcher interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Window width (default: from config)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: from config)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--input", choices=("pointer", "tilt"), default="pointer",
                        help="Basket input: mouse pointer or arrow-key tilt")

    args = parser.parse_args()

    try:
        config = load_config()
        if args.width is not None or args.height is not None:
            config = config.with_board_size(
                args.width or config.board.width,
                args.height or config.board.height
            )
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            input_kind=args.input,
            target_fps=args.fps
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ValueError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
