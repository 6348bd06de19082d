"""
Tests for per-tick fall, collision and catch rules.
"""

import random

import pytest

from fruit_catcher.catcher_core.config_loader import load_config
from fruit_catcher.catcher_core.game_loop import GameLoop, collides
from fruit_catcher.catcher_core.game_state import GameState, Phase
from fruit_catcher.catcher_core.items import FallingItem, ItemKind


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def loop(config):
    return GameLoop(config)


@pytest.fixture
def state(config):
    return GameState.initial(config)


def fruit(item_id, x, y):
    return FallingItem(id=item_id, x=x, y=y, kind=ItemKind.FRUIT, glyph="🍎")


def bomb(item_id, x, y):
    return FallingItem(id=item_id, x=x, y=y, kind=ItemKind.BOMB, glyph="💣")


# Bottom edge of a 40px item is at y + 40; the basket band starts at 844 - 50
ABOUT_TO_LAND = 760


class TestCollision:
    """Test the bounding-box catch test."""

    def test_overlap_in_band(self, config):
        """Overlapping horizontally with the bottom edge in the band is a hit."""
        assert collides(fruit(1, 100, 755), 80, config)

    def test_above_band(self, config):
        """Bottom edge exactly on the band line is not yet a hit."""
        assert not collides(fruit(1, 100, 754), 80, config)

    def test_touching_edges_do_not_overlap(self, config):
        """Edges that only touch are not an overlap."""
        # Item right edge == basket left edge
        assert not collides(fruit(1, 40, 800), 80, config)
        # Item left edge == basket right edge
        assert not collides(fruit(1, 170, 800), 80, config)

    def test_partial_overlap(self, config):
        """A single pixel of overlap counts."""
        assert collides(fruit(1, 41, 800), 80, config)
        assert collides(fruit(1, 169, 800), 80, config)


class TestTick:
    """Test a single tick."""

    def test_items_fall_fixed_step(self, loop, state):
        """Every item advances 5px per tick."""
        state.items = [fruit(1, 0, -40), bomb(2, 200, 100)]

        loop.tick(state, basket_x=300)

        assert [i.y for i in state.items] == [-35, 105]

    def test_spawn_order_preserved(self, loop, state):
        """Surviving items keep insertion order."""
        state.items = [fruit(i, 10 * i, -40 + i) for i in range(5)]

        loop.tick(state, basket_x=300)

        assert [i.id for i in state.items] == [0, 1, 2, 3, 4]

    def test_fruit_catch(self, loop, state):
        """Catching fruit adds exactly one point and never costs a life."""
        state.items = [fruit(1, 100, ABOUT_TO_LAND)]

        result = loop.tick(state, basket_x=80)

        assert state.score == 1
        assert state.lives == 3
        assert state.items == []
        assert [e.item_id for e in result.caught] == [1]
        assert result.fruits_caught == 1

    def test_bomb_catch(self, loop, state):
        """Catching a bomb costs exactly one life and no points."""
        state.score = 4
        state.items = [bomb(1, 100, ABOUT_TO_LAND)]

        result = loop.tick(state, basket_x=80)

        assert state.score == 4
        assert state.lives == 2
        assert state.phase is Phase.PLAYING
        assert result.bombs_caught == 1
        assert not result.game_over

    def test_miss_at_bottom(self, loop, state):
        """An item reaching the bottom edge is dropped without effect."""
        state.items = [fruit(1, 0, 838), bomb(2, 0, 839)]

        result = loop.tick(state, basket_x=300)

        assert [i.id for i in state.items] == [1]   # y == 843, still on screen
        assert result.missed == [2]                 # y == 844
        assert state.score == 0
        assert state.lives == 3

    def test_collision_uses_advanced_position(self, loop, state):
        """Position is advanced before the catch test in the same pass."""
        state.items = [fruit(1, 100, 750)]  # bottom edge 790 -> 795 after falling

        result = loop.tick(state, basket_x=80)

        assert len(result.caught) == 1

    def test_tick_counter(self, loop, state):
        """Ticks are numbered from one."""
        assert loop.tick(state, 0).tick == 1
        assert loop.tick(state, 0).tick == 2
        assert loop.ticks == 2


class TestGameOver:
    """Test the transition to game over."""

    def test_last_life(self, loop, state):
        """Bomb on the last life ends the game with the score unchanged."""
        state.score = 7
        state.lives = 1
        state.items = [bomb(1, 100, ABOUT_TO_LAND)]

        result = loop.tick(state, basket_x=80)

        assert state.lives == 0
        assert state.phase is Phase.GAME_OVER
        assert result.game_over
        assert result.final_score == 7

    def test_same_tick_fruit_counts(self, loop, state):
        """Fruit caught in the game-over tick is part of the final score."""
        state.score = 2
        state.lives = 1
        state.items = [bomb(1, 90, ABOUT_TO_LAND), fruit(2, 110, ABOUT_TO_LAND)]

        result = loop.tick(state, basket_x=80)

        assert result.game_over
        assert result.final_score == 3
        assert state.score == 3

    def test_lives_never_negative(self, loop, state):
        """Several bombs in one tick cannot push lives below zero."""
        state.lives = 1
        state.items = [bomb(i, 80 + i, ABOUT_TO_LAND) for i in range(3)]

        loop.tick(state, basket_x=80)

        assert state.lives == 0

    def test_no_updates_after_game_over(self, loop, state):
        """Ticks after game over change nothing."""
        state.lives = 1
        state.items = [bomb(1, 100, ABOUT_TO_LAND), fruit(2, 0, 0)]
        loop.tick(state, basket_x=80)

        result = loop.tick(state, basket_x=80)

        assert state.items[0].y == 5
        assert result.caught == []
        assert not result.game_over


class TestScenarios:
    """End-to-end tick sequences."""

    def test_fruit_falls_into_basket(self, loop, state):
        """Fruit spawned above the screen is caught once it reaches the band."""
        state.items = [fruit(1, 100, -40)]
        ticks = 0

        while state.items:
            loop.tick(state, basket_x=80)
            ticks += 1

        # -40 + 5 * 159 = 755, first position with bottom edge past 794
        assert ticks == 159
        assert state.score == 1
        assert state.lives == 3

    def test_fruit_falls_past_basket(self, loop, state):
        """Fruit away from the basket falls off the bottom with no effect."""
        state.items = [fruit(1, 0, -40)]
        ticks = 0
        missed = []

        while state.items:
            missed.extend(loop.tick(state, basket_x=300).missed)
            ticks += 1

        # -40 + 5 * 177 = 845 >= 844
        assert ticks == 177
        assert missed == [1]
        assert state.score == 0


class TestProperties:
    """Randomised invariants over long runs."""

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_invariants(self, config, seed):
        """Score/lives monotonic, catch effects exact, items never linger."""
        rng = random.Random(seed)
        loop = GameLoop(config)
        state = GameState.initial(config)
        next_id = 0
        game_overs = 0

        for t in range(3000):
            if t % 37 == 0:
                kind = ItemKind.BOMB if rng.random() < 0.2 else ItemKind.FRUIT
                state.items.append(FallingItem(next_id, rng.random() * 350, -40, kind))
                next_id += 1

            score_before, lives_before = state.score, state.lives
            was_playing = state.phase is Phase.PLAYING
            result = loop.tick(state, basket_x=rng.uniform(0, config.max_basket_x))

            if was_playing:
                assert state.score - score_before == result.fruits_caught
                assert lives_before - state.lives == min(lives_before, result.bombs_caught)
            assert state.score >= score_before
            assert 0 <= state.lives <= lives_before
            assert all(item.y < config.board.height for item in state.items)

            if result.game_over:
                game_overs += 1
                assert lives_before > 0 and state.lives == 0
                assert result.final_score == state.score

        assert game_overs <= 1
        assert (game_overs == 1) == (state.phase is Phase.GAME_OVER)
