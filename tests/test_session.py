"""
Tests for the game session lifecycle: timers, input, game over and restart.
"""

from dataclasses import replace

import pytest

from fruit_catcher.catcher_core.config_loader import load_config
from fruit_catcher.catcher_core.game_state import Phase
from fruit_catcher.catcher_core.input_source import PointerSource, TiltSource
from fruit_catcher.catcher_core.items import FallingItem, ItemKind
from fruit_catcher.catcher_core.session import GameSession


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game_overs():
    return []


@pytest.fixture
def session(config, game_overs):
    session = GameSession(config=config, seed=42, on_game_over=game_overs.append)
    session.start()
    yield session
    session.dispose()


def drop_bombs(session, count, y=760):
    """Place bombs directly above the basket, one tick from landing."""
    for _ in range(count):
        item_id = session.spawn().id
        session.items.pop()
        session.add_item(FallingItem(item_id, session.basket_x, y, ItemKind.BOMB))


class TestStart:
    """Test timer setup."""

    def test_initial_state(self, session, config):
        """New game: no score, full lives, no items, basket centred."""
        assert session.score == 0
        assert session.lives == 3
        assert session.items == []
        assert session.phase is Phase.PLAYING
        assert session.basket_x == config.center_basket_x

    def test_pointer_schedules_two_timers(self, session):
        """Tick and spawn timers; pointer input needs no polling."""
        assert sorted(t.name for t in session.timers) == ["spawn", "tick"]
        assert session.is_running

    def test_tilt_schedules_input_timer(self, config):
        """Tilt input adds a sampling timer."""
        session = GameSession(config=config, source=TiltSource(config))
        session.start()

        assert sorted(t.name for t in session.timers) == ["input", "spawn", "tick"]
        session.dispose()

    def test_start_twice_is_noop(self, session):
        """Starting again does not double the timers."""
        session.start()
        assert len(session.timers) == 2

    def test_start_after_dispose(self, config):
        """A disposed session cannot be started."""
        session = GameSession(config=config)
        session.dispose()
        with pytest.raises(RuntimeError):
            session.start()


class TestTiming:
    """Test tick and spawn rates."""

    def test_tick_every_40ms(self, session):
        """One tick per 40ms of elapsed time."""
        session.advance(400)
        assert session.ticks == 10

    def test_spawn_every_1500ms(self, session, config):
        """First item appears at 1500ms, just above the screen."""
        session.advance(1499)
        assert session.items == []

        session.advance(1)

        assert len(session.items) == 1
        assert session.items[0].y == -config.items.height
        assert session.ticks == 37

    def test_spawn_independent_of_tick(self, config):
        """Spawn count follows elapsed time, not tick count."""
        fruit_only = replace(config, spawn=replace(config.spawn, bomb_probability=0.0))
        session = GameSession(config=fruit_only, seed=1)
        session.start()

        session.advance(15000)

        assert session.get_info()["spawned"] == 10
        assert session.ticks == 375
        session.dispose()

    def test_items_fall_between_spawns(self, session):
        """A spawned item has fallen 5px per tick since it appeared."""
        session.advance(1500)
        item = session.items[0]

        session.advance(400)

        assert item.y == -40 + 10 * 5


class TestInput:
    """Test basket input through the position source."""

    def test_pointer_moves_basket(self, session, config):
        """Pointer events centre the basket under the pointer."""
        session.source.push(200)
        assert session.basket_x == 200 - config.basket.width / 2

    def test_basket_stays_on_screen(self, session, config):
        """Pointer input outside the screen is clamped."""
        session.source.push(10_000)
        assert session.basket_x == config.max_basket_x
        session.source.push(-10_000)
        assert session.basket_x == 0

    def test_tilt_sampled_on_timer(self, config):
        """Tilt readings are applied every 100ms."""
        source = TiltSource(config, reader=lambda: 0.5)
        session = GameSession(config=config, source=source)
        session.start()

        session.advance(99)
        assert session.basket_x == config.center_basket_x
        session.advance(1)
        assert session.basket_x == config.center_basket_x + 40
        session.advance(300)
        assert session.basket_x == config.max_basket_x

        session.dispose()

    def test_unavailable_tilt_keeps_basket(self, config):
        """With no device the basket stays put."""
        session = GameSession(config=config, source=TiltSource(config))
        session.start()

        session.advance(2000)

        assert session.basket_x == config.center_basket_x
        session.dispose()

    def test_latest_input_wins(self, session):
        """Only the basket position at tick time matters."""
        session.add_item(FallingItem(900, 0, 760, ItemKind.FRUIT))
        session.source.push(300)
        session.source.push(20)

        session.advance(40)

        assert session.score == 1

    def test_move_basket_clamps(self, session, config):
        """Direct placement is clamped too."""
        assert session.move_basket(-5) == 0
        assert session.move_basket(1e6) == config.max_basket_x


class TestItems:
    """Test item bookkeeping."""

    def test_add_item_duplicate_id(self, session):
        """Two live items cannot share an ID."""
        session.add_item(FallingItem(5, 0, 0, ItemKind.FRUIT))
        with pytest.raises(ValueError, match="Duplicate"):
            session.add_item(FallingItem(5, 50, 0, ItemKind.FRUIT))

    def test_spawn_after_add_item_gets_new_id(self, session):
        """Spawned IDs skip past externally added ones."""
        session.add_item(FallingItem(100, 0, 0, ItemKind.FRUIT))
        assert session.spawn().id == 101

    def test_ids_unique_across_restart(self, session):
        """IDs are never reused, even after restart."""
        before = {session.spawn().id for _ in range(3)}
        session.restart()
        after = {session.spawn().id for _ in range(3)}

        assert before.isdisjoint(after)


class TestGameOver:
    """Test the game-over transition and teardown."""

    def test_game_over_fires_once(self, session, game_overs):
        """Losing the last life reports the final score exactly once."""
        session.add_item(FallingItem(500, session.basket_x, 760, ItemKind.FRUIT))
        drop_bombs(session, 3)

        session.advance(40)
        session.advance(5000)

        assert game_overs == [1]
        assert session.phase is Phase.GAME_OVER
        assert session.final_score == 1
        assert session.lives == 0

    def test_timers_torn_down(self, session, config):
        """No timer survives game over; nothing spawns afterwards."""
        drop_bombs(session, 3)
        session.advance(40)
        items_after = len(session.items)

        session.advance(10_000)

        assert session.timers == []
        assert not session.is_running
        assert len(session.items) == items_after
        assert session.spawn() is None

    def test_input_ignored_after_game_over(self, session):
        """The basket freezes once the game is over."""
        drop_bombs(session, 3)
        session.advance(40)
        frozen = session.basket_x

        session.source.push(0)

        assert session.basket_x == frozen
        assert session.source.listener_count == 0

    def test_one_life_at_a_time(self, session, game_overs):
        """Bombs on separate ticks take one life each."""
        drop_bombs(session, 1)
        session.advance(40)
        assert session.lives == 2
        drop_bombs(session, 1)
        session.advance(40)
        assert session.lives == 1
        assert game_overs == []

    def test_tick_callback(self, config):
        """on_tick receives every tick result."""
        results = []
        session = GameSession(config=config, on_tick=results.append)
        session.start()

        session.advance(200)

        assert [r.tick for r in results] == [1, 2, 3, 4, 5]
        session.dispose()


class TestRestart:
    """Test starting a new game."""

    def test_restart_resets_everything(self, session, config):
        """Restart: score 0, lives 3, no items, playing, basket centred."""
        session.source.push(0)
        session.add_item(FallingItem(1, session.basket_x, 760, ItemKind.FRUIT))
        drop_bombs(session, 3)
        session.advance(40)
        assert session.is_over

        session.restart()

        assert session.score == 0
        assert session.lives == 3
        assert session.items == []
        assert session.phase is Phase.PLAYING
        assert session.basket_x == config.center_basket_x
        assert session.final_score is None
        assert session.ticks == 0

    def test_restart_reschedules(self, session):
        """Timers and input work again after restart."""
        drop_bombs(session, 3)
        session.advance(40)

        session.restart()
        session.advance(1500)
        session.source.push(100)

        assert session.ticks == 37
        assert len(session.items) == 1
        assert session.basket_x == 55

    def test_second_game_over_reported(self, session, game_overs):
        """Each game reports its own game over."""
        drop_bombs(session, 3)
        session.advance(40)
        session.restart()
        session.add_item(FallingItem(999, session.basket_x, 760, ItemKind.FRUIT))
        drop_bombs(session, 3)
        session.advance(40)

        assert game_overs == [0, 1]

    def test_restart_with_seed_is_reproducible(self, config):
        """Same restart seed gives the same spawns."""
        session = GameSession(config=config)
        session.restart(seed=9)
        first = [session.spawn().x for _ in range(5)]
        session.restart(seed=9)
        second = [session.spawn().x for _ in range(5)]

        assert first == second
        session.dispose()


class TestDispose:
    """Test teardown on unmount."""

    def test_dispose(self, config):
        """Dispose cancels timers, drops the input subscription and stops time."""
        source = PointerSource(config)
        session = GameSession(config=config, source=source)
        session.start()

        session.dispose()

        assert session.timers == []
        assert source.listener_count == 0
        assert session.advance(10_000) == 0
        assert session.ticks == 0
        assert session.is_disposed

    def test_restart_after_dispose(self, config):
        """A disposed session stays disposed."""
        session = GameSession(config=config)
        session.dispose()
        with pytest.raises(RuntimeError):
            session.restart()
