"""
Input Sources
=============

Basket position sources. Each variant turns a raw device signal into a new
basket X, clamped so the basket never leaves the screen.

- TiltSource: accelerometer x reading, applied as a relative move, sampled
  on a fixed period.
- PointerSource: absolute pointer x, event driven, centres the basket under
  the pointer.

A source whose device is unavailable simply never emits; the basket stays
where it was.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from fruit_catcher.catcher_core.config_loader import GameConfig, get_config


Listener = Callable[[float], None]


def clamp_basket_x(x: float, config: GameConfig) -> float:
    """Clamp a basket X to [0, board_width - basket_width]."""
    return max(0.0, min(config.max_basket_x, float(x)))


class Subscription:
    """Handle returned by ``PositionSource.subscribe``."""

    def __init__(self, source: "PositionSource", listener: Listener):
        self._source = source
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def remove(self) -> None:
        """Stop receiving signals. Safe to call more than once."""
        if self._active:
            self._active = False
            self._source._unsubscribe(self._listener)


class PositionSource(ABC):
    """
    Produces a stream of basket-position updates.

    Device glue calls ``push`` (or ``sample`` for polled devices); subscribers
    receive the raw signal and turn it into a position with ``resolve``.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._listeners: List[Listener] = []

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def sample_interval_ms(self) -> Optional[float]:
        """Polling period, or None for event-driven sources."""
        return None

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        """
        Register a listener for raw signals.

        Args:
            listener: Called with each signal value.

        Returns:
            Subscription whose ``remove()`` unregisters the listener.
        """
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def push(self, signal: float) -> None:
        """Deliver one raw signal to every listener."""
        for listener in list(self._listeners):
            listener(float(signal))

    def sample(self) -> None:
        """Poll the device once. Event-driven sources do nothing."""
        return None

    @abstractmethod
    def resolve(self, current_x: float, signal: float) -> float:
        """
        Compute the new basket X for a signal.

        Args:
            current_x: Basket X before the signal.
            signal: Raw device value.

        Returns:
            Clamped basket X.
        """


class TiltSource(PositionSource):
    """
    Accelerometer-driven basket movement.

    Each reading moves the basket by ``reading * tilt_sensitivity`` pixels.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        reader: Optional[Callable[[], Optional[float]]] = None
    ):
        """
        Args:
            config: Game configuration. Uses default if None.
            reader: Returns the current tilt x, or None when no reading is
                available. Without a reader the source never emits.
        """
        super().__init__(config)
        self._reader = reader
        self._sensitivity = self._config.input.tilt_sensitivity

    @property
    def sample_interval_ms(self) -> Optional[float]:
        return self._config.input.tilt_interval_ms

    @property
    def sensitivity(self) -> float:
        return self._sensitivity

    def sample(self) -> None:
        if self._reader is None:
            return
        reading = self._reader()
        if reading is None:
            return
        self.push(reading)

    def resolve(self, current_x: float, signal: float) -> float:
        return clamp_basket_x(current_x + signal * self._sensitivity, self._config)


class PointerSource(PositionSource):
    """Pointer-driven basket movement: the basket centres under the pointer."""

    def resolve(self, current_x: float, signal: float) -> float:
        return clamp_basket_x(signal - self._config.basket.width / 2, self._config)


def make_source(
    kind: str,
    config: Optional[GameConfig] = None,
    reader: Optional[Callable[[], Optional[float]]] = None
) -> PositionSource:
    """
    Build a source by name.

    Args:
        kind: "pointer" or "tilt".
        config: Game configuration. Uses default if None.
        reader: Tilt reader, ignored for pointer sources.
    """
    if kind == "pointer":
        return PointerSource(config)
    if kind == "tilt":
        return TiltSource(config, reader=reader)
    raise ValueError(f"Unknown input source '{kind}', expected 'pointer' or 'tilt'")
