"""CHIP-8 delay and sound timers."""

import asyncio
from typing import Optional

from chip8vm.constants import DEFAULT_TIMER_FREQUENCY


class Timer:
    """8-bit countdown counter decremented at a fixed rate on an event loop.

    Arming only happens from zero: ``set`` on a running timer leaves both the
    value and the pending decrement untouched. Every decrement schedules the
    next one until the counter reaches zero, at which point the chain ends.
    All methods except ``value`` must be called from the loop's thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, period: float = 1.0 / DEFAULT_TIMER_FREQUENCY):
        self._loop = loop
        self._period = period
        self._value = 0
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def value(self) -> int:
        """Current count."""
        return self._value

    @property
    def active(self) -> bool:
        """Whether a decrement is scheduled."""
        return self._handle is not None

    def set(self, value: int):
        """Arm the timer with ``value`` if it is idle."""
        if self._value != 0:
            return
        self._value = value & 0xFF
        if self._value > 0:
            self._schedule()

    def cancel(self):
        """Drop the pending decrement, freezing the current value."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self):
        self._handle = self._loop.call_later(self._period, self._on_tick)

    def _on_tick(self):
        self._handle = None
        if self._value > 0:
            self._value -= 1
        if self._value > 0:
            self._schedule()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cancel()
        return False

    def __repr__(self):
        return f"Timer(value={self._value}, active={self.active})"
