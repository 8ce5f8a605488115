"""Test configuration and fixtures for CHIP-8 machine tests."""

import heapq
import itertools

import pytest
import jax.numpy as jnp
from chip8vm import create_state, MachineConfig, Devices, Keyboard, Timer


class FakeHandle:
    """Stand-in for asyncio.TimerHandle."""

    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Event loop double whose clock only moves when ``advance`` is called."""

    def __init__(self):
        self.time = 0.0
        self._queue = []
        self._counter = itertools.count()

    def call_later(self, delay, callback):
        handle = FakeHandle(self.time + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self):
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds):
        """Run every callback due within the next ``seconds``."""
        deadline = self.time + seconds + 1e-9
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            self.time = when
            if not handle.cancelled:
                handle.callback()
        self.time = max(self.time, deadline)


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state(MachineConfig(seed=0))


@pytest.fixture
def shift_vy_state():
    """Provide a state shifting VY into VX."""
    return create_state(MachineConfig(seed=0, shift_uses_vy=True))


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def keyboard():
    return Keyboard()


@pytest.fixture
def devices(fake_loop, keyboard):
    """Keyboard and timers driven by a fake loop."""
    return Devices(
        keyboard=keyboard,
        delay_timer=Timer(fake_loop),
        sound_timer=Timer(fake_loop),
    )


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )
