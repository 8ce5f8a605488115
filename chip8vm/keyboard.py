"""CHIP-8 hexadecimal keypad."""

import threading
from typing import Callable, Optional, Protocol

from chip8vm.constants import KEY_COUNT
from chip8vm.errors import OutOfBoundsError


class KeyboardCapability(Protocol):
    """What the machine needs from a keypad: state queries and a blocking wait.

    ``wait_for_press`` is only called off the execution thread, while the
    machine is waiting on FX0A.
    """

    def is_pressed(self, key: int) -> bool:
        ...

    def wait_for_press(self, timeout: Optional[float] = None) -> Optional[int]:
        ...


def check_key(key: int) -> int:
    """Return ``key`` if it names one of the 16 keys, else raise OutOfBoundsError."""
    if not 0 <= key < KEY_COUNT:
        raise OutOfBoundsError(f"Key 0x{key:02X} outside 0x0..0x{KEY_COUNT - 1:X}")
    return key


class Keyboard:
    """Thread-safe keypad fed by a frontend.

    The frontend translates its own input events into ``press``/``release``
    calls; the machine queries ``is_pressed`` and subscribes to presses to
    resume an FX0A wait.
    """

    def __init__(self):
        self._pressed = [False] * KEY_COUNT
        self._condition = threading.Condition()
        self._last_press: Optional[int] = None
        self._press_count = 0
        self._listeners: list[Callable[[int], None]] = []

    def press(self, key: int):
        """Mark ``key`` as held down and notify waiters and listeners."""
        check_key(key)
        with self._condition:
            was_pressed = self._pressed[key]
            self._pressed[key] = True
            if not was_pressed:
                self._last_press = key
                self._press_count += 1
                self._condition.notify_all()
            listeners = list(self._listeners)
        if not was_pressed:
            for listener in listeners:
                listener(key)

    def release(self, key: int):
        """Mark ``key`` as released."""
        check_key(key)
        with self._condition:
            self._pressed[key] = False

    def release_all(self):
        with self._condition:
            self._pressed = [False] * KEY_COUNT

    def is_pressed(self, key: int) -> bool:
        check_key(key)
        with self._condition:
            return self._pressed[key]

    def pressed_keys(self) -> list[int]:
        """Keys currently held down, lowest first."""
        with self._condition:
            return [key for key, pressed in enumerate(self._pressed) if pressed]

    def wait_for_press(self, timeout: Optional[float] = None) -> Optional[int]:
        """Block until a key goes down and return it, or ``None`` on timeout."""
        with self._condition:
            count = self._press_count
            if not self._condition.wait_for(lambda: self._press_count != count, timeout):
                return None
            return self._last_press

    def add_press_listener(self, callback: Callable[[int], None]):
        """Call ``callback(key)`` from the pressing thread on every new key press."""
        with self._condition:
            self._listeners.append(callback)

    def remove_press_listener(self, callback: Callable[[int], None]):
        with self._condition:
            if callback in self._listeners:
                self._listeners.remove(callback)
