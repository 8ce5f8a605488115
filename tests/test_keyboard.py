"""Tests for the keypad."""

import threading

import pytest
from chip8vm import Keyboard, OutOfBoundsError


class TestKeyboard:
    """Test key state, waiting and listeners."""

    def test_press_and_release(self, keyboard):
        assert not keyboard.is_pressed(0xA)
        keyboard.press(0xA)
        assert keyboard.is_pressed(0xA)
        assert keyboard.pressed_keys() == [0xA]
        keyboard.release(0xA)
        assert not keyboard.is_pressed(0xA)

    def test_release_all(self, keyboard):
        keyboard.press(1)
        keyboard.press(2)
        keyboard.release_all()
        assert keyboard.pressed_keys() == []

    @pytest.mark.parametrize("key", [-1, 16, 0xFF])
    def test_invalid_key(self, keyboard, key):
        with pytest.raises(OutOfBoundsError):
            keyboard.is_pressed(key)
        with pytest.raises(OutOfBoundsError):
            keyboard.press(key)

    def test_wait_for_press_timeout(self, keyboard):
        assert keyboard.wait_for_press(timeout=0.01) is None

    def test_wait_for_press_from_other_thread(self, keyboard):
        result = []
        ready = threading.Event()

        def waiter():
            ready.set()
            result.append(keyboard.wait_for_press(timeout=5))

        thread = threading.Thread(target=waiter)
        thread.start()
        ready.wait()
        while thread.is_alive() and not result:
            keyboard.press(0xC)
            keyboard.release(0xC)
            thread.join(0.01)

        assert result == [0xC]

    def test_listener_sees_new_presses_only(self, keyboard):
        seen = []
        keyboard.add_press_listener(seen.append)

        keyboard.press(3)
        keyboard.press(3)  # Still held
        keyboard.release(3)
        keyboard.press(3)

        assert seen == [3, 3]

        keyboard.remove_press_listener(seen.append)
        keyboard.press(4)
        assert seen == [3, 3]

    def test_is_keyboard_capability(self):
        keyboard = Keyboard()
        assert callable(keyboard.is_pressed)
        assert callable(keyboard.wait_for_press)
