"""Peripherals the instruction handlers talk to."""

from dataclasses import dataclass

from chip8vm.keyboard import KeyboardCapability
from chip8vm.timer import Timer


@dataclass(frozen=True)
class Devices:
    """Keyboard and timers attached to one machine."""
    keyboard: KeyboardCapability
    delay_timer: Timer
    sound_timer: Timer
