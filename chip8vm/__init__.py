"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, create_state, load_program
from chip8vm.emulator import execute, fetch, advance_pc, step
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.disassemble import disassemble
from chip8vm.config import MachineConfig
from chip8vm.devices import Devices
from chip8vm.errors import (
    Chip8Error, UnimplementedOpcodeError, OutOfBoundsError,
    StackOverflowError, StackUnderflowError, ProgramTooLargeError,
)
from chip8vm.framebuffer import FrameBuffer
from chip8vm.keyboard import Keyboard, KeyboardCapability
from chip8vm.timer import Timer
from chip8vm.machine import Machine, MachineStatus
from chip8vm.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "load_program",
    "fetch",
    "execute",
    "advance_pc",
    "step",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "MachineConfig",
    "Devices",
    "Chip8Error",
    "UnimplementedOpcodeError",
    "OutOfBoundsError",
    "StackOverflowError",
    "StackUnderflowError",
    "ProgramTooLargeError",
    "FrameBuffer",
    "Keyboard",
    "KeyboardCapability",
    "Timer",
    "Machine",
    "MachineStatus",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
