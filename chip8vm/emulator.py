"""Main CHIP-8 emulator execution engine."""

from typing import Optional

import jax.numpy as jnp
from chip8vm.state import EmulatorState, check_memory_range
from chip8vm.decode import decode
from chip8vm.devices import Devices
from chip8vm.constants import INSTRUCTION_WIDTH
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction

INSTRUCTION_TABLE = (
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
)


def execute(state: EmulatorState, instruction: int, devices: Optional[Devices] = None) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    ``devices`` is only consulted by the timer (FX07, FX15, FX18) and key
    (EX9E, EXA1) instructions. PC is left for ``advance_pc``.

    Raises:
        UnimplementedOpcodeError: No handler for the instruction.
        OutOfBoundsError: Memory, key or call stack access out of range.
    """
    decoded_instruction = decode(instruction)
    handler = INSTRUCTION_TABLE[decoded_instruction.opcode]
    return handler(state, decoded_instruction, devices)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> int:
    """Read the big-endian instruction word at PC."""
    pc = int(state.pc)
    check_memory_range(pc, INSTRUCTION_WIDTH)
    return _pack_u16(int(state.memory[pc]), int(state.memory[pc + 1]))


def advance_pc(state: EmulatorState) -> EmulatorState:
    """Move PC past the instruction that just completed."""
    return state.replace(pc=jnp.asarray((int(state.pc) + INSTRUCTION_WIDTH) & 0xFFFF, dtype=jnp.uint16))


def step(state: EmulatorState, devices: Optional[Devices] = None) -> tuple[EmulatorState, int]:
    """Run one fetch-decode-execute cycle, returning the new state and the executed word."""
    instruction = fetch(state)
    state = execute(state, instruction, devices)
    return advance_pc(state), instruction
