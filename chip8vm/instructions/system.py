"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.devices import Devices
from chip8vm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


SYSTEM_INSTRUCTIONS = {
    0x0: execute_clear_screen,
    0xE: execute_return,
}


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """Dispatch system instructions on the bottom nibble; 0NNN machine routines are ignored."""
    handler = SYSTEM_INSTRUCTIONS.get(instruction.n, no_op)
    return handler(state, instruction, devices)
