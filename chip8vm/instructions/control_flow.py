"""CHIP-8 control flow instructions.

Every cycle adds 2 to PC after the handler returns, so handlers that
redirect control flow store the target minus 2.
"""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.devices import Devices
from chip8vm.constants import INSTRUCTION_WIDTH
from chip8vm.errors import UnimplementedOpcodeError
from chip8vm.keyboard import check_key
from chip8vm.stack import push


def _pc_for(address: int) -> jnp.ndarray:
    """PC value that lands on ``address`` after the post-increment."""
    return jnp.asarray((address - INSTRUCTION_WIDTH) & 0xFFFF, dtype=jnp.uint16)


def _skip(state: EmulatorState) -> EmulatorState:
    return state.replace(pc=jnp.asarray((int(state.pc) + INSTRUCTION_WIDTH) & 0xFFFF, dtype=jnp.uint16))


def execute_jump(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=_pc_for(instruction.address()))


def execute_call(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn, require_zero_n: bool = False):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
        if require_zero_n and instruction.n != 0:
            raise UnimplementedOpcodeError(instruction.raw)
        if condition_fn(state, instruction):
            return _skip(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.value()
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.value()
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y]),
    require_zero_n=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y]),
    require_zero_n=True,
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or XNN + VX when ``jump_uses_vx`` is set."""
    offset_register = instruction.x if state.jump_uses_vx else 0
    jump_address = instruction.address() + int(state.V[offset_register])
    return state.replace(pc=_pc_for(jump_address))


KEY_PRESSED = 0x9E
KEY_NOT_PRESSED = 0xA1


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    operation = instruction.value()
    if operation not in (KEY_PRESSED, KEY_NOT_PRESSED):
        raise UnimplementedOpcodeError(instruction.raw)
    if devices is None:
        raise ValueError(f"Instruction 0x{instruction.raw:04X} needs a keyboard")

    key = check_key(int(state.V[instruction.x]))
    key_pressed = devices.keyboard.is_pressed(key)
    if key_pressed != (operation == KEY_NOT_PRESSED):
        return _skip(state)
    return state
