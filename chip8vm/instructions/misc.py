"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState, check_memory_range
from chip8vm.decode import DecodedInstruction
from chip8vm.devices import Devices
from chip8vm.constants import FONT_START, FONT_GLYPH_SIZE
from chip8vm.errors import UnimplementedOpcodeError


def _require_devices(devices: Devices, instruction: DecodedInstruction) -> Devices:
    if devices is None:
        raise ValueError(f"Instruction 0x{instruction.raw:04X} needs timers attached")
    return devices


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    delay = _require_devices(devices, instruction).delay_timer.value
    return state.replace(V=state.V.at[instruction.x].set(delay))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX0A - Suspend until a key press is delivered into VX."""
    return state.replace(awaiting_key=instruction.x)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    _require_devices(devices, instruction).delay_timer.set(int(state.V[instruction.x]))
    return state


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    _require_devices(devices, instruction).sound_timer.set(int(state.V[instruction.x]))
    return state


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX1E - Add VX to I register."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    address = int(state.I)
    check_memory_range(address, 3)

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[address:address + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    address = int(state.I)
    check_memory_range(address, count)
    new_memory = state.memory.at[address:address + count].set(state.V[:count])

    if state.load_store_increments_i:
        return state.replace(memory=new_memory, I=jnp.asarray((address + count) & 0xFFFF, dtype=jnp.uint16))
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    address = int(state.I)
    check_memory_range(address, count)
    new_V = state.V.at[:count].set(state.memory[address:address + count])

    if state.load_store_increments_i:
        return state.replace(V=new_V, I=jnp.asarray((address + count) & 0xFFFF, dtype=jnp.uint16))
    return state.replace(V=new_V)


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.value())
    if handler is None:
        raise UnimplementedOpcodeError(instruction.raw)
    return handler(state, instruction, devices)
