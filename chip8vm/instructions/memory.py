"""CHIP-8 memory and register operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.devices import Devices
from chip8vm.rng import random_byte


def execute_set(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.value()))


def execute_add(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping at 256 without touching VF."""
    result = (int(state.V[instruction.x]) + instruction.value()) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(result))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.address(), dtype=jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, random_value = random_byte(state.rng)
    return state.replace(V=state.V.at[instruction.x].set(random_value & instruction.value()), rng=key)
