"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.config import MachineConfig
from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, REGISTER_COUNT,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
)
from chip8vm.errors import OutOfBoundsError, ProgramTooLargeError
from chip8vm.rng import new_key

NOT_WAITING = -1


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[x, y]``. ``awaiting_key`` holds the destination
    register of a pending FX0A, or ``NOT_WAITING``.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    awaiting_key: int = NOT_WAITING
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    jump_uses_vx: bool = field(pytree_node=False, default=False)
    load_store_increments_i: bool = field(pytree_node=False, default=False)


def create_state(config: Optional[MachineConfig] = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if config is None:
        config = MachineConfig()
    state = EmulatorState(
        new_key(config.seed),
        shift_uses_vy=config.shift_uses_vy,
        jump_uses_vx=config.jump_uses_vx,
        load_store_increments_i=config.load_store_increments_i,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def check_memory_range(address: int, length: int = 1) -> None:
    """Raise OutOfBoundsError unless memory[address:address + length] lies inside memory."""
    if length <= 0:
        return
    if address < 0 or address + length > MEMORY_SIZE:
        raise OutOfBoundsError(
            f"Memory access 0x{address:04X}..0x{address + length - 1:04X} outside 0x000..0x{MEMORY_SIZE - 1:03X}"
        )


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes verbatim into memory starting at 0x200."""
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(program) > capacity:
        raise ProgramTooLargeError(len(program), capacity)
    if not program:
        return state
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)
