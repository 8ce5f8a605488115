"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState, check_memory_range
from chip8vm.decode import DecodedInstruction
from chip8vm.devices import Devices
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER

SPRITE_WIDTH = 8

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def draw_sprite(display: jnp.ndarray, x: int, y: int, sprite: jnp.ndarray) -> tuple[jnp.ndarray, bool]:
    """XOR ``sprite`` onto ``display`` with its top-left corner at (x, y).

    Each sprite byte is one row, most significant bit leftmost. Pixels past
    the right or bottom edge are clipped. Returns the new display and whether
    any lit pixel was turned off.
    """
    height = sprite.shape[0]
    if height == 0:
        return display, False

    in_sprite = (xx >= x) & (xx < x + SPRITE_WIDTH) & (yy >= y) & (yy < y + height)

    row_offset = jnp.clip(yy - y, 0, height - 1)
    col_offset = jnp.clip(xx - x, 0, SPRITE_WIDTH - 1)
    sprite_rows = sprite.astype(jnp.int32)[row_offset]
    pixels = (((sprite_rows >> (SPRITE_WIDTH - 1 - col_offset)) & 1) == 1) & in_sprite

    erased = bool(jnp.any(display & pixels))
    return display ^ pixels, erased


def execute_display(state: EmulatorState, instruction: DecodedInstruction, devices: Devices = None) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Coordinates are used as-is: a start at or past the right or bottom edge
    draws nothing and clears VF.
    """
    x, y = instruction.reg_indices()

    address = int(state.I)
    check_memory_range(address, instruction.n)
    sprite = state.memory[address:address + instruction.n]

    display, erased = draw_sprite(state.display, int(state.V[x]), int(state.V[y]), sprite)
    return state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(int(erased))
    )
