"""CHIP-8 display operations."""

import jax.numpy as jnp
from jaxchip.state import EmulatorState
from jaxchip.decode import DecodedInstruction
from jaxchip.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, PIXEL_ON

# Pre-computed coordinates of every cell of the flat row-major framebuffer
cols = jnp.arange(SCREEN_WIDTH * SCREEN_HEIGHT) % SCREEN_WIDTH
rows = jnp.arange(SCREEN_WIDTH * SCREEN_HEIGHT) // SCREEN_WIDTH


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprites are clipped at the right and bottom edges, never wrapped. Any lit
    pixel turned off by the XOR sets VF to 1; otherwise VF is cleared.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)
    height = jnp.astype(instruction.n, jnp.int32)

    col_offset = cols - sprite_x
    row_offset = rows - sprite_y
    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < height)

    address = jnp.clip(jnp.astype(state.I, jnp.int32) + row_offset, 0, MEMORY_SIZE - 1)
    sprite_bytes = jnp.astype(state.memory[address], jnp.int32)
    bits = (sprite_bytes >> (7 - jnp.clip(col_offset, 0, 7))) & 1
    sprite = (bits == 1) & in_sprite

    collision = jnp.any((state.framebuffer != 0) & sprite)
    return state.replace(
        framebuffer=jnp.where(sprite, state.framebuffer ^ PIXEL_ON, state.framebuffer),
        V=state.V.at[15].set(jnp.astype(collision, jnp.uint8))
    )
