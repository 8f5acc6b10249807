"""CHIP-8 emulator state structures."""

import time
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from jaxchip.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)


@dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The framebuffer is stored flat and row-major, one byte per pixel, with
    0x00 for unlit and 0xFF for lit pixels.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    framebuffer: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros(SCREEN_WIDTH * SCREEN_HEIGHT, dtype=jnp.uint8)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    # FX55/FX65 advance I past the copied block when set
    increment_index: bool = field(pytree_node=False, default=False)


def create_state(rng: Optional[jax.random.PRNGKey] = None, increment_index: bool = False) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Without an explicit key the random source is seeded from the clock, so
    CXKK differs from run to run.
    """
    if rng is None:
        rng = jax.random.PRNGKey(time.time_ns() & 0xFFFFFFFF)
    state = EmulatorState(rng, increment_index=increment_index)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
