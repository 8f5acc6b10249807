"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from jaxchip import create_state, SCREEN_WIDTH


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state(jax.random.PRNGKey(0))


@pytest.fixture
def indexed_state():
    """Provide a fresh state where FX55/FX65 advance I."""
    return create_state(jax.random.PRNGKey(0), increment_index=True)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def pixel(state, x, y):
    """Read one framebuffer cell as an int (0x00 or 0xFF)."""
    return int(state.framebuffer[y * SCREEN_WIDTH + x])
