"""Tests for system instructions (0xxx)."""

import pytest
import jax.numpy as jnp
from jaxchip import execute, StackFault, STACK_SIZE


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(framebuffer=fresh_state.framebuffer.at[0].set(0xFF))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.framebuffer) == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_unwind_in_order(fresh_state):
    """Return addresses come back last-in first-out."""
    state = fresh_state.replace(pc=jnp.uint16(0x202))
    state = execute(state, 0x2400)
    state = state.replace(pc=jnp.uint16(0x402))
    state = execute(state, 0x2600)

    state = execute(state, 0x00EE)
    assert state.pc == 0x402
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


def test_call_past_depth_faults(fresh_state):
    """CALL with a full stack is a stack fault."""
    state = fresh_state
    for _ in range(STACK_SIZE):
        state = execute(state, 0x2300)
    assert state.stack.pointer == STACK_SIZE

    with pytest.raises(StackFault) as excinfo:
        execute(state, 0x2300)
    assert excinfo.value.opcode == 0x2300
    assert excinfo.value.pointer == STACK_SIZE


def test_return_on_empty_stack_faults(fresh_state):
    """RET with nothing to return to is a stack fault."""
    with pytest.raises(StackFault) as excinfo:
        execute(fresh_state, 0x00EE)
    assert "underflow" in str(excinfo.value)
