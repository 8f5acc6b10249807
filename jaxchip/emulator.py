"""Main CHIP-8 emulator execution engine."""

import os
from typing import Iterable, Optional, Union

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from jaxchip.state import EmulatorState, create_state
from jaxchip.decode import decode, is_supported
from jaxchip.errors import DecodeFault, StackFault, MemoryFault, LoadFault
from jaxchip.constants import (
    PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, NUM_KEYS,
)
from jaxchip.stack import depth
from jaxchip.instructions.system import execute_system_instruction
from jaxchip.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from jaxchip.instructions.alu import execute_alu_operation
from jaxchip.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from jaxchip.instructions.display import execute_display
from jaxchip.instructions.misc import execute_misc_instruction


@jax.jit
def _dispatch(state: EmulatorState, instruction: jnp.ndarray) -> EmulatorState:
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _check_stack(state: EmulatorState, instruction: int) -> None:
    pointer = depth(state.stack)
    if instruction & 0xF000 == 0x2000 and pointer >= STACK_SIZE:
        raise StackFault(instruction, pointer)
    if instruction & 0xF0FF == 0x00EE and pointer == 0:
        raise StackFault(instruction, pointer)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The PC is expected to already point past the instruction (see `fetch`).
    Raises `DecodeFault` for opcodes outside the instruction set and
    `StackFault` on call stack overflow or underflow; nothing is applied in
    either case.
    """
    instruction = int(instruction) & 0xFFFF
    if not is_supported(decode(instruction)):
        raise DecodeFault(instruction)
    _check_stack(state, instruction)
    return _dispatch(state, jnp.uint16(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise MemoryFault(pc)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Advance one instruction: fetch, decode and execute.

    On a fault the exception propagates and the caller's `state` is left as
    it was before the fetch.
    """
    next_state, instruction = fetch(state)
    return execute(next_state, instruction)


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Advance time by one tick, flooring both timers at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """Run one host frame: N instructions, then a single timer tick."""
    for _ in range(instructions_per_frame):
        state = step(state)
    return decrement_timers(state)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Load a program image into CHIP-8 memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise LoadFault(f"Program is too large ({len(program)} > {MAX_PROGRAM_SIZE} bytes)")
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise LoadFault(f"Could not open game file ({e.strerror or e})", path=str(filename)) from e
    try:
        return load_program(state, rom_data)
    except LoadFault as e:
        raise LoadFault(e.reason, path=str(filename)) from None


def create_machine(
    source: Union[str, os.PathLike, bytes, bytearray],
    rng: Optional[jax.random.PRNGKey] = None,
    increment_index: bool = False,
) -> EmulatorState:
    """Create a ready-to-run state from a ROM path or a raw program image."""
    state = create_state(rng, increment_index=increment_index)
    if isinstance(source, (bytes, bytearray)):
        return load_program(state, bytes(source))
    return load_rom(state, os.fspath(source))


def view_dimensions() -> tuple[int, int]:
    """Logical display size as (width, height)."""
    return SCREEN_WIDTH, SCREEN_HEIGHT


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Set the state of one hexadecimal key (0x0-0xF)."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key must be in range 0x0-0xF, got {key}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def set_keypad(state: EmulatorState, keys: Iterable[bool]) -> EmulatorState:
    """Replace the whole keypad with 16 key states."""
    keypad = jnp.asarray(list(keys), dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got {keypad.shape[0]}")
    return state.replace(keypad=keypad)


def get_pixels(state: EmulatorState) -> np.ndarray:
    """Framebuffer as a flat row-major uint8 array (0x00 off, 0xFF on)."""
    return np.asarray(state.framebuffer, dtype=np.uint8)


def sound_active(state: EmulatorState) -> bool:
    """Whether the host should be playing a tone this frame."""
    return int(state.sound_timer) > 0
