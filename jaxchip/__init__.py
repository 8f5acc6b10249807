"""CHIP-8 emulator package."""

from jaxchip.state import EmulatorState, StackState, create_state
from jaxchip.emulator import (
    execute, fetch, step, decrement_timers, run_frame,
    load_rom, load_program, create_machine,
    view_dimensions, set_key, set_keypad, get_pixels, sound_active,
)
from jaxchip.decode import DecodedInstruction, decode, is_supported, disassemble
from jaxchip.errors import Chip8Error, LoadFault, DecodeFault, StackFault, MemoryFault
from jaxchip.constants import *
from jaxchip.rendering import framebuffer_to_rgb, create_color_scheme, save_frame
from jaxchip.config import EmulatorConfig

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "decrement_timers",
    "run_frame",
    "load_rom",
    "load_program",
    "create_machine",
    "view_dimensions",
    "set_key",
    "set_keypad",
    "get_pixels",
    "sound_active",
    "DecodedInstruction",
    "decode",
    "is_supported",
    "disassemble",
    "Chip8Error",
    "LoadFault",
    "DecodeFault",
    "StackFault",
    "MemoryFault",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "framebuffer_to_rgb",
    "create_color_scheme",
    "save_frame",
    "EmulatorConfig",
]
