"""CHIP-8 emulator errors.

Library code never terminates the process: loading and execution problems are
raised as one of the exceptions below and hosts decide what to do with them.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class LoadFault(Chip8Error):
    """Program image could not be read or does not fit in memory."""

    def __init__(self, reason: str, path: Optional[str] = None):
        self.reason = reason
        self.path = path
        if path is None:
            super().__init__(reason)
        else:
            super().__init__(f"{reason}: {path}")


class DecodeFault(Chip8Error):
    """Instruction is not part of the supported opcode set."""

    def __init__(self, opcode: int, message: str = "Unsupported opcode"):
        self.opcode = opcode
        super().__init__(f"{message}: 0x{opcode:04X}")


class StackFault(DecodeFault):
    """CALL past the maximum depth or RET on an empty stack."""

    def __init__(self, opcode: int, pointer: int):
        self.pointer = pointer
        kind = "Stack overflow" if pointer > 0 else "Stack underflow"
        super().__init__(opcode, f"{kind} (depth {pointer})")


class MemoryFault(Chip8Error):
    """Program counter points outside addressable memory."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Instruction fetch outside memory at 0x{address:04X}")
