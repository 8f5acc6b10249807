"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Secondary selectors for the families that need them
SYSTEM_OPERATIONS = frozenset({0xE0, 0xEE})
ALU_OPERATIONS = frozenset({0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE})
KEY_OPERATIONS = frozenset({0x9E, 0xA1})
MISC_OPERATIONS = frozenset({0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65})


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


def is_supported(instruction: DecodedInstruction) -> bool:
    """Whether a decoded (concrete) instruction belongs to the instruction set."""
    if instruction.opcode == 0x0:
        return instruction.nn in SYSTEM_OPERATIONS
    if instruction.opcode == 0x8:
        return instruction.n in ALU_OPERATIONS
    if instruction.opcode == 0xE:
        return instruction.nn in KEY_OPERATIONS
    if instruction.opcode == 0xF:
        return instruction.nn in MISC_OPERATIONS
    return True


def disassemble(instruction: int) -> str:
    """Render an instruction as a mnemonic, for logs and fault reports."""
    d = decode(instruction)
    if not is_supported(d):
        return f"DW 0x{instruction:04X}"
    x, y, nn, nnn = d.x, d.y, d.nn, d.nnn
    if d.opcode == 0x0:
        return "CLS" if nn == 0xE0 else "RET"
    if d.opcode == 0x8:
        mnemonic = {0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
                    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL"}[d.n]
        return f"{mnemonic} V{x:X}, V{y:X}"
    if d.opcode == 0xE:
        return f"{'SKP' if nn == 0x9E else 'SKNP'} V{x:X}"
    if d.opcode == 0xF:
        return {
            0x07: f"LD V{x:X}, DT",
            0x0A: f"LD V{x:X}, K",
            0x15: f"LD DT, V{x:X}",
            0x18: f"LD ST, V{x:X}",
            0x1E: f"ADD I, V{x:X}",
            0x29: f"LD F, V{x:X}",
            0x33: f"LD B, V{x:X}",
            0x55: f"LD [I], V{x:X}",
            0x65: f"LD V{x:X}, [I]",
        }[nn]
    return {
        0x1: f"JP 0x{nnn:03X}",
        0x2: f"CALL 0x{nnn:03X}",
        0x3: f"SE V{x:X}, 0x{nn:02X}",
        0x4: f"SNE V{x:X}, 0x{nn:02X}",
        0x5: f"SE V{x:X}, V{y:X}",
        0x6: f"LD V{x:X}, 0x{nn:02X}",
        0x7: f"ADD V{x:X}, 0x{nn:02X}",
        0x9: f"SNE V{x:X}, V{y:X}",
        0xA: f"LD I, 0x{nnn:03X}",
        0xB: f"JP V0, 0x{nnn:03X}",
        0xC: f"RND V{x:X}, 0x{nn:02X}",
        0xD: f"DRW V{x:X}, V{y:X}, {d.n}",
    }[d.opcode]
