"""
MIPS32 Instruction Subset Definition
====================================

This module defines the fixed MIPS32 instruction subset understood by the
assembler: the format class of each mnemonic, its fixed opcode/funct
field, and the operand shape it expects in source.

Instruction Formats
-------------------
All instructions are 32 bits wide. Five format classes are used:

1. **REGISTER**: three-register ALU operation
   - Source: ``add rd, rs, rt``
   - Word:   ``(rs << 21) | (rt << 16) | (rd << 11) | funct``
   - Example: add $1, $2, $3 -> 0x00430820

2. **SHIFT**: shift by a constant amount
   - Source: ``sll rd, rt, shamt``
   - Word:   ``(rt << 16) | (rd << 11) | (shamt << 6) | funct``

3. **IMMEDIATE**: register and 16-bit immediate
   - Source: ``addi rt, rs, imm``
   - Word:   ``opcode | (rs << 21) | (rt << 16) | (imm & 0xFFFF)``
   - Example: addi $1, $0, 5 -> 0x20010005

4. **BRANCH**: PC-relative conditional branch
   - Source: ``beq rs, rt, label`` (rt is optional)
   - Word:   ``opcode | (rs << 21) | (offset & 0xFFFF)``
   - The offset counts words from the instruction after the branch.
   - The rt field is always encoded as 0; the source register is checked
     but not stored.

5. **JUMP**: absolute jump
   - Source: ``j label``
   - Word:   ``opcode | ((target >> 2) & 0x03FFFFFF)``

Opcodes in the table are stored already shifted into bits 31..26, so
they can be OR-ed straight into the word.

Registers
---------
Registers are written as ``$`` followed by a decimal ordinal, ``$0`` to
``$31``. Symbolic names (``$t0``, ``$sp``) are not part of this subset.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Architecture Constants
# =============================================================================

DEFAULT_BASE_ADDRESS = 0x00400000   # Start of the MIPS text segment
INSTRUCTION_SIZE = 4                # Bytes per instruction
NUM_REGISTERS = 32
MAX_ADDRESS = 0xFFFFFFFF

WORD_MASK = 0xFFFFFFFF
IMMEDIATE_MASK = 0xFFFF
JUMP_TARGET_MASK = 0x03FFFFFF
SHAMT_MAX = 31

# Immediates may be written signed or unsigned; both must fit 16 bits
IMMEDIATE_MIN = -0x8000
IMMEDIATE_MAX = 0xFFFF

# Branch offsets are signed 16-bit word counts
BRANCH_OFFSET_MIN = -0x8000
BRANCH_OFFSET_MAX = 0x7FFF


# =============================================================================
# Instruction Format Enumeration
# =============================================================================

class InstructionFormat(Enum):
    """
    Encoding format classes.

    The format decides how many operands an instruction takes, how each
    operand token is interpreted, and which bit fields it lands in.
    """
    REGISTER = auto()
    SHIFT = auto()
    IMMEDIATE = auto()
    BRANCH = auto()
    JUMP = auto()

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return {
            InstructionFormat.REGISTER: "register",
            InstructionFormat.SHIFT: "shift",
            InstructionFormat.IMMEDIATE: "immediate",
            InstructionFormat.BRANCH: "branch",
            InstructionFormat.JUMP: "jump",
        }[self]


# Operand shape per format, as written in source
OPERAND_SYNTAX: dict[InstructionFormat, str] = {
    InstructionFormat.REGISTER: "rd, rs, rt",
    InstructionFormat.SHIFT: "rd, rt, shamt",
    InstructionFormat.IMMEDIATE: "rt, rs, immediate",
    InstructionFormat.BRANCH: "rs, [rt,] label",
    InstructionFormat.JUMP: "label",
}

# Accepted operand counts per format
OPERAND_COUNTS: dict[InstructionFormat, tuple[int, ...]] = {
    InstructionFormat.REGISTER: (3,),
    InstructionFormat.SHIFT: (3,),
    InstructionFormat.IMMEDIATE: (3,),
    InstructionFormat.BRANCH: (2, 3),
    InstructionFormat.JUMP: (1,),
}


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Fixed encoding fields of one mnemonic.

    Attributes:
        format: The encoding format class
        opcode: Primary opcode, pre-shifted into bits 31..26
        funct: Function code for REGISTER and SHIFT formats (bits 5..0)
    """
    format: InstructionFormat
    opcode: int = 0
    funct: int = 0

    @property
    def operand_counts(self) -> tuple[int, ...]:
        return OPERAND_COUNTS[self.format]

    @property
    def syntax(self) -> str:
        return OPERAND_SYNTAX[self.format]

    def __repr__(self) -> str:
        return (
            f"InstructionInfo({self.format.name}, "
            f"opcode=0x{self.opcode:08X}, funct=0x{self.funct:02X})"
        )


# =============================================================================
# Instruction Table
# =============================================================================
# Key: mnemonic (lowercase, case-sensitive lookup)
# Value: InstructionInfo(format, opcode, funct)
# =============================================================================

INSTRUCTION_TABLE: dict[str, InstructionInfo] = {
    # Register format: opcode 0, operation selected by funct
    "add": InstructionInfo(InstructionFormat.REGISTER, funct=0x20),
    "sub": InstructionInfo(InstructionFormat.REGISTER, funct=0x22),
    "and": InstructionInfo(InstructionFormat.REGISTER, funct=0x24),
    "or": InstructionInfo(InstructionFormat.REGISTER, funct=0x25),

    # Shift format
    "sll": InstructionInfo(InstructionFormat.SHIFT, funct=0x00),

    # Immediate format
    "addi": InstructionInfo(InstructionFormat.IMMEDIATE, opcode=0x20000000),
    "andi": InstructionInfo(InstructionFormat.IMMEDIATE, opcode=0x30000000),

    # Branch format
    "beq": InstructionInfo(InstructionFormat.BRANCH, opcode=0x10000000),
    "bne": InstructionInfo(InstructionFormat.BRANCH, opcode=0x14000000),

    # Jump format
    "j": InstructionInfo(InstructionFormat.JUMP, opcode=0x08000000),
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

# Table order, used in error hints
MNEMONICS: tuple[str, ...] = tuple(INSTRUCTION_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up the encoding fields of a mnemonic.

    Lookup is case-sensitive: "ADD" is not a valid mnemonic.

    Returns:
        InstructionInfo if found, None otherwise
    """
    return INSTRUCTION_TABLE.get(mnemonic)


def register_number(token: str) -> Optional[int]:
    """
    Parse a register reference such as "$17".

    Args:
        token: Operand text, including the '$' prefix

    Returns:
        The register ordinal (0-31), or None if the token is not a valid
        register reference.
    """
    if not token.startswith("$"):
        return None
    digits = token[1:]
    # isdecimal() rejects signs, spaces and unicode superscripts
    if not digits.isdecimal() or not digits.isascii():
        return None
    number = int(digits)
    if number >= NUM_REGISTERS:
        return None
    return number


def parse_integer(token: str) -> Optional[int]:
    """
    Parse a signed decimal or 0x-prefixed hexadecimal literal.

    Returns:
        The integer value, or None if the token is not a number.
    """
    text = token
    sign = 1
    if text[:1] in ("+", "-"):
        if text[0] == "-":
            sign = -1
        text = text[1:]

    if text[:2] in ("0x", "0X"):
        digits, base = text[2:], 16
    else:
        digits, base = text, 10

    if not digits or not digits.isascii() or not digits.isalnum():
        return None
    try:
        return sign * int(digits, base)
    except ValueError:
        return None
