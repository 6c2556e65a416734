"""
MIPS Assembler CPU Package
==========================

Architecture definitions for the MIPS32 instruction subset: the static
mnemonic table, format classes, field masks and register parsing.

Modules:
    mips32: Instruction table, format classes and operand helpers.

Usage:
    from mips_asm.cpu import (
        InstructionFormat,
        InstructionInfo,
        INSTRUCTION_TABLE,
        get_instruction_info,
    )
"""

from mips_asm.cpu.mips32 import (
    # Architecture constants
    DEFAULT_BASE_ADDRESS,
    INSTRUCTION_SIZE,
    NUM_REGISTERS,
    MAX_ADDRESS,
    WORD_MASK,
    IMMEDIATE_MASK,
    JUMP_TARGET_MASK,
    SHAMT_MAX,
    IMMEDIATE_MIN,
    IMMEDIATE_MAX,
    BRANCH_OFFSET_MIN,
    BRANCH_OFFSET_MAX,
    # Core types
    InstructionFormat,
    InstructionInfo,
    # Instruction table
    INSTRUCTION_TABLE,
    MNEMONICS,
    OPERAND_COUNTS,
    OPERAND_SYNTAX,
    # Lookup functions
    get_instruction_info,
    register_number,
    parse_integer,
)

__all__ = [
    "DEFAULT_BASE_ADDRESS",
    "INSTRUCTION_SIZE",
    "NUM_REGISTERS",
    "MAX_ADDRESS",
    "WORD_MASK",
    "IMMEDIATE_MASK",
    "JUMP_TARGET_MASK",
    "SHAMT_MAX",
    "IMMEDIATE_MIN",
    "IMMEDIATE_MAX",
    "BRANCH_OFFSET_MIN",
    "BRANCH_OFFSET_MAX",
    "InstructionFormat",
    "InstructionInfo",
    "INSTRUCTION_TABLE",
    "MNEMONICS",
    "OPERAND_COUNTS",
    "OPERAND_SYNTAX",
    "get_instruction_info",
    "register_number",
    "parse_integer",
]
