"""
MIPS Instruction Encoder
========================

Pass 2 of the assembler maps each decoded instruction to a 32-bit word.
Encoding is a pure function of the instruction, the completed symbol
table and the instruction's own address.

Dispatch
--------
The mnemonic selects an InstructionInfo from the static instruction table
(see mips_asm.cpu.mips32); its format selects one of the encoders below:

| Format    | Source              | Fields                                   |
|-----------|---------------------|------------------------------------------|
| REGISTER  | add rd, rs, rt      | rs<<21 | rt<<16 | rd<<11 | funct         |
| SHIFT     | sll rd, rt, shamt   | rt<<16 | rd<<11 | shamt<<6 | funct       |
| IMMEDIATE | addi rt, rs, imm    | opcode | rs<<21 | rt<<16 | imm & 0xFFFF  |
| BRANCH    | beq rs, [rt,] label | opcode | rs<<21 | offset & 0xFFFF       |
| JUMP      | j label             | opcode | (target >> 2) & 0x03FFFFFF    |

Source operand order differs from field order, so each encoder maps
operands to fields explicitly.

Branch Offsets
--------------
Branch offsets are PC-relative to the instruction after the branch and
counted in words::

    offset = (target - (address + 4)) / 4     (truncated toward zero)

The rt field of a branch is always 0. A middle register operand may be
written for readability; it is validated but not encoded.
"""

from typing import Callable, Optional
import logging

from mips_asm.errors import (
    AddressRangeError,
    BranchRangeError,
    InvalidRegisterError,
    MalformedOperandError,
    MisalignedAddressError,
    UnknownMnemonicError,
)
from mips_asm.assembler.lexer import DecodedInstruction, Token
from mips_asm.assembler.symbols import SymbolTable
from mips_asm.cpu import (
    BRANCH_OFFSET_MAX,
    BRANCH_OFFSET_MIN,
    IMMEDIATE_MASK,
    IMMEDIATE_MAX,
    IMMEDIATE_MIN,
    INSTRUCTION_SIZE,
    JUMP_TARGET_MASK,
    MAX_ADDRESS,
    MNEMONICS,
    SHAMT_MAX,
    WORD_MASK,
    InstructionFormat,
    InstructionInfo,
    get_instruction_info,
    parse_integer,
    register_number,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Public Interface
# =============================================================================

def encode(inst: DecodedInstruction, symbols: SymbolTable, address: int) -> int:
    """
    Encode one instruction as a 32-bit word.

    Args:
        inst: The tokenized instruction
        symbols: Completed symbol table from pass 1
        address: Address of this instruction

    Returns:
        The machine word (0..0xFFFFFFFF)

    Raises:
        UnknownMnemonicError: Mnemonic not in the instruction table
        MalformedOperandError: Wrong operand count, bad immediate, shift
            amount or branch range
        InvalidRegisterError: Register missing '$' or outside $0-$31
        UnresolvedLabelError: Branch/jump target label not defined
        MisalignedAddressError: Jump target not a multiple of 4
    """
    info = get_instruction_info(inst.name)
    if info is None:
        raise UnknownMnemonicError(
            inst.name,
            location=inst.location,
            source_line=inst.source_line,
            valid_mnemonics=list(MNEMONICS),
        )

    _check_operand_count(inst, info)

    word = _ENCODERS[info.format](inst, info, symbols, address)
    return word & WORD_MASK


def branch_offset(target: int, address: int) -> int:
    """
    Word offset from the instruction after a branch at address to target.

    Division truncates toward zero.
    """
    delta = target - (address + INSTRUCTION_SIZE)
    offset = abs(delta) // INSTRUCTION_SIZE
    return offset if delta >= 0 else -offset


# =============================================================================
# Format Encoders
# =============================================================================

def _encode_register(inst: DecodedInstruction, info: InstructionInfo,
                     symbols: SymbolTable, address: int) -> int:
    """add rd, rs, rt"""
    rd, rs, rt = (_register(inst, op) for op in inst.operands)
    return (rs << 21) | (rt << 16) | (rd << 11) | info.funct


def _encode_shift(inst: DecodedInstruction, info: InstructionInfo,
                  symbols: SymbolTable, address: int) -> int:
    """sll rd, rt, shamt"""
    rd = _register(inst, inst.operands[0])
    rt = _register(inst, inst.operands[1])
    shamt = _integer(inst, inst.operands[2], 0, SHAMT_MAX, "shift amount")
    return (rt << 16) | (rd << 11) | (shamt << 6) | info.funct


def _encode_immediate(inst: DecodedInstruction, info: InstructionInfo,
                      symbols: SymbolTable, address: int) -> int:
    """addi rt, rs, imm"""
    rt = _register(inst, inst.operands[0])
    rs = _register(inst, inst.operands[1])
    imm = _integer(inst, inst.operands[2], IMMEDIATE_MIN, IMMEDIATE_MAX, "immediate")
    return info.opcode | (rs << 21) | (rt << 16) | (imm & IMMEDIATE_MASK)


def _encode_branch(inst: DecodedInstruction, info: InstructionInfo,
                   symbols: SymbolTable, address: int) -> int:
    """beq rs, [rt,] label"""
    rs = _register(inst, inst.operands[0])
    if len(inst.operands) == 3:
        # Checked for validity only; the rt field stays 0
        _register(inst, inst.operands[1])
    target_token = inst.operands[-1]
    target = _target_address(inst, target_token, symbols)

    offset = branch_offset(target, address)
    if not BRANCH_OFFSET_MIN <= offset <= BRANCH_OFFSET_MAX:
        raise BranchRangeError(
            target_token.text,
            offset,
            location=target_token.location,
            source_line=inst.source_line,
        )

    logger.debug(
        f"{inst.name} at 0x{address:08X} -> 0x{target:08X} (offset {offset})"
    )
    return info.opcode | (rs << 21) | (0 << 16) | (offset & IMMEDIATE_MASK)


def _encode_jump(inst: DecodedInstruction, info: InstructionInfo,
                 symbols: SymbolTable, address: int) -> int:
    """j label"""
    target_token = inst.operands[0]
    target = _target_address(inst, target_token, symbols)
    if target % INSTRUCTION_SIZE:
        raise MisalignedAddressError(
            target,
            location=target_token.location,
            source_line=inst.source_line,
        )
    return info.opcode | ((target >> 2) & JUMP_TARGET_MASK)


_ENCODERS: dict[InstructionFormat, Callable[..., int]] = {
    InstructionFormat.REGISTER: _encode_register,
    InstructionFormat.SHIFT: _encode_shift,
    InstructionFormat.IMMEDIATE: _encode_immediate,
    InstructionFormat.BRANCH: _encode_branch,
    InstructionFormat.JUMP: _encode_jump,
}


# =============================================================================
# Operand Helpers
# =============================================================================

def _check_operand_count(inst: DecodedInstruction, info: InstructionInfo) -> None:
    count = len(inst.operands)
    if count in info.operand_counts:
        return

    expected = " or ".join(str(n) for n in info.operand_counts)
    # Point at the first surplus operand, or at the mnemonic when short
    limit = max(info.operand_counts)
    location = inst.operands[limit].location if count > limit else inst.location
    raise MalformedOperandError(
        f"'{inst.name}' takes {expected} operands, got {count}",
        location=location,
        hint=f"usage: {inst.name} {info.syntax}",
        source_line=inst.source_line,
    )


def _register(inst: DecodedInstruction, token: Token) -> int:
    number = register_number(token.text)
    if number is None:
        raise InvalidRegisterError(
            token.text,
            location=token.location,
            source_line=inst.source_line,
        )
    return number


def _integer(inst: DecodedInstruction, token: Token,
             minimum: int, maximum: int, what: str) -> int:
    value = parse_integer(token.text)
    if value is None:
        raise MalformedOperandError(
            f"{what} '{token.text}' is not a number",
            location=token.location,
            hint="write decimal (-12) or hexadecimal (0x1F) values",
            source_line=inst.source_line,
        )
    if not minimum <= value <= maximum:
        raise MalformedOperandError(
            f"{what} {value} out of range ({minimum} to {maximum})",
            location=token.location,
            source_line=inst.source_line,
        )
    return value


def _target_address(inst: DecodedInstruction, token: Token,
                    symbols: SymbolTable) -> int:
    """Resolve a branch/jump target: a label name or an absolute address."""
    literal: Optional[int] = parse_integer(token.text)
    if literal is None:
        return symbols.lookup(
            token.text,
            location=token.location,
            source_line=inst.source_line,
        )
    if not 0 <= literal <= MAX_ADDRESS:
        raise AddressRangeError(
            f"target address {literal:#x} is outside the 32-bit address space",
            location=token.location,
            source_line=inst.source_line,
        )
    return literal
