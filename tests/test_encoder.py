# =============================================================================
# test_encoder.py - Instruction Encoder Tests
# =============================================================================
# Tests for encoding single instructions into 32-bit words.
#
# Test coverage includes:
#   - Register, shift, immediate, branch and jump formats
#   - Operand-to-field mapping for every mnemonic
#   - Branch offset arithmetic and range checks
#   - Jump target masking and alignment
#   - Every named error for bad mnemonics and operands
# =============================================================================

import pytest

from mips_asm.assembler.encoder import branch_offset, encode
from mips_asm.assembler.lexer import tokenize
from mips_asm.assembler.symbols import SymbolTable, build_symbol_table
from mips_asm.cpu import INSTRUCTION_TABLE, InstructionFormat
from mips_asm.errors import (
    AddressRangeError,
    BranchRangeError,
    InvalidRegisterError,
    MalformedOperandError,
    MisalignedAddressError,
    UnknownMnemonicError,
    UnresolvedLabelError,
)


BASE = 0x00400000


# =============================================================================
# Helper Function
# =============================================================================

def enc(line: str, address: int = BASE, symbols: SymbolTable | None = None) -> int:
    """Tokenize and encode one line."""
    if symbols is None:
        symbols = SymbolTable()
    return encode(tokenize(line, 1), symbols, address)


# =============================================================================
# Register Format Tests
# =============================================================================

class TestRegisterFormat:
    """Test add/sub/and/or: source rd, rs, rt."""

    def test_add(self):
        assert enc("add $1, $2, $3") == 0x00430820

    def test_sub(self):
        assert enc("sub $4, $5, $6") == 0x00A62022

    def test_and(self):
        assert enc("and $7, $8, $9") == 0x01093824

    def test_or(self):
        assert enc("or $10, $11, $12") == 0x016C5025

    def test_max_registers(self):
        assert enc("add $31, $31, $31") == 0x03FFF820

    def test_zero_registers(self):
        assert enc("add $0, $0, $0") == 0x00000020

    def test_field_mapping(self):
        """rd, rs and rt land in bits 15:11, 25:21 and 20:16."""
        word = enc("add $17, $9, $22")
        assert (word >> 11) & 0x1F == 17
        assert (word >> 21) & 0x1F == 9
        assert (word >> 16) & 0x1F == 22

    def test_shamt_and_funct_fields(self):
        """Bits 10:6 are zero and bits 5:0 hold the funct code."""
        for mnemonic, info in INSTRUCTION_TABLE.items():
            if info.format is not InstructionFormat.REGISTER:
                continue
            for rd, rs, rt in ((0, 0, 0), (1, 2, 3), (31, 30, 29), (16, 8, 4)):
                word = enc(f"{mnemonic} ${rd}, ${rs}, ${rt}")
                assert (word >> 6) & 0x1F == 0
                assert word & 0x3F == info.funct
                assert word >> 26 == 0


# =============================================================================
# Shift Format Tests
# =============================================================================

class TestShiftFormat:
    """Test sll: source rd, rt, shamt."""

    def test_sll(self):
        assert enc("sll $2, $3, 4") == 0x00031100

    def test_sll_max_shift(self):
        word = enc("sll $1, $1, 31")
        assert (word >> 6) & 0x1F == 31

    def test_sll_hex_shift(self):
        assert enc("sll $2, $3, 0x4") == enc("sll $2, $3, 4")

    def test_nop(self):
        """sll $0, $0, 0 is the all-zero word."""
        assert enc("sll $0, $0, 0") == 0

    def test_shift_too_large(self):
        with pytest.raises(MalformedOperandError):
            enc("sll $1, $2, 32")

    def test_negative_shift(self):
        with pytest.raises(MalformedOperandError):
            enc("sll $1, $2, -1")

    def test_shift_not_a_number(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            enc("sll $1, $2, four")
        assert "not a number" in exc_info.value.message


# =============================================================================
# Immediate Format Tests
# =============================================================================

class TestImmediateFormat:
    """Test addi/andi: source rt, rs, imm."""

    def test_addi(self):
        assert enc("addi $1, $0, 5") == 0x20010005

    def test_addi_negative(self):
        """Negative immediates are masked to 16 bits."""
        assert enc("addi $2, $3, -1") == 0x2062FFFF

    def test_andi_hex(self):
        assert enc("andi $4, $5, 0xFF") == 0x30A400FF

    def test_immediate_limits(self):
        assert enc("addi $1, $0, 65535") == 0x2001FFFF
        assert enc("addi $1, $0, -32768") == 0x20018000

    def test_immediate_too_large(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            enc("addi $1, $0, 65536")
        assert "out of range" in exc_info.value.message

    def test_immediate_too_small(self):
        with pytest.raises(MalformedOperandError):
            enc("addi $1, $0, -32769")

    def test_immediate_not_a_number(self):
        with pytest.raises(MalformedOperandError):
            enc("andi $1, $0, mask")

    def test_register_in_immediate_slot(self):
        """A register where an immediate belongs is rejected."""
        with pytest.raises(MalformedOperandError):
            enc("addi $1, $2, $3")


# =============================================================================
# Branch Format Tests
# =============================================================================

class TestBranchFormat:
    """Test beq/bne: source rs, [rt,] label."""

    def test_backward_branch(self):
        symbols = build_symbol_table(["loop:", "add $1, $2, $3", "beq $1, $2, loop"])
        assert enc("beq $1, $2, loop", BASE + 4, symbols) == 0x1020FFFE

    def test_forward_branch(self):
        lines = [
            "beq $1, $0, done",
            "add $1, $2, $3",
            "add $1, $2, $3",
            "done:",
            "add $1, $2, $3",
        ]
        symbols = build_symbol_table(lines)
        assert enc("beq $1, $0, done", BASE, symbols) == 0x10200002

    def test_bne_next_instruction(self):
        """A branch to the next instruction has offset 0."""
        symbols = build_symbol_table(["bne $3, next", "next:"])
        assert enc("bne $3, next", BASE, symbols) == 0x14600000

    def test_second_register_not_encoded(self):
        """The rt field is always zero."""
        symbols = build_symbol_table(["top:"])
        with_rt = enc("beq $5, $7, top", BASE, symbols)
        without_rt = enc("beq $5, top", BASE, symbols)
        assert with_rt == without_rt
        assert (with_rt >> 16) & 0x1F == 0
        assert (with_rt >> 21) & 0x1F == 5

    def test_second_register_validated(self):
        symbols = build_symbol_table(["top:"])
        with pytest.raises(InvalidRegisterError):
            enc("beq $5, $40, top", BASE, symbols)

    def test_offset_round_trip(self):
        """label == address + 4 + 4 * offset for every branch."""
        lines = ["a:"] + ["add $1, $2, $3"] * 10 + ["b:"] + ["add $1, $2, $3"] * 5
        symbols = build_symbol_table(lines)
        for address in range(BASE, BASE + 16 * 4, 4):
            for label in ("a", "b"):
                word = enc(f"bne $1, $2, {label}", address, symbols)
                offset = word & 0xFFFF
                if offset & 0x8000:
                    offset -= 0x10000
                assert address + 4 + 4 * offset == symbols[label]

    def test_numeric_target(self):
        """A numeric target is an absolute address."""
        assert enc("beq $0, $0, 0x00400010") == 0x10000003

    def test_unresolved_label(self):
        with pytest.raises(UnresolvedLabelError) as exc_info:
            enc("beq $1, $2, nowhere")
        assert exc_info.value.label == "nowhere"
        assert exc_info.value.location.column == 13

    def test_range_limit(self):
        """The most negative offset still fits."""
        target = BASE + 4 - 4 * 32768
        assert enc(f"beq $0, $0, {target:#x}") == 0x10008000

    def test_out_of_range(self):
        with pytest.raises(BranchRangeError) as exc_info:
            enc("beq $1, $0, 0x00500000")
        assert exc_info.value.offset == 262143

    def test_out_of_range_backward(self):
        target = BASE + 4 - 4 * 32769
        with pytest.raises(BranchRangeError):
            enc(f"beq $1, $0, {target:#x}")

    def test_range_error_is_operand_error(self):
        with pytest.raises(MalformedOperandError):
            enc("bne $1, $0, 0x00500000")


class TestBranchOffset:
    """Test the offset arithmetic directly."""

    def test_next_instruction(self):
        assert branch_offset(BASE + 4, BASE) == 0

    def test_self(self):
        assert branch_offset(BASE, BASE) == -1

    def test_truncates_toward_zero(self):
        """Division rounds toward zero for both signs."""
        assert branch_offset(BASE + 4 + 7, BASE) == 1
        assert branch_offset(BASE + 4 - 7, BASE) == -1
        assert branch_offset(BASE + 3, BASE) == 0


# =============================================================================
# Jump Format Tests
# =============================================================================

class TestJumpFormat:
    """Test j: source label."""

    def test_jump_to_label(self):
        symbols = build_symbol_table(["main:", "add $1, $2, $3", "j main"])
        assert enc("j main", BASE + 4, symbols) == 0x08100000

    def test_jump_numeric(self):
        assert enc("j 0x00400010") == 0x08100004

    def test_jump_round_trip(self):
        """(word & 0x03FFFFFF) << 2 recovers the label address."""
        lines = ["add $1, $2, $3"] * 7 + ["far:"]
        symbols = build_symbol_table(lines)
        word = enc("j far", BASE, symbols)
        assert (word & 0x03FFFFFF) << 2 == symbols["far"]

    def test_jump_independent_of_address(self):
        symbols = build_symbol_table(["main:"])
        assert enc("j main", BASE, symbols) == enc("j main", BASE + 400, symbols)

    def test_jump_target_masked(self):
        """Only 26 bits of the word address are kept."""
        assert enc("j 0x10000000") == 0x08000000

    def test_misaligned_target(self):
        with pytest.raises(MisalignedAddressError) as exc_info:
            enc("j 0x00400002")
        assert exc_info.value.address == 0x00400002

    def test_negative_target(self):
        with pytest.raises(AddressRangeError):
            enc("j -4")

    def test_unresolved_label(self):
        with pytest.raises(UnresolvedLabelError):
            enc("j start")


# =============================================================================
# Error Tests
# =============================================================================

class TestMnemonicErrors:
    """Test rejection of mnemonics outside the table."""

    def test_unknown_mnemonic(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            enc("mul $1, $2, $3")
        assert exc_info.value.mnemonic == "mul"
        assert "supported mnemonics" in exc_info.value.hint

    def test_uppercase_mnemonic(self):
        """Mnemonics are case-sensitive."""
        with pytest.raises(UnknownMnemonicError) as exc_info:
            enc("ADD $1, $2, $3")
        assert "use 'add'" in exc_info.value.hint

    def test_pseudo_instruction(self):
        """Pseudo-instructions are not expanded."""
        with pytest.raises(UnknownMnemonicError):
            enc("move $1, $2")

    def test_directive(self):
        with pytest.raises(UnknownMnemonicError):
            enc(".text")


class TestOperandErrors:
    """Test operand count checks."""

    def test_too_few(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            enc("add $1, $2")
        assert "takes 3 operands, got 2" in exc_info.value.message
        assert exc_info.value.hint == "usage: add rd, rs, rt"

    def test_too_many(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            enc("add $1, $2, $3, $4")
        assert exc_info.value.location.column == 17

    def test_jump_without_target(self):
        with pytest.raises(MalformedOperandError):
            enc("j")

    def test_branch_operand_counts(self):
        symbols = build_symbol_table(["x:"])
        with pytest.raises(MalformedOperandError) as exc_info:
            enc("beq x", BASE, symbols)
        assert "2 or 3" in exc_info.value.message
        with pytest.raises(MalformedOperandError):
            enc("beq $1, $2, $3, x", BASE, symbols)


class TestRegisterErrors:
    """Test register operand validation."""

    def test_out_of_range(self):
        with pytest.raises(InvalidRegisterError) as exc_info:
            enc("add $32, $1, $2")
        assert exc_info.value.register == "$32"

    def test_missing_dollar(self):
        with pytest.raises(InvalidRegisterError) as exc_info:
            enc("add 1, $2, $3")
        assert "'$1'" in exc_info.value.hint

    def test_negative(self):
        with pytest.raises(InvalidRegisterError):
            enc("sub $1, $-1, $2")

    def test_symbolic_name(self):
        """Only numbered registers are accepted."""
        with pytest.raises(InvalidRegisterError):
            enc("add $t0, $1, $2")

    def test_bare_dollar(self):
        with pytest.raises(InvalidRegisterError):
            enc("or $1, $, $2")

    def test_immediate_register_slot(self):
        with pytest.raises(InvalidRegisterError):
            enc("addi 5, $1, 5")

    def test_error_location(self):
        with pytest.raises(InvalidRegisterError) as exc_info:
            enc("add $1, $2, $99")
        assert exc_info.value.location.column == 13
        assert exc_info.value.source_line == "add $1, $2, $99"
