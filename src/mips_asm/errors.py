"""
MIPS Assembler Error Hierarchy
==============================

This module defines the exception hierarchy for the assembler. All
exceptions inherit from MipsAsmError, allowing callers to catch every
assembler failure with a single except clause if desired.

Exception Hierarchy
-------------------
MipsAsmError (base)
└── AssemblerError (carries source location and source text)
    ├── MalformedLineError - line is neither a label nor an instruction
    ├── UnknownMnemonicError - mnemonic not in the instruction table
    ├── MalformedOperandError - wrong operand count or shape
    │   └── BranchRangeError - branch offset does not fit 16 bits
    ├── InvalidRegisterError - bad register reference
    ├── DuplicateLabelError - label defined more than once
    ├── UnresolvedLabelError - reference to an undefined label
    ├── MisalignedAddressError - address not a multiple of 4
    └── AddressRangeError - address outside the 32-bit space

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
            ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MipsAsmError(Exception):
    """
    Base exception for all assembler errors.

        try:
            assembler.assemble_file("program.asm")
        except MipsAsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(MipsAsmError):
    """
    Base exception for errors tied to a line of assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw source text of the offending line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:3:5: error: unresolved label 'lop'
                j   lop
                    ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class MalformedLineError(AssemblerError):
    """
    Line matches neither the label nor the instruction shape.

    Examples:
        - A bare ":" (label with an empty name)
        - "loop: add $1, $2, $3" (label and instruction on one line)
        - "my label:" (whitespace inside a label name)
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """Mnemonic is not in the instruction table."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.valid_mnemonics = valid_mnemonics or []

        hint = None
        if mnemonic.lower() in self.valid_mnemonics and mnemonic != mnemonic.lower():
            hint = f"mnemonics are case-sensitive; use '{mnemonic.lower()}'"
        elif self.valid_mnemonics:
            hint = f"supported mnemonics: {', '.join(self.valid_mnemonics)}"

        super().__init__(
            f"unknown mnemonic '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MalformedOperandError(AssemblerError):
    """
    Operand count or shape does not match the mnemonic's format.

    Examples:
        - "add $1, $2" (register format needs three registers)
        - "addi $1, $2, x" (immediate is not a number)
        - "sll $1, $2, 32" (shift amount above 31)
    """
    pass


class BranchRangeError(MalformedOperandError):
    """
    Branch target is out of range.

    Branch offsets are stored as a signed 16-bit word count relative to
    the instruction after the branch, limiting the reach to -32768..32767
    instructions. Use "j" for targets further away.
    """

    def __init__(
        self,
        target: str,
        offset: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.target = target
        self.offset = offset

        super().__init__(
            f"branch target '{target}' is out of range (offset: {offset})",
            location=location,
            hint="branch offsets must fit in -32768..32767 words; consider using j",
            source_line=source_line,
        )


class InvalidRegisterError(AssemblerError):
    """
    Register reference is malformed or outside $0-$31.

    Raised instead of silently truncating the ordinal into the 5-bit
    register field.
    """

    def __init__(
        self,
        register: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.register = register

        hint = None
        if not register.startswith("$"):
            hint = f"registers are written with a '$' prefix, e.g. '${register}'"
        else:
            hint = "registers are numbered $0 to $31"

        super().__init__(
            f"invalid register '{register}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined multiple times.

    Includes the location of the first definition when available.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedLabelError(AssemblerError):
    """
    Reference to a label that was never defined.

    The symbol table suggests similarly-named labels when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unresolved label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MisalignedAddressError(AssemblerError):
    """Address is not a multiple of the 4-byte instruction width."""

    def __init__(
        self,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address

        super().__init__(
            f"address 0x{address:08X} is not word-aligned",
            location=location,
            hint="instruction addresses must be multiples of 4",
            source_line=source_line,
        )


class AddressRangeError(AssemblerError):
    """
    Address falls outside the 32-bit address space.

    Raised for a negative or oversized base address, or when a program
    is long enough to run the program counter past 0xFFFFFFFC.
    """
    pass
