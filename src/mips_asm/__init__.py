"""
mips_asm - Two-Pass Assembler for a MIPS32 Instruction Subset
=============================================================

This package translates MIPS assembly source into 32-bit machine words and
writes an address-annotated object listing.

Main Components
---------------
- **assembler**: Tokenizer, symbol table, encoder and translation driver
- **cpu**: Instruction table, format classes and register parsing
- **cli**: The ``mipsasm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from mips_asm import Assembler
    >>> asm = Assembler()
    >>> asm.assemble_string("addi $1, $0, 5")
    [(4194304, 536936453)]
    >>> asm.write_object("program.obj")

Or use the command-line tool:
    $ mipsasm program.asm -o program.obj

Reference Documentation
-----------------------
- MIPS32 Architecture For Programmers, Volume II: The MIPS32 Instruction Set
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from mips_asm.assembler import Assembler, assemble, assemble_file, translate
from mips_asm.cpu import DEFAULT_BASE_ADDRESS
from mips_asm.errors import (
    MipsAsmError,
    AssemblerError,
    SourceLocation,
    MalformedLineError,
    UnknownMnemonicError,
    MalformedOperandError,
    BranchRangeError,
    InvalidRegisterError,
    DuplicateLabelError,
    UnresolvedLabelError,
    MisalignedAddressError,
    AddressRangeError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "translate",
    "DEFAULT_BASE_ADDRESS",
    # Errors
    "MipsAsmError",
    "AssemblerError",
    "SourceLocation",
    "MalformedLineError",
    "UnknownMnemonicError",
    "MalformedOperandError",
    "BranchRangeError",
    "InvalidRegisterError",
    "DuplicateLabelError",
    "UnresolvedLabelError",
    "MisalignedAddressError",
    "AddressRangeError",
]
