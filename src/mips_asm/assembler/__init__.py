"""
MIPS Subset Assembler
=====================

This package translates a fixed subset of MIPS32 assembly into 32-bit
machine words, producing an address-annotated object listing.

Main Components
---------------
- **Assembler**: Main class; assembles strings or files and writes output
- **translate**: Two-pass translation driver
- **classify_line / tokenize**: Line classifier and tokenizer
- **build_symbol_table / SymbolTable**: Pass 1, label addresses
- **encode**: Pass 2, instruction encoding
- **format_object_listing** and friends: Output text

Assembly Process
----------------
1. **Pass 1**: scan every line, record each label at the current program
   counter, advance by 4 per instruction line.
2. **Pass 2**: rescan the same lines, encode each instruction at its
   address using the completed symbol table.

Supported Instructions
----------------------
add, sub, and, or, sll, addi, andi, beq, bne, j
"""

from mips_asm.assembler.assembler import (
    Assembler,
    ObjectWord,
    Translation,
    assemble,
    assemble_file,
    translate,
    translate_source,
)
from mips_asm.assembler.lexer import (
    DecodedInstruction,
    LineKind,
    SourceLine,
    Token,
    classify_line,
    split_lines,
    tokenize,
)
from mips_asm.assembler.symbols import Symbol, SymbolTable, build_symbol_table
from mips_asm.assembler.encoder import branch_offset, encode
from mips_asm.assembler.listing import (
    format_object_listing,
    format_source_listing,
    format_symbol_table,
    format_word,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "ObjectWord",
    "Translation",
    "assemble",
    "assemble_file",
    "translate",
    "translate_source",
    # Lexer
    "DecodedInstruction",
    "LineKind",
    "SourceLine",
    "Token",
    "classify_line",
    "split_lines",
    "tokenize",
    # Symbols
    "Symbol",
    "SymbolTable",
    "build_symbol_table",
    # Encoder
    "branch_offset",
    "encode",
    # Output
    "format_object_listing",
    "format_source_listing",
    "format_symbol_table",
    "format_word",
]
