"""
MIPS Assembler - Main Interface
===============================

This module provides the two-pass translation driver and the Assembler
class, the primary interface for turning MIPS source into an object
listing.

Translation
-----------
1. **Pass 1** (build_symbol_table): assign every label an address.
2. **Pass 2** (translate): walk the same lines in the same order with a
   fresh program counter; tokenize and encode each instruction line at
   the current address.

Both passes classify lines with the same function and advance the
program counter by the same rule, so each label's address is exactly the
address later given to the instruction that follows it.

Any error aborts the whole translation. Nothing is returned or written
for a program that fails to assemble.

Example Usage
-------------
>>> from mips_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> pairs = asm.assemble_string('''
... main:
...     add $1, $2, $3
...     j main
... ''')
>>> [hex(w.word) for w in asm.get_words()]
['0x430820', '0x8100000']
>>> asm.write_object("program.obj")

Command-Line Usage
------------------
    $ mipsasm program.asm -o program.obj -l program.lst -s program.sym

Options:
    -o, --output FILE      Output object listing (default: input.obj)
    -b, --base ADDR        Base address (default: 0x00400000)
    -l, --listing FILE     Generate source listing file
    -s, --symbols FILE     Generate symbol file
    -v, --verbose          Verbose output
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from mips_asm.assembler.encoder import encode
from mips_asm.assembler.lexer import LineKind, classify_line, split_lines, tokenize
from mips_asm.assembler.listing import (
    format_object_listing,
    format_source_listing,
    format_symbol_table,
)
from mips_asm.assembler.symbols import (
    SymbolTable,
    build_symbol_table,
    check_base_address,
    check_instruction_address,
)
from mips_asm.cpu import DEFAULT_BASE_ADDRESS, INSTRUCTION_SIZE
from mips_asm.errors import MipsAsmError


logger = logging.getLogger(__name__)


# =============================================================================
# Translation Results
# =============================================================================

@dataclass(frozen=True)
class ObjectWord:
    """
    One emitted machine word.

    Attributes:
        address: Address of the instruction
        word: Encoded 32-bit instruction
        line: Source line number (1-indexed)
        source: Raw source text of the instruction line
    """
    address: int
    word: int
    line: int = 0
    source: str = ""

    def __iter__(self):
        # Unpacks as an (address, word) pair
        yield self.address
        yield self.word


@dataclass
class Translation:
    """
    Complete output of a successful translation.

    Attributes:
        words: Emitted words in source order
        symbols: Symbol table from pass 1
        base_address: Address of the first instruction
    """
    words: list[ObjectWord] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    base_address: int = DEFAULT_BASE_ADDRESS

    def pairs(self) -> list[tuple[int, int]]:
        """Return the output as (address, word) tuples."""
        return [(w.address, w.word) for w in self.words]


# =============================================================================
# Translation Driver
# =============================================================================

def translate(
    lines: Iterable[str],
    base_address: int = DEFAULT_BASE_ADDRESS,
    filename: str = "<input>",
) -> Translation:
    """
    Translate source lines into machine words.

    Args:
        lines: Source lines in program order (without line terminators)
        base_address: Address of the first instruction
        filename: Source name for error messages

    Returns:
        The Translation (words and symbol table)

    Raises:
        AssemblerError: On the first bad line; no partial output is kept.
    """
    lines = list(lines)
    base_address = check_base_address(base_address)

    # Pass 1
    symbols = build_symbol_table(lines, base_address, filename)

    # Pass 2
    words: list[ObjectWord] = []
    pc = base_address
    for number, text in enumerate(lines, start=1):
        line = classify_line(text, number, filename)
        if line.kind is not LineKind.INSTRUCTION:
            continue

        check_instruction_address(pc, line.location, text)
        inst = tokenize(text, number, filename)
        word = encode(inst, symbols, pc)
        words.append(ObjectWord(pc, word, number, text))
        logger.debug(f"0x{pc:08X}: 0x{word:08X}  {text.strip()}")
        pc += INSTRUCTION_SIZE

    logger.debug(f"Pass 2 complete: {len(words)} words")
    return Translation(words=words, symbols=symbols, base_address=base_address)


def translate_source(
    source: str,
    base_address: int = DEFAULT_BASE_ADDRESS,
    filename: str = "<input>",
) -> Translation:
    """Translate source text; lines end at "\\n" with an optional "\\r"."""
    return translate(split_lines(source), base_address, filename)


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main MIPS assembler class.

    Holds configuration (base address, verbosity) and the result of the
    last successful assembly, and writes the output files.

    Attributes:
        base_address: Address of the first instruction
        verbose: If True, log progress at INFO level
    """

    def __init__(self, base_address: int = DEFAULT_BASE_ADDRESS,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            base_address: Address of the first instruction (must be
                          word-aligned and fit in 32 bits)
            verbose: Enable progress messages

        Raises:
            AddressRangeError, MisalignedAddressError: Invalid base address
        """
        self._base_address = check_base_address(base_address)
        self._verbose = verbose
        self._result: Optional[Translation] = None

    @property
    def base_address(self) -> int:
        return self._base_address

    @property
    def verbose(self) -> bool:
        return self._verbose

    def _log(self, message: str) -> None:
        if self._verbose:
            logger.info(message)
        else:
            logger.debug(message)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> list[tuple[int, int]]:
        """
        Assemble a sequence of source lines.

        Returns:
            List of (address, word) pairs

        Raises:
            AssemblerError: If assembly fails (previous results are cleared)
        """
        self._result = None
        self._log(f"Assembling {filename} at base 0x{self._base_address:08X}")

        result = translate(lines, self._base_address, filename)
        self._result = result

        self._log(
            f"Assembled {len(result.words)} instructions, "
            f"{len(result.symbols)} labels"
        )
        return result.pairs()

    def assemble_string(self, source: str, filename: str = "<input>") -> list[tuple[int, int]]:
        """
        Assemble source code from a string.

        Returns:
            List of (address, word) pairs
        """
        return self.assemble_lines(split_lines(source), filename)

    def assemble_file(self, filepath: str | Path) -> list[tuple[int, int]]:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _require_result(self) -> Translation:
        if self._result is None:
            raise MipsAsmError("no successful assembly to output")
        return self._result

    def get_words(self) -> list[ObjectWord]:
        """Return the emitted words of the last assembly."""
        return list(self._require_result().words)

    def get_symbols(self) -> dict[str, int]:
        """Return the symbol table as a dictionary of names to addresses."""
        return self._require_result().symbols.as_dict()

    def get_object_listing(self) -> str:
        """Return the object listing text (address and word per line)."""
        return format_object_listing(self._require_result().words)

    def get_listing(self) -> str:
        """Return the source listing with addresses, words and source."""
        result = self._require_result()
        return format_source_listing(result.words, result.symbols)

    def write_object(self, filepath: str | Path) -> None:
        """Write the object listing file."""
        Path(filepath).write_text(self.get_object_listing())
        self._log(f"Wrote {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the source listing file."""
        Path(filepath).write_text(self.get_listing())
        self._log(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol table file."""
        Path(filepath).write_text(format_symbol_table(self._require_result().symbols))
        self._log(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, base_address: int = DEFAULT_BASE_ADDRESS,
             filename: str = "<input>") -> list[tuple[int, int]]:
    """
    Convenience function to assemble source code.

    Returns:
        List of (address, word) pairs

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(base_address=base_address)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path,
                  base_address: int = DEFAULT_BASE_ADDRESS) -> list[tuple[int, int]]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(base_address=base_address)
    return asm.assemble_file(filepath)
