"""
Symbol Table
============

Pass 1 of the assembler: a single forward scan over the source that
assigns every label the address of the instruction that follows it.

Address Assignment
------------------
The program counter starts at the base address and advances by 4 for
every instruction line. Label lines record the current program counter
without advancing it; blank lines are ignored::

    0x00400000  main:            main = 0x00400000
    0x00400000      add $1,$2,$3
    0x00400004  loop:            loop = 0x00400004
    0x00400004      j main

Operands are not looked at in this pass, so forward references resolve
naturally in pass 2.

The resulting SymbolTable is read-only: it maps label names to addresses
and is passed explicitly to the encoder.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional
import logging

from mips_asm.errors import (
    AddressRangeError,
    DuplicateLabelError,
    MisalignedAddressError,
    SourceLocation,
    UnresolvedLabelError,
)
from mips_asm.assembler.lexer import LineKind, classify_line
from mips_asm.cpu import DEFAULT_BASE_ADDRESS, INSTRUCTION_SIZE, MAX_ADDRESS


logger = logging.getLogger(__name__)

# Highest address an instruction may start at
LAST_INSTRUCTION_ADDRESS = MAX_ADDRESS - (INSTRUCTION_SIZE - 1)


# =============================================================================
# Symbol Table Entry
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name (case-sensitive)
        address: Address of the instruction following the label
        location: Where the label was defined
    """
    name: str
    address: int
    location: SourceLocation


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Read-only table of label names to addresses.

    Indexing with an unknown name raises UnresolvedLabelError rather than
    KeyError; use lookup() to attach the referencing location.

    Usage:
        symbols = build_symbol_table(lines)
        address = symbols.lookup("loop", location=token.location)
    """

    def __init__(self, symbols: Iterable[Symbol] = ()):
        self._symbols: dict[str, Symbol] = {}
        for symbol in symbols:
            self._add(symbol)

    def _add(self, symbol: Symbol, source_line: Optional[str] = None) -> None:
        """Add a symbol; only pass 1 calls this."""
        existing = self._symbols.get(symbol.name)
        if existing is not None:
            raise DuplicateLabelError(
                symbol.name,
                location=symbol.location,
                original_location=existing.location,
                source_line=source_line,
            )
        self._symbols[symbol.name] = symbol

    # -------------------------------------------------------------------------
    # Container interface
    # -------------------------------------------------------------------------

    def __getitem__(self, name: str) -> int:
        return self.lookup(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __repr__(self) -> str:
        items = ", ".join(
            f"{name}=0x{sym.address:08X}" for name, sym in self._symbols.items()
        )
        return f"SymbolTable({items})"

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def lookup(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the address of a label.

        Raises:
            UnresolvedLabelError: If the label was never defined. The error
                suggests similarly spelled labels when there are any.
        """
        symbol = self._symbols.get(name)
        if symbol is None:
            raise UnresolvedLabelError(
                name,
                location=location,
                source_line=source_line,
                similar_labels=self._find_similar(name),
            )
        return symbol.address

    def get_symbol(self, name: str) -> Optional[Symbol]:
        """Return the full Symbol entry, or None if undefined."""
        return self._symbols.get(name)

    def symbols(self) -> list[Symbol]:
        """Return all symbols in definition order."""
        return list(self._symbols.values())

    def as_dict(self) -> dict[str, int]:
        """Return a plain dictionary of label names to addresses."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def _find_similar(self, name: str) -> list[str]:
        """
        Find labels with similar names for error hints.

        Uses simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for label in self._symbols:
            label_lower = label.lower()
            if (
                label_lower == name_lower or
                abs(len(label) - len(name)) <= 1 and
                _edit_distance(name_lower, label_lower) <= 2
            ):
                similar.append(label)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]


# =============================================================================
# Address Checks
# =============================================================================

def check_base_address(base_address: int) -> int:
    """
    Validate a base address.

    Raises:
        AddressRangeError: If the address is outside 0..0xFFFFFFFF
        MisalignedAddressError: If the address is not a multiple of 4
    """
    if not 0 <= base_address <= MAX_ADDRESS:
        raise AddressRangeError(
            f"base address {base_address:#x} is outside the 32-bit address space"
        )
    if base_address % INSTRUCTION_SIZE:
        raise MisalignedAddressError(base_address)
    return base_address


def check_instruction_address(address: int, location: SourceLocation,
                              source_line: Optional[str] = None) -> None:
    """Raise AddressRangeError if an instruction cannot start at address."""
    if address > LAST_INSTRUCTION_ADDRESS:
        raise AddressRangeError(
            "program runs past the end of the 32-bit address space",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Pass 1: Symbol Collection
# =============================================================================

def build_symbol_table(
    lines: Iterable[str],
    base_address: int = DEFAULT_BASE_ADDRESS,
    filename: str = "<input>",
) -> SymbolTable:
    """
    Assign an address to every label in the source.

    Args:
        lines: Source lines in program order
        base_address: Address of the first instruction
        filename: Source name for error messages

    Returns:
        The completed, read-only SymbolTable

    Raises:
        DuplicateLabelError: If a label is defined twice
        MalformedLineError: If a line is neither label nor instruction
        AddressRangeError: If the program does not fit below 4 GiB
    """
    pc = check_base_address(base_address)
    table = SymbolTable()

    for number, text in enumerate(lines, start=1):
        line = classify_line(text, number, filename)

        if line.kind is LineKind.LABEL:
            if pc > MAX_ADDRESS:
                raise AddressRangeError(
                    f"label '{line.label}' would be placed past the end of the address space",
                    location=line.location,
                    source_line=text,
                )
            table._add(Symbol(line.label, pc, line.location), source_line=text)
            logger.debug(f"Label '{line.label}' = 0x{pc:08X} (line {number})")

        elif line.kind is LineKind.INSTRUCTION:
            check_instruction_address(pc, line.location, text)
            pc += INSTRUCTION_SIZE

    logger.debug(f"Pass 1 complete: {len(table)} labels")
    return table
