"""
Output Formatting
=================

Text renderings of a finished translation:

- **Object listing**: the assembler's primary output, one address/word
  pair per instruction::

      Address     Code
      0x00400000 0x00430820
      0x00400004 0x08100000

- **Symbol file**: one ``name address`` line per label
- **Source listing**: address, word and source text side by side,
  followed by the symbol table
"""

from collections.abc import Iterable

from mips_asm.assembler.symbols import SymbolTable


OBJECT_HEADER = "Address     Code"


def format_word(value: int) -> str:
    """Render a 32-bit value as 0x-prefixed, 8 uppercase hex digits."""
    return f"0x{value:08X}"


def format_object_listing(words: Iterable) -> str:
    """
    Format the object listing.

    Args:
        words: ObjectWord entries (anything with .address and .word)

    Returns:
        Header line followed by one "0xAAAAAAAA 0xWWWWWWWW" line per word,
        newline-terminated.
    """
    lines = [OBJECT_HEADER]
    for entry in words:
        lines.append(f"{format_word(entry.address)} {format_word(entry.word)}")
    return "\n".join(lines) + "\n"


def format_symbol_table(symbols: SymbolTable) -> str:
    """
    Format the symbol file.

    Format: name address (one per line, sorted by address then name)
    """
    lines = ["# Symbol table", "# Generated by mipsasm"]
    for sym in sorted(symbols.symbols(), key=lambda s: (s.address, s.name)):
        lines.append(f"{sym.name} {format_word(sym.address)}")
    return "\n".join(lines) + "\n"


def format_source_listing(words: Iterable, symbols: SymbolTable) -> str:
    """
    Format a listing with addresses, generated words and source lines.

    Labels are shown on their own line at the address they name.
    """
    labels_at: dict[int, list[str]] = {}
    for sym in symbols.symbols():
        labels_at.setdefault(sym.address, []).append(sym.name)

    lines = []
    lines.append("MIPS Assembler Listing")
    lines.append("=" * 60)
    lines.append("")
    lines.append("Address     Code        Line  Source")
    lines.append("-" * 60)
    for entry in words:
        for name in labels_at.pop(entry.address, []):
            lines.append(f"{format_word(entry.address)}{'':20}{name}:")
        lines.append(
            f"{format_word(entry.address)}  {format_word(entry.word)}  "
            f"{entry.line:4d}  {entry.source.strip()}"
        )
    # Labels after the last instruction
    for address in sorted(labels_at):
        for name in labels_at[address]:
            lines.append(f"{format_word(address)}{'':20}{name}:")

    lines.append("")
    lines.append("Symbol Table")
    lines.append("-" * 30)
    for sym in sorted(symbols.symbols(), key=lambda s: (s.address, s.name)):
        lines.append(f"{sym.name:20s} = {format_word(sym.address)}")
    return "\n".join(lines) + "\n"
