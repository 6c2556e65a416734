"""
MIPS Assembly Line Lexer
========================

This module classifies source lines and splits instruction lines into
tokens. The assembler is line-oriented: every line is exactly one of

- **LABEL**: trimmed text is an identifier followed by a colon (``loop:``)
- **INSTRUCTION**: a mnemonic followed by operands (``add $1, $2, $3``)
- **BLANK**: empty, whitespace only, or a comment only

A label and an instruction may not share a line.

Tokens
------
Instruction lines are split on spaces, tabs and commas. The first token is
the mnemonic; the remaining tokens are operands in source order. Tokens
are plain text at this stage: whether an operand is a register, an
immediate or a label is decided by the encoder from the mnemonic's format.

Comments
--------
A ``#`` starts a comment that runs to the end of the line.

Example
-------
>>> from mips_asm.assembler.lexer import classify_line, tokenize
>>> classify_line("loop:", 1).kind
<LineKind.LABEL: 1>
>>> inst = tokenize("add $1, $2, $3", 2)
>>> inst.name, [t.text for t in inst.operands]
('add', ['$1', '$2', '$3'])
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional
import re

from mips_asm.errors import MalformedLineError, SourceLocation


COMMENT_CHAR = "#"
LABEL_SUFFIX = ":"

# Tokens are maximal runs of anything but whitespace and commas
_TOKEN_RE = re.compile(r"[^\s,]+")

# Label names are identifiers; a leading digit would read as a number
_LABEL_START_RE = re.compile(r"[A-Za-z_.]")
_LABEL_BAD_CHAR_RE = re.compile(r"[^A-Za-z0-9_.]")


# =============================================================================
# Token and Line Data Classes
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    One whitespace/comma separated piece of an instruction line.

    Attributes:
        text: The token text
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        return f"Token({self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


class LineKind(Enum):
    """Classification of a source line."""
    LABEL = auto()
    INSTRUCTION = auto()
    BLANK = auto()


@dataclass(frozen=True)
class SourceLine:
    """
    A classified source line.

    Attributes:
        kind: LABEL, INSTRUCTION or BLANK
        number: Line number (1-indexed)
        text: Raw line text as read
        filename: Name of the source file
        label: Label name for LABEL lines
    """
    kind: LineKind
    number: int
    text: str
    filename: str = "<input>"
    label: Optional[str] = None

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.number, _first_column(self.text))


@dataclass
class DecodedInstruction:
    """
    An instruction line split into mnemonic and operand tokens.

    Attributes:
        mnemonic: The mnemonic token
        operands: Operand tokens in source order
        source_line: Raw line text, for error context
    """
    mnemonic: Token
    operands: list[Token] = field(default_factory=list)
    source_line: Optional[str] = None

    @property
    def name(self) -> str:
        """The mnemonic text."""
        return self.mnemonic.text

    @property
    def location(self) -> SourceLocation:
        return self.mnemonic.location


# =============================================================================
# Line Classification and Tokenizing
# =============================================================================

def strip_comment(text: str) -> str:
    """Remove a trailing '#' comment from a line."""
    index = text.find(COMMENT_CHAR)
    if index >= 0:
        return text[:index]
    return text


def split_lines(source: str) -> list[str]:
    """
    Split source text into physical lines.

    Only '\\n' ends a line (a trailing '\\r' is dropped), so line numbers
    match what an editor shows even when the text holds form feeds or
    other characters str.splitlines() would break on.
    """
    lines = [line.removesuffix("\r") for line in source.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _first_column(text: str) -> int:
    """1-indexed column of the first non-blank character (0 if none)."""
    stripped = text.lstrip()
    if not stripped:
        return 0
    return len(text) - len(stripped) + 1


def classify_line(text: str, line_number: int, filename: str = "<input>") -> SourceLine:
    """
    Classify one source line as a label definition, instruction or blank.

    Both assembler passes go through this function, so they always agree
    on which lines occupy an address.

    Raises:
        MalformedLineError: If the line is neither a valid label definition
            nor an instruction (empty label name, a name that is not an
            identifier, or a label sharing the line with an instruction).
    """
    code = strip_comment(text)
    stripped = code.strip()

    if not stripped:
        return SourceLine(LineKind.BLANK, line_number, text, filename)

    column = _first_column(code)

    if stripped.endswith(LABEL_SUFFIX):
        name = stripped[:-len(LABEL_SUFFIX)]
        if not name:
            raise MalformedLineError(
                "label definition has an empty name",
                location=SourceLocation(filename, line_number, column),
                source_line=text,
            )
        bad = _LABEL_BAD_CHAR_RE.search(name)
        if bad:
            raise MalformedLineError(
                f"invalid character {bad.group()!r} in label '{name}'",
                location=SourceLocation(filename, line_number, column + bad.start()),
                hint="a label line holds a single name followed by ':'",
                source_line=text,
            )
        if not _LABEL_START_RE.match(name):
            raise MalformedLineError(
                f"label '{name}' must start with a letter, '_' or '.'",
                location=SourceLocation(filename, line_number, column),
                hint="names starting with a digit would be read as addresses",
                source_line=text,
            )
        return SourceLine(LineKind.LABEL, line_number, text, filename, label=name)

    colon = code.find(LABEL_SUFFIX)
    if colon >= 0:
        raise MalformedLineError(
            "label and instruction on the same line",
            location=SourceLocation(filename, line_number, colon + 1),
            hint="put the label on its own line",
            source_line=text,
        )

    return SourceLine(LineKind.INSTRUCTION, line_number, text, filename)


def tokenize(text: str, line_number: int, filename: str = "<input>") -> DecodedInstruction:
    """
    Split an instruction line into a mnemonic and operand tokens.

    Tokens are separated by spaces, tabs and commas; empty fields between
    consecutive separators are dropped. Operand count is not checked here
    since it depends on the mnemonic.

    Raises:
        MalformedLineError: If the line holds no tokens.
    """
    code = strip_comment(text)
    tokens = [
        Token(m.group(), line_number, m.start() + 1, filename)
        for m in _TOKEN_RE.finditer(code)
    ]

    if not tokens:
        raise MalformedLineError(
            "expected an instruction",
            location=SourceLocation(filename, line_number, 0),
            source_line=text,
        )

    return DecodedInstruction(
        mnemonic=tokens[0],
        operands=tokens[1:],
        source_line=text,
    )
