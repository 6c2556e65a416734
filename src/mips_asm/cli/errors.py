"""
mipsasm Exit Codes and Error Reporting
======================================

Maps exceptions raised while assembling to a message on stderr and a
process exit status.

| Exit code | Cause                                            |
|-----------|--------------------------------------------------|
| 0         | Object listing written                           |
| 1         | The source program failed to assemble            |
| 2         | Bad option value, unreadable or missing file     |
| 3         | Anything else (a bug in the assembler itself)    |
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from mips_asm.errors import MipsAsmError


class ExitCode(IntEnum):
    """Process exit status of mipsasm."""
    SUCCESS = 0
    BUILD_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception raised by the mipsasm command and exit.

    Assembler errors are printed as-is, since they already carry the
    file, line, column and caret. Traceback output is reserved for
    unexpected errors in verbose mode.

    Args:
        error: The exception that was raised
        verbose: Print a traceback for unexpected errors
        error_type: Heading printed above an assembler error
            (e.g. "Assembly" gives "Assembly failed:")

    Raises:
        SystemExit: With the matching ExitCode
    """
    if isinstance(error, MipsAsmError):
        if error_type:
            click.echo(f"{error_type} failed:", err=True)
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    if isinstance(error, (click.BadParameter, OSError)):
        # Missing, unreadable or unwritable files land here too
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
