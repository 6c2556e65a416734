"""
mipsasm - MIPS Assembler Command-Line Interface
===============================================

Command-line front end for the MIPS subset assembler.

Usage Examples
--------------
Basic assembly (writes program.obj):
    $ mipsasm program.asm

With output file:
    $ mipsasm program.asm -o out.obj

Generate all output files:
    $ mipsasm program.asm -o program.obj -l program.lst -s program.sym

Different load address:
    $ mipsasm --base 0x00000000 program.asm

Verbose mode:
    $ mipsasm -v program.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from mips_asm import __version__
from mips_asm.assembler import Assembler
from mips_asm.cli.errors import handle_cli_exception
from mips_asm.cpu import DEFAULT_BASE_ADDRESS, INSTRUCTION_SIZE, MAX_ADDRESS


# =============================================================================
# Address Parameter Type
# =============================================================================

class AddressParamType(click.ParamType):
    """
    Click parameter type for a 32-bit, word-aligned address.

    Accepts decimal (4194304) or hexadecimal (0x00400000) values.
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to an integer address."""
        if isinstance(value, int):
            address = value
        else:
            text = value.strip()
            try:
                if text.lower().startswith("0x"):
                    address = int(text, 16)
                else:
                    address = int(text)
            except ValueError:
                self.fail(f"invalid address '{value}'", param, ctx)

        if not 0 <= address <= MAX_ADDRESS:
            self.fail(
                f"address must be 0x00000000-0x{MAX_ADDRESS:08X}", param, ctx
            )
        if address % INSTRUCTION_SIZE:
            self.fail(
                f"address 0x{address:08X} is not a multiple of {INSTRUCTION_SIZE}",
                param, ctx,
            )
        return address


ADDRESS = AddressParamType()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output object listing (default: input.obj)",
)
@click.option(
    "-b", "--base",
    type=ADDRESS,
    default=f"0x{DEFAULT_BASE_ADDRESS:08X}",
    show_default=True,
    help="Address of the first instruction (decimal or 0x hex, word-aligned)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate source listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mipsasm")
def main(
    input_file: Path,
    output: Optional[Path],
    base: int,
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble MIPS source code into an object listing.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    Each instruction becomes one line of the object listing: its address
    and its 32-bit machine word, both in hexadecimal.

    \b
    Supported instructions:
        add, sub, and, or, sll, addi, andi, beq, bne, j

    \b
    Examples:
        mipsasm prog.asm               # Outputs prog.obj
        mipsasm prog.asm -o out.obj    # Specify output file
        mipsasm -b 0x0 prog.asm        # Assemble at address 0
    """
    setup_logging(verbose)

    output_file = output if output is not None else input_file.with_suffix(".obj")

    try:
        asm = Assembler(base_address=base, verbose=verbose)

        if verbose:
            click.echo(f"Assembling {input_file} at 0x{base:08X}...")

        asm.assemble_file(input_file)

        # Outputs are written only after the whole program assembled
        asm.write_object(output_file)
        if verbose:
            click.echo(f"Wrote {len(asm.get_words())} instructions to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            words = asm.get_words()
            click.echo(
                f"Assembly complete: {len(words)} instructions, "
                f"{len(asm.get_symbols())} labels"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
