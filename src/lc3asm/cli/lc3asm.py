"""
lc3asm - LC-3 Assembler Command-Line Interface
==============================================

Usage Examples
--------------
Basic assembly (writes prog.lc3):
    $ lc3asm prog.asm

With output file:
    $ lc3asm prog.asm -o out.lc3

Generate listing and symbol files:
    $ lc3asm prog.asm -l prog.lst -s prog.sym

Verbose mode (symbol table, listing and summary):
    $ lc3asm -v prog.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from lc3asm import __version__
from lc3asm.assembler import Assembler
from lc3asm.cli.errors import handle_cli_exception
from lc3asm.config import AssemblerConfig


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
    help="Output object file (default: input with .lc3 extension)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--stop-at-end",
    is_flag=True,
    help="Ignore lines after the first .END",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=None,
    help="Stop a pass after this many errors (default: 100)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lc3asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    stop_at_end: bool,
    max_errors: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble LC-3 source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        lc3asm prog.asm              # Outputs prog.lc3
        lc3asm prog.asm -o out.lc3   # Specify output file
        lc3asm -v prog.asm           # Show symbols and listing
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        config = AssemblerConfig.from_env()
        if stop_at_end:
            config.stop_at_end = True
        if max_errors is not None:
            config.max_errors = max_errors

        asm = Assembler(config=config, verbose=verbose)
        output_file = output if output is not None else asm.output_path_for(input_file)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if verbose:
            click.echo("Pass 1 Symbol Table Results")
            click.echo(asm.get_symbol_report())
            click.echo("")
            click.echo("Pass 2 Operation List Results")
            click.echo(asm.get_listing())
            click.echo("")

        asm.write_binary(output_file)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            image = asm.get_image()
            click.echo(f"Assembly complete: wrote {output_file}")
            click.echo(f"    {image.size + 2} words written")
            click.echo(f"    section at x{image.origin:04X}, {image.size} words")
            click.echo(f"    {len(asm.get_symbols())} symbols defined")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
