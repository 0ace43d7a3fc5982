"""
lc3dis - LC-3 Disassembler Command-Line Interface
=================================================

Usage Examples
--------------
Disassemble an object image:
    $ lc3dis prog.lc3

Limit number of words:
    $ lc3dis prog.lc3 --count 20

Output to file:
    $ lc3dis prog.lc3 -o prog.dis
"""

import json
from pathlib import Path
from typing import Optional

import click

from lc3asm import __version__
from lc3asm.cli.errors import handle_cli_exception
from lc3asm.disassembler import LC3Disassembler
from lc3asm.objfile import ObjectImage


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of words to disassemble (default: all)",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Emit decoded instructions as JSON",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lc3dis")
def main(
    input_file: Path,
    output: Optional[Path],
    count: Optional[int],
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Disassemble an LC-3 object image.

    INPUT_FILE is a .lc3 file produced by lc3asm.
    """
    try:
        image = ObjectImage.read(input_file)
        instructions = LC3Disassembler().disassemble_image(image, count)

        if as_json:
            text = json.dumps([inst.to_dict() for inst in instructions], indent=2)
        else:
            lines = [f"; {input_file.name}: {image.size} words at x{image.origin:04X}"]
            lines.extend(str(inst) for inst in instructions)
            text = "\n".join(lines)

        if output:
            output.write_text(text + "\n")
            if verbose:
                click.echo(f"Wrote {len(instructions)} lines to {output}")
        else:
            click.echo(text)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


if __name__ == "__main__":
    main()
