"""
CLI Exit Codes and Error Reporting
==================================

Both commands end every failure through handle_cli_exception, so lc3asm
and lc3dis report problems the same way:

    0  success
    1  the toolchain rejected the input (bad source, bad image, I/O)
    2  the command line or LC3ASM_* environment was invalid
    3  a bug: anything not raised on purpose by lc3asm
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from lc3asm.config import ConfigError
from lc3asm.errors import LC3Error


class ExitCode(IntEnum):
    SUCCESS = 0
    BUILD_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


# Checked in order; the first matching class decides the exit code
_EXIT_CODES: tuple[tuple[type[BaseException] | tuple, ExitCode], ...] = (
    (LC3Error, ExitCode.BUILD_ERROR),
    ((click.BadParameter, ConfigError), ExitCode.INVALID_ARGS),
    ((FileNotFoundError, PermissionError), ExitCode.INVALID_ARGS),
)


def exit_code_for(error: BaseException) -> ExitCode:
    for classes, code in _EXIT_CODES:
        if isinstance(error, classes):
            return code
    return ExitCode.INTERNAL_ERROR


def describe(error: BaseException, error_type: str | None = None) -> str:
    """
    One message for stderr.

    Toolchain errors are prefixed with the command's activity, e.g.
    "Assembly error: prog.asm:3: error: undefined symbol 'LOPP'".
    """
    code = exit_code_for(error)
    if code == ExitCode.BUILD_ERROR and error_type:
        return f"{error_type} error: {error}"
    if code == ExitCode.INTERNAL_ERROR:
        return f"Internal error: {error}"
    return f"Error: {error}"


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None,
) -> NoReturn:
    """
    Print ``error`` to stderr and exit with its code.

    With ``verbose`` an internal error also prints its traceback.
    """
    code = exit_code_for(error)
    click.echo(describe(error, error_type), err=True)
    if verbose and code == ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
