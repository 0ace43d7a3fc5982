"""
lc3asm - Two-Pass Assembler for the LC-3
========================================

This package assembles source for the LC-3, a small 16-bit teaching
computer, into loadable object images, and disassembles them again.

Main Components
---------------
- **assembler**: Tokenizer, two-pass code generator and encoder (lc3asm)
- **disassembler**: Word decoder (lc3dis)
- **objfile**: The .lc3 object image format
- **config**: Run settings, overridable from the environment

Quick Start
-----------
Assemble a program:
    >>> from lc3asm.assembler import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_file("prog.asm")
    >>> asm.write_binary("prog.lc3")

Or use the command-line tools:
    $ lc3asm prog.asm -o prog.lc3
    $ lc3dis prog.lc3

Version History
---------------
1.0.0 - Initial release with assembler, object images and disassembler
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lc3asm.assembler import Assembler
from lc3asm.config import AssemblerConfig
from lc3asm.errors import (
    LC3Error,
    FileError,
    ObjectFormatError,
    SourceLocation,
    AssemblerError,
    UnknownOpcodeError,
    MalformedOperationError,
    DuplicateSymbolError,
    UndefinedSymbolError,
    EncodingError,
    AssemblyFailedError,
    ErrorCollector,
    TooManyErrors,
)
from lc3asm.objfile import ObjectImage

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblerConfig",
    "ObjectImage",
    # Errors
    "LC3Error",
    "FileError",
    "ObjectFormatError",
    "SourceLocation",
    "AssemblerError",
    "UnknownOpcodeError",
    "MalformedOperationError",
    "DuplicateSymbolError",
    "UndefinedSymbolError",
    "EncodingError",
    "AssemblyFailedError",
    "ErrorCollector",
    "TooManyErrors",
]
