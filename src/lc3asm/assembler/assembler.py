"""
LC-3 Assembler - Main Interface
===============================

The Assembler class ties the tokenizer, both passes and the object
image together behind one object.

Example Usage
-------------
>>> from lc3asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
...         .ORIG x3000
...         ADD R1, R1, R2
...         .END
... ''')
[12288, 1, 4674]
>>> asm.write_binary("add.lc3")

Command-Line Usage
------------------
    $ lc3asm prog.asm -o prog.lc3 -l prog.lst -s prog.sym
"""

import logging
from pathlib import Path
from typing import Optional

from lc3asm.assembler.codegen import CodeGenerator
from lc3asm.assembler.operations import OperationList
from lc3asm.assembler.symbols import SymbolTable
from lc3asm.assembler.tokenizer import Tokenizer
from lc3asm.config import AssemblerConfig
from lc3asm.errors import AssemblerError, AssemblyFailedError
from lc3asm.objfile import ObjectImage

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main LC-3 assembler class.

    Attributes:
        config: Settings for this assembler
        verbose: If True, log progress at INFO level
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, verbose: bool = False):
        self.config = config or AssemblerConfig()
        self.verbose = verbose
        self._codegen = CodeGenerator(self.config)
        self._image: Optional[ObjectImage] = None
        self._failure: Optional[AssemblyFailedError] = None
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source text.

        Returns:
            Header and body words of the object image

        Raises:
            AssemblyFailedError: If either pass reports errors
        """
        with Tokenizer.from_string(source, filename) as tokenizer:
            return self._assemble(tokenizer)

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble a source file.

        Raises:
            FileError: If the file cannot be opened or decoded
            AssemblyFailedError: If either pass reports errors
        """
        filepath = Path(filepath)
        self._source_file = filepath
        if self.verbose:
            logger.info(f"Assembling {filepath}")

        with Tokenizer.open(filepath, self.config.encoding) as tokenizer:
            return self._assemble(tokenizer)

    def _assemble(self, tokenizer: Tokenizer) -> list[int]:
        self._image = None
        self._failure = None
        try:
            self._image = self._codegen.generate(tokenizer)
        except AssemblyFailedError as e:
            self._failure = e
            raise

        if self.verbose:
            logger.info(
                f"Assembled {tokenizer.batch_count} lines "
                f"({tokenizer.line_number} physical) into {self._image.size} words"
            )
        return self._image.to_words()

    # =========================================================================
    # Results
    # =========================================================================

    def get_image(self) -> ObjectImage:
        if self._image is None:
            raise AssemblerError("no program has been assembled")
        return self._image

    def get_words(self) -> list[int]:
        """Header and body words of the last assembled program."""
        return self.get_image().to_words()

    def get_code(self) -> bytes:
        """Object file bytes of the last assembled program."""
        return self.get_image().to_bytes()

    def get_origin(self) -> int:
        return self._codegen.get_origin()

    def get_symbols(self) -> dict[str, int]:
        return self._codegen.get_symbols()

    def get_symbol_table(self) -> SymbolTable:
        return self._codegen.symbols

    def get_operations(self) -> OperationList:
        return self._codegen.operations

    def get_listing(self) -> str:
        return self._codegen.get_listing()

    def get_symbol_report(self) -> str:
        return self._codegen.get_symbol_report()

    # =========================================================================
    # Output Methods
    # =========================================================================

    def output_path_for(self, source: str | Path) -> Path:
        """Default output path: ``source`` with the configured suffix."""
        return Path(source).with_suffix(self.config.output_suffix)

    def write_binary(self, filepath: str | Path | None = None) -> Path:
        """
        Write the object image.

        Args:
            filepath: Destination; defaults to the source file name with
                the output suffix

        Raises:
            FileError: If the destination cannot be written
        """
        if filepath is None:
            if self._source_file is None:
                raise AssemblerError("no output path given for string input")
            filepath = self.output_path_for(self._source_file)
        self.get_image().write(filepath)
        return Path(filepath)

    def write_listing(self, filepath: str | Path) -> None:
        self._codegen.write_listing(filepath)
        if self.verbose:
            logger.info(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        self._codegen.write_symbols(filepath)
        if self.verbose:
            logger.info(f"Wrote symbols to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self._failure is not None

    def get_errors(self) -> list[AssemblerError]:
        return list(self._failure.errors) if self._failure else []

    def get_error_report(self) -> str:
        return str(self._failure) if self._failure else ""


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[int]:
    """Assemble source text and return the object image words."""
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> list[int]:
    """Assemble a file and return the object image words."""
    return Assembler().assemble_file(filepath)
