"""
LC-3 Code Generator
===================

Two-pass assembly over a stream of token batches.

Pass 1 (Address Assignment)
---------------------------
- Classify each line's opcode and operands
- Move the location counter on .ORIG
- Bind labels to the current location counter
- Record each line's address and word size in the operation list

Pass 2 (Resolution and Encoding)
--------------------------------
- Replace every symbol operand with its PC-relative offset,
  ``target - (address + 1)``
- Encode each operation into its instruction word

Errors on individual lines are collected rather than raised, so one run
reports every bad line. A pass that collected errors ends by raising
AssemblyFailedError carrying all of them.

Output Image
------------
```
Word   Description
----   -----------
0      Address of the first operation
1      Total program size in words
2..    Program words in operation order
```
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from lc3asm.assembler.encoder import encode
from lc3asm.assembler.opcodes import OpcodeKind, classify_opcode, is_keyword
from lc3asm.assembler.operands import (
    NumericOperand,
    StringOperand,
    SymbolOperand,
    classify_operand,
)
from lc3asm.assembler.operations import MAX_OPERANDS, Operation, OperationList
from lc3asm.assembler.symbols import SymbolTable
from lc3asm.assembler.tokenizer import TokenBatch
from lc3asm.config import AssemblerConfig
from lc3asm.errors import (
    AssemblerError,
    AssemblyFailedError,
    ErrorCollector,
    FileError,
    MalformedOperationError,
    TooManyErrors,
    UndefinedSymbolError,
)
from lc3asm.objfile import MAX_WORDS, ObjectImage

logger = logging.getLogger(__name__)

WORD_MASK = 0xFFFF


class CodeGenerator:
    """
    Runs both passes and holds their results.

    Usage:
        codegen = CodeGenerator()
        with Tokenizer.open("prog.asm") as tokenizer:
            codegen.pass_one(tokenizer)
        codegen.pass_two()
        image = codegen.build_image()
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._reset()

    def _reset(self) -> None:
        self.symbols = SymbolTable(self.config.table_size)
        self.operations = OperationList()
        self._pc = 0
        self._errors = ErrorCollector(self.config.max_errors)

    # =========================================================================
    # Public Interface
    # =========================================================================

    @property
    def location_counter(self) -> int:
        """Location counter value at the end of pass one."""
        return self._pc

    def generate(self, batches: Iterable[TokenBatch]) -> ObjectImage:
        """
        Run both passes and return the program image.

        Raises:
            AssemblyFailedError: If either pass collected errors
        """
        self.pass_one(batches)
        self.pass_two()
        return self.build_image()

    def pass_one(self, batches: Iterable[TokenBatch]) -> OperationList:
        """
        Assign addresses and sizes, and build the symbol table.

        Raises:
            AssemblyFailedError: If any line could not be processed
        """
        self._reset()

        try:
            for batch in batches:
                try:
                    operation = self._pass_one_line(batch)
                except AssemblerError as e:
                    self._errors.add(e)
                    continue

                if self.config.stop_at_end and operation.kind == OpcodeKind.END:
                    logger.debug(f"Stopping at .END on line {batch.line_number}")
                    break
        except TooManyErrors:
            logger.debug("Error limit reached in pass one")

        self._raise_if_failed("pass one")
        logger.debug(
            f"Pass one: {len(self.operations)} operations, "
            f"{self.operations.size} words, {len(self.symbols)} symbols"
        )
        return self.operations

    def pass_two(self) -> OperationList:
        """
        Resolve symbol operands and encode every operation in place.

        Raises:
            AssemblyFailedError: If any operation could not be encoded
        """
        self._errors.clear()

        try:
            for operation in self.operations:
                try:
                    self._resolve_symbols(operation)
                    operation.instruction = encode(operation)
                except AssemblerError as e:
                    self._errors.add(e)
        except TooManyErrors:
            logger.debug("Error limit reached in pass two")

        self._raise_if_failed("pass two")
        logger.debug(f"Pass two: encoded {len(self.operations)} operations")
        return self.operations

    def build_image(self) -> ObjectImage:
        """Return the program image for the completed operation list."""
        return ObjectImage.from_operations(self.operations)

    def emit_words(self) -> list[int]:
        """Header and body words, as written to the object file."""
        return self.build_image().to_words()

    def get_symbols(self) -> dict[str, int]:
        return self.symbols.to_dict()

    def get_origin(self) -> int:
        return self.operations.origin

    def has_errors(self) -> bool:
        return self._errors.has_errors()

    def get_error_report(self) -> str:
        return self._errors.report()

    # =========================================================================
    # Pass One
    # =========================================================================

    def _pass_one_line(self, batch: TokenBatch) -> Operation:
        if batch.overflow:
            raise MalformedOperationError(
                f"too many tokens ({len(batch) + batch.overflow}), "
                f"a line holds a label, an opcode and {MAX_OPERANDS} operands",
                location=batch.location,
                source_line=batch.line,
            )

        opcode = classify_opcode(batch)
        has_label = not is_keyword(batch[0])
        first = 2 if has_label else 1

        if opcode.kind == OpcodeKind.ORIG:
            origin = classify_operand(batch, first)
            if not isinstance(origin, NumericOperand):
                raise self._malformed(batch, ".ORIG needs a numeric address")
            self._pc = origin.value

        label = batch[0] if has_label else None
        if label is not None:
            self.symbols.insert(label, self._pc, batch.location)

        operation = Operation(
            line=batch.line,
            line_number=batch.line_number,
            opcode=opcode,
            address=self._pc,
            label=label,
            filename=batch.filename,
        )

        operand_count = len(batch) - first
        if operand_count > MAX_OPERANDS:
            raise self._malformed(
                batch, f"too many operands ({operand_count}), at most {MAX_OPERANDS}"
            )
        for position in range(first, len(batch)):
            operation.add_operand(classify_operand(batch, position))

        operation.size = self._operation_size(operation, batch)
        if self.operations.size + operation.size > MAX_WORDS:
            raise self._malformed(
                batch, f"program grows past {MAX_WORDS} words, the most an image can hold"
            )
        self.operations.append(operation)
        logger.debug(
            f"{batch.line_number:5d} 0x{operation.address:04X} "
            f"size={operation.size} {opcode.mnemonic}"
        )
        self._pc = (self._pc + operation.size) & WORD_MASK
        return operation

    def _operation_size(self, operation: Operation, batch: TokenBatch) -> int:
        kind = operation.kind
        if kind in (OpcodeKind.ORIG, OpcodeKind.END):
            return 0

        if kind == OpcodeKind.BLKW:
            if len(operation.operands) != 1 or not isinstance(
                operation.operands[0], NumericOperand
            ):
                raise self._malformed(batch, ".BLKW needs a single numeric count")
            return operation.operands[0].value

        if kind == OpcodeKind.STRINGZ:
            if len(operation.operands) != 1 or not isinstance(
                operation.operands[0], StringOperand
            ):
                raise self._malformed(batch, ".STRINGZ needs a single quoted string")
            operand = operation.operands[0]
            size = operand.value
            operand.value = ord(operand.text[0]) & WORD_MASK if operand.text else 0
            return size

        return 1

    @staticmethod
    def _malformed(batch: TokenBatch, detail: str) -> MalformedOperationError:
        return MalformedOperationError(
            detail, location=batch.location, source_line=batch.line
        )

    # =========================================================================
    # Pass Two
    # =========================================================================

    def _resolve_symbols(self, operation: Operation) -> None:
        for operand in operation.operands:
            if not isinstance(operand, SymbolOperand):
                continue
            entry = self.symbols.lookup(operand.name)
            if entry is None:
                raise UndefinedSymbolError(
                    operand.name,
                    location=operation.location,
                    source_line=operation.line,
                    similar_symbols=self.symbols.similar(operand.name),
                )
            operand.resolve(entry.address, operation.address)

    def _raise_if_failed(self, phase: str) -> None:
        if self._errors.has_errors():
            raise AssemblyFailedError(phase, self._errors.errors, self._errors.report())

    # =========================================================================
    # Reports
    # =========================================================================

    def get_symbol_report(self) -> str:
        """
        Symbol table in bucket order.

            Symbol             ADDRESS (indx)
            ---------------------------------
            LOOP................0x3000 (2427)
        """
        lines = [
            "Symbol             ADDRESS (indx)",
            "-" * 33,
        ]
        for index, entry in self.symbols.items():
            dots = "." * max(0, 20 - len(entry.name))
            lines.append(f"{entry.name}{dots}0x{entry.address:04X} ({index:04d})")
        return "\n".join(lines)

    def get_listing(self) -> str:
        """
        Operation list after pass two, one row per program word.

        .BLKW and .STRINGZ get one extra row for each word after the
        first, with "." in the opcode and operand columns.
        """
        lines = [
            f"{'LABEL':<20}{'OPCODE':<10}{'OPERANDS':<40} {'ADDR':<4}: {'INST':<4} {'BINARY':>16}",
            "-" * 98,
        ]
        for operation in self.operations:
            operands = ", ".join(op.display() for op in operation.operands)
            lines.append(self._listing_row(
                operation.label or "",
                operation.opcode.mnemonic,
                operands,
                operation.address,
                operation.instruction,
            ))

            if operation.kind in (OpcodeKind.BLKW, OpcodeKind.STRINGZ):
                for offset, word in enumerate(operation.words()[1:operation.size], start=1):
                    lines.append(self._listing_row(
                        "", ".", ".", (operation.address + offset) & WORD_MASK, word
                    ))
        return "\n".join(lines)

    @staticmethod
    def _listing_row(label: str, mnemonic: str, operands: str, address: int, word: int) -> str:
        return f"{label:<20}{mnemonic:<10}{operands:<40} {address:04X}: {word:04X} {word:016b}"

    # =========================================================================
    # Output Files
    # =========================================================================

    def write_listing(self, filepath: str | Path) -> None:
        _write_text(filepath, self.get_listing() + "\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, sorted by name)
        """
        lines = ["; Symbol table", "; Generated by lc3asm"]
        for name, address in sorted(self.get_symbols().items()):
            lines.append(f"{name} x{address:04X}")
        _write_text(filepath, "\n".join(lines) + "\n")


def _write_text(filepath: str | Path, text: str) -> None:
    try:
        Path(filepath).write_text(text)
    except OSError as e:
        raise FileError(str(filepath), e.strerror or str(e)) from e
