"""
LC-3 Assembler Errors
=====================

Every exception the toolchain raises on purpose derives from LC3Error.

Exception Tree
--------------
LC3Error
├── FileError - a source, image or output file cannot be opened
├── ObjectFormatError - a .lc3 image does not parse
└── AssemblerError - tied to a source line
    ├── UnknownOpcodeError - no mnemonic in the first two tokens
    ├── MalformedOperationError - wrong operand count or kind
    ├── DuplicateSymbolError - a label is bound twice
    ├── UndefinedSymbolError - a label is referenced but never bound
    ├── EncodingError - an opcode the encoder has no rule for
    ├── TooManyErrors - the per-pass error limit was hit
    └── AssemblyFailedError - a pass ended with collected errors

Diagnostics render as:

    prog.asm:7: error: undefined symbol 'LOPP'
        BRp LOPP
    hint: did you mean 'LOOP'?
"""

from dataclasses import dataclass
from typing import Iterator, Optional


class LC3Error(Exception):
    """Root of the lc3asm exception tree."""


class FileError(LC3Error):
    """A file could not be opened for reading or writing."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"cannot open '{self.path}': {reason}")


class ObjectFormatError(LC3Error):
    """A .lc3 image is truncated, odd-sized or disagrees with its header."""


# =============================================================================
# Locations
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    filename:line[:column] of a diagnostic.

    ``column`` is 1-based; 0 means the column is not known and is left
    out of the rendered form.
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        parts = [self.filename, str(self.line)]
        if self.column > 0:
            parts.append(str(self.column))
        return ":".join(parts)


# =============================================================================
# Line Diagnostics
# =============================================================================

class AssemblerError(LC3Error):
    """
    A problem with one line of assembly source.

    Attributes:
        message: What is wrong
        location: Where, when known
        hint: How to fix it, when there is something useful to say
        source_line: The offending line as written
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self.render())

    def render(self) -> str:
        """Headline, then the quoted source line and caret, then the hint."""
        where = f"{self.location}: " if self.location else ""
        lines = [f"{where}error: {self.message}"]
        lines.extend(self._context())
        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)

    def _context(self) -> Iterator[str]:
        if self.location is None or self.source_line is None:
            return
        yield "    " + self.source_line.rstrip()
        if self.location.column > 0:
            yield " " * (3 + self.location.column) + "^"


class UnknownOpcodeError(AssemblerError):
    """
    Neither of the first two tokens is a mnemonic or pseudo-op.

        LOOP MOV R1, R2     ; tried 'LOOP' and 'MOV'
    """

    def __init__(
        self,
        candidates: list[str],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.candidates = list(candidates)
        tried = ", ".join(repr(c) for c in self.candidates) or "<none>"
        super().__init__(
            f"unknown opcode (tried {tried})",
            location=location,
            hint="mnemonics and pseudo-ops are case sensitive, e.g. ADD, BRnz, .FILL",
            source_line=source_line,
        )


class MalformedOperationError(AssemblerError):
    """Operand count or operand kind does not fit the opcode."""


class DuplicateSymbolError(AssemblerError):
    """A label was bound a second time; the hint points at the first."""

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location
        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=f"'{symbol}' was first defined at {original_location}" if original_location else None,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    A symbol operand names no label.

    Up to three ``similar_symbols`` are offered as the hint when no
    explicit hint is given.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = list(similar_symbols or [])
        if hint is None and self.similar_symbols:
            names = ", ".join(repr(name) for name in self.similar_symbols[:3])
            hint = f"did you mean {names}?"
        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class EncodingError(AssemblerError):
    """The encoder met an opcode outside the keyword table (an assembler bug)."""


class TooManyErrors(AssemblerError):
    """The error limit of a pass was reached."""

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)


# =============================================================================
# Per-Pass Collection
# =============================================================================

class ErrorCollector:
    """
    Gathers line diagnostics so a pass can report all of them at once.

    ``add`` raises TooManyErrors once ``max_errors`` diagnostics are
    held; the pass catches it and stops reading lines.
    """

    def __init__(self, max_errors: int = 100):
        self.errors: list[AssemblerError] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        self.errors.append(error)
        if len(self) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_count(self) -> int:
        return len(self)

    def report(self) -> str:
        """Each diagnostic followed by a blank line, then the total."""
        blocks = [f"{error}\n" for error in self.errors]
        blocks.append(_count(len(self)))
        return "\n".join(blocks)

    def clear(self) -> None:
        self.errors.clear()

    def __len__(self) -> int:
        return len(self.errors)


class AssemblyFailedError(AssemblerError):
    """
    A pass finished with at least one collected diagnostic.

    Attributes:
        phase: "pass one" or "pass two"
        errors: The diagnostics, in source order
    """

    def __init__(self, phase: str, errors: list[AssemblerError], report: str):
        self.phase = phase
        self.errors = list(errors)
        super().__init__(f"{phase} failed with {_count(len(self.errors))}:\n\n{report}")


def _count(n: int) -> str:
    return f"{n} error" if n == 1 else f"{n} errors"
