"""
LC-3 Source Tokenizer
=====================

Splits assembly source into one token batch per meaningful line.

Tokenization Rules
------------------
- Tokens are separated by spaces, tabs and commas
- A token that starts with a double quote runs to the closing quote,
  so delimiters inside a string do not split it; with no closing quote
  the token runs to the end of the line
- A token that starts with ';' ends the line (comment)
- Lines that are blank or contain only a comment produce no batch,
  but still advance the physical line number
- At most MAX_TOKENS tokens are kept per line; a longer line is
  reported as malformed by pass one

Each source stream owns its own LineScanner cursor, so several
tokenizers can run side by side without sharing state.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, TextIO

from lc3asm.errors import FileError, SourceLocation

logger = logging.getLogger(__name__)

# Label + opcode + three operands
MAX_TOKENS = 5

DELIMITERS = frozenset(" \t\n\r,")
COMMENT_MARKER = ";"
QUOTE = '"'


@dataclass(frozen=True)
class TokenBatch:
    """
    One tokenized source line.

    Attributes:
        line: Raw line text without the trailing newline
        line_number: Physical line number (1-indexed)
        tokens: Tokens in source order, at most MAX_TOKENS of them
        filename: Source name for diagnostics
        overflow: Number of tokens dropped beyond MAX_TOKENS
    """
    line: str
    line_number: int
    tokens: tuple[str, ...]
    filename: str = "<input>"
    overflow: int = 0

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> str:
        return self.tokens[index]

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line_number)


@dataclass
class LineScanner:
    """
    Cursor over a single line of text.

    The scanner is created per line and discarded afterwards, so no
    position survives from one call to the next.
    """
    text: str
    _pos: int = field(default=0, init=False)

    def _at_end(self) -> bool:
        return self._pos >= len(self.text)

    def _peek(self) -> str:
        if self._at_end():
            return ""
        return self.text[self._pos]

    def _advance(self) -> str:
        char = self._peek()
        self._pos += 1
        return char

    def _skip_delimiters(self) -> None:
        while not self._at_end() and self._peek() in DELIMITERS:
            self._advance()

    def next_token(self) -> Optional[str]:
        """
        Return the next token, or None at end of line or start of comment.
        """
        self._skip_delimiters()
        if self._at_end() or self._peek() == COMMENT_MARKER:
            return None

        start = self._pos
        if self._advance() == QUOTE:
            while not self._at_end():
                if self._advance() == QUOTE:
                    break
            # Text right after the closing quote starts a new token: "AB"C -> "AB", C
            return self.text[start:self._pos]

        while not self._at_end() and self._peek() not in DELIMITERS:
            self._advance()
        return self.text[start:self._pos]

    def tokens(self) -> list[str]:
        """Return every token on the line up to any comment."""
        result = []
        while (token := self.next_token()) is not None:
            result.append(token)
        return result


def tokenize_line(text: str) -> list[str]:
    """Split one line into its tokens (no length limit applied)."""
    return LineScanner(text).tokens()


class Tokenizer:
    """
    Streams token batches from assembly source.

    Usage:
        with Tokenizer.open("prog.asm") as tokenizer:
            for batch in tokenizer:
                print(batch.line_number, batch.tokens)
    """

    def __init__(self, stream: TextIO | BinaryIO, filename: str = "<input>", encoding: str = "utf-8"):
        self._stream = stream
        self.filename = filename
        self.encoding = encoding
        self._line_number = 0
        self._batch_count = 0

    @classmethod
    def open(cls, path: str | Path, encoding: str = "utf-8") -> "Tokenizer":
        """
        Open a source file for tokenizing.

        Raises:
            FileError: If the file cannot be opened
        """
        path = Path(path)
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise FileError(str(path), e.strerror or str(e)) from e
        logger.debug(f"Opened source {path}")
        return cls(stream, str(path), encoding)

    @classmethod
    def from_string(cls, source: str, filename: str = "<input>") -> "Tokenizer":
        return cls(io.StringIO(source), filename)

    @property
    def line_number(self) -> int:
        """Physical line number of the most recently read line."""
        return self._line_number

    @property
    def batch_count(self) -> int:
        """Number of token batches returned so far."""
        return self._batch_count

    def next_line(self) -> Optional[TokenBatch]:
        """
        Return the next non-blank, non-comment line as a TokenBatch.

        Returns:
            The batch, or None once the input is exhausted

        Raises:
            FileError: If the source is not valid text in its encoding
        """
        while raw := self._read_raw_line():
            self._line_number += 1
            line = raw.rstrip("\r\n")
            tokens = tokenize_line(line)
            if not tokens:
                continue

            self._batch_count += 1
            return TokenBatch(
                line=line,
                line_number=self._line_number,
                tokens=tuple(tokens[:MAX_TOKENS]),
                filename=self.filename,
                overflow=max(0, len(tokens) - MAX_TOKENS),
            )
        return None

    def _read_raw_line(self) -> str:
        raw = self._stream.readline()
        if isinstance(raw, str):
            return raw
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise FileError(
                self.filename,
                f"line {self._line_number + 1}: not valid {self.encoding}",
            ) from e

    def __iter__(self) -> Iterator[TokenBatch]:
        while (batch := self.next_line()) is not None:
            yield batch

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "Tokenizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
