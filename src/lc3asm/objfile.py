"""
LC-3 Object Image
=================

The .lc3 file written by the assembler and read back by the
disassembler.

Structure (all words little-endian, 16 bits):
    Word    Description
    0       Load address (address of the first operation)
    1       Word count n of the program body
    2..n+1  Program body

An empty program is written as the header [0, 0] with no body.
"""

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path

from lc3asm.errors import FileError, ObjectFormatError

logger = logging.getLogger(__name__)

WORD_FORMAT = "<H"
HEADER_WORDS = 2

# Largest body the 16-bit size word can describe
MAX_WORDS = 0xFFFF


@dataclass
class ObjectImage:
    """
    A loadable program image.

    Attributes:
        origin: Address the first body word is loaded at
        words: Program body, one int per 16-bit word
    """
    origin: int = 0
    words: list[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.words)

    @classmethod
    def from_operations(cls, operations) -> "ObjectImage":
        """Build the image of a fully encoded operation list."""
        words = list(operations.words())
        if len(words) != operations.size:
            raise ObjectFormatError(
                f"operation list reports {operations.size} words "
                f"but produced {len(words)}"
            )
        return cls(origin=operations.origin, words=words)

    def to_words(self) -> list[int]:
        """
        Header followed by the body.

        Raises:
            ObjectFormatError: If the body is too long for the size word
        """
        if self.size > MAX_WORDS:
            raise ObjectFormatError(
                f"program of {self.size} words does not fit the {MAX_WORDS}-word limit"
            )
        return [self.origin & 0xFFFF, self.size] + [w & 0xFFFF for w in self.words]

    def to_bytes(self) -> bytes:
        """Serialize to the on-disk byte layout."""
        words = self.to_words()
        return struct.pack(f"<{len(words)}H", *words)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ObjectImage":
        """
        Parse an image from bytes.

        Raises:
            ObjectFormatError: If the data is truncated or inconsistent
        """
        if len(data) < HEADER_WORDS * 2:
            raise ObjectFormatError(f"object image too short: {len(data)} bytes")
        if len(data) % 2:
            raise ObjectFormatError(f"object image has odd length: {len(data)} bytes")

        count = len(data) // 2
        words = list(struct.unpack(f"<{count}H", data))
        origin, size = words[0], words[1]
        body = words[HEADER_WORDS:]
        if size != len(body):
            raise ObjectFormatError(
                f"header declares {size} words but image holds {len(body)}"
            )
        return cls(origin=origin, words=body)

    def write(self, filepath: str | Path) -> None:
        """
        Write the image to ``filepath``.

        Raises:
            FileError: If the file cannot be written
        """
        data = self.to_bytes()
        try:
            with open(filepath, "wb") as f:
                f.write(data)
        except OSError as e:
            raise FileError(str(filepath), e.strerror or str(e)) from e
        logger.info(f"Wrote {self.size} words at 0x{self.origin:04X} to {filepath}")

    @classmethod
    def read(cls, filepath: str | Path) -> "ObjectImage":
        """
        Read an image from ``filepath``.

        Raises:
            FileError: If the file cannot be read
            ObjectFormatError: If its contents are malformed
        """
        try:
            data = Path(filepath).read_bytes()
        except OSError as e:
            raise FileError(str(filepath), e.strerror or str(e)) from e
        return cls.from_bytes(data)

    def addressed_words(self):
        """Yield (address, word) pairs for the body."""
        for offset, word in enumerate(self.words):
            yield (self.origin + offset) & 0xFFFF, word
