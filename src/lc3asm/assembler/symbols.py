"""
LC-3 Symbol Table
=================

Open-hashing dictionary from label name to address.

The hash is a polynomial rolling hash over the UTF-8 bytes of the name,
``h = h * 31 + byte``, kept to 32 unsigned bits and reduced modulo the
bucket count. Each bucket is a collision chain with the most recently
inserted entry first.
"""

import difflib
import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from lc3asm.config import DEFAULT_TABLE_SIZE
from lc3asm.errors import DuplicateSymbolError, SourceLocation

logger = logging.getLogger(__name__)

HASH_MULTIPLIER = 31
HASH_MASK = 0xFFFFFFFF


@dataclass
class SymbolEntry:
    """
    A label bound to an address.

    Attributes:
        name: Label text, case sensitive
        address: 16-bit address assigned in pass one
        location: Where the label was defined (optional)
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Hash table of SymbolEntry records keyed by name.

    Usage:
        table = SymbolTable()
        table.insert("LOOP", 0x3000)
        table.lookup("LOOP").address   # 0x3000
        table.lookup("NOPE")           # None
    """

    def __init__(self, table_size: int = 0):
        """
        Args:
            table_size: Bucket count; 0 selects DEFAULT_TABLE_SIZE
        """
        if table_size < 0:
            raise ValueError(f"table size must be >= 0, got {table_size}")
        self.table_size = table_size or DEFAULT_TABLE_SIZE
        self._buckets: list[list[SymbolEntry]] = [[] for _ in range(self.table_size)]
        self._count = 0

    def hash(self, name: str) -> int:
        """Return the bucket index for ``name``, always < table_size."""
        key = 0
        for byte in name.encode("utf-8"):
            key = (key * HASH_MULTIPLIER + byte) & HASH_MASK
        return key % self.table_size

    def insert(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
    ) -> SymbolEntry:
        """
        Bind ``name`` to ``address``.

        Raises:
            DuplicateSymbolError: If ``name`` is already defined
        """
        existing = self.lookup(name)
        if existing is not None:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=existing.location,
            )

        entry = SymbolEntry(name, address & 0xFFFF, location)
        self._buckets[self.hash(name)].insert(0, entry)
        self._count += 1
        logger.debug(f"Symbol {name} = 0x{entry.address:04X}")
        return entry

    def lookup(self, name: str) -> Optional[SymbolEntry]:
        """Return the entry for ``name`` or None if it is not defined."""
        for entry in self._buckets[self.hash(name)]:
            if entry.name == name:
                return entry
        return None

    def similar(self, name: str, limit: int = 3) -> list[str]:
        """Names close to ``name``, best match first, for typo hints."""
        return difflib.get_close_matches(name, [e.name for e in self], n=limit)

    def bucket(self, index: int) -> list[SymbolEntry]:
        """Return a copy of one collision chain, newest entry first."""
        return list(self._buckets[index])

    def items(self) -> Iterator[tuple[int, SymbolEntry]]:
        """Yield (bucket index, entry) pairs in bucket order."""
        for index, chain in enumerate(self._buckets):
            for entry in chain:
                yield index, entry

    def to_dict(self) -> dict[str, int]:
        """Return a plain name -> address mapping."""
        return {entry.name: entry.address for entry in self}

    def __len__(self) -> int:
        return self._count

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[SymbolEntry]:
        for _, entry in self.items():
            yield entry
