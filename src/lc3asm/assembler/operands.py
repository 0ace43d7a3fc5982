"""
LC-3 Operand Classification
===========================

Turns operand tokens into typed operand values.

Classification order is fixed; the first rule that matches wins:

1. Register  - ``R`` followed by a digit 0-7 (``R0`` .. ``R7``)
2. String    - starts with ``"``
3. Hex       - ``x``/``X``/``0x``/``0X`` followed by hex digits
4. Decimal   - ``#`` followed by an optional ``-`` and digits, or a
               bare leading digit (``.BLKW 5``)
5. Symbol    - anything else, kept verbatim

Numeric values are truncated to 16 bits, so ``#-1`` becomes 0xFFFF.
A string operand's value starts out as its storage length in words
(payload plus terminating zero).
"""

import re
from dataclasses import dataclass
from typing import Optional

from lc3asm.errors import MalformedOperationError

WORD_MASK = 0xFFFF
NUM_REGISTERS = 8

_REGISTER_RE = re.compile(r"R([0-7])")
_HEX_RE = re.compile(r"(?:0[xX]|[xX])([0-9A-Fa-f]+)")
_DECIMAL_RE = re.compile(r"#(-?[0-9]+)|([0-9]+)")


@dataclass
class Operand:
    """
    Base operand: the source token and its 16-bit value.

    The value is rewritten in place by the passes: STRINGZ replaces a
    string's length with its first character, and pass two stores a
    symbol's relative offset here.
    """
    token: str
    value: int = 0

    def display(self) -> str:
        """Text used for this operand in listings."""
        return self.token


@dataclass
class RegisterOperand(Operand):
    """A general purpose register; value is the index 0-7."""

    @property
    def index(self) -> int:
        return self.value

    def display(self) -> str:
        return f"R{self.value}"


@dataclass
class NumericOperand(Operand):
    """A hex or decimal literal, already truncated to 16 bits."""
    pass


@dataclass
class StringOperand(Operand):
    """
    A quoted string.

    Attributes:
        text: Payload with the surrounding quotes removed
    """
    text: str = ""

    @property
    def storage_words(self) -> int:
        """Words needed to store the payload and its terminator."""
        return len(self.text) + 1


@dataclass
class SymbolOperand(Operand):
    """
    A label reference.

    Attributes:
        address: Target address once resolved, None before pass two
    """
    address: Optional[int] = None

    @property
    def name(self) -> str:
        return self.token

    @property
    def resolved(self) -> bool:
        return self.address is not None

    def resolve(self, target: int, source: int) -> int:
        """
        Store the PC-relative offset from ``source`` to ``target``.

        The offset is ``target - (source + 1)`` truncated to 16 bits.
        """
        self.address = target & WORD_MASK
        self.value = (target - (source + 1)) & WORD_MASK
        return self.value


def parse_register(token: str) -> Optional[int]:
    if match := _REGISTER_RE.match(token):
        return int(match.group(1))
    return None


def parse_hex(token: str) -> Optional[int]:
    if match := _HEX_RE.match(token):
        return int(match.group(1), 16) & WORD_MASK
    return None


def parse_decimal(token: str) -> Optional[int]:
    if match := _DECIMAL_RE.match(token):
        digits = match.group(1) if match.group(1) is not None else match.group(2)
        return int(digits) & WORD_MASK
    return None


def parse_string(token: str) -> str:
    """Strip the opening quote and, when present, the closing one."""
    body = token[1:]
    if body.endswith('"'):
        body = body[:-1]
    return body


def make_operand(token: str) -> Operand:
    """Classify a single token."""
    if (index := parse_register(token)) is not None:
        return RegisterOperand(token, index)

    if token.startswith('"'):
        operand = StringOperand(token, text=parse_string(token))
        operand.value = operand.storage_words
        return operand

    if (value := parse_hex(token)) is not None:
        return NumericOperand(token, value)

    if (value := parse_decimal(token)) is not None:
        return NumericOperand(token, value)

    return SymbolOperand(token)


def classify_operand(batch, position: int) -> Operand:
    """
    Classify the token at ``position`` in a token batch.

    Raises:
        MalformedOperationError: If the batch has no token there
    """
    if position < 0 or position >= len(batch.tokens):
        raise MalformedOperationError(
            f"missing operand at position {position}",
            location=batch.location,
            source_line=batch.line,
        )
    return make_operand(batch.tokens[position])
