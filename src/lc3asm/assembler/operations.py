"""
Intermediate Representation
===========================

Pass one turns every token batch into an Operation and appends it to an
OperationList. Pass two walks the same list in order, resolving symbol
operands and filling in the encoded instruction word. Nothing is added
to the list after pass one.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from lc3asm.assembler.opcodes import Opcode, OpcodeKind
from lc3asm.assembler.operands import Operand, StringOperand
from lc3asm.errors import SourceLocation

MAX_OPERANDS = 3


@dataclass
class Operation:
    """
    One assembled source line.

    Attributes:
        line: Original line text
        line_number: Physical line number
        opcode: Classified opcode record
        address: Location counter value when the line was read
        label: Label defined on this line, if any
        operands: Up to MAX_OPERANDS operands, in source order
        size: Words occupied (0 for .ORIG/.END, n for .BLKW/.STRINGZ)
        instruction: Encoded word after pass two; for .STRINGZ only the
            first character is kept here
        filename: Source name for diagnostics
    """
    line: str
    line_number: int
    opcode: Opcode
    address: int
    label: Optional[str] = None
    operands: list[Operand] = field(default_factory=list)
    size: int = 1
    instruction: int = 0
    filename: str = "<input>"

    @property
    def kind(self) -> OpcodeKind:
        return self.opcode.kind

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line_number)

    def add_operand(self, operand: Operand) -> None:
        if len(self.operands) >= MAX_OPERANDS:
            raise ValueError(f"an operation holds at most {MAX_OPERANDS} operands")
        self.operands.append(operand)

    def words(self) -> list[int]:
        """
        Words this operation contributes to the program image.

        .BLKW reserves zero words, .STRINGZ stores one word per character
        plus a terminator, .ORIG/.END contribute nothing, and everything
        else is its single encoded instruction.
        """
        kind = self.kind
        if kind in (OpcodeKind.ORIG, OpcodeKind.END):
            return []
        if kind == OpcodeKind.BLKW:
            return [0] * self.size
        if kind == OpcodeKind.STRINGZ:
            operand = self.operands[0]
            text = operand.text if isinstance(operand, StringOperand) else ""
            return [ord(c) & 0xFFFF for c in text] + [0]
        return [self.instruction & 0xFFFF]


class OperationList:
    """
    Ordered, index-addressable sequence of operations.

    Also tracks the running word total across all operations.
    """

    def __init__(self):
        self._operations: list[Operation] = []
        self.size = 0

    def append(self, operation: Operation) -> None:
        self._operations.append(operation)
        self.size += operation.size

    @property
    def origin(self) -> int:
        """Address of the first operation, 0 for an empty program."""
        if not self._operations:
            return 0
        return self._operations[0].address

    @property
    def labels(self) -> list[str]:
        return [op.label for op in self._operations if op.label]

    def words(self) -> Iterator[int]:
        """Yield the program body words in operation order."""
        for operation in self._operations:
            yield from operation.words()

    def __len__(self) -> int:
        return len(self._operations)

    def __getitem__(self, index: int) -> Operation:
        return self._operations[index]

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations)
