"""
LC-3 Instruction Encoder
========================

Builds the 16-bit word for a resolved operation.

Instruction Layouts (bit 15 first)
----------------------------------
```
ADD/AND   op  DR  SR1 0 00 SR2         op  DR  SR1 1 imm5
BR        0000 n z p  PCoffset9
JMP/RET   1100 000 BaseR 000000        (RET: BaseR = 7)
JSR       0100 1 PCoffset11
JSRR      0100 0 00 BaseR 000000
LD/LDI    op  DR  PCoffset9
ST/STI    op  SR  PCoffset9
LDR/STR   op  R   BaseR offset6
LEA       1110 DR PCoffset9
NOT       1001 DR SR 111111
RTI       1000 000000000000
TRAP      1111 0000 trapvect8
.FILL     raw value
.STRINGZ  first character (remaining words come from the payload)
```

.ORIG, .END and .BLKW produce no instruction word and encode as 0.
"""

from typing import Callable

from lc3asm.assembler.opcodes import (
    BranchOpcode,
    JumpOpcode,
    OpcodeKind,
    RET_VARIANT,
    SubroutineOpcode,
    JSRR_VARIANT,
)
from lc3asm.assembler.operands import RegisterOperand
from lc3asm.assembler.operations import Operation
from lc3asm.errors import EncodingError, MalformedOperationError

OFFSET6_MASK = 0x003F
OFFSET9_MASK = 0x01FF
OFFSET11_MASK = 0x07FF
IMM5_MASK = 0x001F
TRAPVECT_MASK = 0x00FF
IMMEDIATE_BIT = 0x0020
JSR_OFFSET_BIT = 0x0800
RET_BASE_REGISTER = 7


# =============================================================================
# Validation Helpers
# =============================================================================

def _malformed(operation: Operation, detail: str) -> MalformedOperationError:
    return MalformedOperationError(
        f"malformed {operation.opcode.mnemonic} operation: {detail}",
        location=operation.location,
        source_line=operation.line,
    )


def expect_arity(operation: Operation, count: int) -> None:
    """
    Raises:
        MalformedOperationError: If the operand count is not ``count``
    """
    actual = len(operation.operands)
    if actual != count:
        noun = "operand" if count == 1 else "operands"
        raise _malformed(operation, f"expected {count} {noun}, got {actual}")


def register(operation: Operation, position: int, role: str) -> int:
    """
    Return the register index at ``position``.

    Raises:
        MalformedOperationError: If that operand is not a register
    """
    operand = operation.operands[position]
    if not isinstance(operand, RegisterOperand):
        raise _malformed(operation, f"{role} must be a register, got '{operand.token}'")
    return operand.index


def _value(operation: Operation, position: int) -> int:
    return operation.operands[position].value


# =============================================================================
# Per-Opcode Encoders
# =============================================================================

def _encode_operate(operation: Operation) -> int:
    """ADD and AND, register or immediate form."""
    expect_arity(operation, 3)
    dr = register(operation, 0, "DR")
    sr1 = register(operation, 1, "SR1")
    word = (operation.kind << 12) | (dr << 9) | (sr1 << 6)

    third = operation.operands[2]
    if isinstance(third, RegisterOperand):
        return word | third.index
    return word | IMMEDIATE_BIT | (third.value & IMM5_MASK)


def _encode_branch(operation: Operation) -> int:
    expect_arity(operation, 1)
    opcode = operation.opcode
    flags = opcode.flags if isinstance(opcode, BranchOpcode) else 0
    return (OpcodeKind.BR << 12) | (flags << 9) | (_value(operation, 0) & OFFSET9_MASK)


def _encode_jump(operation: Operation) -> int:
    opcode = operation.opcode
    if isinstance(opcode, JumpOpcode) and opcode.variant == RET_VARIANT:
        expect_arity(operation, 0)
        base = RET_BASE_REGISTER
    else:
        expect_arity(operation, 1)
        base = register(operation, 0, "BaseR")
    return (OpcodeKind.JMP << 12) | (base << 6)


def _encode_subroutine(operation: Operation) -> int:
    expect_arity(operation, 1)
    opcode = operation.opcode
    if isinstance(opcode, SubroutineOpcode) and opcode.variant == JSRR_VARIANT:
        base = register(operation, 0, "BaseR")
        return (OpcodeKind.JSR << 12) | (base << 6)
    return (OpcodeKind.JSR << 12) | JSR_OFFSET_BIT | (_value(operation, 0) & OFFSET11_MASK)


def _encode_pc_relative(operation: Operation) -> int:
    """LD, LDI, ST, STI and LEA."""
    expect_arity(operation, 2)
    role = "SR" if operation.kind in (OpcodeKind.ST, OpcodeKind.STI) else "DR"
    reg = register(operation, 0, role)
    return (operation.kind << 12) | (reg << 9) | (_value(operation, 1) & OFFSET9_MASK)


def _encode_base_offset(operation: Operation) -> int:
    """LDR and STR."""
    expect_arity(operation, 3)
    reg = register(operation, 0, "DR" if operation.kind == OpcodeKind.LDR else "SR")
    base = register(operation, 1, "BaseR")
    return (operation.kind << 12) | (reg << 9) | (base << 6) | (_value(operation, 2) & OFFSET6_MASK)


def _encode_not(operation: Operation) -> int:
    expect_arity(operation, 2)
    dr = register(operation, 0, "DR")
    sr = register(operation, 1, "SR")
    return (OpcodeKind.NOT << 12) | (dr << 9) | (sr << 6) | OFFSET6_MASK


def _encode_rti(operation: Operation) -> int:
    expect_arity(operation, 0)
    return OpcodeKind.RTI << 12


def _encode_trap(operation: Operation) -> int:
    expect_arity(operation, 1)
    return (OpcodeKind.TRAP << 12) | (_value(operation, 0) & TRAPVECT_MASK)


def _encode_raw(operation: Operation) -> int:
    """.FILL and .STRINGZ store the operand value itself."""
    expect_arity(operation, 1)
    return _value(operation, 0) & 0xFFFF


def _encode_layout(operation: Operation) -> int:
    """.ORIG, .END and .BLKW occupy addresses but have no instruction word."""
    return 0


_ENCODERS: dict[OpcodeKind, Callable[[Operation], int]] = {
    OpcodeKind.ADD: _encode_operate,
    OpcodeKind.AND: _encode_operate,
    OpcodeKind.BR: _encode_branch,
    OpcodeKind.JMP: _encode_jump,
    OpcodeKind.JSR: _encode_subroutine,
    OpcodeKind.LD: _encode_pc_relative,
    OpcodeKind.LDI: _encode_pc_relative,
    OpcodeKind.ST: _encode_pc_relative,
    OpcodeKind.STI: _encode_pc_relative,
    OpcodeKind.LEA: _encode_pc_relative,
    OpcodeKind.LDR: _encode_base_offset,
    OpcodeKind.STR: _encode_base_offset,
    OpcodeKind.NOT: _encode_not,
    OpcodeKind.RTI: _encode_rti,
    OpcodeKind.TRAP: _encode_trap,
    OpcodeKind.FILL: _encode_raw,
    OpcodeKind.STRINGZ: _encode_raw,
    OpcodeKind.ORIG: _encode_layout,
    OpcodeKind.END: _encode_layout,
    OpcodeKind.BLKW: _encode_layout,
}


def encode(operation: Operation) -> int:
    """
    Encode one operation into its 16-bit instruction word.

    Symbol operands must already hold their relative offsets.

    Raises:
        MalformedOperationError: On an operand count or kind mismatch
        EncodingError: If the opcode has no encoding rule
    """
    encoder = _ENCODERS.get(operation.kind)
    if encoder is None:
        raise EncodingError(
            f"no encoding rule for opcode '{operation.opcode.mnemonic}'",
            location=operation.location,
            source_line=operation.line,
        )
    return encoder(operation) & 0xFFFF
