"""
LC-3 Opcode Definitions
=======================

The closed set of mnemonics the assembler recognizes and the opcode
records built from them.

Real instructions carry their 4-bit machine opcode as the OpcodeKind
value; pseudo-operations use values above 0x1F so they can never be
confused with an instruction field.

Keywords are case sensitive. The compound branch forms (BRn ... BRnzp)
and the RET/JSRR forms are separate keywords, so a label named, say,
``BRz`` is not possible.
"""

from dataclasses import dataclass
from enum import IntEnum

from lc3asm.errors import UnknownOpcodeError


class OpcodeKind(IntEnum):
    """Opcode identifiers; instruction values are the machine opcodes."""
    BR = 0x0
    ADD = 0x1
    LD = 0x2
    ST = 0x3
    JSR = 0x4
    AND = 0x5
    LDR = 0x6
    STR = 0x7
    RTI = 0x8
    NOT = 0x9
    LDI = 0xA
    STI = 0xB
    JMP = 0xC
    LEA = 0xE
    TRAP = 0xF
    # Pseudo-operations
    ORIG = 0x20
    END = 0x21
    BLKW = 0x22
    FILL = 0x23
    STRINGZ = 0x24

    @property
    def is_pseudo(self) -> bool:
        return self >= OpcodeKind.ORIG


# Condition flag bits, as placed in bits 11..9 of a BR word
FLAG_P = 0x1
FLAG_Z = 0x2
FLAG_N = 0x4

# Variant selectors
JSRR_VARIANT = 0
JSR_VARIANT = 1
JMP_VARIANT = 0
RET_VARIANT = 1


@dataclass(frozen=True)
class Opcode:
    """
    An opcode with no auxiliary fields.

    Attributes:
        kind: Which instruction or pseudo-op this is
        mnemonic: The keyword as written in source
    """
    kind: OpcodeKind
    mnemonic: str

    def __str__(self) -> str:
        return self.mnemonic


@dataclass(frozen=True)
class BranchOpcode(Opcode):
    """BR with its N/Z/P condition mask (0 for plain BR)."""
    flags: int = 0


@dataclass(frozen=True)
class SubroutineOpcode(Opcode):
    """JSR (variant 1, PC offset) or JSRR (variant 0, base register)."""
    variant: int = JSR_VARIANT


@dataclass(frozen=True)
class JumpOpcode(Opcode):
    """JMP (variant 0, base register) or RET (variant 1, R7 implied)."""
    variant: int = JMP_VARIANT


def _branch_flags(suffix: str) -> int:
    flags = 0
    if "n" in suffix:
        flags |= FLAG_N
    if "z" in suffix:
        flags |= FLAG_Z
    if "p" in suffix:
        flags |= FLAG_P
    return flags


def _build_keywords() -> dict[str, Opcode]:
    table: dict[str, Opcode] = {}

    for suffix in ("", "n", "z", "p", "nz", "np", "zp", "nzp"):
        mnemonic = "BR" + suffix
        table[mnemonic] = BranchOpcode(OpcodeKind.BR, mnemonic, _branch_flags(suffix))

    table["JSR"] = SubroutineOpcode(OpcodeKind.JSR, "JSR", JSR_VARIANT)
    table["JSRR"] = SubroutineOpcode(OpcodeKind.JSR, "JSRR", JSRR_VARIANT)
    table["JMP"] = JumpOpcode(OpcodeKind.JMP, "JMP", JMP_VARIANT)
    table["RET"] = JumpOpcode(OpcodeKind.JMP, "RET", RET_VARIANT)

    for kind in (
        OpcodeKind.ADD, OpcodeKind.AND, OpcodeKind.LD, OpcodeKind.LDI,
        OpcodeKind.LDR, OpcodeKind.LEA, OpcodeKind.NOT, OpcodeKind.RTI,
        OpcodeKind.ST, OpcodeKind.STI, OpcodeKind.STR, OpcodeKind.TRAP,
    ):
        table[kind.name] = Opcode(kind, kind.name)

    for kind in (
        OpcodeKind.ORIG, OpcodeKind.END, OpcodeKind.BLKW,
        OpcodeKind.FILL, OpcodeKind.STRINGZ,
    ):
        mnemonic = "." + kind.name
        table[mnemonic] = Opcode(kind, mnemonic)

    return table


# Every reserved word, mapped to its (shared, immutable) opcode record
KEYWORDS: dict[str, Opcode] = _build_keywords()


def is_keyword(token: str) -> bool:
    """Return True if ``token`` is a mnemonic or pseudo-op."""
    return token in KEYWORDS


def classify_opcode(batch) -> Opcode:
    """
    Find the opcode of a token batch.

    The opcode is the first token, or the second when the first is a
    label (any token outside the keyword set).

    Raises:
        UnknownOpcodeError: If neither candidate is a keyword
    """
    tokens = list(batch.tokens)
    for token in tokens[:2]:
        opcode = KEYWORDS.get(token)
        if opcode is not None:
            return opcode

    raise UnknownOpcodeError(
        tokens[:2],
        location=batch.location,
        source_line=batch.line,
    )
