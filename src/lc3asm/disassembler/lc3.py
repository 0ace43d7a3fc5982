"""
LC-3 Disassembler
=================

Decodes 16-bit LC-3 words back into mnemonics and fields. It reverses
the encoder, so every field the assembler packs (registers, imm5,
offset6/9/11, condition flags, trap vector) can be read back.

PC-relative offsets are reported sign-extended, together with the
absolute target address they reach.

Example:
    >>> dis = LC3Disassembler()
    >>> str(dis.disassemble_one(0x1242, 0x3000))
    'x3000: x1242  ADD R1, R1, R2'
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from lc3asm.assembler.opcodes import (
    FLAG_N,
    FLAG_P,
    FLAG_Z,
    OpcodeKind,
)


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low ``bits`` bits of ``value`` as two's complement."""
    mask = (1 << bits) - 1
    value &= mask
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


@dataclass
class DisassembledInstruction:
    """
    One decoded word.

    Attributes:
        address: Address the word was loaded at
        word: The raw 16-bit word
        mnemonic: Decoded mnemonic (".FILL" for unused opcodes)
        operand_str: Operands formatted as assembler source
        fields: Decoded bit fields (dr, sr1, imm5, offset9, flags, ...)
        target: Absolute address reached by a PC-relative offset
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str = ""
    fields: dict = field(default_factory=dict)
    target: Optional[int] = None

    def __str__(self) -> str:
        asm = f"{self.mnemonic} {self.operand_str}" if self.operand_str else self.mnemonic
        if self.target is not None:
            return f"x{self.address:04X}: x{self.word:04X}  {asm:<20} ; -> x{self.target:04X}"
        return f"x{self.address:04X}: x{self.word:04X}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"x{self.address:04X}",
            "address_int": self.address,
            "word": f"x{self.word:04X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "fields": dict(self.fields),
            "target": self.target,
        }


class LC3Disassembler:
    """Decodes LC-3 machine words."""

    def disassemble_one(self, word: int, address: int = 0) -> DisassembledInstruction:
        word &= 0xFFFF
        opcode = word >> 12
        decoder = _DECODERS.get(opcode)
        if decoder is None:
            return DisassembledInstruction(
                address, word, ".FILL", f"x{word:04X}", {"value": word}
            )
        return decoder(word, address)

    def disassemble(
        self,
        words: Iterable[int],
        origin: int = 0,
        count: Optional[int] = None,
    ) -> list[DisassembledInstruction]:
        result = []
        for offset, word in enumerate(words):
            if count is not None and offset >= count:
                break
            result.append(self.disassemble_one(word, (origin + offset) & 0xFFFF))
        return result

    def disassemble_image(self, image, count: Optional[int] = None) -> list[DisassembledInstruction]:
        return self.disassemble(image.words, image.origin, count)

    def disassemble_to_text(self, words: Iterable[int], origin: int = 0) -> str:
        return "\n".join(str(inst) for inst in self.disassemble(words, origin))


# =============================================================================
# Field Decoders
# =============================================================================

def _reg(word: int, shift: int) -> int:
    return (word >> shift) & 0x7


def _target(address: int, offset: int) -> int:
    return (address + 1 + offset) & 0xFFFF


def _decode_operate(word: int, address: int) -> DisassembledInstruction:
    kind = OpcodeKind(word >> 12)
    dr, sr1 = _reg(word, 9), _reg(word, 6)
    fields = {"dr": dr, "sr1": sr1}
    if word & 0x20:
        imm5 = sign_extend(word, 5)
        fields["imm5"] = imm5
        operands = f"R{dr}, R{sr1}, #{imm5}"
    else:
        sr2 = _reg(word, 0)
        fields["sr2"] = sr2
        operands = f"R{dr}, R{sr1}, R{sr2}"
    return DisassembledInstruction(address, word, kind.name, operands, fields)


def _decode_branch(word: int, address: int) -> DisassembledInstruction:
    flags = (word >> 9) & 0x7
    offset = sign_extend(word, 9)
    suffix = ""
    if flags & FLAG_N:
        suffix += "n"
    if flags & FLAG_Z:
        suffix += "z"
    if flags & FLAG_P:
        suffix += "p"
    target = _target(address, offset)
    return DisassembledInstruction(
        address, word, "BR" + suffix, f"x{target:04X}",
        {"flags": flags, "offset9": offset}, target,
    )


def _decode_pc_relative(word: int, address: int) -> DisassembledInstruction:
    kind = OpcodeKind(word >> 12)
    reg = _reg(word, 9)
    offset = sign_extend(word, 9)
    target = _target(address, offset)
    role = "sr" if kind in (OpcodeKind.ST, OpcodeKind.STI) else "dr"
    return DisassembledInstruction(
        address, word, kind.name, f"R{reg}, x{target:04X}",
        {role: reg, "offset9": offset}, target,
    )


def _decode_base_offset(word: int, address: int) -> DisassembledInstruction:
    kind = OpcodeKind(word >> 12)
    reg, base = _reg(word, 9), _reg(word, 6)
    offset = sign_extend(word, 6)
    role = "dr" if kind == OpcodeKind.LDR else "sr"
    return DisassembledInstruction(
        address, word, kind.name, f"R{reg}, R{base}, #{offset}",
        {role: reg, "base": base, "offset6": offset},
    )


def _decode_subroutine(word: int, address: int) -> DisassembledInstruction:
    if word & 0x0800:
        offset = sign_extend(word, 11)
        target = _target(address, offset)
        return DisassembledInstruction(
            address, word, "JSR", f"x{target:04X}", {"offset11": offset}, target
        )
    base = _reg(word, 6)
    return DisassembledInstruction(address, word, "JSRR", f"R{base}", {"base": base})


def _decode_jump(word: int, address: int) -> DisassembledInstruction:
    base = _reg(word, 6)
    if base == 7:
        return DisassembledInstruction(address, word, "RET", "", {"base": base})
    return DisassembledInstruction(address, word, "JMP", f"R{base}", {"base": base})


def _decode_not(word: int, address: int) -> DisassembledInstruction:
    dr, sr = _reg(word, 9), _reg(word, 6)
    return DisassembledInstruction(address, word, "NOT", f"R{dr}, R{sr}", {"dr": dr, "sr": sr})


def _decode_rti(word: int, address: int) -> DisassembledInstruction:
    return DisassembledInstruction(address, word, "RTI")


def _decode_trap(word: int, address: int) -> DisassembledInstruction:
    vector = word & 0xFF
    return DisassembledInstruction(
        address, word, "TRAP", f"x{vector:02X}", {"trapvect8": vector}
    )


_DECODERS = {
    OpcodeKind.BR: _decode_branch,
    OpcodeKind.ADD: _decode_operate,
    OpcodeKind.AND: _decode_operate,
    OpcodeKind.LD: _decode_pc_relative,
    OpcodeKind.LDI: _decode_pc_relative,
    OpcodeKind.ST: _decode_pc_relative,
    OpcodeKind.STI: _decode_pc_relative,
    OpcodeKind.LEA: _decode_pc_relative,
    OpcodeKind.LDR: _decode_base_offset,
    OpcodeKind.STR: _decode_base_offset,
    OpcodeKind.JSR: _decode_subroutine,
    OpcodeKind.JMP: _decode_jump,
    OpcodeKind.NOT: _decode_not,
    OpcodeKind.RTI: _decode_rti,
    OpcodeKind.TRAP: _decode_trap,
}
