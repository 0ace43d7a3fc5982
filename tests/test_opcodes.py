# =============================================================================
# test_opcodes.py - Opcode Classification Tests
# =============================================================================
# Tests for the keyword table and opcode classification.
#
# Test coverage includes:
#   - Machine opcode values of every instruction
#   - BR condition flag masks for all eight forms
#   - JSR/JSRR and JMP/RET variants
#   - Label detection (opcode in first or second token)
#   - Case sensitivity and unknown opcodes
# =============================================================================

import pytest

from lc3asm.assembler.opcodes import (
    FLAG_N,
    FLAG_P,
    FLAG_Z,
    JMP_VARIANT,
    JSR_VARIANT,
    JSRR_VARIANT,
    KEYWORDS,
    RET_VARIANT,
    BranchOpcode,
    JumpOpcode,
    OpcodeKind,
    SubroutineOpcode,
    classify_opcode,
    is_keyword,
)
from lc3asm.assembler.tokenizer import TokenBatch
from lc3asm.errors import UnknownOpcodeError


def batch(*tokens: str) -> TokenBatch:
    """Helper: build a token batch from tokens."""
    return TokenBatch(line=" ".join(tokens), line_number=1, tokens=tokens, filename="<test>")


# =============================================================================
# Keyword Table Tests
# =============================================================================

class TestKeywordTable:
    """The reserved word set."""

    @pytest.mark.parametrize("mnemonic,value", [
        ("ADD", 0x1), ("LD", 0x2), ("ST", 0x3), ("JSR", 0x4),
        ("AND", 0x5), ("LDR", 0x6), ("STR", 0x7), ("RTI", 0x8),
        ("NOT", 0x9), ("LDI", 0xA), ("STI", 0xB), ("JMP", 0xC),
        ("LEA", 0xE), ("TRAP", 0xF), ("BR", 0x0),
    ])
    def test_machine_opcodes(self, mnemonic, value):
        """Instruction kinds carry their 4-bit machine opcode."""
        assert KEYWORDS[mnemonic].kind == value

    def test_pseudo_ops_have_dots(self):
        """Pseudo-ops are spelled with a leading dot."""
        for name in ("ORIG", "END", "BLKW", "FILL", "STRINGZ"):
            assert is_keyword("." + name)
            assert not is_keyword(name)
            assert KEYWORDS["." + name].kind.is_pseudo

    def test_instructions_are_not_pseudo(self):
        """Real instructions are not pseudo-ops."""
        assert not OpcodeKind.ADD.is_pseudo
        assert not OpcodeKind.TRAP.is_pseudo

    def test_keyword_count(self):
        """8 BR forms, RET, JSRR, 14 other instructions and 5 pseudo-ops."""
        assert len(KEYWORDS) == 8 + 2 + 14 + 5

    def test_case_sensitive(self):
        """Lower-case mnemonics are not keywords."""
        assert not is_keyword("add")
        assert not is_keyword("brp")
        assert not is_keyword(".orig")
        assert not is_keyword("BRP")


# =============================================================================
# Branch Flag Tests
# =============================================================================

class TestBranchFlags:
    """BR forms OR together the N, Z and P flags."""

    @pytest.mark.parametrize("mnemonic,flags", [
        ("BR", 0),
        ("BRn", FLAG_N),
        ("BRz", FLAG_Z),
        ("BRp", FLAG_P),
        ("BRnz", FLAG_N | FLAG_Z),
        ("BRnp", FLAG_N | FLAG_P),
        ("BRzp", FLAG_Z | FLAG_P),
        ("BRnzp", FLAG_N | FLAG_Z | FLAG_P),
    ])
    def test_flags(self, mnemonic, flags):
        """Each form maps to its mask and the BR kind."""
        opcode = KEYWORDS[mnemonic]
        assert isinstance(opcode, BranchOpcode)
        assert opcode.kind == OpcodeKind.BR
        assert opcode.flags == flags
        assert opcode.mnemonic == mnemonic

    def test_flag_bit_values(self):
        """P is bit 0, Z bit 1 and N bit 2 of the mask."""
        assert (FLAG_P, FLAG_Z, FLAG_N) == (0x1, 0x2, 0x4)


# =============================================================================
# Variant Tests
# =============================================================================

class TestVariants:
    """JSR/JSRR and JMP/RET share a kind and differ by variant."""

    def test_jsr_variants(self):
        """JSR is the offset form (1), JSRR the register form (0)."""
        jsr, jsrr = KEYWORDS["JSR"], KEYWORDS["JSRR"]
        assert isinstance(jsr, SubroutineOpcode)
        assert jsr.kind == jsrr.kind == OpcodeKind.JSR
        assert jsr.variant == JSR_VARIANT == 1
        assert jsrr.variant == JSRR_VARIANT == 0

    def test_jmp_variants(self):
        """JMP is the register form (0), RET the implicit form (1)."""
        jmp, ret = KEYWORDS["JMP"], KEYWORDS["RET"]
        assert isinstance(ret, JumpOpcode)
        assert jmp.kind == ret.kind == OpcodeKind.JMP
        assert jmp.variant == JMP_VARIANT == 0
        assert ret.variant == RET_VARIANT == 1


# =============================================================================
# Classification Tests
# =============================================================================

class TestClassifyOpcode:
    """Finding the opcode of a line."""

    def test_opcode_first(self):
        """Without a label the first token is the opcode."""
        assert classify_opcode(batch("ADD", "R1", "R1", "R2")).kind == OpcodeKind.ADD

    def test_opcode_after_label(self):
        """With a label the second token is the opcode."""
        opcode = classify_opcode(batch("AGAIN", "ADD", "R3", "R3", "R2"))
        assert opcode.kind == OpcodeKind.ADD

    def test_label_on_pseudo_op(self):
        """Labels can precede pseudo-ops."""
        assert classify_opcode(batch("SIX", ".FILL", "0x0006")).kind == OpcodeKind.FILL

    def test_compound_branch_after_label(self):
        """Compound BR forms are recognized in either position."""
        opcode = classify_opcode(batch("LOOP", "BRnz", "DONE"))
        assert opcode.flags == FLAG_N | FLAG_Z

    def test_ret_and_jsrr_recognized(self):
        """RET and JSRR are keywords in their own right."""
        assert classify_opcode(batch("RET")).mnemonic == "RET"
        assert classify_opcode(batch("SUB", "JSRR", "R4")).mnemonic == "JSRR"

    def test_unknown_opcode(self):
        """Neither token a keyword raises UnknownOpcodeError."""
        with pytest.raises(UnknownOpcodeError) as exc_info:
            classify_opcode(batch("LOOP", "MOV", "R1", "R2"))
        assert exc_info.value.candidates == ["LOOP", "MOV"]
        assert exc_info.value.location.line == 1

    def test_opcode_in_third_position_not_found(self):
        """Only the first two tokens are considered."""
        with pytest.raises(UnknownOpcodeError):
            classify_opcode(batch("A", "B", "ADD"))

    def test_lowercase_mnemonic_unknown(self):
        """A lower-case mnemonic is not an opcode."""
        with pytest.raises(UnknownOpcodeError):
            classify_opcode(batch("add", "R1", "R1", "R2"))
