# =============================================================================
# test_encoder.py - Instruction Encoder Tests
# =============================================================================
# Tests for the per-opcode instruction word layouts.
#
# Test coverage includes:
#   - Register and immediate forms of ADD/AND
#   - BR flag and offset placement
#   - JMP/RET, JSR/JSRR variants
#   - PC-relative loads and stores, base+offset loads and stores
#   - NOT, RTI, TRAP and the data pseudo-ops
#   - Arity and register-slot validation
#   - Field recovery through the disassembler
# =============================================================================

import pytest

from lc3asm.assembler.encoder import encode
from lc3asm.assembler.opcodes import KEYWORDS, Opcode
from lc3asm.assembler.operands import make_operand
from lc3asm.assembler.operations import Operation
from lc3asm.disassembler import LC3Disassembler, sign_extend
from lc3asm.errors import EncodingError, MalformedOperationError


def op(mnemonic: str, *tokens: str, address: int = 0x3000) -> Operation:
    """Helper: build an operation from a mnemonic and operand tokens."""
    operation = Operation(
        line=f"{mnemonic} {', '.join(tokens)}",
        line_number=1,
        opcode=KEYWORDS[mnemonic],
        address=address,
        filename="<test>",
    )
    for token in tokens:
        operation.add_operand(make_operand(token))
    return operation


# =============================================================================
# Operate Instructions
# =============================================================================

class TestOperate:
    """ADD, AND and NOT."""

    def test_add_registers(self):
        """ADD R1,R1,R2 = 0001 001 001 000 010."""
        assert encode(op("ADD", "R1", "R1", "R2")) == 0x1242

    def test_add_immediate(self):
        """Bit 5 selects the immediate form."""
        assert encode(op("ADD", "R0", "R0", "#1")) == 0x1021

    def test_add_negative_immediate(self):
        """#-1 keeps its low five bits."""
        assert encode(op("ADD", "R1", "R1", "#-1")) == 0x127F

    def test_and_clear(self):
        """AND R3,R3,#0 clears R3."""
        assert encode(op("AND", "R3", "R3", "#0")) == 0x56E0

    def test_and_registers(self):
        """AND uses opcode 0101."""
        assert encode(op("AND", "R7", "R6", "R5")) == 0x5F85

    def test_add_immediate_hex(self):
        """Hex literals work as immediates."""
        assert encode(op("ADD", "R2", "R2", "xF")) == 0x14AF

    def test_not(self):
        """NOT sets the low six bits."""
        assert encode(op("NOT", "R4", "R5")) == 0x997F


# =============================================================================
# Control Flow
# =============================================================================

class TestControlFlow:
    """BR, JMP, RET, JSR, JSRR, RTI and TRAP."""

    def test_brp_backward(self):
        """BRp with offset -2: 0000 001 111111110."""
        operation = op("BRp", "LOOP", address=0x3001)
        operation.operands[0].resolve(0x3000, 0x3001)
        assert encode(operation) == 0x03FE

    def test_brnzp_numeric_offset(self):
        """A literal offset is used directly."""
        assert encode(op("BRnzp", "#3")) == 0x0E03

    def test_plain_br_has_no_flags(self):
        """BR without suffix encodes no condition bits."""
        assert encode(op("BR", "#1")) == 0x0001

    def test_jmp(self):
        """JMP R2 puts the base register in bits 8-6."""
        assert encode(op("JMP", "R2")) == 0xC080

    def test_ret(self):
        """RET is JMP R7."""
        assert encode(op("RET")) == 0xC1C0

    def test_jsr_offset(self):
        """JSR sets bit 11 and an 11-bit offset."""
        assert encode(op("JSR", "#-1")) == 0x4FFF

    def test_jsrr(self):
        """JSRR R3 clears bit 11."""
        assert encode(op("JSRR", "R3")) == 0x40C0

    def test_rti(self):
        """RTI is 1000 followed by zeros."""
        assert encode(op("RTI")) == 0x8000

    def test_trap(self):
        """TRAP x25 halts."""
        assert encode(op("TRAP", "x25")) == 0xF025

    def test_trap_vector_masked(self):
        """Only eight bits of the vector are kept."""
        assert encode(op("TRAP", "x125")) == 0xF025


# =============================================================================
# Memory Access
# =============================================================================

class TestMemory:
    """Loads, stores and LEA."""

    @pytest.mark.parametrize("mnemonic,opcode", [
        ("LD", 0x2), ("LDI", 0xA), ("ST", 0x3), ("STI", 0xB), ("LEA", 0xE),
    ])
    def test_pc_relative(self, mnemonic, opcode):
        """op DR/SR offset9."""
        word = encode(op(mnemonic, "R1", "#11"))
        assert word == (opcode << 12) | (1 << 9) | 11

    def test_ld_negative_offset(self):
        """Negative offsets keep nine bits."""
        assert encode(op("LD", "R0", "#-1")) == 0x21FF

    def test_ldr(self):
        """LDR R1, R2, #-3."""
        assert encode(op("LDR", "R1", "R2", "#-3")) == 0x62BD

    def test_str_uses_its_own_opcode(self):
        """STR encodes with 0111, not LDR's 0110."""
        assert encode(op("STR", "R1", "R2", "#4")) == 0x7284


# =============================================================================
# Pseudo-Operations
# =============================================================================

class TestPseudoOps:
    """Data and layout pseudo-ops."""

    def test_fill(self):
        """.FILL stores its raw value."""
        assert encode(op(".FILL", "0x0006")) == 0x0006

    def test_fill_negative(self):
        """.FILL #-1 is xFFFF."""
        assert encode(op(".FILL", "#-1")) == 0xFFFF

    def test_stringz_first_word(self):
        """.STRINGZ stores its operand value (the first character after pass one)."""
        operation = op(".STRINGZ", '"AB"')
        operation.operands[0].value = ord("A")
        assert encode(operation) == 0x41

    @pytest.mark.parametrize("mnemonic,tokens", [
        (".ORIG", ("x3000",)), (".END", ()), (".BLKW", ("5",)),
    ])
    def test_layout_ops_encode_zero(self, mnemonic, tokens):
        """.ORIG, .END and .BLKW have no instruction word."""
        assert encode(op(mnemonic, *tokens)) == 0


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    """Operand count and kind checks."""

    @pytest.mark.parametrize("mnemonic,tokens", [
        ("ADD", ("R1", "R2")),
        ("AND", ("R1",)),
        ("BRz", ()),
        ("JMP", ()),
        ("RET", ("R7",)),
        ("JSR", ()),
        ("LD", ("R1",)),
        ("LDR", ("R1", "R2")),
        ("NOT", ("R1",)),
        ("RTI", ("R1",)),
        ("TRAP", ()),
        (".FILL", ()),
    ])
    def test_wrong_arity(self, mnemonic, tokens):
        """A wrong operand count is a malformed operation."""
        with pytest.raises(MalformedOperationError) as exc_info:
            encode(op(mnemonic, *tokens))
        assert mnemonic in str(exc_info.value)

    def test_error_reports_line(self):
        """The error names the line and shows its text."""
        operation = op("ADD", "R1")
        operation.line_number = 42
        with pytest.raises(MalformedOperationError) as exc_info:
            encode(operation)
        assert exc_info.value.location.line == 42
        assert exc_info.value.source_line == operation.line

    @pytest.mark.parametrize("mnemonic,tokens", [
        ("ADD", ("#1", "R1", "R2")),
        ("ADD", ("R1", "#1", "R2")),
        ("NOT", ("R1", "#2")),
        ("LD", ("#1", "#2")),
        ("LDR", ("R1", "#2", "#3")),
        ("JMP", ("#3",)),
        ("JSRR", ("LABEL",)),
    ])
    def test_register_slots(self, mnemonic, tokens):
        """Register slots reject non-register operands."""
        with pytest.raises(MalformedOperationError, match="must be a register"):
            encode(op(mnemonic, *tokens))

    def test_unknown_kind(self):
        """An opcode outside the keyword set is an encoding error."""
        operation = op("RTI")
        operation.opcode = Opcode(0xD, "RESERVED")
        with pytest.raises(EncodingError):
            encode(operation)


# =============================================================================
# Field Recovery
# =============================================================================

class TestFieldRecovery:
    """Decoding an encoded word gives back the fields."""

    disassembler = LC3Disassembler()

    @pytest.mark.parametrize("imm", range(-16, 16))
    def test_imm5(self, imm):
        """Every imm5 value survives encoding."""
        word = encode(op("ADD", "R5", "R6", f"#{imm}"))
        fields = self.disassembler.disassemble_one(word).fields
        assert fields == {"dr": 5, "sr1": 6, "imm5": imm}

    @pytest.mark.parametrize("offset", [-256, -3, -1, 0, 1, 255])
    def test_offset9(self, offset):
        """LD offsets and BR flags come back sign-extended."""
        word = encode(op("LD", "R7", f"#{offset}"))
        assert self.disassembler.disassemble_one(word).fields == {"dr": 7, "offset9": offset}
        word = encode(op("BRnp", f"#{offset}"))
        assert self.disassembler.disassemble_one(word).fields == {"flags": 0x5, "offset9": offset}

    @pytest.mark.parametrize("offset", [-32, -1, 0, 31])
    def test_offset6(self, offset):
        """STR offsets come back sign-extended."""
        word = encode(op("STR", "R2", "R3", f"#{offset}"))
        assert self.disassembler.disassemble_one(word).fields == {
            "sr": 2, "base": 3, "offset6": offset,
        }

    @pytest.mark.parametrize("offset", [-1024, -1, 0, 1023])
    def test_offset11(self, offset):
        """JSR offsets come back sign-extended."""
        word = encode(op("JSR", f"#{offset}"))
        assert self.disassembler.disassemble_one(word).fields == {"offset11": offset}

    def test_sign_extend(self):
        """sign_extend treats the top bit as the sign."""
        assert sign_extend(0x1FE, 9) == -2
        assert sign_extend(0x0FF, 9) == 255
        assert sign_extend(0xFFFF, 16) == -1
