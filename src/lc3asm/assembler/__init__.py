"""
LC-3 Two-Pass Assembler
=======================

Converts LC-3 assembly source into a .lc3 object image.

Main Components
---------------
- **Assembler**: Facade that runs a whole assembly
- **Tokenizer**: Splits source lines into token batches
- **CodeGenerator**: Pass one (addresses, symbols) and pass two
  (resolution, encoding)
- **SymbolTable**: Label name to address mapping
- **encode**: Per-opcode instruction word layouts

Assembly Process
----------------
1. Pass one walks the token batches, binds labels to addresses and
   builds the operation list.
2. Pass two resolves label references to PC-relative offsets and
   encodes each operation.
3. The operation list is serialized as header + body words.

Example Usage
-------------
>>> from lc3asm.assembler import Assembler
>>> asm = Assembler()
>>> words = asm.assemble_string('''
...         .ORIG x3000
... LOOP    ADD R0, R0, #1
...         BRp LOOP
...         .END
... ''')
"""

from lc3asm.assembler.assembler import Assembler, assemble, assemble_file
from lc3asm.assembler.codegen import CodeGenerator
from lc3asm.assembler.encoder import encode
from lc3asm.assembler.opcodes import (
    KEYWORDS,
    BranchOpcode,
    JumpOpcode,
    Opcode,
    OpcodeKind,
    SubroutineOpcode,
    classify_opcode,
    is_keyword,
)
from lc3asm.assembler.operands import (
    NumericOperand,
    Operand,
    RegisterOperand,
    StringOperand,
    SymbolOperand,
    classify_operand,
)
from lc3asm.assembler.operations import Operation, OperationList
from lc3asm.assembler.symbols import SymbolEntry, SymbolTable
from lc3asm.assembler.tokenizer import TokenBatch, Tokenizer

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Tokenizer
    "Tokenizer",
    "TokenBatch",
    # Opcodes
    "KEYWORDS",
    "Opcode",
    "OpcodeKind",
    "BranchOpcode",
    "JumpOpcode",
    "SubroutineOpcode",
    "classify_opcode",
    "is_keyword",
    # Operands
    "Operand",
    "RegisterOperand",
    "NumericOperand",
    "StringOperand",
    "SymbolOperand",
    "classify_operand",
    # Intermediate representation
    "Operation",
    "OperationList",
    # Symbols
    "SymbolTable",
    "SymbolEntry",
    # Code generation
    "CodeGenerator",
    "encode",
]
