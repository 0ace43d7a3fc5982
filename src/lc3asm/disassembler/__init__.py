"""
LC-3 Disassembler
=================

Turns object images back into readable assembly, one line per word.

>>> from lc3asm.disassembler import LC3Disassembler
>>> from lc3asm.objfile import ObjectImage
>>> image = ObjectImage.read("prog.lc3")
>>> for inst in LC3Disassembler().disassemble_image(image):
...     print(inst)
"""

from lc3asm.disassembler.lc3 import (
    DisassembledInstruction,
    LC3Disassembler,
    sign_extend,
)

__all__ = [
    "DisassembledInstruction",
    "LC3Disassembler",
    "sign_extend",
]
