"""
Command-Line Tools
==================

- **lc3asm**: Assembler
- **lc3dis**: Disassembler for .lc3 object images
"""
