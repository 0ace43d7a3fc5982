# =============================================================================
# conftest.py - Shared Test Fixtures
# =============================================================================
# The multiply-by-six program used across the pass one, pass two and
# emission tests. Physical line numbers matter: .ORIG is on line 5 and
# the AGAIN label on line 13.
# =============================================================================

import pytest


MULTIPLY_SOURCE = '''\
; multiply.asm
; Multiply the value stored at NUMBER by six using repeated addition.
; Result is left in R3.

        .ORIG 0x3050
        LD R1, SIX
        LD R2, NUMBER
        AND R3, R3, #0

; The inner loop
;   R3 accumulates NUMBER once per pass

AGAIN   ADD R3, R3, R2
        ADD R1, R1, #-1
        BRp AGAIN
        TRAP 0x25
NUMBER  .BLKW 5
SIX     .FILL 0x0006
MSG     .STRINGZ "Error Message"
        .END
'''


@pytest.fixture
def multiply_source() -> str:
    """Source text of the multiply-by-six program."""
    return MULTIPLY_SOURCE


@pytest.fixture
def multiply_file(tmp_path):
    """The multiply-by-six program written to a temporary .asm file."""
    path = tmp_path / "multiply.asm"
    path.write_text(MULTIPLY_SOURCE)
    return path
