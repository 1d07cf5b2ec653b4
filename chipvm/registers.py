#!/usr/bin/env python3

"""
Register File

Passive storage for the CPU.  There is no behaviour here beyond holding
values; all the arithmetic lives in the CPU, which masks results so they wrap
the way the real hardware would:

    * V  - 16 general-purpose 8-bit registers, V0 to Vf.  Vf doubles as the
           carry/borrow/collision flag, so programs shouldn't rely on it.
    * I  - 16-bit index register.  Only the low 12 bits can address memory.
    * DT - Delay timer (byte)
    * ST - Sound timer (byte)
    * PC - Program counter (16-bit)
    * SP - Stack pointer (byte), indexing the top of the call stack
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_REGISTERS


class Registers:
    def __init__(self):
        # Bytearrays are mutable and reject anything outside 0-255, so unmasked arithmetic fails loudly
        self.v = memoryview(bytearray(NUM_REGISTERS))
        self.reset()

    def reset(self):
        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0
        self.dt = 0
        self.st = 0
        self.pc = 0
        self.sp = 0
