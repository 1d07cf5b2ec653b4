#!/usr/bin/env python3

"""
Machine State

Bundles everything an executing program can touch: RAM, the register file,
the call stack, and the display and keypad collaborators.  One Machine is
created per emulated computer and handed to the CPU, so there is no global
state anywhere.

Memory map:

    0x000 - 0x04F  Hexadecimal glyph table (16 digits, 5 bytes each)
    0x050 - 0x1FF  Reserved for the interpreter, unused
    0x200 - 0xFFF  Program and data space

Fetching and advancing the program counter, and ticking the timers, are here
rather than in the CPU, as they are driven by the host loop and not by any
instruction.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import GLYPH_LOAD_ADDRESS, GLYPH_TABLE, MEMORY_SIZE, PROGRAM_LOAD_ADDRESS
from .ram import RAM
from .registers import Registers
from .stack import Stack


class MachineError(Exception):
    pass


class Machine:
    def __init__(self, ram, registers, stack, framebuffer, inputs):
        self.ram = ram
        self.registers = registers
        self.stack = stack
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.reset()

    @classmethod
    def create(cls, framebuffer, inputs):
        registers = Registers()
        return cls(RAM(), registers, Stack(registers), framebuffer, inputs)

    def reset(self):
        self.ram.clear()
        self.registers.reset()
        self.stack.reset()
        self.ram.write_block(GLYPH_LOAD_ADDRESS, GLYPH_TABLE)

    def load(self, program):
        if PROGRAM_LOAD_ADDRESS + len(program) > MEMORY_SIZE:
            raise MachineError(
                "Program is too large: {} bytes, but only {} are available".format(
                    len(program), MEMORY_SIZE - PROGRAM_LOAD_ADDRESS
                )
            )

        self.ram.write_block(PROGRAM_LOAD_ADDRESS, program)
        self.registers.pc = PROGRAM_LOAD_ADDRESS

    def fetch(self):
        return self.ram.get_word(self.registers.pc)

    def advance(self):
        self.registers.pc = (self.registers.pc + 2) & 0xFFFF

    def tick_timers(self, ticks=1):
        # Both timers count down towards zero and stop there.  Returns True while the buzzer should sound.
        registers = self.registers
        registers.dt = max(0, registers.dt - ticks)
        registers.st = max(0, registers.st - ticks)
        return registers.st > 0
