#!/usr/bin/env python3

"""
RAM Emulator

A fixed-size bank of bytes.  Supports reading and writing of individual bytes,
big-endian 16-bit words, and whole blocks.

Every access is bounds-checked.  An out-of-range address means either a
malformed ROM or a fault in the interpreter itself, so a RAMError is raised
immediately rather than wrapping or clamping the address.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEMORY_SIZE


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=MEMORY_SIZE):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_size = mem_size

    def get(self, location):
        self.check_bounds(location)
        return self.mem[location]

    def set(self, location, byte):
        self.check_bounds(location)
        self.mem[location] = byte

    def get_word(self, location):
        # CHIP-8 is big-endian.  Both bytes are checked, so a word can't straddle the top of memory.
        return (self.get(location) << 8) | self.get(location + 1)

    def read_block(self, location, size):
        if size:
            self.check_bounds(location)
            self.check_bounds(location + size - 1)

        return self.mem[location:location + size]

    def write_block(self, location, block):
        block_size = len(block)

        if block_size:
            self.check_bounds(location)
            self.check_bounds(location + block_size - 1)

        self.mem[location:location + block_size] = block

    def check_bounds(self, location):
        if location < 0 or location >= self.mem_size:
            raise RAMError("Memory access out of range: 0x{:04x}".format(location))

    def clear(self):
        # Reallocating would invalidate any views handed out, so zero in place
        self.mem[:] = bytes(self.mem_size)
