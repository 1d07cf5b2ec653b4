#!/usr/bin/env python3

"""
Stack Emulator

The call stack is kept out of system RAM.  There is no specified location for
it and programs can't address it, so a fixed list of return addresses is
enough.  The stack pointer lives in the register file alongside the other
pseudo-registers, and is shared with this object.

The pointer starts at zero and is incremented before each write, so slot 0 is
never used and a 16-entry stack holds at most 15 return addresses.  The
pointer is always bounds-checked against the number of entries.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_DEPTH


class StackError(Exception):
    pass


class Stack:
    def __init__(self, registers, size=STACK_DEPTH):
        self.registers = registers
        self.size = size
        self.items = [0] * size

    def push(self, item):
        sp = self.registers.sp + 1

        # Check before touching anything, so a failed push leaves the machine state as it was
        if sp >= self.size:
            raise StackError("Stack overflow")

        self.registers.sp = sp
        self.items[sp] = item

    def pop(self):
        sp = self.registers.sp

        if sp <= 0 or sp >= self.size:
            raise StackError("Stack underflow" if sp <= 0 else "Stack pointer out of range")

        item = self.items[sp]
        self.registers.sp = sp - 1
        return item

    def get_items(self):
        # For debugging.  Bottom of the stack first.
        return self.items[1:self.registers.sp + 1]

    def reset(self):
        self.items = [0] * self.size
