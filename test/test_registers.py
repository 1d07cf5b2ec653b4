#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chipvm.registers import Registers


class TestRegisters(unittest.TestCase):
    def setUp(self):
        self.registers = Registers()

    def test_registers_init(self):
        self.assertEqual(bytes(16), bytes(self.registers.v))
        self.assertEqual(
            (0, 0, 0, 0, 0),
            (self.registers.i, self.registers.dt, self.registers.st, self.registers.pc, self.registers.sp)
        )

    def test_registers_reject_out_of_range_bytes(self):
        # Arithmetic must be masked before it reaches a register
        self.assertRaises(ValueError, self.registers.v.__setitem__, 0, 0x100)

    def test_registers_reset(self):
        v = self.registers.v
        v[0x3] = 0x12
        self.registers.i = 0x2F0
        self.registers.pc = 0x204
        self.registers.sp = 2
        self.registers.reset()
        self.assertEqual(0, v[0x3])
        self.assertEqual(0, self.registers.i)
        self.assertEqual(0, self.registers.pc)
        self.assertEqual(0, self.registers.sp)
        # The same view is kept, so anything holding on to it sees the reset
        self.assertIs(v, self.registers.v)
