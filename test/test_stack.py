#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chipvm.registers import Registers
from chipvm.stack import Stack, StackError


class TestStack(unittest.TestCase):
    def setUp(self):
        self.registers = Registers()
        self.stack = Stack(self.registers)

    def _populate_stack(self):
        self.stack.push(0x0)
        self.stack.push(0x1)
        self.stack.push(0xFFF)

    def test_stack_push_pop(self):
        self._populate_stack()
        self.assertEqual(3, self.registers.sp)
        self.assertEqual(0xFFF, self.stack.pop())
        self.assertEqual(0x1, self.stack.pop())
        self.assertEqual(0x0, self.stack.pop())
        self.assertEqual(0, self.registers.sp)

    def test_stack_slot_zero_unused(self):
        self.stack.push(0x202)
        self.assertEqual(0, self.stack.items[0])
        self.assertEqual(0x202, self.stack.items[1])

    def test_stack_pointer_restored(self):
        for depth in range(1, 16):
            for address in range(depth):
                self.stack.push(0x200 + address * 2)

            for address in reversed(range(depth)):
                self.assertEqual(0x200 + address * 2, self.stack.pop())

            self.assertEqual(0, self.registers.sp)

    def test_stack_overflow(self):
        # 16 entries, but slot 0 is never used
        for address in range(15):
            self.stack.push(address)

        self.assertRaises(StackError, self.stack.push, 0x1)
        # A failed push changes nothing
        self.assertEqual(15, self.registers.sp)
        self.assertEqual(14, self.stack.pop())

    def test_stack_underflow(self):
        self.assertRaises(StackError, self.stack.pop)
        self.assertEqual(0, self.registers.sp)

    def test_stack_pointer_out_of_range(self):
        self.registers.sp = 16
        self.assertRaises(StackError, self.stack.pop)

    def test_stack_get_items(self):
        self.assertEqual([], self.stack.get_items())
        self._populate_stack()
        self.assertEqual([0x0, 0x1, 0xFFF], self.stack.get_items())

    def test_stack_reset(self):
        self._populate_stack()
        self.stack.reset()
        self.assertEqual([0] * 16, self.stack.items)
