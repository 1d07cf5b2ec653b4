#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chipvm.constants import DEFAULT_KEYMAP, GLYPH_TABLE
from chipvm.framebuffer import Framebuffer
from chipvm.inputs.i_null import Inputs
from chipvm.machine import Machine, MachineError
from chipvm.ram import RAMError
from chipvm.renderers.r_null import Renderer


class TestMachine(unittest.TestCase):
    def setUp(self):
        renderer = Renderer()
        self.machine = Machine.create(Framebuffer(renderer), Inputs(DEFAULT_KEYMAP, renderer))

    def test_machine_glyphs_after_reset(self):
        ram = self.machine.ram
        self.assertEqual(b"\xF0\x90\x90\x90\xF0", bytes(ram.read_block(0x000, 5)))
        self.assertEqual(GLYPH_TABLE, bytes(ram.read_block(0x000, 80)))
        self.assertEqual(80, len(GLYPH_TABLE))
        # Digit "F" is the last glyph
        self.assertEqual(b"\xF0\x80\xF0\x80\x80", bytes(ram.read_block(0x04B, 5)))
        # Nothing else is written
        self.assertEqual(bytes(0x1000 - 80), bytes(ram.read_block(0x050, 0x1000 - 80)))

    def test_machine_reset(self):
        machine = self.machine
        machine.ram.set(0x000, 0x00)
        machine.ram.set(0x300, 0x12)
        machine.registers.v[0x4] = 0x7
        machine.stack.push(0x200)
        machine.reset()
        self.assertEqual(0xF0, machine.ram.get(0x000))
        self.assertEqual(0x00, machine.ram.get(0x300))
        self.assertEqual(0, machine.registers.v[0x4])
        self.assertEqual(0, machine.registers.sp)
        self.assertEqual([], machine.stack.get_items())

    def test_machine_load(self):
        self.machine.load(b"\x60\x05\x70\x03\x00\x00")
        self.assertEqual(0x200, self.machine.registers.pc)
        self.assertEqual(0x6005, self.machine.fetch())
        self.assertEqual(0x03, self.machine.ram.get(0x203))

    def test_machine_load_largest(self):
        self.machine.load(b"\xAB" * (0x1000 - 0x200))
        self.assertEqual(0xAB, self.machine.ram.get(0xFFF))

    def test_machine_load_too_large(self):
        self.assertRaises(MachineError, self.machine.load, b"\x00" * (0x1000 - 0x200 + 1))

    def test_machine_fetch_advance(self):
        self.machine.load(b"\x12\x34\x56\x78")
        self.assertEqual(0x1234, self.machine.fetch())
        self.machine.advance()
        self.assertEqual(0x202, self.machine.registers.pc)
        self.assertEqual(0x5678, self.machine.fetch())

    def test_machine_fetch_out_of_range(self):
        self.machine.registers.pc = 0xFFF
        self.assertRaises(RAMError, self.machine.fetch)
        self.machine.registers.pc = 0x1000
        self.assertRaises(RAMError, self.machine.fetch)

    def test_machine_advance_wraps(self):
        self.machine.registers.pc = 0xFFFE
        self.machine.advance()
        self.assertEqual(0x0000, self.machine.registers.pc)

    def test_machine_tick_timers(self):
        registers = self.machine.registers
        registers.dt = 3
        registers.st = 1
        self.assertFalse(self.machine.tick_timers())
        self.assertEqual((2, 0), (registers.dt, registers.st))
        self.assertFalse(self.machine.tick_timers(5))
        self.assertEqual((0, 0), (registers.dt, registers.st))
        registers.st = 4
        self.assertTrue(self.machine.tick_timers(2))
        self.assertEqual(2, registers.st)
