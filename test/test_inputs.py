#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import threading
import unittest
from chipvm.constants import DEFAULT_KEYMAP
from chipvm.inputs.i_null import Inputs, InputsError, KeyWaitCancelled, KeyWaitTimeout
from chipvm.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.inputs = Inputs(DEFAULT_KEYMAP, Renderer())

    def test_inputs_keymap_translate(self):
        self.assertEqual(0x0, self.inputs.translate(ord("0")))
        self.assertEqual(0x9, self.inputs.translate(ord("9")))
        self.assertEqual(0xA, self.inputs.translate(ord("a")))
        self.assertEqual(0xF, self.inputs.translate(ord("f")))
        self.assertIsNone(self.inputs.translate(ord("z")))

    def test_inputs_keymap_wrong_length(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", None)

    def test_inputs_keymap_not_integers(self):
        self.assertRaises(InputsError, Inputs, ",".join(["x"] * 16), None)

    def test_inputs_keymap_duplicates(self):
        self.assertRaises(InputsError, Inputs, ",".join(["1"] * 16), None)

    def test_inputs_down_up(self):
        self.assertFalse(self.inputs.is_key_down(0x5))
        self.inputs.set_down(0x5)
        self.assertTrue(self.inputs.is_key_down(0x5))
        self.assertFalse(self.inputs.is_key_down(0x6))
        self.inputs.set_up(0x5)
        self.assertFalse(self.inputs.is_key_down(0x5))

    def test_inputs_off_keypad(self):
        self.assertFalse(self.inputs.is_key_down(0x10))
        self.assertFalse(self.inputs.is_key_down(0xFF))
        self.assertRaises(InputsError, self.inputs.set_down, 0x10)
        self.assertRaises(InputsError, self.inputs.set_up, -1)

    def test_inputs_wait_pending(self):
        self.inputs.set_down(0xB)
        self.inputs.set_down(0x2)
        self.assertEqual(0xB, self.inputs.wait_for_keypress())
        self.assertEqual(0x2, self.inputs.wait_for_keypress())

    def test_inputs_wait_from_other_thread(self):
        timer = threading.Timer(0.05, self.inputs.set_down, (0x7,))
        timer.start()

        try:
            self.assertEqual(0x7, self.inputs.wait_for_keypress(timeout=5))
        finally:
            timer.cancel()

    def test_inputs_wait_timeout(self):
        self.assertRaises(KeyWaitTimeout, self.inputs.wait_for_keypress, 0.01)

    def test_inputs_wait_cancelled_from_other_thread(self):
        timer = threading.Timer(0.05, self.inputs.cancel_wait)
        timer.start()

        try:
            self.assertRaises(KeyWaitCancelled, self.inputs.wait_for_keypress, 5)
        finally:
            timer.cancel()

    def test_inputs_cancel_is_sticky(self):
        self.inputs.cancel_wait()
        self.inputs.set_down(0x1)
        self.assertRaises(KeyWaitCancelled, self.inputs.wait_for_keypress)
        self.inputs.reset_cancel()
        self.assertEqual(0x1, self.inputs.wait_for_keypress(timeout=1))

    def test_inputs_process_messages_flushes(self):
        self.inputs.set_down(0x3)
        self.assertFalse(self.inputs.process_messages())
        # The key is still held, but the press has already been seen by the host
        self.assertTrue(self.inputs.is_key_down(0x3))
        self.assertRaises(KeyWaitTimeout, self.inputs.wait_for_keypress, 0.01)

    def test_inputs_shutdown_cancels(self):
        self.inputs.shutdown()
        self.assertRaises(KeyWaitCancelled, self.inputs.wait_for_keypress, 1)
