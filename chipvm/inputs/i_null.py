#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required, or to drive the keypad by hand (such as from
tests) through set_down and set_up.

Host key codes are translated into the 16 keypad keys through the keymap.
Key-down events are queued for the blocking 'wait for keypress' instruction.
The host loop flushes the queue every time it processes messages, so a wait
only sees keys pressed since the last time the host looked.

The wait blocks the calling thread, but can be aborted from any thread with
cancel_wait, which is what allows a clean shutdown while a program is sat
waiting for input.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import deque
from threading import Condition
from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


class KeyWaitCancelled(InputsError):
    pass


class KeyWaitTimeout(InputsError):
    pass


class Inputs:
    def __init__(self, keymap, renderer):
        self.keymap_dict = {}
        self.renderer = renderer
        keymap_split = keymap.split(",")

        if len(keymap_split) != NUM_KEYS:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

        self.key_down = [False] * NUM_KEYS
        self.pending_keys = deque()
        self.keypress_ready = Condition()
        self.cancelled = False

    def translate(self, host_key):
        # Returns None for host keys that aren't mapped to the keypad
        return self.keymap_dict.get(host_key)

    def set_down(self, key):
        self._check_key(key)

        with self.keypress_ready:
            self.key_down[key] = True
            self.pending_keys.append(key)
            self.keypress_ready.notify_all()

    def set_up(self, key):
        self._check_key(key)
        self.key_down[key] = False

    def is_key_down(self, key):
        # Registers can hold any byte, but only 0-F exist on the keypad
        return key < NUM_KEYS and self.key_down[key]

    def wait_for_keypress(self, timeout=None):
        with self.keypress_ready:
            ready = self.keypress_ready.wait_for(lambda: self.cancelled or self.pending_keys, timeout)

            if self.cancelled:
                raise KeyWaitCancelled("Wait for keypress cancelled")

            if not ready:
                raise KeyWaitTimeout("No key pressed within {} seconds".format(timeout))

            return self.pending_keys.popleft()

    def cancel_wait(self):
        # Sticky until reset_cancel, so a wait that starts after shutdown begins also aborts
        with self.keypress_ready:
            self.cancelled = True
            self.keypress_ready.notify_all()

    def reset_cancel(self):
        with self.keypress_ready:
            self.cancelled = False

    def flush_keypresses(self):
        with self.keypress_ready:
            self.pending_keys.clear()

    def process_messages(self):
        self.flush_keypresses()
        return False  # Don't exit the program

    def shutdown(self):
        self.cancel_wait()

    def _check_key(self, key):
        if key < 0 or key >= NUM_KEYS:
            raise InputsError("Key 0x{:02x} is not on the keypad".format(key))
