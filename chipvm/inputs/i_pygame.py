#!/usr/bin/env python3

"""
PyGame Input Plugin

Scans the keyboard and properly detects key 'press' and 'release' events.
Note that the check should not be called more often than 60Hz, as constantly
checking the queue is time consuming.

While a program is blocked waiting for a keypress, nothing else is pumping the
PyGame event queue, so the wait does it instead.  Closing the window or
pressing Escape during the wait cancels it.

If the application is quit, then this will control shutting PyGame down too, so
any linked Renderer must be able to handle that.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
import pygame
from .i_null import Inputs as InputsBase, KeyWaitCancelled, KeyWaitTimeout

WAIT_POLL_MS = 50  # How often a blocked keypress wait checks for cancellation


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        self.pygame_methods = {
            pygame.QUIT:    self._pygame_quit,
            pygame.KEYDOWN: self._pygame_keydown,
            pygame.KEYUP:   self._pygame_keyup
        }

        self.quit_requested = False
        super().__init__(keymap, renderer)

    def _pump_events(self, events):
        # Call PyGame method based on fast dictionary lookup of event
        quit_program = False

        for event in events:
            pygame_method = self.pygame_methods.get(event.type)

            if pygame_method and pygame_method(event):  # Check via short circuit that we don't have 'None'
                quit_program = True  # Process more events, even if planning to quit

        if quit_program:
            self.quit_requested = True

        return quit_program

    def process_messages(self):
        # Key-down events seen here have been delivered, so they shouldn't satisfy a later wait
        quit_program = self._pump_events(pygame.event.get())
        self.flush_keypresses()
        return quit_program

    def wait_for_keypress(self, timeout=None):
        deadline = None if timeout is None else perf_counter() + timeout

        while True:
            if self.cancelled:
                raise KeyWaitCancelled("Wait for keypress cancelled")

            if self.pending_keys:
                return super().wait_for_keypress(0)

            if deadline is not None and perf_counter() >= deadline:
                raise KeyWaitTimeout("No key pressed within {} seconds".format(timeout))

            event = pygame.event.wait(WAIT_POLL_MS)

            if event.type != pygame.NOEVENT and self._pump_events([event]):
                self.cancel_wait()

    def _pygame_quit(self, _):
        return True

    def _pygame_keydown(self, event):
        hex_key = self.translate(event.key)

        if hex_key is not None:
            self.set_down(hex_key)

        return False

    def _pygame_keyup(self, event):
        if event.key == pygame.K_ESCAPE:
            return True

        hex_key = self.translate(event.key)

        if hex_key is not None:
            self.set_up(hex_key)

        return False
