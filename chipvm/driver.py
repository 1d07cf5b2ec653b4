#!/usr/bin/env python3

"""
Host Driver

Owns the fetch / advance / execute cadence, and everything else that happens
in real time around it:

    * Host inputs are processed, and the display refreshed, at 60Hz
    * The delay and sound timers count down at 60Hz
    * The buzzer sounds while the sound timer is above zero
    * Instructions are paced to the requested clock speed

The timers are tied to real time rather than to the number of instructions
executed.  If the CPU gets lagged (such as during a keypress wait), the
timers will jump to catch up.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_INTRO, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, TIMER_FREQ
from .cpu import CPUError
from .inputs.i_null import KeyWaitCancelled
from .ram import RAMError
from .stack import StackError

DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
TIMER_INTERVAL = 1.0 / TIMER_FREQ


class Driver:
    def __init__(self, machine, cpu, audio, clock_speed=None):
        self.machine = machine
        self.cpu = cpu
        self.audio = audio
        self.debugger = cpu.debugger

        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        # User can specify 0 for uncapped
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed
        self.running = False
        self.stop_requested = False
        self.debug_pc = 0

        # Performance-related vars
        self.next_display_update_time = 0
        self.next_timer_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def step(self):
        machine = self.machine
        # Keep track of the program counter before altering it, in case there is a crash
        self.debug_pc = machine.registers.pc

        try:
            opcode = machine.fetch()
            machine.advance()  # Program counter updates after fetch, but before execute
            self.cpu.execute(opcode)
        except (RAMError, StackError) as e:
            raise CPUError(
                (
                    "Emulation halted.\n\n" +
                    "{}Debug info:\n" +
                    "{}\n\n{} at address 0x{:03x}."
                ).format(APP_INTRO, self.debugger.debug(self.cpu, "???", verbose=True), e, self.debug_pc)
            ) from e

    def run(self):
        machine = self.machine
        inputs = machine.inputs
        registers = machine.registers
        self.running = True
        self.next_timer_time = perf_counter() + TIMER_INTERVAL

        while not self.stop_requested:
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                machine.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    break

                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                machine.framebuffer.refresh_display()
                self.perf_counter_fps += 1

            if this_time >= self.next_timer_time:
                ticks = int((this_time - self.next_timer_time) * TIMER_FREQ) + 1
                machine.tick_timers(ticks)
                self.next_timer_time += ticks * TIMER_INTERVAL

            try:
                self.step()
            except KeyWaitCancelled:
                # Only happens on shutdown
                break

            # Allow the program to start the buzzer, or stop it before the sound timer hits zero
            buzzer_on = registers.st > 0

            if buzzer_on != self.audio.buzzer_enabled:
                self.audio.enable_buzzer(buzzer_on)

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1

        self.running = False
        self.audio.enable_buzzer(False)

        # A stop request is consumed by the run it ends, so the driver can be run again
        self.stop_requested = False
        inputs.reset_cancel()

    def stop(self):
        # Safe to call from another thread, even while the CPU is blocked waiting for a key, or before run starts
        self.stop_requested = True
        self.machine.inputs.cancel_wait()
