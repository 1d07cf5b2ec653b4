#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Decodes and executes a single instruction word against a Machine.  The host
driver fetches the word and advances the program counter past it before
calling execute, so control transfers and skips here are relative to the
address of the next instruction.

The CPU never loops and owns no timing.  The only instruction that can block
is Fx0A, which waits on the keypad until a key is pressed or the wait is
cancelled.

Instruction words that don't match any known instruction are ignored rather
than halting emulation.  Some ROMs rely on this.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import GLYPH_HEIGHT, GLYPH_LOAD_ADDRESS


class CPUError(Exception):
    pass


class CPU:
    def __init__(self, machine, debugger, subn_quirks=None, bcd_quirks=None, seed=None):
        self.machine = machine
        self.ram = machine.ram
        self.registers = machine.registers
        self.v = machine.registers.v
        self.stack = machine.stack
        self.framebuffer = machine.framebuffer
        self.inputs = machine.inputs
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()

        """
        Quirks
        ------

        - SUBN quirks: 8xy7 first overwrites Vx with the flag, then subtracts
                       that flag from Vy, leaving Vf alone.  Disable for the
                       usual Vx = Vy - Vx with Vf = NOT borrow.
        - BCD quirks : Fx33 also stores V0 to Vx at I afterwards, as if Fx55
                       had run straight after it.  Disable to store only the
                       three digits.
        """

        self.subn_quirks = True if subn_quirks is None else subn_quirks
        self.bcd_quirks = True if bcd_quirks is None else bcd_quirks

        # One generator for the lifetime of the CPU, rather than reseeding from the clock every time
        self.random = Random(seed)
        self.opcode = 0

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Exact match
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5xy0,  # The last nibble is never checked
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._8nnn,  # Bitmask 0xF00F
            0x9: self._9xy0,  # The last nibble is never checked
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Bitmask 0xF0FF
            0xF: self._Ennn_Fnnn   # Bitmask 0xF0FF
        }

        self.masked_instructions = {
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x8, bitmask 0xF00F
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

    def execute(self, opcode):
        self.opcode = opcode
        self.instructions[(opcode & 0xF000) >> 12]()

    def _call_masked_instruction(self, masked_opcode):
        instruction = self.masked_instructions.get(masked_opcode)

        if instruction is None:
            # Unknown instructions within a family are silently skipped
            if self.live_debug:
                self.debug("???")

            return

        instruction()

    def _skip(self):
        self.registers.pc = (self.registers.pc + 2) & 0xFFFF

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication.  Don't reference these more than necessary as they are recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _0nnn(self):
        self._call_masked_instruction(self.opcode)

    def _8nnn(self):
        self._call_masked_instruction(self.opcode & 0xF00F)

    def _Ennn_Fnnn(self):
        self._call_masked_instruction(self.opcode & 0xF0FF)

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        self.registers.pc = self.stack.pop()

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.registers.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        self.stack.push(self.registers.pc)
        self.registers.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] == self.byte:
            self._skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] != self.byte:
            self._skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] == self.v[self.vy]:
            self._skip()

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        self.v[vx] = (self.v[vx] + byte) & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        # The sum is taken before Vf changes, and Vx is written last, so the result wins if x is Vf
        val = self.v[vx] + self.v[vy]
        self.v[0xF] = int(val > 0xFF)
        self.v[vx] = val & 0xFF

    def _8xy5(self):  # SUB Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(vx, vy))

        # Vf is set first, then the subtraction reads the registers again
        self.v[0xF] = int(self.v[vx] > self.v[vy])
        self.v[vx] = (self.v[vx] - self.v[vy]) & 0xFF

    def _8xy6(self):  # SHR Vx
        vx = self.vx

        if self.live_debug:
            self.debug("SHR V{:01x}".format(vx))

        self.v[0xF] = self.v[vx] & 1
        self.v[vx] = self.v[vx] // 2

    def _8xy7(self):  # SUBN Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(vx, vy))

        if self.subn_quirks:
            # Vx is overwritten by the flag, and the flag is what gets subtracted
            self.v[vx] = int(self.v[vy] > self.v[vx])
            self.v[vx] = (self.v[vy] - self.v[vx]) & 0xFF
        else:
            not_borrow = int(self.v[vy] > self.v[vx])
            self.v[vx] = (self.v[vy] - self.v[vx]) & 0xFF
            self.v[0xF] = not_borrow

    def _8xyE(self):  # SHL Vx
        vx = self.vx

        if self.live_debug:
            self.debug("SHL V{:01x}".format(vx))

        # The flag is the top bit as-is (0x80), not shifted down to 1
        self.v[0xF] = self.v[vx] & 0x80
        self.v[vx] = (self.v[vx] * 2) & 0xFF

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] != self.v[self.vy]:
            self._skip()

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.registers.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(self.addr))

        self.registers.pc = self.addr + self.v[0x0]

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.  The range also
        # tops out at 0xFE rather than 0xFF.
        self.v[self.vx] = self.random.randint(0, 0xFE) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        sprite = self.ram.read_block(self.registers.i, height)
        collision = self.framebuffer.draw_sprite(self.v[self.vx], self.v[self.vy], sprite, height)
        self.v[0xF] = int(collision)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        if self.inputs.is_key_down(self.v[self.vx]):
            self._skip()

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        if not self.inputs.is_key_down(self.v[self.vx]):
            self._skip()

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.registers.dt

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        # Blocks until a key goes down.  If the wait is cancelled, the exception passes straight up to the host and Vx
        # is left untouched.
        self.v[self.vx] = self.inputs.wait_for_keypress()

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.registers.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        self.registers.st = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        self.registers.i = (self.registers.i + self.v[self.vx]) & 0xFFFF

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        self.registers.i = GLYPH_LOAD_ADDRESS + self.v[self.vx] * GLYPH_HEIGHT

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        i = self.registers.i
        # Check the whole range first, so a write past the top of memory changes nothing
        self.ram.check_bounds(i + (max(2, self.vx) if self.bcd_quirks else 2))
        self.ram.set(i, val // 100)           # Most-significant digit
        self.ram.set(i + 1, (val // 10) % 10)  # Middle digit
        self.ram.set(i + 2, val % 10)          # Least-significant digit

        if self.bcd_quirks:
            # Carries on into LD [I], Vx, overwriting the digits from V0 onwards
            self._store_registers()

    def _store_registers(self):
        i = self.registers.i
        self.ram.check_bounds(i + self.vx)

        for reg in range(self.vx + 1):
            self.ram.set(i + reg, self.v[reg])

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        self._store_registers()

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        i = self.registers.i
        self.ram.check_bounds(i + self.vx)

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.get(i + reg)
