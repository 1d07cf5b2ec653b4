#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "ChipVM"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Machine layout
MEMORY_SIZE = 0x1000         # 4KB address space, 0x000 - 0xFFF
PROGRAM_LOAD_ADDRESS = 0x200
GLYPH_LOAD_ADDRESS = 0x000
GLYPH_HEIGHT = 5
NUM_REGISTERS = 16
STACK_DEPTH = 16             # Entries, not bytes.  Slot 0 is never used, so 15 are usable.
NUM_KEYS = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# Built-in hexadecimal digit sprites, 5 rows of MSB-first bits per digit 0-F
GLYPH_TABLE = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F, later populated into a dictionary.  These are the ASCII codes for '0'-'9' and 'a'-'f',
# which are also the PyGame keyscan codes for the same keys
DEFAULT_KEYMAP = "48,49,50,51,52,53,54,55,56,57,97,98,99,100,101,102"

# Timing
DEFAULT_CLOCK_SPEED = 700  # Instructions per second
TIMER_FREQ = 60.0          # 60Hz delay and sound timer decrement
DISPLAY_FREQ = 60.0        # 60Hz display refresh and input polling

# CPU quirks.  Both default to the behaviour of the interpreter these ROMs were originally tested against.
CPU_QUIRKS = ["subn", "bcd"]
