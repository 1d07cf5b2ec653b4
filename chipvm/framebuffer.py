#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) when refreshed at 60Hz.  This keeps the number of calls into
rendering frameworks down, as PyGame can lower speed substantially when called
tens of thousands of times a second.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method against a single
monochrome plane.  Sprite rows are 8 pixels wide, most-significant bit first,
and wrap around both edges of the screen.

A collision is reported when any lit pixel is switched off by a draw.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, SCREEN_WIDTH, SCREEN_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, renderer, vid_width=SCREEN_WIDTH, vid_height=SCREEN_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Framebuffer dimensions must be positive")

        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.plane = RAM(self.vid_size)
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        self.plane.clear()

        for y in range(self.vid_height):
            for x in range(self.vid_width):
                self.renderer.set_pixel(x, y, 0)

    def draw_sprite(self, origin_x, origin_y, sprite, count):
        # Returns True if any lit pixel was erased
        collision = False

        for row in range(count):
            row_data = sprite[row]
            scr_y = (origin_y + row) % self.vid_height

            for bit in range(8):
                if row_data & (0x80 >> bit):
                    # Don't stop drawing on a collision, just remember it
                    if self.xor_pixel((origin_x + bit) % self.vid_width, scr_y):
                        collision = True

        return collision

    def xor_pixel(self, x, y):
        # Returns flagging any collision
        vram_loc = y * self.vid_width + x
        pixel = self.plane.get(vram_loc)
        new_pixel = pixel ^ 0xFF
        self.plane.set(vram_loc, new_pixel)
        self.renderer.set_pixel(x, y, int(new_pixel != 0))
        return pixel != 0

    def get_pixel(self, x, y):
        return self.plane.get(y * self.vid_width + x) != 0

    def refresh_display(self):
        self.renderer.refresh_display()

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
