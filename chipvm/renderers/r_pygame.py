#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Used by a Framebuffer object to draw the screen.  This draws graphics onto an
SDL window surface via PyGame.  The surface is allocated at the emulated
resolution, and then the contents are stretched (using 'Nearest Neighbour'
translation) to fit the window itself.  This means we don't have to draw the
same pixel multiple times.

Lit pixels are drawn in the foreground colour, and unlit pixels in the
background colour.  Both can be overridden with a palette.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 10  # Window multiplier if not supplied

        pygame.display.init()
        self.rgb_buffer = None
        self.render_surface = None
        self.scaled_size = None
        self.display_surface = None
        self.content_changed = False

        # Background, then foreground
        colour_map = [0x222222, 0xDDDDDD]

        # Override one (or both) of the colours with a user-defined palette, if necessary
        if pygame_palette is not None:
            pygame_palette_split = pygame_palette.split(",")

            if len(pygame_palette_split) > len(colour_map):
                raise RendererError("Too many palette colours defined.")

            for pygame_colour_num, pygame_colour in enumerate(pygame_palette_split):
                if len(pygame_colour) != 6:
                    raise RendererError("Palette colours must all be 6 hex digits long.")

                try:
                    colour_map[pygame_colour_num] = int(pygame_colour, 16)
                except ValueError:
                    raise RendererError("Invalid palette colour defined.") from None

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [memoryview(bytearray([i >> 16, (i >> 8) & 0xFF, i & 0xFF])) for i in colour_map]

        super().__init__(scale)
        self.set_title(APP_NAME)

    def set_resolution(self, width, height):
        if not width or not height:
            # Nothing to draw until the framebuffer has been sized
            super().set_resolution(width, height)
            return

        self.scaled_size = (width * self.scale, height * self.scale)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        self.rgb_buffer = memoryview(bytearray(width * height * 3))  # 24-bit

        # Call superclass method first, so set_pixel knows the row width
        super().set_resolution(width, height)

        # Fill the offscreen RGB buffer with the background colour
        for y in range(height):
            for x in range(width):
                self.set_pixel(x, y, 0)

        # Force a refresh now, in case nothing else is drawn afterwards
        self.refresh_display()

    def set_pixel(self, x, y, colour):
        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_location = (y * self.width + x) * 3
        self.rgb_buffer[rgb_location:rgb_location + 3] = self.rgb_map[colour]
        self.content_changed = True

    def refresh_display(self, content_changed=False):
        if (content_changed or self.content_changed) and self.rgb_buffer is not None:
            # Blit the bytearray straight to the surface, rather than drawing pixels one at a time
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()
            self.content_changed = False

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame can segfault if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
