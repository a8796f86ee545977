#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the framebuffer onto an SDL window surface via PyGame.  The surface is
built at the emulated screen size (64x32), and then stretched to fit the window
using 'Nearest Neighbour' scaling.  This means we don't have to draw the same
pixel multiple times.

The window is twice as wide as it is tall, matching the emulated screen.  Lit
pixels are drawn in the foreground colour, and unlit ones in the background
colour.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME

DEFAULT_WINDOW_WIDTH = 640


class Renderer(RendererBase):
    def __init__(self, scale=None, palette=None, **kwargs):
        if scale is None:
            scale = DEFAULT_WINDOW_WIDTH  # Default window width if not supplied

        pygame.display.init()
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        self.rgb_buffer = None
        self.buffer_size = None

        # Background, then foreground.  Looked up instantly by pixel state, so no need for a dictionary.
        colour_map = [0x000000, 0xFFFFFF]

        # Override one or both colours with a user-defined palette, if necessary
        if palette is not None:
            palette_split = palette.split(",")

            if len(palette_split) > len(colour_map):
                raise RendererError("Too many palette colours defined.  Only background and foreground are used.")

            for colour_num, colour in enumerate(palette_split):
                if len(colour) != 6:
                    raise RendererError("Palette colours must all be 6 hex digits long.")

                try:
                    colour_map[colour_num] = int(colour, 16)
                except ValueError:
                    raise RendererError("Invalid palette colour defined.") from None

        # Split compound RGB values for faster byte-based copying later
        self.rgb_map = [bytes((i >> 16, (i >> 8) & 0xFF, i & 0xFF)) for i in colour_map]

        super().__init__(scale)
        self.set_title(APP_NAME)

    def render(self, framebuffer):
        width, height = framebuffer.get_vid_size()
        buffer_size = width * height * 3  # 24-bit

        if buffer_size != self.buffer_size:
            self.rgb_buffer = memoryview(bytearray(buffer_size))
            self.buffer_size = buffer_size

        rgb_buffer = self.rgb_buffer
        rgb_map = self.rgb_map
        rgb_location = 0

        # Update the RGB buffer in-place to minimise allocations and PyGame calls
        for y in range(height):
            for pixel in framebuffer.get_row(y):
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]
                rgb_location += 3

        # Blitting the bytearray straight to a surface is far quicker than setting pixels one at a time
        render_surface = pygame.image.frombuffer(rgb_buffer, (width, height), "RGB")
        scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
        self.display_surface.blit(scaled_win, (0, 0))
        pygame.display.flip()
        super().render(framebuffer)

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame can segfault if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
