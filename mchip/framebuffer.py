#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here by the CPU, and sampled by the host rendering system
(usually at 60Hz).  The CPU never pushes pixels to the renderer directly.
Instead, the framebuffer remembers whether anything has changed since the last
time a renderer acknowledged it, so unchanged frames need not be redrawn.

Programs for this system cannot write directly into video RAM.  Sprites are
drawn to the screen using an XOR method, and sprite coordinates wrap around
both edges of the screen.  Collisions (where a set pixel was unset by an XOR)
are reported back to the caller.

Writes only come from the clear and draw instructions, which each run to
completion before control returns to the host, so a renderer always samples a
complete frame.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import SCREEN_WIDTH, SCREEN_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width=SCREEN_WIDTH, vid_height=SCREEN_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Framebuffer dimensions must be positive")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)  # One byte per pixel; 0 is off, anything else is on
        self.changed = True

    def clear(self):
        self.vram.clear()
        self.changed = True

    def xor_pixel(self, x, y):
        # Returns True if a set pixel was switched off
        x %= self.vid_width
        y %= self.vid_height
        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 0xFF)
        self.changed = True

        return pixel != 0

    def _check_position(self, x=0, y=0):
        if not 0 <= x < self.vid_width or not 0 <= y < self.vid_height:
            raise FramebufferError("Pixel position ({}, {}) is off screen".format(x, y))

    def get_pixel(self, x, y):
        self._check_position(x, y)
        return self.vram.read(y * self.vid_width + x) != 0

    def get_row(self, y):
        self._check_position(y=y)
        row_start = y * self.vid_width
        return [pixel != 0 for pixel in self.vram.read_block(row_start, self.vid_width)]

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def is_changed(self):
        return self.changed

    def acknowledge(self):
        # Called by a renderer once it has sampled the current frame
        self.changed = False
