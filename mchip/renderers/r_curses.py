#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws the framebuffer in a standard Linux-style TTY Terminal, the Windows
Command Prompt, or PowerShell.  Each lit pixel is an inverted space, stretched
horizontally by the scale so the picture keeps roughly the right shape.

The top line of the pad holds the window title.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
import _curses
from .r_null import Renderer as RendererBase

DEFAULT_SCALE = 2


class Renderer(RendererBase):
    def __init__(self, scale=None, curses_cursor_mode=0, **kwargs):
        if scale is None:
            scale = DEFAULT_SCALE  # Default horizontal stretch if not supplied

        self.pixel_char = " " * scale
        self.pad = None
        self.pad_size = None
        self.last_screen_height = -1
        self.last_screen_width = -1
        self.cursor_mode = curses_cursor_mode
        self.screen = curses.initscr()
        curses.curs_set(self.cursor_mode)
        curses.noecho()
        curses.cbreak()
        super().__init__(scale)

    def _resize_pad(self, width, height):
        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.  The extra line at the top is for the title.
        if self.pad_size != (width, height):
            self.pad = curses.newpad(height + 2, width * self.scale + 1)
            self.pad_size = (width, height)
            self._draw_title()

    def render(self, framebuffer):
        width, height = framebuffer.get_vid_size()
        self._resize_pad(width, height)
        pixel_char = self.pixel_char

        for y in range(height):
            for x, pixel in enumerate(framebuffer.get_row(y)):
                self.pad.addstr(y + 1, x * self.scale, pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        screen_height, screen_width = self.screen.getmaxyx()

        if screen_height != self.last_screen_height or screen_width != self.last_screen_width:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width

        self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
        super().render(framebuffer)

    def _draw_title(self):
        if self.pad is None:
            return

        pad_width = self.pad_size[0] * self.scale
        title = self.title[:pad_width]
        self.pad.addstr(0, 0, title + " " * (pad_width - len(title)), curses.A_REVERSE)

    def set_title(self, title):
        super().set_title(title)
        self._draw_title()

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        if self.cursor_mode != 1:
            try:
                curses.curs_set(1)
            except _curses.error:
                pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
