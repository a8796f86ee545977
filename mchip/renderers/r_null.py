#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if nothing should be
shown, such as when running headless.  It only remembers the window title and
how many frames it has been asked to draw.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.title = ""
        self.frames_rendered = 0

    def render(self, framebuffer):  # pylint: disable=unused-argument
        # Sample the whole framebuffer and show it
        self.frames_rendered += 1

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
