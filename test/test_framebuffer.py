#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip.framebuffer import Framebuffer, FramebufferError


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.framebuffer = Framebuffer(4, 5)

    def test_framebuffer_default_size(self):
        self.assertEqual((64, 32), Framebuffer().get_vid_size())

    def test_framebuffer_bad_size(self):
        self.assertRaises(FramebufferError, Framebuffer, 0, 32)

    def test_framebuffer_writes(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("ff00000000000000000000000000000000000000", fb.vram.mem.hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("ff00000000ff0000000000000000000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.get_pixel(1, 1))
        self.assertEqual([False, True, False, False], fb.get_row(1))

    def test_framebuffer_collision(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(2, 3))
        self.assertTrue(fb.xor_pixel(2, 3))  # Switched back off
        self.assertFalse(fb.get_pixel(2, 3))

    def test_framebuffer_wrapping(self):
        fb = self.framebuffer
        fb.xor_pixel(4, 5)  # Should land on the first pixel
        self.assertTrue(fb.get_pixel(0, 0))
        fb.xor_pixel(7, 11)
        self.assertTrue(fb.get_pixel(3, 1))

    def test_framebuffer_reads_off_screen(self):
        fb = self.framebuffer
        fb.xor_pixel(0, 1)
        self.assertRaises(FramebufferError, fb.get_pixel, 4, 0)  # Would otherwise alias (0, 1)
        self.assertRaises(FramebufferError, fb.get_pixel, 0, 5)
        self.assertRaises(FramebufferError, fb.get_pixel, -1, 0)
        self.assertRaises(FramebufferError, fb.get_row, 5)
        self.assertRaises(FramebufferError, fb.get_row, -1)

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.xor_pixel(0, 0)
        fb.xor_pixel(3, 4)
        fb.clear()
        self.assertEqual("0000000000000000000000000000000000000000", fb.vram.mem.hex())

    def test_framebuffer_change_tracking(self):
        fb = self.framebuffer
        self.assertTrue(fb.is_changed())  # A new framebuffer has never been shown
        fb.acknowledge()
        self.assertFalse(fb.is_changed())
        fb.get_pixel(0, 0)
        fb.get_row(0)
        self.assertFalse(fb.is_changed())
        fb.xor_pixel(0, 0)
        self.assertTrue(fb.is_changed())
        fb.acknowledge()
        fb.clear()
        self.assertTrue(fb.is_changed())
