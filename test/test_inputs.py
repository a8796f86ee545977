#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
import unittest
from time import sleep
from unittest import mock
from mchip.constants import DEFAULT_KEYMAP
from mchip.inputs import i_curses
from mchip.inputs.i_null import Inputs, InputsError, parse_keymap
from mchip.keypad import Keypad
from mchip.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()
        self.renderer = Renderer()

    def test_inputs_default_keymap(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.keypad, self.renderer)
        self.assertEqual(16, len(inputs.keymap_dict))
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])
        self.assertEqual(0x1, inputs.keymap_dict[ord("1")])
        self.assertEqual(0xC, inputs.keymap_dict[ord("4")])
        self.assertEqual(0xF, inputs.keymap_dict[ord("v")])
        self.assertFalse(inputs.process_messages())

    def test_inputs_keymap_wrong_length(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", self.keypad, self.renderer)

    def test_inputs_keymap_not_integers(self):
        keymap = ",".join(["a"] * 16)
        self.assertRaises(InputsError, Inputs, keymap, self.keypad, self.renderer)

    def test_inputs_keymap_duplicates(self):
        keymap = ",".join(["49"] * 16)
        self.assertRaises(InputsError, Inputs, keymap, self.keypad, self.renderer)

    def test_inputs_keymap_force_lowercase(self):
        # 'X' and 'x' become the same key, so this is a duplicate once lowered
        keymap = ",".join(str(key) for key in [88, 120] + list(range(200, 214)))
        Inputs(keymap, self.keypad, self.renderer)
        self.assertRaises(InputsError, Inputs, keymap, self.keypad, self.renderer, True)

    def test_inputs_parse_keymap(self):
        keymap_dict = parse_keymap(",".join(str(code) for code in range(65, 81)), force_lowercase=True)
        self.assertEqual(0x0, keymap_dict[ord("a")])
        self.assertEqual(0xF, keymap_dict[ord("p")])
        self.assertNotIn(ord("A"), keymap_dict)


class IdleCursesScreen:
    # Stands in for a curses window that never has a character waiting
    def getch(self):
        sleep(0.01)
        return -1


class ScriptedCursesScreen:
    def __init__(self, chars):
        self.chars = iter(chars)

    def getch(self):
        return next(self.chars)


class CursesRenderer(Renderer):
    def __init__(self, screen):
        super().__init__()
        self.screen = screen

    def get_curses_screen(self):
        return self.screen


class TestCursesInputs(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()
        self.inputs = i_curses.Inputs(DEFAULT_KEYMAP, self.keypad, CursesRenderer(IdleCursesScreen()))

    def tearDown(self):
        self.inputs.shutdown()

    def _process_at(self, now):
        with mock.patch("mchip.inputs.i_curses.time", return_value=now):
            return self.inputs.process_messages()

    def test_curses_inputs_drain_queue(self):
        self.inputs.input_queue.put(0x3)
        self.inputs.input_queue.put(0xA)
        self.assertFalse(self.keypad.is_key_down(0x3))  # Nothing happens until the main thread processes messages
        self.assertFalse(self._process_at(100.0))
        self.assertTrue(self.keypad.is_key_down(0x3))
        self.assertTrue(self.keypad.is_key_down(0xA))
        self.assertTrue(self.inputs.input_queue.empty())

    def test_curses_inputs_fake_release(self):
        self.inputs.input_queue.put(0x3)
        self._process_at(100.0)
        self._process_at(100.0 + i_curses.KEYBOARD_FAKE_KEYDOWN_TIME / 2)
        self.assertTrue(self.keypad.is_key_down(0x3))
        self._process_at(100.0 + i_curses.KEYBOARD_FAKE_KEYDOWN_TIME * 1.5)
        self.assertFalse(self.keypad.is_key_down(0x3))

    def test_curses_inputs_repeat_holds_key(self):
        hold_time = i_curses.KEYBOARD_FAKE_KEYDOWN_TIME
        self.inputs.input_queue.put(0x3)
        self._process_at(100.0)

        # A keyboard repeat arrives before the release, so the key stays down for longer
        self.inputs.input_queue.put(0x3)
        self._process_at(100.0 + hold_time * 0.75)
        self._process_at(100.0 + hold_time * 1.25)
        self.assertTrue(self.keypad.is_key_down(0x3))
        self._process_at(100.0 + hold_time * 2)
        self.assertFalse(self.keypad.is_key_down(0x3))

    def test_curses_inputs_quit(self):
        self.inputs.input_queue.put(0x3)
        self.inputs.input_queue.put(None)
        self.assertTrue(self._process_at(100.0))

    def test_curses_input_thread(self):
        # 'X' is read as 'x' (key 0), '#' isn't mapped, and ESC stops the thread
        input_queue = queue.Queue(16)
        screen = ScriptedCursesScreen([ord("X"), -1, ord("#"), ord("v"), 27])
        i_curses.input_thread(queue.Queue(1), input_queue, self.inputs.keymap_dict, screen)
        self.assertEqual(0x0, input_queue.get(block=False))
        self.assertEqual(0xF, input_queue.get(block=False))
        self.assertIsNone(input_queue.get(block=False))
        self.assertTrue(input_queue.empty())
