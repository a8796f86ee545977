#!/usr/bin/env python3

"""
Hexadecimal Keypad

Sixteen keys, 0 through F.  Key states are only ever set by an input plugin
(which maps physical keys to these logical ones), and the CPU only reads them.
Input plugins update the keypad from the main thread between instructions, so
the CPU sees a consistent set of keys for the whole of an instruction.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS

    def _check_key(self, key):
        if key < 0 or key >= NUM_KEYS:
            raise KeypadError("Key 0x{:x} does not exist on the keypad".format(key))

    def press(self, key):
        self._check_key(key)
        self.key_down[key] = True

    def release(self, key):
        self._check_key(key)
        self.key_down[key] = False

    def is_key_down(self, key):
        self._check_key(key)
        return self.key_down[key]

    def get_pressed(self):
        # Lowest-numbered key currently held, if any
        for key, down in enumerate(self.key_down):
            if down:
                return key

        return None

    def clear(self):
        for key in range(NUM_KEYS):
            self.key_down[key] = False
