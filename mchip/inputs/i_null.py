#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Input plugins map physical keys (keyscan codes or characters) onto the 16 keys
of the hexadecimal keypad, and press or release them there.  The keymap is a
comma-separated list of 16 decimal codes, the first for key 0x0 and the last
for key 0xF.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


def parse_keymap(keymap, force_lowercase=False):
    # Returns a dictionary of host key code -> hexadecimal key number
    codes = keymap.split(",")

    if len(codes) != NUM_KEYS:
        raise InputsError(
            "Keymap has {} entries, but {} are required.  Use commas to split numbers".format(len(codes), NUM_KEYS)
        )

    try:
        codes = [int(code) for code in codes]
    except ValueError:
        raise InputsError("Defined keys are not all integer values") from None

    if force_lowercase:
        # Characters rather than keyscan codes, so 'A' and 'a' should be the same key
        codes = [ord(chr(code).lower()) for code in codes]

    keymap_dict = {code: hex_key for hex_key, code in enumerate(codes)}

    if len(keymap_dict) != NUM_KEYS:
        raise InputsError("Duplicate keys defined")

    return keymap_dict


class Inputs:
    def __init__(self, keymap, keypad, renderer, force_lowercase=False):
        self.keymap_dict = parse_keymap(keymap, force_lowercase)
        self.keypad = keypad
        self.renderer = renderer

    def process_messages(self):
        # Returns True if the user has asked to quit
        return False

    def shutdown(self):
        pass
