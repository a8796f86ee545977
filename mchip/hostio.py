#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program images from the host for later writing into RAM.
Programs are loaded at 0x200, so anything larger than the memory left above
that address cannot fit, and is rejected here rather than truncated.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MAX_PROGRAM_SIZE


class LoaderError(Exception):
    pass


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_program(self, filename, max_size=MAX_PROGRAM_SIZE):
        data = self.load_binary(filename)

        if len(data) > max_size:
            raise LoaderError(
                "Program '{}' is {} bytes long, but only {} bytes of memory are available".format(
                    filename, len(data), max_size
                )
            )

        return data
