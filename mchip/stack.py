#!/usr/bin/env python3

"""
Stack Emulator

The call stack is not part of addressable memory.  There is no specified
location for it, and the stack pointer is not exposed to the running program,
so a capacity-limited list emulates it fully.  The stack pointer is simply the
length of the list.

Overflowing (calling more than 16 subroutines deep) or underflowing (returning
with nothing to return to) are program bugs, so both raise a fault.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackFault(Exception):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    def __len__(self):
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackFault("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackFault("Stack underflow") from None

    def clear(self):
        self.items = []

    def get_items(self):
        # For diagnostics
        return self.items
