#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes.  Every
access is checked against the size of the bank.  Running off either end of
memory is treated as a fault rather than wrapped around, since a program that
does so has already gone wrong, and wrapping would only hide where.

The same class backs the framebuffer's video memory.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class MemoryFault(Exception):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        if size <= 0:
            return self.mem[0:0]

        self.check_overflow(location)
        self.check_overflow(location + size - 1)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)

        if not block_size:
            return

        block_top = location + block_size
        self.check_overflow(location)
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location < 0 or location > self.mem_top:
            raise MemoryFault("Memory access out of range at 0x{:04x}".format(location))

    def clear(self):
        # Reallocating is quicker than zeroing byte by byte
        self.resize(self.mem_size)
