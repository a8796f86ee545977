#!/usr/bin/env python3

"""
CPU Diagnostics

Receives reports of illegal opcodes from the CPU.  These are not fatal; the
CPU carries on from the next instruction, so each one is simply printed and
counted.

When emulation halts on a fault, the dump shows:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Address of the last instruction fetched
    * OP - OpCode number
    * Stack contents
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import sys


class Diagnostics:
    def __init__(self, stream=None):
        self.stream = stream
        self.illegal_opcode_count = 0

    def report_illegal_opcode(self, opcode, address):
        self.illegal_opcode_count += 1
        self.output("Illegal opcode 0x{:04x} at 0x{:03x}".format(opcode, address))

    def dump(self, cpu):
        dump_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x}"
        ).format(
            *[cpu.v[reg_num] for reg_num in range(15, -1, -1)] +
            [cpu.i, cpu.dt, cpu.st, cpu.op_address, cpu.opcode]
        )

        stack_items = cpu.stack.get_items()
        stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
        dump_str += "\nStack:{}".format(stack_str or " (Empty)")

        return dump_str

    def output(self, message):
        # Look the stream up late, so redirected output (e.g. under test) is respected
        print(message, file=self.stream or sys.stderr)
