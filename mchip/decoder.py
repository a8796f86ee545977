#!/usr/bin/env python3

"""
Instruction Decoder

Every CHIP-8 instruction is two bytes long, and the operand fields always sit
in the same places:

    kind = first nibble   (0xF000)  selects the instruction family
    x    = second nibble  (0x0F00)  first register
    y    = third nibble   (0x00F0)  second register
    n    = fourth nibble  (0x000F)  4-bit immediate, usually a sprite height
    nn   = low byte       (0x00FF)  8-bit immediate
    nnn  = low 12 bits    (0x0FFF)  address

Decoding is a two-level table lookup.  Most families are identified by their
first nibble alone, but the 0x0, 0x5, 0x8, 0x9, 0xE and 0xF nibbles are shared
by several instructions (or reserve their trailing bits), so the opcode is
masked and looked up a second time.  Anything without an entry is an illegal
opcode.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import Enum


class IllegalOpcode(Exception):
    def __init__(self, opcode):
        self.opcode = opcode
        super().__init__("Illegal opcode 0x{:04x}".format(opcode))


class Op(Enum):
    SYS = "SYS addr"             # 0nnn
    CLS = "CLS"                  # 00E0
    RET = "RET"                  # 00EE
    JP = "JP addr"               # 1nnn
    CALL = "CALL addr"           # 2nnn
    SE_BYTE = "SE Vx, byte"      # 3xnn
    SNE_BYTE = "SNE Vx, byte"    # 4xnn
    SE_REG = "SE Vx, Vy"         # 5xy0
    LD_BYTE = "LD Vx, byte"      # 6xnn
    ADD_BYTE = "ADD Vx, byte"    # 7xnn
    LD_REG = "LD Vx, Vy"         # 8xy0
    OR = "OR Vx, Vy"             # 8xy1
    AND = "AND Vx, Vy"           # 8xy2
    XOR = "XOR Vx, Vy"           # 8xy3
    ADD_REG = "ADD Vx, Vy"       # 8xy4
    SUB = "SUB Vx, Vy"           # 8xy5
    SHR = "SHR Vx"               # 8xy6
    SUBN = "SUBN Vx, Vy"         # 8xy7
    SHL = "SHL Vx"               # 8xyE
    SNE_REG = "SNE Vx, Vy"       # 9xy0
    LD_I = "LD I, addr"          # Annn
    JP_V0 = "JP V0, addr"        # Bnnn
    RND = "RND Vx, byte"         # Cxnn
    DRW = "DRW Vx, Vy, nibble"   # Dxyn
    SKP = "SKP Vx"               # Ex9E
    SKNP = "SKNP Vx"             # ExA1
    LD_VX_DT = "LD Vx, DT"       # Fx07
    LD_VX_K = "LD Vx, K"         # Fx0A
    LD_DT_VX = "LD DT, Vx"       # Fx15
    LD_ST_VX = "LD ST, Vx"       # Fx18
    ADD_I = "ADD I, Vx"          # Fx1E
    LD_F = "LD F, Vx"            # Fx29
    LD_B = "LD B, Vx"            # Fx33
    LD_MEM_VX = "LD [I], Vx"     # Fx55
    LD_VX_MEM = "LD Vx, [I]"     # Fx65


Instruction = namedtuple("Instruction", ["op", "opcode", "x", "y", "n", "nn", "nnn"])

# Families identified by their first nibble alone
SINGLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW
}

# Families needing a second lookup, as (bitmask, {masked opcode: operation})
SHARED_OPS = {
    0x0: (0xFFFF, {
        0x00E0: Op.CLS,
        0x00EE: Op.RET
    }),
    0x5: (0xF00F, {
        0x5000: Op.SE_REG
    }),
    0x8: (0xF00F, {
        0x8000: Op.LD_REG,
        0x8001: Op.OR,
        0x8002: Op.AND,
        0x8003: Op.XOR,
        0x8004: Op.ADD_REG,
        0x8005: Op.SUB,
        0x8006: Op.SHR,
        0x8007: Op.SUBN,
        0x800E: Op.SHL
    }),
    0x9: (0xF00F, {
        0x9000: Op.SNE_REG
    }),
    0xE: (0xF0FF, {
        0xE09E: Op.SKP,
        0xE0A1: Op.SKNP
    }),
    0xF: (0xF0FF, {
        0xF007: Op.LD_VX_DT,
        0xF00A: Op.LD_VX_K,
        0xF015: Op.LD_DT_VX,
        0xF018: Op.LD_ST_VX,
        0xF01E: Op.ADD_I,
        0xF029: Op.LD_F,
        0xF033: Op.LD_B,
        0xF055: Op.LD_MEM_VX,
        0xF065: Op.LD_VX_MEM
    })
}


def kind(opcode):
    return (opcode & 0xF000) >> 12


def field_x(opcode):
    return (opcode & 0xF00) >> 8


def field_y(opcode):
    return (opcode & 0xF0) >> 4


def field_n(opcode):
    return opcode & 0xF


def field_nn(opcode):
    return opcode & 0xFF


def field_nnn(opcode):
    return opcode & 0xFFF


def lookup(opcode):
    family = kind(opcode)
    op = SINGLE_OPS.get(family)

    if op is not None:
        return op

    bitmask, shared = SHARED_OPS[family]
    op = shared.get(opcode & bitmask)

    if op is None and family == 0x0:
        # Calls to native machine code routines on the original hardware.  They can't be emulated, so they do nothing.
        return Op.SYS

    return op


def decode(opcode):
    op = lookup(opcode)

    if op is None:
        raise IllegalOpcode(opcode)

    return Instruction(
        op, opcode, field_x(opcode), field_y(opcode), field_n(opcode), field_nn(opcode), field_nnn(opcode)
    )
