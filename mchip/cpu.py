#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
owns the machine state (registers, timers, program counter, and the memory,
stack, framebuffer and keypad plugged into it), and exposes three operations
to the host:

    * load(program) - copy a program image into memory at 0x200
    * step()        - fetch, decode and execute one instruction
    * tick_timers() - count the delay and sound timers down by one (60Hz)

The CPU does not measure time itself.  Whatever drives it decides how often
each of these is called, so the instruction rate and timer rate are completely
independent of the machine's semantics.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import randint
from .constants import FONT_LOCATION, NUM_KEYS, NUM_REGISTERS, PROGRAM_START
from .decoder import IllegalOpcode, Op, decode
from .font import FONT, FONT_GLYPH_SIZE

CPU_ENDIAN = "big"      # CHIP-8 is big-endian
INSTRUCTION_SIZE = 2    # All instructions are two bytes long
I_BITMASK = 0xFFFF      # The index register is 16 bits wide, even though only 12 bits can address memory
ADDRESSABLE_TOP = 0xFFF


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, audio, diagnostics, load_quirks=None,
                 index_overflow_quirks=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.audio = audio
        self.diagnostics = diagnostics

        """
        Quirks
        ------

        - Load quirks           : Enabled by default.  Fx55/Fx65 leave I pointing just past the last byte touched, as
                                  the original interpreter did.  If disabled, I is left alone.
        - Index overflow quirks : Disabled by default.  If enabled, Fx1E sets Vf when I goes past the end of
                                  addressable memory (Amiga interpreter behaviour).
        """

        self.load_quirks = True if load_quirks is None else load_quirks
        self.index_overflow_quirks = False if index_overflow_quirks is None else index_overflow_quirks

        self.instructions = {
            Op.SYS: self._0nnn,
            Op.CLS: self._00E0,
            Op.RET: self._00EE,
            Op.JP: self._1nnn,
            Op.CALL: self._2nnn,
            Op.SE_BYTE: self._3xnn,
            Op.SNE_BYTE: self._4xnn,
            Op.SE_REG: self._5xy0,
            Op.LD_BYTE: self._6xnn,
            Op.ADD_BYTE: self._7xnn,
            Op.LD_REG: self._8xy0,
            Op.OR: self._8xy1,
            Op.AND: self._8xy2,
            Op.XOR: self._8xy3,
            Op.ADD_REG: self._8xy4,
            Op.SUB: self._8xy5,
            Op.SHR: self._8xy6,
            Op.SUBN: self._8xy7,
            Op.SHL: self._8xyE,
            Op.SNE_REG: self._9xy0,
            Op.LD_I: self._Annn,
            Op.JP_V0: self._Bnnn,
            Op.RND: self._Cxnn,
            Op.DRW: self._Dxyn,
            Op.SKP: self._Ex9E,
            Op.SKNP: self._ExA1,
            Op.LD_VX_DT: self._Fx07,
            Op.LD_VX_K: self._Fx0A,
            Op.LD_DT_VX: self._Fx15,
            Op.LD_ST_VX: self._Fx18,
            Op.ADD_I: self._Fx1E,
            Op.LD_F: self._Fx29,
            Op.LD_B: self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65
        }

        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so updating a register is fast
        self.buzzer_enabled = False
        self.reset()

    def reset(self):
        self.ram.clear()
        self.ram.write_block(FONT_LOCATION, FONT)
        self.stack.clear()
        self.framebuffer.clear()
        self.keypad.clear()

        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0   # Index register
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer
        self._update_buzzer()

        self.pc = PROGRAM_START
        self.op_address = PROGRAM_START  # Where the current instruction was fetched from
        self.opcode = 0

        # Key waiting is either idle (None), or holding on until the given key is released
        self.awaiting_release = None

    def load(self, program):
        self.ram.write_block(PROGRAM_START, program)
        self.pc = PROGRAM_START

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, INSTRUCTION_SIZE), CPU_ENDIAN, signed=False)

    def step(self):
        self.op_address = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute

        try:
            instruction = decode(self.opcode)
        except IllegalOpcode:
            # Not fatal.  Carry on from the next instruction.
            self.diagnostics.report_illegal_opcode(self.opcode, self.op_address)
            return

        self.instructions[instruction.op](instruction)

    def tick_timers(self):
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1
            self._update_buzzer()

    def inc_pc(self):
        self.pc += INSTRUCTION_SIZE

    def hold_pc(self):
        # Come back to the current instruction next step
        self.pc = self.op_address

    def _update_buzzer(self):
        # Only tell the audio system when the buzzer actually switches on or off
        enabled = self.st > 0

        if enabled != self.buzzer_enabled:
            self.buzzer_enabled = enabled
            self.audio.enable_buzzer(enabled)

    def _0nnn(self, ins):  # SYS addr
        # Native machine code routines can't run here.  Ignored.
        pass

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _3xnn(self, ins):  # SE Vx, byte
        if self.v[ins.x] == ins.nn:
            self.inc_pc()

    def _4xnn(self, ins):  # SNE Vx, byte
        if self.v[ins.x] != ins.nn:
            self.inc_pc()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.v[ins.x] == self.v[ins.y]:
            self.inc_pc()

    def _6xnn(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.nn

    def _7xnn(self, ins):  # ADD Vx, byte
        # No carry flag for this one
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]

    # Vf has to be written AFTER Vx in all the arithmetic instructions below, because Vf may also be an operand, and
    # the flag must win.

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Carry

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val >= 0)  # Vf is set when NOT borrowing

    def _8xy5(self, ins):  # SUB Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.x] - self.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx
        val = self.v[ins.x]
        self.v[ins.x] = val >> 1
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.y] - self.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx
        val = self.v[ins.x]
        self.v[ins.x] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.v[ins.x] != self.v[ins.y]:
            self.inc_pc()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # Can land past the end of memory, in which case the next fetch faults
        self.pc = self.v[0] + ins.nnn

    def _Cxnn(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = randint(0, 0xFF) & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        vx_pos = self.v[ins.x]
        vy_pos = self.v[ins.y]
        collided = False

        for y, spr_data in enumerate(self.ram.read_block(self.i, ins.n)):
            for x in range(8):
                if spr_data & (0x80 >> x):
                    # Don't stop drawing on a collision.  Just remember it happened.
                    if self.framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                        collided = True

        self.v[0xF] = int(collided)

    def _key_from_vx(self, ins):
        # Vx may hold anything up to 0xFF, but there are only 16 keys.  Treat the rest like an illegal opcode.
        key = self.v[ins.x]

        if key >= NUM_KEYS:
            self.diagnostics.report_illegal_opcode(self.opcode, self.op_address)
            return None

        return key

    def _Ex9E(self, ins):  # SKP Vx
        key = self._key_from_vx(ins)

        if key is not None and self.keypad.is_key_down(key):
            self.inc_pc()

    def _ExA1(self, ins):  # SKNP Vx
        key = self._key_from_vx(ins)

        if key is not None and not self.keypad.is_key_down(key):
            self.inc_pc()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.dt

    def _Fx0A(self, ins):  # LD Vx, K
        # This waits for a keypress, but the timers still need to count down and the display still needs updating, so
        # control goes back to the host every step, and the program counter is held on this instruction instead.
        # Once a key is caught, we keep holding until it is released, so one press can't satisfy two waits in a row.

        if self.awaiting_release is None:
            key = self.keypad.get_pressed()

            if key is not None:
                self.v[ins.x] = key
                self.awaiting_release = key

            self.hold_pc()
        elif self.keypad.is_key_down(self.awaiting_release):
            self.hold_pc()
        else:
            self.awaiting_release = None

    def _Fx15(self, ins):  # LD DT, Vx
        self.dt = self.v[ins.x]

    def _Fx18(self, ins):  # LD ST, Vx
        # Allow the program to start the buzzer, or immediately stop it before the sound timer hits zero
        self.st = self.v[ins.x]
        self._update_buzzer()

    def _Fx1E(self, ins):  # ADD I, Vx
        val = self.i + self.v[ins.x]
        self.i = val & I_BITMASK

        # Allow for Amiga CHIP-8 interpreter behaviour
        if self.index_overflow_quirks:
            self.v[0xF] = int(val > ADDRESSABLE_TOP)

    def _Fx29(self, ins):  # LD F, Vx
        self.i = FONT_LOCATION + FONT_GLYPH_SIZE * self.v[ins.x]

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        i = self.i
        self.ram.write(i, val // 100)             # Most-significant digit
        self.ram.write(i + 1, (val // 10) % 10)   # Middle digit
        self.ram.write(i + 2, val % 10)           # Least-significant digit

    def _post_Fx55_Fx65(self, ins):
        if self.load_quirks:
            self.i = (self.i + ins.x + 1) & I_BITMASK

    def _Fx55(self, ins):  # LD [I], Vx
        i = self.i

        for reg in range(ins.x + 1):
            self.ram.write(i + reg, self.v[reg])

        self._post_Fx55_Fx65(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        i = self.i

        for reg in range(ins.x + 1):
            self.v[reg] = self.ram.read(i + reg)

        self._post_Fx55_Fx65(ins)
