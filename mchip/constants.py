#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "MiniChip8 Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Machine layout
MEMORY_SIZE = 0x1000     # 4K of addressable memory
PROGRAM_START = 0x200    # Everything below here belongs to the interpreter
FONT_LOCATION = 0x000    # Built-in hex font lives at the very bottom of memory
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
STACK_DEPTH = 16
NUM_REGISTERS = 16
NUM_KEYS = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# Clocks
DEFAULT_CLOCK_SPEED = 500  # Instructions per second
TIMER_FREQ = 60.0          # Delay and sound timers count down at 60Hz
DISPLAY_FREQ = 60.0        # Inputs are polled and the display refreshed at 60Hz

# Default mappings for keys 0-F.  The keyscans (on a QWERTY keyboard) and ASCII characters for these are the same code:
# X 1 2 3 / Q W E A / S D Z C / 4 R F V
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Compatibility choices which differ between historical interpreters
CPU_QUIRKS = ["load", "index_overflow"]
