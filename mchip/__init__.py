#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, DEFAULT_KEYMAP, MEMORY_SIZE, STACK_DEPTH
from .cpu import CPU
from .diagnostics import Diagnostics
from .framebuffer import Framebuffer
from .hostio import Loader, LoaderError
from .keypad import Keypad
from .ram import RAM, MemoryFault
from .runner import Runner
from .stack import Stack, StackFault


class StartupError(Exception):
    pass


class EmulationHalted(Exception):
    pass


def select_plugins(opt_renderer, mute_audio):
    # Returns the Renderer, Inputs and Audio classes to use.  If no renderer is chosen, try PyGame first, then Curses.
    auto_select_renderer = opt_renderer is None

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            # PyGame can play a proper tone
            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

            return Renderer, Inputs, Audio

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

            # Terminals can handle fixed-length beeps, but not a sustained tone
            if mute_audio or mute_audio is None:
                from .audio.a_null import Audio
            else:
                from .audio.a_curses import Audio

            return Renderer, Inputs, Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

        return Renderer, Inputs, Audio

    raise StartupError("Unknown renderer '{}'.".format(opt_renderer))


def create_machine(audio, diagnostics, quirk_settings=None):
    # Builds a CPU with freshly allocated memory, stack, framebuffer and keypad plugged in
    ram = RAM(MEMORY_SIZE)
    stack = Stack(STACK_DEPTH)
    framebuffer = Framebuffer()
    keypad = Keypad()
    cpu = CPU(ram, stack, framebuffer, keypad, audio, diagnostics, **(quirk_settings or {}))
    return cpu


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_label = "{}_quirks".format(cpu_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    # Read the program before opening any windows, so a bad filename fails cleanly
    try:
        program = Loader().load_program(args["filename"])
    except (OSError, LoaderError) as err:
        raise StartupError("Unable to load program: {}".format(err)) from None

    Renderer, Inputs, Audio = select_plugins(args["renderer"], args["mute"])

    renderer = Renderer(
        scale=args["scale"],
        palette=args["palette"],
        curses_cursor_mode=args["curses_cursor_mode"]
    )

    audio = None
    inputs = None

    try:
        keymap = args["keymap"] or DEFAULT_KEYMAP
        audio = Audio()
        diagnostics = Diagnostics()
        cpu = create_machine(audio, diagnostics, quirk_settings)
        cpu.load(program)

        # Set up host inputs, and link to the chosen rendering module in case it provides inputs too
        inputs = Inputs(keymap, cpu.keypad, renderer)
        runner = Runner(cpu, cpu.framebuffer, renderer, inputs, clock_speed=args["clock_speed"])

        try:
            runner.run()
        except (MemoryFault, StackFault) as err:
            raise EmulationHalted(
                "Emulation halted.\n\n{}{}\n\n{}".format(APP_INTRO, err, diagnostics.dump(cpu))
            ) from None
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        if audio is not None:
            audio.shutdown()

        if inputs is not None:
            inputs.shutdown()

        renderer.shutdown()
