#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays a tone within PyGame / SDL whenever the buzzer is enabled.

The emulated system only has a buzzer with an 'on' or 'off' status, so a single
cycle of a square wave is built once, at the tone frequency, and looped for as
long as the buzzer stays on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
TONE_FREQUENCY = 1050
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self):
        # Unsigned 8-bit mono, so silence sits at 0x80 and the wave swings either side of it
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()

        cycle_length = PLAYBACK_FREQUENCY // TONE_FREQUENCY
        half_cycle = cycle_length // 2
        wave = bytes([0x00] * half_cycle + [0xFF] * (cycle_length - half_cycle))

        self.sound = pygame.mixer.Sound(buffer=wave)
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def enable_buzzer(self, enabled):
        # If the buzzer is already in the requested state, don't restart or re-stop the sample
        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        elif self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()
