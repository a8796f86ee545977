#!/usr/bin/env python3

"""
Emulation Runner

Drives the CPU against the wall clock.  Four things happen on independent
schedules:

    * Inputs are processed (60Hz).  This is done before anything else so the
      CPU sees the newest key states.
    * The delay and sound timers tick (60Hz).
    * Instructions are executed (500Hz by default, or uncapped).
    * The framebuffer is sampled and rendered if it changed (60Hz).

Each call to advance() runs everything that has fallen due by the given time,
which makes the runner easy to drive from a fake clock.  If the host stalls
for a long time (e.g. the window is dragged), the schedules are resynchronised
rather than trying to catch up on every missed instruction at once.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, TIMER_FREQ

TIMER_INTERVAL = 1.0 / TIMER_FREQ
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
PERF_REPORT_INTERVAL = 1.0
MAX_LAG = 0.25  # Seconds behind schedule before giving up on catching up


class Runner:
    def __init__(self, cpu, framebuffer, renderer, inputs, clock_speed=None, time_func=perf_counter,
                 sleep_func=sleep):

        self.cpu = cpu
        self.framebuffer = framebuffer
        self.renderer = renderer
        self.inputs = inputs
        self.time_func = time_func
        self.sleep_func = sleep_func

        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        # A clock speed of 0 (or less) runs one instruction every time round the loop, as fast as the host allows
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed
        self.start(0.0)

    def start(self, now):
        self.next_step_time = now
        self.next_timer_time = now
        self.next_display_update_time = now
        self.next_perf_report_time = now + PERF_REPORT_INTERVAL
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

    def advance(self, now):
        # Returns True if the inputs have asked to quit

        if now >= self.next_perf_report_time:
            self.next_perf_report_time = now + PERF_REPORT_INTERVAL
            self.renderer.set_title(
                "{} - {} FPS, {} OPS".format(APP_NAME, self.perf_counter_fps, self.perf_counter_ops)
            )
            self.perf_counter_fps = 0
            self.perf_counter_ops = 0

        if now >= self.next_display_update_time:
            if self.inputs.process_messages():
                return True

        if now - self.next_timer_time > MAX_LAG:
            self.next_timer_time = now

        while now >= self.next_timer_time:
            self.cpu.tick_timers()
            self.next_timer_time += TIMER_INTERVAL

        if self.core_interval is None:
            self.cpu.step()
            self.perf_counter_ops += 1
        else:
            if now - self.next_step_time > MAX_LAG:
                self.next_step_time = now

            while now >= self.next_step_time:
                self.cpu.step()
                self.perf_counter_ops += 1
                self.next_step_time += self.core_interval

        # Render after executing, so the frame includes this batch of instructions
        if now >= self.next_display_update_time:
            self.next_display_update_time = now + DISPLAY_INTERVAL
            self.refresh_framebuffer()
            self.perf_counter_fps += 1

        return False

    def refresh_framebuffer(self):
        framebuffer = self.framebuffer

        if framebuffer.is_changed():
            self.renderer.render(framebuffer)
            framebuffer.acknowledge()

    def next_event_time(self):
        next_time = min(self.next_timer_time, self.next_display_update_time)

        if self.core_interval is not None:
            next_time = min(next_time, self.next_step_time)

        return next_time

    def run(self):
        time_func = self.time_func
        self.start(time_func())

        while True:
            if self.advance(time_func()):
                return

            if self.core_interval is not None:
                delay = self.next_event_time() - time_func()

                if delay > 0:
                    self.sleep_func(delay)
