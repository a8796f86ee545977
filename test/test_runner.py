#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip.framebuffer import Framebuffer
from mchip.renderers.r_null import Renderer
from mchip.runner import Runner


class CountingCPU:
    def __init__(self):
        self.steps = 0
        self.ticks = 0

    def step(self):
        self.steps += 1

    def tick_timers(self):
        self.ticks += 1


class ScriptedInputs:
    def __init__(self, quit_after=None):
        self.calls = 0
        self.quit_after = quit_after

    def process_messages(self):
        self.calls += 1
        return self.quit_after is not None and self.calls >= self.quit_after


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay


class TestRunner(unittest.TestCase):
    def setUp(self):
        self.cpu = CountingCPU()
        self.framebuffer = Framebuffer()
        self.renderer = Renderer()
        self.inputs = ScriptedInputs()

    def _create_runner(self, clock_speed=None, clock=None):
        if clock is None:
            return Runner(self.cpu, self.framebuffer, self.renderer, self.inputs, clock_speed=clock_speed)

        return Runner(
            self.cpu, self.framebuffer, self.renderer, self.inputs, clock_speed=clock_speed, time_func=clock.time,
            sleep_func=clock.sleep
        )

    def test_runner_rates(self):
        runner = self._create_runner(500)
        runner.start(0.0)

        # Advance every millisecond for one second, halfway between each step boundary
        for ms in range(1000):
            self.assertFalse(runner.advance(ms / 1000 + 0.0005))

        self.assertEqual(500, self.cpu.steps)
        self.assertEqual(60, self.cpu.ticks)

    def test_runner_default_clock_speed(self):
        runner = self._create_runner()
        runner.start(0.0)

        for ms in range(100):
            runner.advance(ms / 1000 + 0.0005)

        self.assertEqual(50, self.cpu.steps)

    def test_runner_uncapped(self):
        runner = self._create_runner(0)
        runner.start(0.0)

        for _ in range(25):
            runner.advance(0.0)

        self.assertEqual(25, self.cpu.steps)
        self.assertEqual(1, self.cpu.ticks)

    def test_runner_quit(self):
        self.inputs.quit_after = 1
        runner = self._create_runner(500)
        runner.start(0.0)
        self.assertTrue(runner.advance(0.0))
        self.assertEqual(0, self.cpu.steps)
        self.assertEqual(0, self.cpu.ticks)

    def test_runner_inputs_at_display_rate(self):
        runner = self._create_runner(500)
        runner.start(0.0)
        runner.advance(0.0)
        runner.advance(0.005)
        runner.advance(0.010)
        self.assertEqual(1, self.inputs.calls)
        runner.advance(0.02)
        self.assertEqual(2, self.inputs.calls)

    def test_runner_render_only_when_changed(self):
        runner = self._create_runner(500)
        runner.start(0.0)
        runner.advance(0.0)
        self.assertEqual(1, self.renderer.frames_rendered)
        self.assertFalse(self.framebuffer.is_changed())

        runner.advance(0.02)
        self.assertEqual(1, self.renderer.frames_rendered)

        self.framebuffer.xor_pixel(3, 4)
        runner.advance(0.025)  # Display not due yet
        self.assertEqual(1, self.renderer.frames_rendered)
        runner.advance(0.04)
        self.assertEqual(2, self.renderer.frames_rendered)
        self.assertFalse(self.framebuffer.is_changed())

    def test_runner_perf_title(self):
        runner = self._create_runner(500)
        runner.start(0.0)
        runner.advance(0.0)
        self.assertEqual("", self.renderer.title)
        runner.advance(1.0)
        self.assertEqual("MiniChip8 Emulator - 1 FPS, 1 OPS", self.renderer.title)

    def test_runner_lag_resync(self):
        runner = self._create_runner(500)
        runner.start(0.0)
        runner.advance(0.0)

        # A long stall shouldn't cause a burst of catch-up work
        runner.advance(10.0)
        self.assertEqual(2, self.cpu.steps)
        self.assertEqual(2, self.cpu.ticks)

    def test_runner_next_event_time(self):
        runner = self._create_runner(500)
        runner.start(0.0)
        runner.advance(0.0)
        self.assertAlmostEqual(0.002, runner.next_event_time())

        uncapped_runner = self._create_runner(0)
        uncapped_runner.start(0.0)
        uncapped_runner.advance(0.0)
        self.assertAlmostEqual(1.0 / 60, uncapped_runner.next_event_time())

    def test_runner_run(self):
        clock = FakeClock()
        self.inputs.quit_after = 3
        runner = self._create_runner(500, clock)
        runner.run()

        # Inputs are checked at 60Hz, so quitting on the third check happens two display frames in
        self.assertEqual(3, self.inputs.calls)
        self.assertGreaterEqual(clock.now, 2.0 / 60)
        self.assertGreater(self.cpu.steps, 0)
        self.assertTrue(clock.sleeps)
        self.assertTrue(all(delay > 0 for delay in clock.sleeps))
