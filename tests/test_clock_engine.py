"""Tests for the two-source clock engine. Runs against a real asyncio loop."""

import asyncio

from stopwatch_sync.clock_engine import ClockEngine, ClockState


class Counter:
    def __init__(self) -> None:
        self.n = 0

    def __call__(self) -> None:
        self.n += 1


def run(coro):
    return asyncio.run(coro)


class TestLifecycle:
    def test_starts_stopped(self):
        engine = ClockEngine(Counter())
        assert engine.state is ClockState.Stopped
        assert engine.ticks == 0

    def test_stop_when_stopped_is_noop(self):
        engine = ClockEngine(Counter())
        engine.stop()
        engine.stop()
        assert engine.state is ClockState.Stopped

    def test_start_then_stop(self):
        async def scenario():
            engine = ClockEngine(Counter())
            engine.start()
            assert engine.state is ClockState.Running
            await asyncio.sleep(0.05)
            engine.stop()
            assert engine.state is ClockState.Stopped
            assert engine.ticks == 0

        run(scenario())

    def test_double_stop_has_no_side_effects(self):
        async def scenario():
            refreshes = Counter()
            engine = ClockEngine(refreshes, refresh_period=0.02)
            engine.start()
            await asyncio.sleep(0.05)
            engine.stop()
            engine.stop()
            n = refreshes.n
            await asyncio.sleep(0.1)
            assert engine.state is ClockState.Stopped
            assert refreshes.n == n

        run(scenario())

    def test_restart_keeps_a_single_pair_of_sources(self):
        """Starting while running replaces the sources instead of adding a second pair."""
        async def scenario():
            refreshes = Counter()
            engine = ClockEngine(refreshes, refresh_period=0.05)
            engine.start()
            engine.start()
            engine.start()
            await asyncio.sleep(0.525)
            engine.stop()
            # one source: ~10 refreshes; three would give ~30
            assert 7 <= refreshes.n <= 11

        run(scenario())

    def test_restart_counts_from_zero(self):
        async def scenario():
            engine = ClockEngine(Counter())
            engine.start()
            await asyncio.sleep(0.2)
            assert engine.ticks > 5
            engine.start()
            assert engine.ticks == 0
            engine.stop()

        run(scenario())


class TestFineSource:
    def test_no_tick_before_first_period(self):
        async def scenario():
            engine = ClockEngine(Counter())
            engine.start()
            await asyncio.sleep(0)
            assert engine.ticks == 0
            engine.stop()

        run(scenario())

    def test_ticks_track_wall_time(self):
        async def scenario():
            engine = ClockEngine(Counter())
            engine.start()
            await asyncio.sleep(0.5)
            ticks = engine.ticks
            engine.stop()
            assert 47 <= ticks <= 51

        run(scenario())

    def test_catches_up_after_a_blocked_loop(self):
        """A late wake-up jumps straight to the count the clock implies."""
        import time

        async def scenario():
            engine = ClockEngine(Counter())
            engine.start()
            await asyncio.sleep(0.015)
            time.sleep(0.2)  # starve the loop
            await asyncio.sleep(0.015)
            ticks = engine.ticks
            engine.stop()
            assert ticks >= 20

        run(scenario())


class TestRefreshSource:
    def test_refreshes_every_period(self):
        async def scenario():
            refreshes = Counter()
            engine = ClockEngine(refreshes)
            engine.start()
            await asyncio.sleep(0.55)
            engine.stop()
            assert 4 <= refreshes.n <= 6

        run(scenario())

    def test_refresh_can_sample_ticks(self):
        async def scenario():
            samples = []
            engine: ClockEngine
            engine = ClockEngine(lambda: samples.append(engine.ticks))
            engine.start()
            await asyncio.sleep(0.35)
            engine.stop()
            assert samples == sorted(samples)
            assert samples[0] >= 8

        run(scenario())
