"""Tests for the 60Hz countdown timers."""

from chip8vm import Timer

TICK = 1.0 / 60


class TestTimer:
    """Test arming, counting down and cancellation."""

    def test_counts_down_to_zero(self, fake_loop):
        timer = Timer(fake_loop)
        timer.set(10)

        for expected in range(9, -1, -1):
            fake_loop.advance(TICK)
            assert timer.value == expected

        assert not timer.active
        fake_loop.advance(5 * TICK)
        assert timer.value == 0
        assert fake_loop.pending == 0

    def test_set_while_running_is_noop(self, fake_loop):
        timer = Timer(fake_loop)
        timer.set(5)
        fake_loop.advance(2 * TICK)
        assert timer.value == 3

        timer.set(5)

        assert timer.value == 3
        assert fake_loop.pending == 1

    def test_rearm_after_expiry(self, fake_loop):
        timer = Timer(fake_loop)
        timer.set(1)
        fake_loop.advance(TICK)
        assert timer.value == 0

        timer.set(2)
        assert timer.value == 2
        assert timer.active

    def test_set_zero_schedules_nothing(self, fake_loop):
        timer = Timer(fake_loop)
        timer.set(0)

        assert timer.value == 0
        assert not timer.active
        assert fake_loop.pending == 0

    def test_cancel_stops_chain(self, fake_loop):
        timer = Timer(fake_loop)
        timer.set(4)
        fake_loop.advance(TICK)

        timer.cancel()
        fake_loop.advance(10 * TICK)

        assert timer.value == 3
        assert not timer.active

    def test_context_manager_cancels(self, fake_loop):
        with Timer(fake_loop) as timer:
            timer.set(8)
        assert fake_loop.pending == 0

    def test_custom_period(self, fake_loop):
        timer = Timer(fake_loop, period=0.5)
        timer.set(2)

        fake_loop.advance(0.25)
        assert timer.value == 2
        fake_loop.advance(0.25)
        assert timer.value == 1
