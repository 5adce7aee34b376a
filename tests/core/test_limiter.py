"""Tests for the move cooldown gate."""

from war.limiter import DEFAULT_COOLDOWN_MS, cooldown_remaining, is_on_cooldown, now_ms


class TestCooldown:
    """Tests for cooldown arithmetic."""

    def test_first_move_never_on_cooldown(self):
        """A game with no accepted move yet is always ready."""
        assert cooldown_remaining(None, 0) == 0
        assert not is_on_cooldown(None, now_ms())

    def test_inside_window(self):
        """Moves inside the window report the time left."""
        assert cooldown_remaining(10_000, 10_400) == DEFAULT_COOLDOWN_MS - 400
        assert is_on_cooldown(10_000, 10_999)

    def test_window_boundary(self):
        """The move exactly one period later is accepted."""
        assert cooldown_remaining(10_000, 11_000) == 0
        assert not is_on_cooldown(10_000, 11_000)

    def test_custom_period(self):
        """Period can be tuned or disabled."""
        assert cooldown_remaining(0, 100, period_ms=250) == 150
        assert not is_on_cooldown(0, 0, period_ms=0)

    def test_clock_skew_backwards(self):
        """A clock behind the stored timestamp waits out the skew as well."""
        assert cooldown_remaining(10_000, 9_500) == 1_500

    def test_now_ms_is_epoch_millis(self):
        """Wall clock is in milliseconds."""
        assert now_ms() > 1_600_000_000_000
