"""Move cooldown gate."""

import time

DEFAULT_COOLDOWN_MS = 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def cooldown_remaining(
    last_move_timestamp: int | None,
    now: int,
    period_ms: int = DEFAULT_COOLDOWN_MS,
) -> int:
    """
    Milliseconds left before another move is accepted.

    Args:
        last_move_timestamp: Epoch ms of the last accepted move, or None
        now: Current epoch ms
        period_ms: Cooldown length

    Returns:
        0 when a move may be made now
    """
    if last_move_timestamp is None:
        return 0
    return max(0, period_ms - (now - last_move_timestamp))


def is_on_cooldown(
    last_move_timestamp: int | None,
    now: int,
    period_ms: int = DEFAULT_COOLDOWN_MS,
) -> bool:
    """Check whether a move at `now` falls inside the cooldown window."""
    return cooldown_remaining(last_move_timestamp, now, period_ms) > 0
