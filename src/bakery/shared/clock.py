"""Wall clock read by command handlers.

Handlers take "now" from here and hand it to the aggregates, so every
timestamp written during one command agrees. Tests pin it with ``set_clock``.
"""

from datetime import UTC, datetime


def utcnow():
    return datetime.now(UTC)


_clock = utcnow


def now():
    return _clock()


def set_clock(clock=None):
    """Replace the clock; ``None`` restores the system clock."""
    global _clock
    _clock = clock or utcnow
