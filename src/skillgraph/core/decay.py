"""Rustiness classification based on time since the last direct award."""

from __future__ import annotations

from enum import StrEnum

DAY = 86400

# Default thresholds (in seconds)
RUSTY_AFTER = 7 * DAY
VERY_RUSTY_AFTER = 30 * DAY


class Rustiness(StrEnum):
    FRESH = "fresh"
    RUSTY = "rusty"
    VERY_RUSTY = "very_rusty"


def rustiness(
    last_modified: float,
    now: float,
    rusty_after: float = RUSTY_AFTER,
    very_rusty_after: float = VERY_RUSTY_AFTER,
) -> Rustiness:
    """Classify a skill by elapsed seconds since ``last_modified``.

    Args:
        last_modified: Epoch seconds of the last award
        now: Current epoch seconds
        rusty_after: Elapsed seconds beyond which a skill is rusty
        very_rusty_after: Elapsed seconds beyond which a skill is very rusty

    Returns:
        ``VERY_RUSTY`` when elapsed > very_rusty_after, ``RUSTY`` when
        elapsed > rusty_after, otherwise ``FRESH``
    """
    elapsed = now - last_modified
    if elapsed > very_rusty_after:
        return Rustiness.VERY_RUSTY
    if elapsed > rusty_after:
        return Rustiness.RUSTY
    return Rustiness.FRESH
