"""Integer time utilities shared by allocation and placement.

All timeline arithmetic is done in whole frames or whole ticks. Seconds only
appear at the edges, when talking to the host or to people.
"""

import math
from fractions import Fraction


# Premiere Pro's internal clock. Consumers receive it through settings or a
# constructor argument so other hosts can use a different resolution.
DEFAULT_TICKS_PER_SECOND = 254016000000


class InvalidInputError(ValueError):
    """Raised when allocation or placement receives nonsensical numbers."""


class InsufficientFramesError(InvalidInputError):
    """Raised when there are fewer frames than images to show."""


def round_half_up(value: float | Fraction) -> int:
    """Round to the nearest integer, halves away from -inf (like JS Math.round)."""
    return math.floor(value + Fraction(1, 2) if isinstance(value, Fraction) else value + 0.5)


def frames_to_ticks(frames: int, ticks_per_frame: int) -> int:
    return frames * ticks_per_frame


def ticks_to_frames(ticks: int, ticks_per_frame: int) -> int:
    """Whole frames contained in a tick count (floor)."""
    return ticks // ticks_per_frame


def ticks_to_seconds(ticks: int, ticks_per_second: int = DEFAULT_TICKS_PER_SECOND) -> float:
    """Convert ticks to seconds (display/logging only, not frame-exact)."""
    return ticks / ticks_per_second


def require_positive_ticks(ticks_per_frame: int, ticks_per_second: int) -> None:
    """Validate a sequence timebase before any tick arithmetic uses it."""
    if ticks_per_second <= 0:
        raise InvalidInputError(f"ticks_per_second must be positive, got {ticks_per_second}")
    if ticks_per_frame <= 0:
        raise InvalidInputError(f"ticks_per_frame must be positive, got {ticks_per_frame}")
    if ticks_per_frame > ticks_per_second:
        raise InvalidInputError(
            f"ticks_per_frame ({ticks_per_frame}) exceeds ticks_per_second ({ticks_per_second})"
        )
