"""OpenTimelineIO-based frame rate utilities for frame-perfect calculations.

This module provides the rational frame rate used throughout slideshow
planning. Seconds/frames conversions go through OTIO's RationalTime so the
arithmetic matches what the rest of the timeline tooling sees.
"""

from fractions import Fraction
from typing import NamedTuple

from opentimelineio.opentime import RationalTime

from ..utils.timing import (
    DEFAULT_TICKS_PER_SECOND,
    InvalidInputError,
    round_half_up,
)


class FrameRateInfo(NamedTuple):
    """Frame rate as an exact rational number of frames per second.

    Uses Fraction for exact representation, avoiding floating-point
    precision issues with rates like 29.97fps (30000/1001).
    """

    numerator: int
    denominator: int = 1

    @property
    def rate(self) -> Fraction:
        """Get the exact frame rate as a Fraction."""
        return Fraction(self.numerator, self.denominator)

    @property
    def rate_float(self) -> float:
        """Get the frame rate as a float."""
        return float(self.rate)

    @property
    def ntsc(self) -> bool:
        return self.denominator == 1001

    def to_rational_time(self, seconds: float) -> RationalTime:
        """Convert seconds to RationalTime at this frame rate."""
        return RationalTime.from_seconds(seconds, self.rate_float)

    def frames_from_seconds(self, seconds: float) -> int:
        """Convert seconds to a whole frame count, rounding halves up."""
        rt = self.to_rational_time(seconds)
        return round_half_up(rt.value)

    def seconds_from_frames(self, frames: int) -> float:
        """Convert frame count to frame-aligned seconds."""
        rt = RationalTime(frames, self.rate_float)
        return rt.to_seconds()

    def ticks_per_frame(self, ticks_per_second: int = DEFAULT_TICKS_PER_SECOND) -> int:
        """Host ticks in one frame at this rate (nearest whole tick)."""
        return round_half_up(Fraction(ticks_per_second) / self.rate)

    def label(self) -> str:
        if self.denominator == 1:
            return f"{self.numerator}fps"
        return f"{self.rate_float:.3f}fps"

    @classmethod
    def coerce(cls, value: "FrameRateInfo | Fraction | float | int") -> "FrameRateInfo":
        """Build a FrameRateInfo without changing the value (floats are kept exactly)."""
        if isinstance(value, FrameRateInfo):
            rate = value.rate
        else:
            try:
                rate = Fraction(value)
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(f"Invalid frame rate: {value!r}") from exc
        if rate <= 0:
            raise InvalidInputError(f"Frame rate must be positive, got {value!r}")
        return cls(numerator=rate.numerator, denominator=rate.denominator)

    @classmethod
    def from_fps(cls, fps: float) -> "FrameRateInfo":
        """Create FrameRateInfo from an approximate FPS value (e.g. a UI dropdown)."""
        if fps <= 0:
            raise InvalidInputError(f"Frame rate must be positive, got {fps!r}")

        # Map common NTSC values to their exact 1001-based fractions
        ntsc_mapping = {
            23.976: 24,
            29.97: 30,
            47.952: 48,
            59.94: 60,
        }

        for target_fps, timebase in ntsc_mapping.items():
            if abs(fps - target_fps) < 0.005:
                return cls(numerator=timebase * 1000, denominator=1001)

        rate = Fraction(fps).limit_denominator(1001)
        return cls(numerator=rate.numerator, denominator=rate.denominator)

    @classmethod
    def from_ticks_per_frame(
        cls,
        ticks_per_frame: int,
        ticks_per_second: int = DEFAULT_TICKS_PER_SECOND,
    ) -> "FrameRateInfo":
        """Derive the exact sequence rate from the host timebase (sequence.timebase)."""
        if ticks_per_frame <= 0 or ticks_per_second <= 0:
            raise InvalidInputError(
                f"Invalid timebase: {ticks_per_frame} ticks/frame at {ticks_per_second} ticks/s"
            )
        rate = Fraction(ticks_per_second, ticks_per_frame)
        return cls(numerator=rate.numerator, denominator=rate.denominator)
