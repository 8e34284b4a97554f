"""Frame-based duration allocation for slideshow images.

Distributes a voiceover's length across N images in whole frames. The sum of
the returned frame counts always equals the rounded total frame count, so the
images end exactly where the voiceover ends: no drift, no gaps, no overlaps.
"""

from __future__ import annotations

import random

from ..models import DurationPlan
from ..utils.timing import InsufficientFramesError, InvalidInputError, round_half_up
from .otio_timing import FrameRateInfo


class ExactnessViolation(AssertionError):
    """The produced plan does not sum to the expected frame total."""


class DurationAllocator:
    """Computes per-image frame counts with bounded pseudo-random variation.

    Randomness comes from an injected ``random.Random`` so a seeded instance
    reproduces the same plan.
    """

    # Minimum on-screen time per image, in seconds (never below one frame)
    MIN_SECONDS = 0.5

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def allocate(
        self,
        total_duration_seconds: float,
        image_count: int,
        max_variation_seconds: float,
        frame_rate: FrameRateInfo | float,
    ) -> DurationPlan:
        """Split ``total_duration_seconds`` into ``image_count`` frame counts.

        Args:
            total_duration_seconds: Length to fill (voiceover duration)
            image_count: Number of images to distribute time across
            max_variation_seconds: Maximum deviation from the even split (e.g. 2 for ±2s)
            frame_rate: Sequence frame rate (30, 29.97, 30000/1001, ...)

        Returns:
            DurationPlan whose frame_counts sum to round(total * rate)

        Raises:
            InvalidInputError: non-positive duration/rate, image_count < 1,
                negative variation
            InsufficientFramesError: fewer frames than images
        """
        if image_count < 1:
            raise InvalidInputError(f"image_count must be at least 1, got {image_count}")
        if total_duration_seconds <= 0:
            raise InvalidInputError(
                f"total_duration_seconds must be positive, got {total_duration_seconds}"
            )
        if max_variation_seconds < 0:
            raise InvalidInputError(
                f"max_variation_seconds cannot be negative, got {max_variation_seconds}"
            )
        rate = FrameRateInfo.coerce(frame_rate)
        fps = rate.rate_float

        total_frames = round_half_up(total_duration_seconds * fps)
        if total_frames < image_count:
            raise InsufficientFramesError(
                f"{total_duration_seconds:.3f}s at {rate.label()} is {total_frames} frame(s), "
                f"not enough for {image_count} image(s)"
            )

        base_frames = total_frames // image_count
        extra_frames = total_frames - base_frames * image_count

        frame_counts = [base_frames] * image_count
        for e in range(extra_frames):
            frame_counts[e] += 1

        max_var_frames = round_half_up(max_variation_seconds * fps)
        min_frames = max(round_half_up(fps * self.MIN_SECONDS), 1)
        safe_max_var_frames = max(min(max_var_frames, base_frames - min_frames), 0)

        if safe_max_var_frames > 0 and image_count > 1:
            frame_counts = self._apply_variation(
                frame_counts, total_frames, base_frames, safe_max_var_frames
            )

        if sum(frame_counts) != total_frames:
            raise ExactnessViolation(
                f"Plan sums to {sum(frame_counts)} frames, expected {total_frames}"
            )

        return DurationPlan(
            frame_counts=frame_counts,
            total_frames=total_frames,
            base_frames=base_frames,
            extra_frames=extra_frames,
            min_frames=min_frames,
            safe_max_variation_frames=safe_max_var_frames,
            frame_rate=fps,
        )

    def _apply_variation(
        self,
        frame_counts: list[int],
        total_frames: int,
        base_frames: int,
        spread: int,
    ) -> list[int]:
        image_count = len(frame_counts)
        offsets = [self.rng.randint(-spread, spread) for _ in range(image_count)]

        # Zero-center the perturbation around the even split
        adjustment = round_half_up(sum(offsets) / image_count)

        # Clamp both ways, not just at 1, so no slot but the last leaves
        # base ± spread after centering. What the clamp trims goes to the
        # last slot with the rest of the residual.
        low = max(base_frames - spread, 1)
        high = base_frames + spread
        counts = []
        for slot, offset in zip(frame_counts, offsets):
            counts.append(min(max(slot + offset - adjustment, low), high))

        # The last slot absorbs all drift from rounding and clamping
        counts[-1] += total_frames - sum(counts)

        if counts[-1] < 1:
            # Pull the shortfall back from earlier slots, latest first,
            # without taking any of them outside the variation bound.
            deficit = 1 - counts[-1]
            counts[-1] = 1
            for i in range(image_count - 2, -1, -1):
                if deficit == 0:
                    break
                take = min(counts[i] - low, deficit)
                counts[i] -= take
                deficit -= take

        return counts
