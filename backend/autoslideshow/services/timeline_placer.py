"""Frame-exact timeline placement and post-placement gap closing.

Placement keeps a running cursor in integer ticks and only converts to
seconds per clip, from whole frames, so hundreds of sequential placements do
not accumulate floating-point error. After the host has placed the clips, the
gap-fix pass reads the observed boundaries back and extends each clip to meet
the next one.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..config import settings
from ..models import (
    ClipPlacement,
    DurationPlan,
    GapFix,
    GapFixResult,
    PlacementPlan,
    TimelineClip,
)
from ..utils.run_log import RunLog
from ..utils.timing import (
    InvalidInputError,
    frames_to_ticks,
    require_positive_ticks,
    ticks_to_seconds,
)
from .otio_timing import FrameRateInfo
from .timeline_host import TimelineHost


class TimelinePlacer:
    """Computes tick-exact placements and closes residual gaps."""

    TRACK_COUNT = 2

    def __init__(self, ticks_per_second: int | None = None):
        self.ticks_per_second = ticks_per_second or settings.ticks_per_second

    def place(
        self,
        plan: DurationPlan | Sequence[int],
        ticks_per_frame: int,
        frame_rate: FrameRateInfo | float,
    ) -> PlacementPlan:
        """Compute start tick, duration and track for every image.

        Seconds are derived from whole frames (frames / rate) rather than
        ticks / ticks_per_second, so every value handed to the host is
        frame-aligned.
        """
        require_positive_ticks(ticks_per_frame, self.ticks_per_second)
        rate = FrameRateInfo.coerce(frame_rate)
        frame_counts = plan.frame_counts if isinstance(plan, DurationPlan) else list(plan)

        placements: list[ClipPlacement] = []
        cursor_ticks = 0
        for i, frames in enumerate(frame_counts):
            if frames < 0:
                raise InvalidInputError(f"Negative frame count at index {i}: {frames}")
            clip_ticks = frames_to_ticks(frames, ticks_per_frame)
            placements.append(
                ClipPlacement(
                    index=i,
                    track_parity=i % self.TRACK_COUNT,
                    start_tick=cursor_ticks,
                    duration_frames=frames,
                    duration_ticks=clip_ticks,
                    position_seconds=rate.seconds_from_frames(cursor_ticks // ticks_per_frame),
                    duration_seconds=rate.seconds_from_frames(frames),
                )
            )
            cursor_ticks += clip_ticks

        return PlacementPlan(
            placements=placements,
            ticks_per_frame=ticks_per_frame,
            end_tick=cursor_ticks,
        )

    @staticmethod
    def close_gaps(clips: Iterable[TimelineClip]) -> GapFixResult:
        """Extend each clip's end to the next clip's start when a gap exists.

        Clips from all tracks are merged and sorted by observed start tick.
        Later clips are never shrunk and overlaps are left to the host.
        Running this on its own output produces no fixes.
        """
        ordered = sorted(clips, key=lambda c: (c.start_tick, c.track_index))
        fixed: list[TimelineClip] = []
        fixes: list[GapFix] = []
        overlap_count = 0

        for i, clip in enumerate(ordered):
            if i < len(ordered) - 1:
                next_start = ordered[i + 1].start_tick
                gap = next_start - clip.end_tick
                if gap > 0:
                    fixes.append(
                        GapFix(
                            clip_id=clip.clip_id,
                            track_index=clip.track_index,
                            old_end_tick=clip.end_tick,
                            new_end_tick=next_start,
                        )
                    )
                    clip = clip.model_copy(update={"end_tick": next_start})
                elif gap < 0:
                    overlap_count += 1
            fixed.append(clip)

        return GapFixResult(clips=fixed, fixes=fixes, overlap_count=overlap_count)

    def fix_timeline(
        self,
        host: TimelineHost,
        track_indices: Sequence[int] = (0, 1),
        run_log: RunLog | None = None,
    ) -> GapFixResult:
        """Run the gap-fix pass against clips observed on a host timeline."""
        observed: list[TimelineClip] = []
        for track_index in track_indices:
            observed.extend(host.list_clips(track_index))

        result = self.close_gaps(observed)
        for fix in result.fixes:
            host.extend_clip_end(fix.track_index, fix.clip_id, fix.new_end_tick)
            if run_log is not None:
                run_log.log(
                    f"Gap fix: {fix.clip_id} on V{fix.track_index + 1} extended by "
                    f"{fix.gap_ticks} ticks ({ticks_to_seconds(fix.gap_ticks, self.ticks_per_second):.6f}s)"
                )

        if run_log is not None:
            run_log.log(
                f"Gap fix complete: {result.fixed_count} gap(s) closed, "
                f"{result.overlap_count} overlap(s) left to the host"
            )
        return result
