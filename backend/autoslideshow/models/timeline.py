from pydantic import BaseModel, Field


class DurationPlan(BaseModel):
    """Per-image frame counts for one slideshow.

    Invariant: sum(frame_counts) == total_frames.
    """

    frame_counts: list[int] = Field(default_factory=list)
    total_frames: int
    base_frames: int
    extra_frames: int = 0
    min_frames: int = 1
    safe_max_variation_frames: int = 0
    frame_rate: float

    @property
    def image_count(self) -> int:
        return len(self.frame_counts)

    def durations_seconds(self) -> list[float]:
        """Frame-aligned durations in seconds."""
        return [frames / self.frame_rate for frames in self.frame_counts]


class ClipPlacement(BaseModel):
    """Where one image goes on the timeline."""

    index: int
    track_parity: int  # 0 = first video track, 1 = second
    start_tick: int
    duration_frames: int
    duration_ticks: int
    position_seconds: float
    duration_seconds: float

    @property
    def end_tick(self) -> int:
        return self.start_tick + self.duration_ticks


class PlacementPlan(BaseModel):
    """Ordered placements plus the final tick cursor."""

    placements: list[ClipPlacement] = Field(default_factory=list)
    ticks_per_frame: int
    end_tick: int = 0

    @property
    def total_frames(self) -> int:
        return sum(p.duration_frames for p in self.placements)


class TimelineClip(BaseModel):
    """A clip as observed on the timeline after placement."""

    clip_id: str
    track_index: int
    start_tick: int
    end_tick: int
    name: str = ""

    @property
    def duration_ticks(self) -> int:
        return self.end_tick - self.start_tick


class GapFix(BaseModel):
    """One end-extension applied by the gap-fix pass."""

    clip_id: str
    track_index: int
    old_end_tick: int
    new_end_tick: int

    @property
    def gap_ticks(self) -> int:
        return self.new_end_tick - self.old_end_tick


class GapFixResult(BaseModel):
    """Outcome of a gap-fix pass."""

    clips: list[TimelineClip] = Field(default_factory=list)
    fixes: list[GapFix] = Field(default_factory=list)
    overlap_count: int = 0

    @property
    def fixed_count(self) -> int:
        return len(self.fixes)
