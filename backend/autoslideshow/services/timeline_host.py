"""Timeline host boundary.

`TimelineHost` is what slideshow creation needs from an editing host: clip
insertion, observing placed clips in ticks, and extending a clip's end.
`InMemoryTimeline` implements it with host-like tick rounding and overwrite
trimming, and backs planning previews and tests.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..models import TimelineClip
from ..utils.timing import DEFAULT_TICKS_PER_SECOND


@runtime_checkable
class TimelineHost(Protocol):
    """Operations the slideshow workflow performs on a sequence."""

    ticks_per_frame: int | None
    video_track_count: int
    sequence_name: str

    def import_files(self, paths: list[str], bin_path: list[str]) -> None: ...

    def media_duration(self, media_path: str) -> float | None: ...

    def overwrite_clip(
        self,
        track_index: int,
        media_path: str,
        position_seconds: float,
        duration_seconds: float,
    ) -> str: ...

    def place_audio(self, track_index: int, media_path: str, position_seconds: float) -> str: ...

    def create_caption_track(self, srt_path: str) -> bool: ...

    def list_clips(self, track_index: int) -> list[TimelineClip]: ...

    def extend_clip_end(self, track_index: int, clip_id: str, end_tick: int) -> None: ...


@dataclass
class _TrackItem:
    clip_id: str
    media_path: str
    start_tick: int
    end_tick: int


@dataclass
class InMemoryTimeline:
    """A sequence held in memory.

    Seconds are converted to ticks by truncation, the way the host does when
    it receives a float position, so frame-aligned seconds can still land a
    tick or two off the frame grid.
    """

    ticks_per_frame: int | None = 8467200000  # 30fps
    video_track_count: int = 2
    audio_track_count: int = 1
    sequence_name: str = "Sequence 01"
    ticks_per_second: int = DEFAULT_TICKS_PER_SECOND
    audio_durations: dict[str, float] = field(default_factory=dict)
    video_tracks: list[list[_TrackItem]] = field(init=False)
    audio_tracks: list[list[_TrackItem]] = field(init=False)
    bins: dict[tuple[str, ...], list[str]] = field(default_factory=dict)
    captions: list[str] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), init=False, repr=False)

    def __post_init__(self) -> None:
        self.video_tracks = [[] for _ in range(self.video_track_count)]
        self.audio_tracks = [[] for _ in range(self.audio_track_count)]

    def _to_ticks(self, seconds: float) -> int:
        return int(seconds * self.ticks_per_second)

    @staticmethod
    def _overwrite(track: list[_TrackItem], item: _TrackItem) -> None:
        """Insert ``item`` and trim whatever it covers, like an overwrite edit."""
        kept: list[_TrackItem] = []
        for existing in track:
            if existing.end_tick <= item.start_tick or existing.start_tick >= item.end_tick:
                kept.append(existing)
                continue
            if existing.start_tick < item.start_tick:
                kept.append(_TrackItem(existing.clip_id, existing.media_path, existing.start_tick, item.start_tick))
            if existing.end_tick > item.end_tick:
                kept.append(
                    _TrackItem(f"{existing.clip_id}b", existing.media_path, item.end_tick, existing.end_tick)
                )
        kept.append(item)
        kept.sort(key=lambda c: c.start_tick)
        track[:] = kept

    def imported(self) -> set[str]:
        return {path for paths in self.bins.values() for path in paths}

    def import_files(self, paths: list[str], bin_path: list[str]) -> None:
        self.bins.setdefault(tuple(bin_path), []).extend(paths)

    def media_duration(self, media_path: str) -> float | None:
        if media_path not in self.imported():
            return None
        return self.audio_durations.get(media_path)

    def overwrite_clip(
        self,
        track_index: int,
        media_path: str,
        position_seconds: float,
        duration_seconds: float,
    ) -> str:
        if track_index >= len(self.video_tracks):
            raise IndexError(f"Sequence has no video track {track_index + 1}")
        start = self._to_ticks(position_seconds)
        end = self._to_ticks(position_seconds + duration_seconds)
        item = _TrackItem(f"v{next(self._ids)}", media_path, start, end)
        self._overwrite(self.video_tracks[track_index], item)
        return item.clip_id

    def place_audio(self, track_index: int, media_path: str, position_seconds: float) -> str:
        duration = self.audio_durations.get(media_path, 0.0)
        start = self._to_ticks(position_seconds)
        item = _TrackItem(f"a{next(self._ids)}", media_path, start, start + self._to_ticks(duration))
        self._overwrite(self.audio_tracks[track_index], item)
        return item.clip_id

    def create_caption_track(self, srt_path: str) -> bool:
        if srt_path not in self.imported():
            return False
        self.captions.append(srt_path)
        return True

    def list_clips(self, track_index: int) -> list[TimelineClip]:
        return [
            TimelineClip(
                clip_id=item.clip_id,
                track_index=track_index,
                start_tick=item.start_tick,
                end_tick=item.end_tick,
                name=Path(item.media_path).name,
            )
            for item in self.video_tracks[track_index]
        ]

    def extend_clip_end(self, track_index: int, clip_id: str, end_tick: int) -> None:
        for item in self.video_tracks[track_index]:
            if item.clip_id == clip_id:
                item.end_tick = end_tick
                return
        raise KeyError(f"No clip {clip_id!r} on video track {track_index}")
