"""Slideshow creation workflow.

Ties folder scanning, duration allocation, placement and gap fixing together,
either against a TimelineHost or by rendering a Premiere Pro script.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path

from ..config import settings
from ..models import CreateSlideshowResult, PreviewInfo, SlideshowPlan, SlideshowRecord
from ..utils.run_log import RunLog
from ..utils.timing import InvalidInputError
from .duration_allocator import DurationAllocator
from .folder_scanner import AudioProbe, FolderScanner
from .jsx_generator import JsxGenerator
from .manifest_service import ManifestService
from .otio_timing import FrameRateInfo
from .timeline_host import TimelineHost
from .timeline_placer import TimelinePlacer


@dataclass
class GeneratedScript:
    plan: SlideshowPlan
    script_path: Path
    log_path: Path
    record: SlideshowRecord
    log: list[str]


class SlideshowService:
    """Service for planning and creating slideshows."""

    SCRIPT_FILENAME = "create_slideshow.jsx"
    LOG_FILENAME = "run_log.txt"

    @staticmethod
    def resolve_frame_rate(
        frame_rate: float | None = None,
        ticks_per_frame: int | None = None,
    ) -> FrameRateInfo:
        """Sequence timebase wins; otherwise the requested rate; otherwise the default."""
        if ticks_per_frame:
            return FrameRateInfo.from_ticks_per_frame(ticks_per_frame, settings.ticks_per_second)
        return FrameRateInfo.from_fps(frame_rate or settings.default_fps)

    @classmethod
    def get_output_dir(cls, folder_name: str) -> Path:
        return settings.output_dir / folder_name

    @classmethod
    def build_plan(
        cls,
        folder_path: str | Path,
        *,
        max_variation: float | None = None,
        frame_rate: float | FrameRateInfo | None = None,
        ticks_per_frame: int | None = None,
        voice_duration: float | None = None,
        rng: random.Random | None = None,
        run_log: RunLog | None = None,
        preview: PreviewInfo | None = None,
    ) -> SlideshowPlan:
        """Scan a folder and compute frame counts and placements.

        Pass ``preview`` when the folder has already been scanned.

        Raises:
            ValueError: the folder is not a valid slideshow project, or the
                numbers cannot produce a plan (InvalidInputError)
        """
        if run_log is None:
            run_log = RunLog(FolderScanner.folder_name(folder_path))
        if max_variation is None:
            max_variation = settings.default_max_variation

        preview = preview or FolderScanner.preview(folder_path)
        if not preview.valid:
            raise ValueError(preview.error or "Invalid slideshow folder")
        run_log.log(f"Folder {preview.folder_name}: {preview.image_count} image(s), voice {preview.voice_name}")

        if isinstance(frame_rate, FrameRateInfo):
            rate = frame_rate
        else:
            rate = cls.resolve_frame_rate(frame_rate, ticks_per_frame)
        tpf = ticks_per_frame or rate.ticks_per_frame(settings.ticks_per_second)

        if voice_duration is None:
            voice_duration = AudioProbe.duration_seconds(preview.voice_path)
        if voice_duration <= 0:
            raise InvalidInputError("Voice file has no duration or could not be read.")
        run_log.log(f"Voice duration {voice_duration:.3f}s at {rate.label()} ({tpf} ticks/frame)")

        allocation = DurationAllocator(rng).allocate(
            voice_duration, preview.image_count, max_variation, rate
        )
        run_log.log(
            f"Allocated {allocation.total_frames} frames: base {allocation.base_frames}, "
            f"extra {allocation.extra_frames}, variation ±{allocation.safe_max_variation_frames} frames"
        )

        placement = TimelinePlacer(settings.ticks_per_second).place(allocation, tpf, rate)
        if placement.end_tick != allocation.total_frames * tpf:
            run_log.warning(
                f"Placement ends at tick {placement.end_tick}, expected {allocation.total_frames * tpf}"
            )

        return SlideshowPlan(
            preview=preview,
            bins=FolderScanner.bins_for(folder_path),
            sequence_name=preview.folder_name,
            voice_duration=voice_duration,
            max_variation=max_variation,
            frame_rate=rate.rate_float,
            frame_rate_label=rate.label(),
            ticks_per_frame=tpf,
            ticks_per_second=settings.ticks_per_second,
            duration_plan=allocation,
            placement=placement,
        )

    @classmethod
    def create_on_host(
        cls,
        folder_path: str | Path,
        host: TimelineHost,
        *,
        max_variation: float | None = None,
        preferred_frame_rate: float | None = None,
        voice_duration: float | None = None,
        rng: random.Random | None = None,
    ) -> CreateSlideshowResult:
        """Build a slideshow in the host's sequence.

        Voice goes on A1 at 0, images alternate V1/V2 at frame-aligned
        positions, then the gap-fix pass runs over the observed clips.
        Problems are reported in the result rather than raised.
        """
        folder_name = FolderScanner.folder_name(folder_path)
        run_log = RunLog(folder_name)
        result = CreateSlideshowResult()

        try:
            if host.video_track_count < settings.min_video_tracks:
                result.error = "Sequence needs at least 2 video tracks. Please add another video track."
                return result

            rate: FrameRateInfo
            if host.ticks_per_frame:
                rate = FrameRateInfo.from_ticks_per_frame(host.ticks_per_frame, settings.ticks_per_second)
            else:
                rate = FrameRateInfo.from_fps(preferred_frame_rate or settings.default_fps)
                run_log.warning(f"Sequence frame rate unavailable, using {rate.label()}")

            preview = FolderScanner.preview(folder_path)
            if not preview.valid:
                result.error = preview.error
                return result

            bins = FolderScanner.bins_for(folder_path)
            host.import_files(preview.image_paths, [bins.root, bins.project, bins.images])
            if host.media_duration(preview.voice_path) is None:
                host.import_files([preview.voice_path], [bins.root, bins.project, bins.voiceovers])

            if voice_duration is None:
                voice_duration = host.media_duration(preview.voice_path)
            if voice_duration is None:
                voice_duration = AudioProbe.duration_seconds(preview.voice_path)

            plan = cls.build_plan(
                folder_path,
                max_variation=max_variation,
                frame_rate=rate,
                ticks_per_frame=host.ticks_per_frame,
                voice_duration=voice_duration,
                rng=rng,
                run_log=run_log,
                preview=preview,
            )

            host.place_audio(0, preview.voice_path, 0.0)
            for placement in plan.placement.placements:
                host.overwrite_clip(
                    placement.track_parity,
                    preview.image_paths[placement.index],
                    placement.position_seconds,
                    placement.duration_seconds,
                )
            run_log.log(f"Placed {len(plan.placement.placements)} image(s) on V1/V2")

            gap_result = TimelinePlacer(settings.ticks_per_second).fix_timeline(
                host, (0, 1), run_log
            )

            if preview.srt_path:
                host.import_files([preview.srt_path], [bins.root, bins.project, bins.captions])
                result.has_captions = host.create_caption_track(preview.srt_path)
                if result.has_captions:
                    run_log.log(f"Caption track created from {preview.srt_name}")

            record = ManifestService.add(
                SlideshowRecord(
                    name=folder_name,
                    folder_path=str(folder_path),
                    sequence_name=host.sequence_name,
                    image_count=preview.image_count,
                    voice_duration=voice_duration,
                    frame_rate=plan.frame_rate,
                    frame_counts=plan.duration_plan.frame_counts,
                    has_captions=result.has_captions,
                )
            )

            result.success = True
            result.voice_duration = voice_duration
            result.image_count = preview.image_count
            result.seconds_per_image = plan.seconds_per_image
            result.frame_rate = plan.frame_rate
            result.frame_counts = plan.duration_plan.frame_counts
            result.gaps_closed = gap_result.fixed_count
            result.overlaps = gap_result.overlap_count
            result.record_id = record.id
        except (ValueError, IndexError, KeyError, OSError) as exc:
            run_log.warning(f"Slideshow creation failed: {exc}")
            result.error = f"Error: {exc}"
        finally:
            result.log = run_log.lines

        return result

    @classmethod
    def write_script(
        cls,
        folder_path: str | Path,
        *,
        max_variation: float | None = None,
        frame_rate: float | None = None,
        ticks_per_frame: int | None = None,
        seed: int | None = None,
    ) -> GeneratedScript:
        """Plan a slideshow, write its Premiere Pro script and record it."""
        folder_name = FolderScanner.folder_name(folder_path)
        run_log = RunLog(folder_name)
        rng = random.Random(seed) if seed is not None else None

        plan = cls.build_plan(
            folder_path,
            max_variation=max_variation,
            frame_rate=frame_rate,
            ticks_per_frame=ticks_per_frame,
            rng=rng,
            run_log=run_log,
        )

        output_dir = cls.get_output_dir(folder_name)
        output_dir.mkdir(parents=True, exist_ok=True)
        script_path = output_dir / cls.SCRIPT_FILENAME
        script_path.write_text(JsxGenerator.generate_create_script(plan, settings), encoding="utf-8")
        run_log.log(f"Script written to {script_path}")

        record = ManifestService.add(
            SlideshowRecord(
                name=folder_name,
                folder_path=str(folder_path),
                sequence_name=plan.sequence_name,
                image_count=plan.preview.image_count,
                voice_duration=plan.voice_duration,
                frame_rate=plan.frame_rate,
                frame_counts=plan.duration_plan.frame_counts,
                has_captions=plan.preview.srt_path is not None,
                script_path=str(script_path),
            )
        )
        log_path = run_log.write(output_dir / cls.LOG_FILENAME)

        return GeneratedScript(
            plan=plan,
            script_path=script_path,
            log_path=log_path,
            record=record,
            log=run_log.lines,
        )
