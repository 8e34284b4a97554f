import random

import pytest

from autoslideshow.services import (
    FolderScanner,
    InMemoryTimeline,
    ManifestService,
    SlideshowService,
    TimelinePlacer,
)
from autoslideshow.utils.timing import InsufficientFramesError

from .conftest import make_project_folder


def voice_path(folder):
    return str((folder / "voiceovers" / "voice.wav").resolve())


class TestBuildPlan:
    def test_even_plan_from_folder(self, project_folder):
        plan = SlideshowService.build_plan(project_folder, max_variation=0, frame_rate=30)

        assert plan.voice_duration == pytest.approx(10.0)
        assert plan.duration_plan.frame_counts == [75, 75, 75, 75]
        assert plan.ticks_per_frame == 8467200000
        assert plan.placement.end_tick == 300 * 8467200000
        assert plan.sequence_name == "Trip"
        assert plan.seconds_per_image == pytest.approx(2.5)

    def test_timebase_overrides_frame_rate(self, project_folder):
        plan = SlideshowService.build_plan(
            project_folder, max_variation=0, frame_rate=25, ticks_per_frame=8475667200
        )
        assert plan.frame_rate_label == "29.970fps"
        assert plan.duration_plan.total_frames == 300  # 299.7 rounded

    def test_voice_duration_override(self, project_folder):
        plan = SlideshowService.build_plan(
            project_folder, max_variation=0, frame_rate=30, voice_duration=7.05
        )
        assert plan.duration_plan.frame_counts == [53, 53, 53, 53]

    def test_invalid_folder(self, tmp_path):
        with pytest.raises(ValueError, match="Missing both"):
            SlideshowService.build_plan(tmp_path)

    def test_too_many_images(self, tmp_path):
        folder = make_project_folder(
            tmp_path / "Many", image_names=[f"{i}.png" for i in range(20)], voice_seconds=0.2
        )
        with pytest.raises(InsufficientFramesError):
            SlideshowService.build_plan(folder, frame_rate=30)


class TestCreateOnHost:
    def test_creates_gapless_slideshow(self, project_folder):
        host = InMemoryTimeline(
            ticks_per_frame=8475667200,
            audio_durations={voice_path(project_folder): 10.0},
        )
        result = SlideshowService.create_on_host(
            project_folder, host, max_variation=2.0, rng=random.Random(1)
        )

        assert result.success, result.error
        assert result.image_count == 4
        assert sum(result.frame_counts) == 300
        assert result.has_captions
        assert host.captions == [str((project_folder / "subtitles" / "captions.srt").resolve())]
        assert ("Auto Slideshow", "Trip", "Images") in host.bins
        assert host.audio_tracks[0][0].start_tick == 0

        clips = host.list_clips(0) + host.list_clips(1)
        assert len(clips) == 4
        assert TimelinePlacer.close_gaps(clips).fixed_count == 0
        assert any(line.endswith("INFO Placed 4 image(s) on V1/V2") for line in result.log)
        assert any("Allocated 300 frames" in line for line in result.log)

        record = ManifestService.get(result.record_id)
        assert record is not None
        assert record.sequence_name == "Sequence 01"
        assert record.frame_counts == result.frame_counts

    def test_probes_audio_when_host_has_no_duration(self, project_folder):
        result = SlideshowService.create_on_host(project_folder, InMemoryTimeline(), max_variation=0)
        assert result.success
        assert result.frame_counts == [75, 75, 75, 75]

    def test_needs_two_video_tracks(self, project_folder):
        result = SlideshowService.create_on_host(project_folder, InMemoryTimeline(video_track_count=1))
        assert not result.success
        assert result.error == "Sequence needs at least 2 video tracks. Please add another video track."

    def test_unknown_timebase_falls_back(self, project_folder):
        host = InMemoryTimeline(ticks_per_frame=None)
        result = SlideshowService.create_on_host(
            project_folder, host, max_variation=0, preferred_frame_rate=25
        )
        assert result.success
        assert result.frame_rate == 25.0
        assert any("frame rate unavailable" in line for line in result.log)

    def test_bad_folder_is_reported(self, tmp_path):
        result = SlideshowService.create_on_host(tmp_path, InMemoryTimeline())
        assert not result.success
        assert result.error == "Missing both 'images' and 'voiceovers' folders"

    def test_allocation_errors_are_reported(self, tmp_path):
        folder = make_project_folder(
            tmp_path / "Many", image_names=[f"{i}.png" for i in range(20)], voice_seconds=0.2
        )
        result = SlideshowService.create_on_host(folder, InMemoryTimeline())
        assert not result.success
        assert result.error.startswith("Error: ")


class TestWriteScript:
    def test_writes_script_log_and_record(self, project_folder):
        generated = SlideshowService.write_script(project_folder, max_variation=2.0, seed=9)

        assert generated.script_path.name == "create_slideshow.jsx"
        assert generated.script_path.exists()
        assert generated.log_path.read_text(encoding="utf-8")
        script = generated.script_path.read_text(encoding="utf-8")
        assert '"sequenceName": "Trip"' in script
        assert generated.record.script_path == str(generated.script_path)
        assert generated.record.has_captions

    def test_seed_is_reproducible(self, project_folder):
        first = SlideshowService.write_script(project_folder, seed=4)
        second = SlideshowService.write_script(project_folder, seed=4)
        assert first.plan.duration_plan.frame_counts == second.plan.duration_plan.frame_counts

    def test_rewriting_replaces_record(self, project_folder):
        SlideshowService.write_script(project_folder, seed=1)
        SlideshowService.write_script(project_folder, seed=2)
        assert len(ManifestService.list_all()) == 1


class TestCreateOnHostScanning:
    def test_unreadable_voice_is_reported(self, project_folder):
        (project_folder / "voiceovers" / "voice.wav").write_bytes(b"not audio at all")
        result = SlideshowService.create_on_host(project_folder, InMemoryTimeline())
        assert not result.success
        assert result.error == "Error: Voice file has no duration or could not be read."

    def test_folder_is_scanned_once(self, project_folder, monkeypatch):
        scanned = []
        original = FolderScanner.preview

        def counting_preview(folder_path):
            scanned.append(folder_path)
            return original(folder_path)

        monkeypatch.setattr(FolderScanner, "preview", counting_preview)
        result = SlideshowService.create_on_host(project_folder, InMemoryTimeline(), max_variation=0)

        assert result.success
        assert scanned == [project_folder]
