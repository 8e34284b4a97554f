from pathlib import Path

import pytest

from autoslideshow.services import AudioProbe, FolderScanner, natural_sort_key
from autoslideshow.utils.timing import InvalidInputError

from .conftest import make_project_folder, write_silent_wav


def test_natural_sort_key():
    names = ["img10.png", "img2.png", "img1.png", "cover.png", "img02.png"]
    assert sorted(names, key=natural_sort_key) == [
        "cover.png",
        "img1.png",
        "img2.png",
        "img02.png",
        "img10.png",
    ]


@pytest.mark.parametrize(
    "path, expected",
    [("/a/b/Trip", "Trip"), ("/a/b/Trip/", "Trip"), ("C:\\Users\\me\\Trip", "Trip"), ("/", "Slideshow")],
)
def test_folder_name(path, expected):
    assert FolderScanner.folder_name(path) == expected


def test_preview_lists_media_in_natural_order(tmp_path):
    folder = make_project_folder(
        tmp_path / "Trip",
        image_names=["10.jpg", "2.png", "1.JPEG", "notes.txt"],
        with_srt=True,
    )
    info = FolderScanner.preview(folder)

    assert info.valid
    assert info.folder_name == "Trip"
    assert info.voice_name == "voice.wav"
    assert [Path(p).name for p in info.image_paths] == ["1.JPEG", "2.png", "10.jpg"]
    assert info.image_count == 3
    assert info.srt_name == "captions.srt"


def test_preview_without_subtitles(tmp_path):
    info = FolderScanner.preview(make_project_folder(tmp_path / "Trip"))
    assert info.valid
    assert info.srt_path is None


@pytest.mark.parametrize(
    "subdirs, message",
    [
        ([], "Missing both 'images' and 'voiceovers' folders"),
        (["voiceovers"], "Missing 'images' folder"),
        (["images"], "Missing 'voiceovers' folder"),
    ],
)
def test_missing_folders(tmp_path, subdirs, message):
    for name in subdirs:
        (tmp_path / name).mkdir()
    info = FolderScanner.preview(tmp_path)
    assert not info.valid
    assert info.error == message


def test_missing_voice(tmp_path):
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "1.png").write_bytes(b"")
    (tmp_path / "voiceovers").mkdir()
    info = FolderScanner.preview(tmp_path)
    assert info.error == "No audio file found in 'voiceovers' folder"


def test_missing_images(tmp_path):
    folder = make_project_folder(tmp_path / "Trip", image_names=[])
    info = FolderScanner.preview(folder)
    assert info.error == "No image files found in 'images' folder"


def test_bins_for():
    bins = FolderScanner.bins_for("/x/Trip")
    assert (bins.root, bins.project, bins.images) == ("Auto Slideshow", "Trip", "Images")


def test_audio_probe_reads_wav(tmp_path):
    path = write_silent_wav(tmp_path / "voice.wav", 3.25)
    assert AudioProbe.duration_seconds(path) == pytest.approx(3.25, abs=0.001)


@pytest.mark.parametrize("content", [b"not audio at all", b""])
def test_audio_probe_rejects_unreadable_voice(tmp_path, content):
    path = tmp_path / "voice.wav"
    path.write_bytes(content)
    with pytest.raises(InvalidInputError, match="could not be read"):
        AudioProbe.duration_seconds(path)


def test_audio_probe_rejects_silent_length(tmp_path):
    path = write_silent_wav(tmp_path / "empty.wav", 0)
    with pytest.raises(InvalidInputError):
        AudioProbe.duration_seconds(path)
