import os
import tempfile
import wave
from pathlib import Path

import pytest

# Settings are read at import time; point them somewhere disposable first.
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="asc-tests-"))
os.environ.setdefault("ASC_DATA_DIR", str(_SESSION_DIR))
os.environ.setdefault("ASC_OUTPUT_DIR", str(_SESSION_DIR / "output"))
os.environ.setdefault("ASC_EXPORT_DIR", str(_SESSION_DIR / "exports"))
os.environ.setdefault("ASC_MANIFEST_PATH", str(_SESSION_DIR / "manifest.json"))
os.environ.setdefault("ASC_EXPORT_CONFIG_PATH", str(_SESSION_DIR / "export.yaml"))

from autoslideshow.config import settings  # noqa: E402
from autoslideshow.services import ExportConfigService  # noqa: E402


EXPORT_YAML = """\
default_preset_key: h264
presets:
  h264:
    display_name: H.264
    preset_path: /presets/h264.epr
    extension: mp4
  prores:
    display_name: ProRes
    preset_path: /presets/prores.epr
    extension: .MOV
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Fresh output, export and manifest locations for every test."""
    monkeypatch.setattr(settings, "output_dir", tmp_path / "output")
    monkeypatch.setattr(settings, "export_dir", tmp_path / "exports")
    monkeypatch.setattr(settings, "manifest_path", tmp_path / "manifest.json")
    config_path = tmp_path / "export.yaml"
    config_path.write_text(EXPORT_YAML, encoding="utf-8")
    monkeypatch.setattr(settings, "export_config_path", config_path)
    ExportConfigService._cached = None
    yield
    ExportConfigService._cached = None


def write_silent_wav(path: Path, seconds: float, sample_rate: int = 8000) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(b"\x00\x00" * int(seconds * sample_rate))
    return path


def make_project_folder(
    root: Path,
    *,
    image_names: list[str] | None = None,
    voice_seconds: float = 10.0,
    with_srt: bool = False,
) -> Path:
    images = root / "images"
    images.mkdir(parents=True)
    for name in image_names if image_names is not None else ["1.png", "2.png", "3.png", "4.png"]:
        (images / name).write_bytes(b"")
    write_silent_wav(root / "voiceovers" / "voice.wav", voice_seconds)
    if with_srt:
        subtitles = root / "subtitles"
        subtitles.mkdir()
        (subtitles / "captions.srt").write_text(
            "1\n00:00:00,000 --> 00:00:02,000\nHello\n", encoding="utf-8"
        )
    return root


@pytest.fixture
def project_folder(tmp_path) -> Path:
    return make_project_folder(tmp_path / "Trip", with_srt=True)
