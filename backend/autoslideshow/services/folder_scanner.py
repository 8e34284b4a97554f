"""Project folder scanning for slideshow creation.

A project folder holds:
- images/      the slides, shown in natural filename order (required)
- voiceovers/  the voice track, first audio file found (required)
- subtitles/   an optional .srt caption file
"""

from __future__ import annotations

import re
from pathlib import Path

from pydub import AudioSegment as PydubSegment
from pydub.exceptions import CouldntDecodeError

from ..config import settings
from ..models import FolderValidation, PreviewInfo, SlideshowBins
from ..utils.timing import InvalidInputError

_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> tuple:
    """Sort key so 'img2' comes before 'img10'."""
    parts = _DIGITS_RE.split(name)
    key = []
    for part in parts:
        if part.isdigit():
            key.append((0, int(part), ""))
        else:
            key.append((1, 0, part))
    return (key, len(name))


class FolderScanner:
    """Reads a slideshow project folder."""

    IMAGES_DIR = "images"
    VOICEOVERS_DIR = "voiceovers"
    SUBTITLES_DIR = "subtitles"

    @staticmethod
    def folder_name(folder_path: str | Path) -> str:
        """Last non-empty path segment, for bin and sequence names."""
        parts = [p for p in str(folder_path).replace("\\", "/").split("/") if p]
        return parts[-1] if parts else "Slideshow"

    @classmethod
    def bins_for(cls, folder_path: str | Path) -> SlideshowBins:
        return SlideshowBins(project=cls.folder_name(folder_path))

    @classmethod
    def validate_structure(cls, folder_path: str | Path) -> FolderValidation:
        folder = Path(folder_path)
        images_exists = (folder / cls.IMAGES_DIR).is_dir()
        voiceovers_exists = (folder / cls.VOICEOVERS_DIR).is_dir()

        error = None
        if not images_exists and not voiceovers_exists:
            error = "Missing both 'images' and 'voiceovers' folders"
        elif not images_exists:
            error = "Missing 'images' folder"
        elif not voiceovers_exists:
            error = "Missing 'voiceovers' folder"

        return FolderValidation(
            valid=images_exists and voiceovers_exists,
            folder_exists=folder.is_dir(),
            images_exists=images_exists,
            voiceovers_exists=voiceovers_exists,
            error=error,
        )

    @staticmethod
    def _files_with_extensions(folder: Path, extensions: list[str]) -> list[Path]:
        if not folder.is_dir():
            return []
        allowed = {ext.lower() for ext in extensions}
        return [
            p for p in folder.iterdir()
            if p.is_file() and p.suffix.lower() in allowed
        ]

    @classmethod
    def find_voice_file(cls, folder_path: str | Path) -> Path | None:
        candidates = cls._files_with_extensions(
            Path(folder_path) / cls.VOICEOVERS_DIR, settings.audio_extensions
        )
        candidates.sort(key=lambda p: natural_sort_key(p.name))
        return candidates[0] if candidates else None

    @classmethod
    def find_srt_file(cls, folder_path: str | Path) -> Path | None:
        candidates = cls._files_with_extensions(Path(folder_path) / cls.SUBTITLES_DIR, [".srt"])
        candidates.sort(key=lambda p: natural_sort_key(p.name))
        return candidates[0] if candidates else None

    @classmethod
    def list_images(cls, folder_path: str | Path) -> list[Path]:
        images = cls._files_with_extensions(
            Path(folder_path) / cls.IMAGES_DIR, settings.image_extensions
        )
        images.sort(key=lambda p: natural_sort_key(p.name))
        return images

    @classmethod
    def preview(cls, folder_path: str | Path) -> PreviewInfo:
        """Validate the folder and list its media. Never raises for bad folders."""
        info = PreviewInfo(folder_name=cls.folder_name(folder_path))

        validation = cls.validate_structure(folder_path)
        if not validation.valid:
            info.error = validation.error
            return info

        voice = cls.find_voice_file(folder_path)
        if voice is None:
            info.error = "No audio file found in 'voiceovers' folder"
            return info
        info.voice_name = voice.name
        info.voice_path = str(voice.resolve())

        images = cls.list_images(folder_path)
        if not images:
            info.error = "No image files found in 'images' folder"
            return info
        info.image_count = len(images)
        info.image_paths = [str(p.resolve()) for p in images]

        srt = cls.find_srt_file(folder_path)
        if srt is not None:
            info.srt_name = srt.name
            info.srt_path = str(srt.resolve())

        info.valid = True
        return info


class AudioProbe:
    """Reads voiceover durations."""

    UNREADABLE = "Voice file has no duration or could not be read."

    @classmethod
    def duration_seconds(cls, path: str | Path) -> float:
        """Voiceover length in seconds.

        Raises:
            InvalidInputError: the file cannot be decoded (or ffmpeg is
                missing for a non-WAV file), or it is empty
        """
        try:
            audio = PydubSegment.from_file(str(path))
        except (CouldntDecodeError, OSError, EOFError) as exc:
            raise InvalidInputError(cls.UNREADABLE) from exc
        if len(audio) <= 0:
            raise InvalidInputError(cls.UNREADABLE)
        return len(audio) / 1000.0
