from pathlib import Path
from threading import Lock

from ..config import settings
from ..models import SlideshowManifest, SlideshowRecord


class ManifestService:
    """Service for the record of created slideshows."""

    _lock = Lock()

    @staticmethod
    def get_manifest_file() -> Path:
        """Get the manifest.json file path."""
        return settings.manifest_path

    @classmethod
    def load(cls) -> SlideshowManifest:
        """Load the manifest from disk (empty if missing)."""
        manifest_file = cls.get_manifest_file()
        if not manifest_file.exists():
            return SlideshowManifest()
        return SlideshowManifest.model_validate_json(manifest_file.read_text(encoding="utf-8"))

    @classmethod
    def save(cls, manifest: SlideshowManifest) -> None:
        """Save the manifest to disk."""
        manifest_file = cls.get_manifest_file()
        manifest_file.parent.mkdir(parents=True, exist_ok=True)
        manifest_file.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def add(cls, record: SlideshowRecord) -> SlideshowRecord:
        """Record a slideshow, replacing any earlier one with the same name."""
        with cls._lock:
            manifest = cls.load()
            manifest.slideshows = [s for s in manifest.slideshows if s.name != record.name]
            manifest.slideshows.append(record)
            cls.save(manifest)
        return record

    @classmethod
    def list_all(cls) -> list[SlideshowRecord]:
        """List all slideshows, newest first."""
        return sorted(cls.load().slideshows, key=lambda s: s.created_at, reverse=True)

    @classmethod
    def get(cls, record_id: str) -> SlideshowRecord | None:
        return next((s for s in cls.load().slideshows if s.id == record_id), None)

    @classmethod
    def remove(cls, record_id: str) -> bool:
        """Remove a slideshow record."""
        with cls._lock:
            manifest = cls.load()
            remaining = [s for s in manifest.slideshows if s.id != record_id]
            if len(remaining) == len(manifest.slideshows):
                return False
            manifest.slideshows = remaining
            cls.save(manifest)
        return True
