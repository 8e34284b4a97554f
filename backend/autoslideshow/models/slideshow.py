from datetime import datetime
from pydantic import BaseModel, Field
import uuid

from .timeline import DurationPlan, PlacementPlan


class FolderValidation(BaseModel):
    """Result of checking a project folder's subfolders."""

    valid: bool
    folder_exists: bool
    images_exists: bool
    voiceovers_exists: bool
    error: str | None = None


class PreviewInfo(BaseModel):
    """What a project folder contains, before anything is imported."""

    valid: bool = False
    folder_name: str = ""
    voice_name: str | None = None
    voice_path: str | None = None
    image_count: int = 0
    image_paths: list[str] = Field(default_factory=list)
    srt_name: str | None = None
    srt_path: str | None = None
    error: str | None = None


class SlideshowBins(BaseModel):
    """Project bin path segments: Auto Slideshow / <folder> / <bin>."""

    root: str = "Auto Slideshow"
    project: str
    images: str = "Images"
    voiceovers: str = "Voiceovers"
    captions: str = "Captions"


class SlideshowPlan(BaseModel):
    """Everything needed to build a slideshow on a timeline."""

    preview: PreviewInfo
    bins: SlideshowBins
    sequence_name: str
    voice_duration: float
    max_variation: float
    frame_rate: float
    frame_rate_label: str
    ticks_per_frame: int
    ticks_per_second: int
    duration_plan: DurationPlan
    placement: PlacementPlan

    @property
    def seconds_per_image(self) -> float:
        return self.voice_duration / max(self.preview.image_count, 1)


class CreateSlideshowResult(BaseModel):
    """Outcome of creating a slideshow on a timeline host."""

    success: bool = False
    voice_duration: float = 0.0
    image_count: int = 0
    seconds_per_image: float = 0.0
    frame_rate: float = 0.0
    frame_counts: list[int] = Field(default_factory=list)
    has_captions: bool = False
    gaps_closed: int = 0
    overlaps: int = 0
    record_id: str | None = None
    error: str | None = None
    log: list[str] = Field(default_factory=list)


class SlideshowRecord(BaseModel):
    """A slideshow created earlier, kept so it can be exported later."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str
    folder_path: str
    sequence_name: str
    image_count: int
    voice_duration: float
    frame_rate: float
    frame_counts: list[int] = Field(default_factory=list)
    has_captions: bool = False
    script_path: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class SlideshowManifest(BaseModel):
    """All recorded slideshows."""

    version: int = 1
    slideshows: list[SlideshowRecord] = Field(default_factory=list)
