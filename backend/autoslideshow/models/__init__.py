from .timeline import (
    DurationPlan,
    ClipPlacement,
    PlacementPlan,
    TimelineClip,
    GapFix,
    GapFixResult,
)
from .slideshow import (
    FolderValidation,
    PreviewInfo,
    SlideshowBins,
    SlideshowPlan,
    CreateSlideshowResult,
    SlideshowRecord,
    SlideshowManifest,
)
from .export import (
    ExportPreset,
    ExportConfig,
    ExportJob,
    ExportBatchResult,
)

__all__ = [
    "DurationPlan", "ClipPlacement", "PlacementPlan",
    "TimelineClip", "GapFix", "GapFixResult",
    "FolderValidation", "PreviewInfo", "SlideshowBins", "SlideshowPlan",
    "CreateSlideshowResult", "SlideshowRecord", "SlideshowManifest",
    "ExportPreset", "ExportConfig", "ExportJob", "ExportBatchResult",
]
