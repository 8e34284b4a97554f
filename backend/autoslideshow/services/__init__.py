from .otio_timing import FrameRateInfo
from .duration_allocator import DurationAllocator, ExactnessViolation
from .timeline_host import TimelineHost, InMemoryTimeline
from .timeline_placer import TimelinePlacer
from .folder_scanner import FolderScanner, AudioProbe, natural_sort_key
from .manifest_service import ManifestService
from ..models import ExportPreset
from .export_config_service import ExportConfigService
from .jsx_generator import JsxGenerator
from .slideshow_service import SlideshowService, GeneratedScript
from .export_service import ExportService

__all__ = [
    "FrameRateInfo",
    "DurationAllocator", "ExactnessViolation",
    "TimelineHost", "InMemoryTimeline", "TimelinePlacer",
    "FolderScanner", "AudioProbe", "natural_sort_key",
    "ManifestService",
    "ExportConfigService", "ExportPreset",
    "JsxGenerator",
    "SlideshowService", "GeneratedScript",
    "ExportService",
]
