"""Media Encoder presets for batch export.

Read from ``settings.export_config_path``::

    default_preset_key: h264_1080p
    presets:
      h264_1080p:
        display_name: H.264 1080p
        preset_path: /path/to/Match Source - High bitrate.epr
        extension: mp4
"""

from __future__ import annotations

from pathlib import Path
from threading import Lock

import yaml
from pydantic import ValidationError

from ..config import settings
from ..models import ExportConfig, ExportPreset


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err["loc"]) or "config"
        problems.append(f"{where}: {err['msg']}")
    return "; ".join(problems)


class ExportConfigService:
    """Holds the parsed preset file; edits need ``force_reload=True``."""

    _lock = Lock()
    _cached: ExportConfig | None = None

    @staticmethod
    def read(path: Path) -> ExportConfig:
        """Parse one preset file. A missing or empty file has no presets."""
        if not path.is_file():
            return ExportConfig()
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse {path.name}: {exc}") from exc
        if raw is None:
            return ExportConfig()
        if not isinstance(raw, dict):
            raise ValueError(f"{path.name} must hold a mapping at the top level")
        try:
            return ExportConfig.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid export presets in {path.name}: {_describe(exc)}") from exc

    @classmethod
    def get_config(cls, *, force_reload: bool = False) -> ExportConfig:
        with cls._lock:
            if force_reload or cls._cached is None:
                cls._cached = cls.read(settings.export_config_path)
            return cls._cached

    @classmethod
    def get_preset(cls, preset_key: str | None = None) -> ExportPreset:
        return cls.get_config().resolve(preset_key)
