from __future__ import annotations

import re
from pathlib import Path

from ..config import settings
from ..models import ExportBatchResult, ExportJob, ExportPreset, SlideshowRecord
from ..utils.run_log import RunLog
from .export_config_service import ExportConfigService
from .jsx_generator import JsxGenerator
from .manifest_service import ManifestService


class ExportService:
    """Batch export of recorded slideshows through Adobe Media Encoder."""

    SCRIPT_FILENAME = "export_slideshows.jsx"

    @classmethod
    def get_export_dir(cls) -> Path:
        return settings.export_dir

    @classmethod
    def sanitize_slug(cls, value: str) -> str:
        cleaned = re.sub(r"[^a-zA-Z0-9]+", "_", value).strip("_")
        return cleaned.lower() or "slideshow"

    @classmethod
    def build_jobs(
        cls,
        records: list[SlideshowRecord],
        preset: ExportPreset,
        export_dir: Path | None = None,
    ) -> list[ExportJob]:
        """One job per record, with output filenames unique within the batch."""
        export_dir = export_dir or cls.get_export_dir()
        jobs: list[ExportJob] = []
        used: set[str] = set()
        for record in records:
            stem = cls.sanitize_slug(record.name)
            candidate = stem
            suffix = 2
            while candidate in used:
                candidate = f"{stem}_{suffix}"
                suffix += 1
            used.add(candidate)
            jobs.append(
                ExportJob(
                    record_id=record.id,
                    sequence_name=record.sequence_name,
                    output_path=str(export_dir / f"{candidate}{preset.extension}"),
                    preset_path=preset.preset_path,
                )
            )
        return jobs

    @classmethod
    def export_all(
        cls,
        preset_key: str | None = None,
        record_ids: list[str] | None = None,
    ) -> ExportBatchResult:
        """Write the Media Encoder queue script for recorded slideshows."""
        result = ExportBatchResult()
        run_log = RunLog("export")

        records = ManifestService.list_all()
        if record_ids is not None:
            wanted = set(record_ids)
            missing = wanted - {r.id for r in records}
            result.errors.extend(f"Unknown slideshow id: {rid}" for rid in sorted(missing))
            records = [r for r in records if r.id in wanted]
        if not records:
            result.error = "No slideshows found"
            result.failed = len(result.errors)
            return result

        try:
            preset = ExportConfigService.get_preset(preset_key)
        except ValueError as exc:
            result.error = str(exc)
            return result

        if not Path(preset.preset_path).exists():
            run_log.warning(f"Preset file not found locally: {preset.preset_path}")

        jobs = cls.build_jobs(records, preset)
        export_dir = cls.get_export_dir()
        export_dir.mkdir(parents=True, exist_ok=True)
        script_path = export_dir / cls.SCRIPT_FILENAME
        script_path.write_text(JsxGenerator.generate_export_script(jobs), encoding="utf-8")
        run_log.log(f"Export script for {len(jobs)} slideshow(s) written to {script_path}")

        result.success = True
        result.jobs = jobs
        result.queued = len(jobs)
        result.failed = len(result.errors)
        result.script_path = str(script_path)
        return result
