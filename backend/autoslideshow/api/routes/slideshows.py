"""Slideshow routes: folder preview, planning, script generation and export."""

import random
from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel

from ...config import settings
from ...models import ClipPlacement, ExportBatchResult, PreviewInfo, SlideshowRecord
from ...services import (
    AudioProbe,
    ExportService,
    FolderScanner,
    ManifestService,
    SlideshowService,
)
from ...utils.timing import InvalidInputError

router = APIRouter(prefix="/slideshows", tags=["slideshows"])


class FolderRequest(BaseModel):
    folder_path: str


class PlanRequest(BaseModel):
    folder_path: str
    max_variation: float | None = None
    frame_rate: float | None = None
    ticks_per_frame: int | None = None
    seed: int | None = None


class ExportRequest(BaseModel):
    preset_key: str | None = None
    record_ids: list[str] | None = None


class PreviewResponse(BaseModel):
    preview: PreviewInfo
    voice_duration: float
    seconds_per_image: float
    max_variation: float


class PlanResponse(BaseModel):
    folder_name: str
    image_count: int
    voice_duration: float
    seconds_per_image: float
    frame_rate: float
    ticks_per_frame: int
    total_frames: int
    frame_counts: list[int]
    durations: list[float]
    placements: list[ClipPlacement]
    has_captions: bool


class ScriptResponse(BaseModel):
    record: SlideshowRecord
    script_path: str
    log_path: str
    log: list[str]


@router.post("/preview", response_model=PreviewResponse)
async def preview_folder(request: FolderRequest) -> PreviewResponse:
    """Validate a project folder and report what a slideshow would contain."""
    preview = FolderScanner.preview(request.folder_path)
    if not preview.valid:
        raise HTTPException(status_code=400, detail=preview.error)

    try:
        duration = AudioProbe.duration_seconds(preview.voice_path)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return PreviewResponse(
        preview=preview,
        voice_duration=duration,
        seconds_per_image=duration / preview.image_count,
        max_variation=settings.default_max_variation,
    )


@router.post("/plan", response_model=PlanResponse)
async def plan_slideshow(request: PlanRequest) -> PlanResponse:
    """Compute frame counts and placements without writing anything."""
    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        plan = SlideshowService.build_plan(
            request.folder_path,
            max_variation=request.max_variation,
            frame_rate=request.frame_rate,
            ticks_per_frame=request.ticks_per_frame,
            rng=rng,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return PlanResponse(
        folder_name=plan.preview.folder_name,
        image_count=plan.preview.image_count,
        voice_duration=plan.voice_duration,
        seconds_per_image=plan.seconds_per_image,
        frame_rate=plan.frame_rate,
        ticks_per_frame=plan.ticks_per_frame,
        total_frames=plan.duration_plan.total_frames,
        frame_counts=plan.duration_plan.frame_counts,
        durations=plan.duration_plan.durations_seconds(),
        placements=plan.placement.placements,
        has_captions=plan.preview.srt_path is not None,
    )


@router.post("/script", response_model=ScriptResponse)
async def create_slideshow_script(request: PlanRequest) -> ScriptResponse:
    """Write the Premiere Pro script for a slideshow and record it."""
    try:
        generated = SlideshowService.write_script(
            request.folder_path,
            max_variation=request.max_variation,
            frame_rate=request.frame_rate,
            ticks_per_frame=request.ticks_per_frame,
            seed=request.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return ScriptResponse(
        record=generated.record,
        script_path=str(generated.script_path),
        log_path=str(generated.log_path),
        log=generated.log,
    )


@router.get("", response_model=list[SlideshowRecord])
async def list_slideshows() -> list[SlideshowRecord]:
    """List recorded slideshows."""
    return ManifestService.list_all()


@router.get("/{record_id}/script")
async def download_script(record_id: str):
    """Download a recorded slideshow's creation script."""
    record = ManifestService.get(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Slideshow not found")
    if not record.script_path:
        raise HTTPException(status_code=404, detail="Slideshow has no generated script")
    if not Path(record.script_path).is_file():
        raise HTTPException(status_code=404, detail="Script file no longer exists")
    return FileResponse(
        path=record.script_path,
        filename=SlideshowService.SCRIPT_FILENAME,
        media_type="application/javascript",
    )


@router.delete("/{record_id}")
async def delete_slideshow(record_id: str) -> dict:
    """Forget a recorded slideshow."""
    if not ManifestService.remove(record_id):
        raise HTTPException(status_code=404, detail="Slideshow not found")
    return {"status": "deleted"}


@router.post("/export", response_model=ExportBatchResult)
async def export_slideshows(request: ExportRequest) -> ExportBatchResult:
    """Write the Media Encoder batch script for recorded slideshows."""
    return ExportService.export_all(request.preset_key, request.record_ids)
