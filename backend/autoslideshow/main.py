import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .api import api_router
from .services import ExportConfigService


# Server logger; RunLog mirrors slideshow runs to the same one.
logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load export presets on startup."""
    try:
        config = ExportConfigService.get_config()
        logger.info(
            "Loaded %d export preset(s) from %s (default=%s)",
            len(config.presets),
            settings.export_config_path,
            config.default_preset_key,
        )
    except ValueError:
        logger.exception("Export preset config is invalid; batch export will fail until fixed")
    logger.info(
        "Slideshow defaults: variation ±%.1fs, fallback %.3ffps, %d ticks/s",
        settings.default_max_variation,
        settings.default_fps,
        settings.ticks_per_second,
    )
    yield


app = FastAPI(
    title="Auto Slideshow Creator",
    description="Plans frame-accurate image slideshows over a voiceover for Premiere Pro",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the panel
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
