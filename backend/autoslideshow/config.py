from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASC_",
        env_file=(PROJECT_ROOT / ".env", BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    # Paths
    data_dir: Path = BACKEND_ROOT / "data"
    output_dir: Path = BACKEND_ROOT / "data" / "output"
    export_dir: Path = BACKEND_ROOT / "data" / "exports"
    manifest_path: Path = BACKEND_ROOT / "data" / "manifest.json"
    export_config_path: Path = PROJECT_ROOT / "config" / "export" / "config.yaml"

    # CORS (CEP panels load from file:// or a local debug port)
    cors_origins: list[str] = ["http://localhost:8088", "http://127.0.0.1:8088"]

    # Host timebase
    ticks_per_second: int = 254016000000  # Premiere Pro timebase constant

    # Slideshow defaults (panel sliders)
    default_max_variation: float = 2.0
    default_fps: float = 30.0
    min_video_tracks: int = 2

    # Host settle delays used by generated scripts (milliseconds)
    import_settle_ms: int = 500
    caption_settle_ms: int = 300

    # Media recognised in a project folder
    image_extensions: list[str] = [".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tiff", ".tif"]
    audio_extensions: list[str] = [".mp3", ".wav", ".aac", ".m4a", ".aiff", ".aif", ".ogg", ".flac"]


settings = Settings()

# Ensure directories exist
settings.output_dir.mkdir(parents=True, exist_ok=True)
settings.export_dir.mkdir(parents=True, exist_ok=True)
