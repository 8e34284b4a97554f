from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ExportPreset(BaseModel):
    """An Adobe Media Encoder preset (.epr) and the container it writes."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    key: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    preset_path: str
    extension: str = ".mp4"

    @field_validator("preset_path")
    @classmethod
    def _must_be_epr(cls, value: str) -> str:
        # AME only accepts encoder presets exported as .epr
        if PurePath(value).suffix.lower() != ".epr":
            raise ValueError(f"preset_path must point to an .epr file, got {value!r}")
        return value

    @field_validator("extension")
    @classmethod
    def _dotted_lowercase(cls, value: str) -> str:
        stem = value.lstrip(".").lower()
        if not stem.isalnum():
            raise ValueError(f"extension must look like 'mp4' or '.mov', got {value!r}")
        return f".{stem}"


class ExportConfig(BaseModel):
    """Contents of config/export/config.yaml."""

    model_config = ConfigDict(frozen=True)

    default_preset_key: str | None = None
    presets: dict[str, ExportPreset] = Field(default_factory=dict)

    @field_validator("default_preset_key")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("presets", mode="before")
    @classmethod
    def _keyed_entries(cls, value):
        """YAML keys become preset keys; display_name defaults to the key."""
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("presets must be a mapping of key -> preset")
        entries = {}
        for key, entry in value.items():
            key = str(key).strip()
            if not isinstance(entry, dict):
                raise ValueError(f"preset '{key}' must be a mapping")
            entries[key] = {"display_name": key, **entry, "key": key}
        return entries

    @model_validator(mode="after")
    def _default_is_a_preset(self) -> "ExportConfig":
        if self.default_preset_key and self.default_preset_key not in self.presets:
            raise ValueError(
                f"default_preset_key '{self.default_preset_key}' does not exist in presets"
            )
        return self

    def resolve(self, preset_key: str | None = None) -> ExportPreset:
        """Preset by key, else the default, else the only preset there is."""
        key = (preset_key or self.default_preset_key or "").strip()
        if not key:
            if len(self.presets) == 1:
                return next(iter(self.presets.values()))
            raise ValueError("No export preset selected and no default_preset_key configured")
        if key not in self.presets:
            raise ValueError(f"Unknown export preset '{key}'")
        return self.presets[key]


class ExportJob(BaseModel):
    """One sequence to queue in Media Encoder."""

    record_id: str
    sequence_name: str
    output_path: str
    preset_path: str


class ExportBatchResult(BaseModel):
    """Outcome of preparing a batch export."""

    success: bool = False
    queued: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)
    jobs: list[ExportJob] = Field(default_factory=list)
    script_path: str | None = None
    error: str | None = None
