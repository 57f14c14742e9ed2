"""Project configuration models and YAML loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from boxmanifest.errors import ConfigError


DEFAULT_EXTENSIONS = ("jpg", "jpeg", "png", "bmp")


class DatasetSettings(BaseModel):
    root: str = "images"
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        normalized = [ext.strip().lstrip(".").lower() for ext in value]
        if not all(normalized):
            raise ValueError("extensions cannot be empty strings")
        return normalized


class ExtractionSettings(BaseModel):
    workers: int | None = Field(default=None, ge=1)
    skip_unreadable: bool = False


class ExportSettings(BaseModel):
    output_path: str = "tensorflow.csv"
    coverage_percent: int = Field(default=80, ge=0, le=100)


class LabelSettings(BaseModel):
    path: str = "configs/label_classification.yaml"


class AppSettings(BaseModel):
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    labels: LabelSettings = Field(default_factory=LabelSettings)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_settings(config_path: str | Path | None = None) -> AppSettings:
    """Load YAML configuration into typed app settings."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        return AppSettings()

    try:
        with path.open("r", encoding="utf-8") as f:
            raw: dict[str, Any] = yaml.safe_load(f) or {}
        return AppSettings.model_validate(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse settings file {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc
