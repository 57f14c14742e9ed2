"""Label classification loading helpers."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from boxmanifest.errors import ConfigError
from boxmanifest.labels.schema import LabelClassification


logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
TOML_SUFFIXES = {".toml"}


def parse_classification(raw: dict[str, Any], source: str = "<memory>") -> LabelClassification:
    """Validate a parsed mapping into a classification table."""
    try:
        classification = LabelClassification.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid label classification in {source}: {exc}") from exc

    for label, classes in classification.duplicate_labels().items():
        logger.warning(
            "Raw label %r is listed in several groups %s; %r takes precedence",
            label,
            classes,
            classes[0],
        )
    return classification


def load_classification(path: str | Path) -> LabelClassification:
    """Load a YAML or TOML label classification file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Label classification file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in TOML_SUFFIXES:
            with path.open("rb") as f:
                raw = tomllib.load(f)
        elif suffix in YAML_SUFFIXES:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        else:
            raise ConfigError(f"Unsupported label classification format: {path.suffix or path.name}")
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not parse label classification {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read label classification {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Label classification {path} must be a mapping with a 'groups' list")
    return parse_classification(raw, source=str(path))
