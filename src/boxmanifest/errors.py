"""Error types raised by the manifest pipeline."""

from __future__ import annotations


class BoxManifestError(RuntimeError):
    """Base class for failures that abort a manifest run."""


class DatasetIOError(BoxManifestError):
    """Dataset path missing, unreadable or not listable."""


class ImageDecodeError(BoxManifestError):
    """Image header could not be parsed."""


class ConfigError(BoxManifestError):
    """Settings or label classification file is malformed."""


class ExportError(BoxManifestError):
    """Manifest file could not be created or written."""
