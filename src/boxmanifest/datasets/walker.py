"""Folder-per-class dataset enumeration."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from boxmanifest.config import DEFAULT_EXTENSIONS
from boxmanifest.errors import DatasetIOError


def is_supported_image(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """Whether the file suffix is a supported image extension (case-insensitive)."""
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in {ext.lower().lstrip(".") for ext in extensions}


def list_label_dirs(root: Path) -> list[Path]:
    """List first-level label directories in deterministic order."""
    if not root.exists():
        raise DatasetIOError(f"Dataset root not found: {root}")
    if not root.is_dir():
        raise DatasetIOError(f"Dataset root is not a directory: {root}")
    try:
        return sorted(p for p in root.iterdir() if p.is_dir())
    except OSError as exc:
        raise DatasetIOError(f"Could not list dataset root {root}: {exc}") from exc


def list_image_files(label_dir: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> list[Path]:
    """List supported image files directly inside a label directory."""
    exts = {ext.lower().lstrip(".") for ext in extensions}
    try:
        return sorted(p for p in label_dir.iterdir() if p.is_file() and is_supported_image(p, exts))
    except OSError as exc:
        raise DatasetIOError(f"Could not list label directory {label_dir}: {exc}") from exc
