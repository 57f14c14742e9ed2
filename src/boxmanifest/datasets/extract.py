"""Parallel detection extraction over label directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path

from boxmanifest.config import DEFAULT_EXTENSIONS
from boxmanifest.datasets.probe import probe_image_size
from boxmanifest.datasets.walker import list_image_files, list_label_dirs
from boxmanifest.errors import DatasetIOError, ImageDecodeError
from boxmanifest.types import Detection


logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    return os.cpu_count() or 1


def extract_label_dir(
    label_dir: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    skip_unreadable: bool = False,
) -> list[Detection]:
    """Probe every supported image in one label directory, sequentially."""
    raw_label = label_dir.name
    if not raw_label:
        raise DatasetIOError(f"Could not resolve label name for {label_dir}")

    detections: list[Detection] = []
    for image_path in list_image_files(label_dir, extensions):
        try:
            width, height = probe_image_size(image_path)
        except (ImageDecodeError, DatasetIOError) as exc:
            if not skip_unreadable:
                raise
            logger.warning("Skipping unreadable image %s: %s", image_path, exc)
            continue
        detections.append(
            Detection(path=image_path, width=width, height=height, raw_label=raw_label)
        )
    return detections


def extract_detections(
    root: str | Path,
    *,
    workers: int | None = None,
    skip_unreadable: bool = False,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[Detection]:
    """Extract one detection per supported image under ``root/<raw_label>/``.

    Each label directory is one unit of work on a bounded thread pool. Results are
    joined after all units finish and concatenated in label directory order, so the
    output is stable for a fixed filesystem snapshot.

    Strict by default: the first listing or decode failure cancels pending units and
    propagates, discarding partial results. With ``skip_unreadable`` an image whose
    header cannot be read is logged and left out instead.
    """
    label_dirs = list_label_dirs(Path(root))
    if not label_dirs:
        return []

    exts = tuple(extensions)
    max_workers = min(workers or default_worker_count(), len(label_dirs))
    logger.debug("Extracting %d label directories with %d workers", len(label_dirs), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="extract") as executor:
        futures: list[Future[list[Detection]]] = [
            executor.submit(extract_label_dir, label_dir, exts, skip_unreadable)
            for label_dir in label_dirs
        ]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()
        errors = [future.exception() for future in futures if future in done]
        first_error = next((exc for exc in errors if exc is not None), None)
        if first_error is not None:
            raise first_error

    return [detection for future in futures for detection in future.result()]
