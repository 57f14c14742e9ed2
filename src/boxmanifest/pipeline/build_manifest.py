"""Manifest build orchestration."""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from boxmanifest.config import DEFAULT_EXTENSIONS, AppSettings
from boxmanifest.datasets.bbox import DEFAULT_COVERAGE_PERCENT
from boxmanifest.datasets.extract import extract_detections
from boxmanifest.datasets.manifest import ExportReport, export_manifest
from boxmanifest.labels.io import load_classification
from boxmanifest.labels.schema import LabelClassification


@dataclass(frozen=True)
class BuildSummary:
    root: Path
    output_path: Path
    num_detections: int
    report: ExportReport
    traversal_seconds: float
    export_seconds: float


def build_manifest(
    root: str | Path,
    classification: LabelClassification,
    output_path: str | Path,
    coverage_percent: int = DEFAULT_COVERAGE_PERCENT,
    workers: int | None = None,
    skip_unreadable: bool = False,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> BuildSummary:
    """Extract detections under ``root`` and export them as a CSV manifest.

    Extraction finishes before the output file is opened, so a traversal failure
    never leaves a manifest behind.
    """
    root = Path(root)

    start = time.perf_counter()
    detections = extract_detections(
        root,
        workers=workers,
        skip_unreadable=skip_unreadable,
        extensions=extensions,
    )
    traversal_seconds = time.perf_counter() - start

    export_start = time.perf_counter()
    report = export_manifest(detections, classification, output_path, coverage_percent)
    export_seconds = time.perf_counter() - export_start

    return BuildSummary(
        root=root,
        output_path=report.output_path,
        num_detections=len(detections),
        report=report,
        traversal_seconds=traversal_seconds,
        export_seconds=export_seconds,
    )


def build_manifest_from_settings(settings: AppSettings) -> BuildSummary:
    """Load the label table named in settings and run a build."""
    classification = load_classification(settings.labels.path)
    return build_manifest(
        root=settings.dataset.root,
        classification=classification,
        output_path=settings.export.output_path,
        coverage_percent=settings.export.coverage_percent,
        workers=settings.extraction.workers,
        skip_unreadable=settings.extraction.skip_unreadable,
        extensions=settings.dataset.extensions,
    )


def print_summary(summary: BuildSummary) -> None:
    report = summary.report
    if summary.num_detections == 0:
        print(f"No images found under {summary.root}")
    print(f"Unique labels: {report.unique_labels}")
    print(f"Unique len: {len(report.unique_labels)}")
    if report.skipped_labels:
        print(f"Skipped labels (no class configured): {report.skipped_labels} ({report.skipped_rows} images)")
    print(f"Wrote {report.rows_written} rows to {report.output_path}")
    print(f"Traversal time: {summary.traversal_seconds * 1000:.0f}ms")
    print(f"Export time: {summary.export_seconds * 1000:.0f}ms")
