"""CSV manifest export for object detection training."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from boxmanifest.datasets.bbox import DEFAULT_COVERAGE_PERCENT, calculate_bounding_box
from boxmanifest.errors import ExportError
from boxmanifest.labels.schema import LabelClassification
from boxmanifest.types import Detection


logger = logging.getLogger(__name__)

MANIFEST_HEADER = ("filename", "width", "height", "class", "xmin", "ymin", "xmax", "ymax")


@dataclass(frozen=True)
class ExportReport:
    output_path: Path
    rows_written: int
    skipped_rows: int
    skipped_labels: list[str] = field(default_factory=list)
    unique_labels: list[str] = field(default_factory=list)


def relative_filename(detection: Detection) -> str:
    """Path under the scan root, e.g. ``t-80/a.jpg``.

    Name bytes that are not valid UTF-8 are rendered as U+FFFD.
    """
    name = (Path(detection.raw_label) / detection.path.name).as_posix()
    return os.fsencode(name).decode("utf-8", errors="replace")


def unique_raw_labels(detections: Sequence[Detection]) -> list[str]:
    """Distinct raw labels in first-seen order."""
    return list(dict.fromkeys(d.raw_label for d in detections))


def manifest_row(detection: Detection, class_name: str, coverage_percent: int) -> list[str]:
    box = calculate_bounding_box(detection.width, detection.height, coverage_percent)
    return [
        relative_filename(detection),
        str(detection.width),
        str(detection.height),
        class_name,
        *(str(v) for v in box.as_tuple()),
    ]


def export_manifest(
    detections: Sequence[Detection],
    classification: LabelClassification,
    output_path: str | Path,
    coverage_percent: int = DEFAULT_COVERAGE_PERCENT,
) -> ExportReport:
    """Write classified detections to a CSV manifest.

    Detections whose raw label has no configured class are left out of the file and
    reported back in ``ExportReport.skipped_labels``.
    """
    if not 0 <= coverage_percent <= 100:
        raise ValueError(f"coverage_percent must be in [0, 100], got {coverage_percent}")

    path = Path(output_path)
    rows_written = 0
    skipped: dict[str, int] = {}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(MANIFEST_HEADER)
            for detection in detections:
                class_name = classification.classify(detection.raw_label)
                if class_name is None:
                    if detection.raw_label not in skipped:
                        logger.info("Skipping unclassified label: %s", detection.raw_label)
                    skipped[detection.raw_label] = skipped.get(detection.raw_label, 0) + 1
                    continue
                writer.writerow(manifest_row(detection, class_name, coverage_percent))
                rows_written += 1
    except (OSError, UnicodeError) as exc:
        raise ExportError(f"Could not write manifest {path}: {exc}") from exc

    return ExportReport(
        output_path=path,
        rows_written=rows_written,
        skipped_rows=sum(skipped.values()),
        skipped_labels=sorted(skipped),
        unique_labels=sorted(unique_raw_labels(detections)),
    )
