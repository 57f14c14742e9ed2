from __future__ import annotations

import os
from pathlib import Path

import pytest

from boxmanifest.datasets.manifest import export_manifest, relative_filename
from boxmanifest.errors import DatasetIOError, ExportError, ImageDecodeError
from boxmanifest.labels.schema import LabelClassification
from boxmanifest.pipeline.build_manifest import build_manifest
from boxmanifest.types import Detection


HEADER = "filename,width,height,class,xmin,ymin,xmax,ymax"


def det(path: str, width: int, height: int) -> Detection:
    p = Path("/data/images") / path
    return Detection(path=p, width=width, height=height, raw_label=p.parent.name)


def test_relative_filename_is_under_scan_root() -> None:
    assert relative_filename(det("t-80/a.jpg", 1, 1)) == "t-80/a.jpg"


def test_export_writes_classified_rows_and_reports_skips(
    tmp_path: Path, classification: LabelClassification
) -> None:
    detections = [det("t-80/a.jpg", 100, 100), det("unknown/c.bmp", 10, 10), det("btr-70/x.png", 50, 60)]
    out = tmp_path / "tensorflow.csv"

    report = export_manifest(detections, classification, out)

    assert out.read_text(encoding="utf-8").splitlines() == [
        HEADER,
        "t-80/a.jpg,100,100,tank,10,10,90,90",
        "btr-70/x.png,50,60,lav,5,6,45,54",
    ]
    assert report.rows_written == 2
    assert report.skipped_rows == 1
    assert report.skipped_labels == ["unknown"]
    assert report.unique_labels == ["btr-70", "t-80", "unknown"]


def test_export_quotes_filenames_with_commas(tmp_path: Path, classification: LabelClassification) -> None:
    out = tmp_path / "out.csv"
    export_manifest([det("t-80/a,b.jpg", 10, 10)], classification, out, coverage_percent=100)

    assert out.read_text(encoding="utf-8").splitlines()[1] == '"t-80/a,b.jpg",10,10,tank,0,0,10,10'


def test_export_with_no_detections_writes_header_only(tmp_path: Path, classification: LabelClassification) -> None:
    out = tmp_path / "nested" / "out.csv"
    report = export_manifest([], classification, out)

    assert out.read_text(encoding="utf-8") == HEADER + "\n"
    assert report.rows_written == 0
    assert report.unique_labels == []


def test_export_is_byte_identical_across_runs(tmp_path: Path, classification: LabelClassification) -> None:
    detections = [det("t-80/a.jpg", 100, 100), det("t-90/b.png", 31, 17), det("skip/c.bmp", 2, 2)]
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    export_manifest(detections, classification, first)
    export_manifest(detections, classification, second)

    assert first.read_bytes() == second.read_bytes()


def test_export_to_unwritable_path_raises_export_error(tmp_path: Path, classification: LabelClassification) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(ExportError):
        export_manifest([det("t-80/a.jpg", 10, 10)], classification, blocker / "out.csv")


def test_export_rejects_invalid_coverage(tmp_path: Path, classification: LabelClassification) -> None:
    with pytest.raises(ValueError):
        export_manifest([], classification, tmp_path / "out.csv", coverage_percent=120)


def test_build_manifest_end_to_end(
    tmp_path: Path, dataset_root: Path, classification: LabelClassification
) -> None:
    out = tmp_path / "tensorflow.csv"

    summary = build_manifest(dataset_root, classification, out, coverage_percent=80)

    assert out.read_text(encoding="utf-8").splitlines() == [
        HEADER,
        "t-80/a.jpg,100,100,tank,10,10,90,90",
        "t-80/b.png,50,60,tank,5,6,45,54",
    ]
    assert summary.num_detections == 3
    assert summary.report.skipped_labels == ["unknown"]
    assert summary.report.unique_labels == ["t-80", "unknown"]
    assert summary.traversal_seconds >= 0.0
    assert summary.export_seconds >= 0.0


def test_build_manifest_corrupt_image_writes_no_csv(
    tmp_path: Path, dataset_root: Path, classification: LabelClassification
) -> None:
    (dataset_root / "t-90").mkdir()
    (dataset_root / "t-90" / "corrupt.png").write_bytes(b"not a png")
    out = tmp_path / "tensorflow.csv"

    with pytest.raises(ImageDecodeError):
        build_manifest(dataset_root, classification, out)

    assert not out.exists()


def test_build_manifest_lenient_mode_skips_corrupt_image(
    tmp_path: Path, dataset_root: Path, classification: LabelClassification
) -> None:
    (dataset_root / "t-90").mkdir()
    (dataset_root / "t-90" / "corrupt.png").write_bytes(b"not a png")
    out = tmp_path / "tensorflow.csv"

    summary = build_manifest(dataset_root, classification, out, skip_unreadable=True)

    assert summary.report.rows_written == 2
    assert "t-90" not in summary.report.unique_labels


def test_export_renders_undecodable_names_lossily(tmp_path: Path, classification: LabelClassification) -> None:
    name = os.fsdecode(b"\xff.jpg")
    detection = Detection(path=Path("/data/images/t-80") / name, width=10, height=10, raw_label="t-80")
    out = tmp_path / "out.csv"

    report = export_manifest([detection], classification, out, coverage_percent=100)

    assert report.rows_written == 1
    assert out.read_text(encoding="utf-8").splitlines()[1] == "t-80/\ufffd.jpg,10,10,tank,0,0,10,10"


def test_build_manifest_unlistable_label_dir_writes_no_csv(
    tmp_path: Path, dataset_root: Path, classification: LabelClassification, monkeypatch: pytest.MonkeyPatch
) -> None:
    original_iterdir = Path.iterdir

    def iterdir(self: Path):
        if self.name == "t-80":
            raise PermissionError(13, "Permission denied", str(self))
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)
    out = tmp_path / "tensorflow.csv"

    for skip_unreadable in (False, True):
        with pytest.raises(DatasetIOError):
            build_manifest(dataset_root, classification, out, skip_unreadable=skip_unreadable)
        assert not out.exists()
