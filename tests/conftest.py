from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from boxmanifest.labels.schema import LabelClassification, LabelGroup


FORMATS = {".jpg": "JPEG", ".jpeg": "JPEG", ".png": "PNG", ".bmp": "BMP"}


def write_image(path: Path, width: int, height: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (width, height), color=(40, 80, 120)).save(path, format=FORMATS[path.suffix.lower()])
    return path


@pytest.fixture
def make_image() -> Callable[[Path, int, int], Path]:
    return write_image


@pytest.fixture
def classification() -> LabelClassification:
    return LabelClassification(
        groups=[
            LabelGroup(class_name="tank", labels=["t-80", "t-90"]),
            LabelGroup(class_name="lav", labels=["btr-70"]),
        ]
    )


@pytest.fixture
def dataset_root(tmp_path: Path) -> Path:
    root = tmp_path / "images"
    write_image(root / "t-80" / "a.jpg", 100, 100)
    write_image(root / "t-80" / "b.png", 50, 60)
    write_image(root / "unknown" / "c.bmp", 10, 10)
    return root
