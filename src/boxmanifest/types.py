from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Detection:
    path: Path
    width: int
    height: int
    raw_label: str  # parent directory name


@dataclass(frozen=True)
class BoundingBox:
    xmin: int
    ymin: int
    xmax: int
    ymax: int

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)
