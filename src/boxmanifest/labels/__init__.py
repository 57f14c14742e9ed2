"""Raw folder label to training class lookup."""

from boxmanifest.labels.io import load_classification, parse_classification
from boxmanifest.labels.schema import LabelClassification, LabelGroup

__all__ = [
    "LabelClassification",
    "LabelGroup",
    "load_classification",
    "parse_classification",
]
