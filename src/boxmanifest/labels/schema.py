"""Label classification schema definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LabelGroup(BaseModel):
    """Canonical training class plus the raw folder labels that map to it."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    class_name: str = Field(alias="class", min_length=1)
    description: str = ""
    labels: list[str] = Field(default_factory=list)


class LabelClassification(BaseModel):
    """Ordered label groups. Built once before traversal, read-only afterwards."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    groups: list[LabelGroup] = Field(default_factory=list)

    def classify(self, raw_label: str) -> str | None:
        """Return the class of the first group listing ``raw_label``, else None."""
        for group in self.groups:
            if raw_label in group.labels:
                return group.class_name
        return None

    def duplicate_labels(self) -> dict[str, list[str]]:
        """Raw labels listed by more than one group, mapped to their classes in load order."""
        owners: dict[str, list[str]] = {}
        for group in self.groups:
            for label in dict.fromkeys(group.labels):
                owners.setdefault(label, []).append(group.class_name)
        return {label: classes for label, classes in owners.items() if len(classes) > 1}

    def class_names(self) -> list[str]:
        return list(dict.fromkeys(group.class_name for group in self.groups))
