"""Models for label classification."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReferenceVocabulary(BaseModel):
    """Ordered, immutable set of canonical labels."""

    labels: tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_labels(cls, labels: Iterable[str | None]) -> ReferenceVocabulary:
        """Build from any iterable; blanks dropped, duplicates keep first position."""
        seen: set[str] = set()
        ordered: list[str] = []
        for label in labels:
            if label is None:
                continue
            cleaned = str(label).strip()
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            ordered.append(cleaned)
        return cls(labels=tuple(ordered))

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    def __contains__(self, label: object) -> bool:
        return label in self.labels


class ClassifiedLabel(BaseModel):
    """A raw label and the canonical label it was mapped to."""

    raw_label: str
    canonical_label: str
    distance: int = Field(..., ge=0)


class TitleCategory(str, Enum):
    """Coarse role categories for free-text job titles."""

    PROFESSOR = "professor"
    ASSOCIATE_PROFESSOR = "associate_professor"
    ASSISTANT_PROFESSOR = "assistant_professor"
    LECTURER = "lecturer"
    POSTDOC = "postdoc"
    RESEARCHER = "researcher"
    STUDENT = "student"
    STAFF = "staff"
    OTHER = "other"
