"""Department label classification by minimum edit distance.

Free-text department names are mapped onto a reference vocabulary of
canonical labels. Each raw label is normalized (see
``utils.text_normalization.normalize_label``) and compared with every
normalized vocabulary entry using Levenshtein distance; the closest entry
wins and ties go to the entry listed first.

Labels that are blank or written entirely in capitals ("ECE", "EECS") are
not classified: acronyms are too short for edit distance to mean anything.
They are simply absent from the output mapping.

Cost is O(R x V x L) for R raw labels, V vocabulary entries and label
length L. Fine for a few thousand labels against a few hundred entries;
beyond that, pre-deduplicate the raw labels.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

import pandas as pd
from loguru import logger
from rapidfuzz.distance import Levenshtein

from ..exceptions import FileSystemError, ValidationError
from ..models.classification import ClassifiedLabel, ReferenceVocabulary
from ..utils.text_normalization import is_acronym, is_blank, normalize_label


def _as_vocabulary(vocabulary: ReferenceVocabulary | Iterable[str]) -> ReferenceVocabulary:
    if isinstance(vocabulary, ReferenceVocabulary):
        return vocabulary
    return ReferenceVocabulary.from_labels(vocabulary)


class FuzzyClassifier:
    """Maps raw labels onto a fixed vocabulary. Deterministic and stateless per call."""

    def __init__(self, vocabulary: ReferenceVocabulary | Iterable[str]):
        self.vocabulary = _as_vocabulary(vocabulary)
        if len(self.vocabulary) == 0:
            raise ValidationError(
                "Reference vocabulary is empty",
                component="transformer.label_classifier",
                operation="__init__",
            )
        self._normalized = [(label, normalize_label(label)) for label in self.vocabulary]

    @staticmethod
    def should_classify(label: str | None) -> bool:
        """False for blank labels and all-uppercase acronyms."""
        return not is_blank(label) and not is_acronym(label)

    def best_match(self, raw_label: str) -> ClassifiedLabel:
        """Closest vocabulary entry for a single label."""
        normalized = normalize_label(raw_label)
        best_label, best_distance = self._normalized[0][0], None
        for canonical, candidate in self._normalized:
            distance = Levenshtein.distance(normalized, candidate)
            # Strict comparison keeps the first entry on ties
            if best_distance is None or distance < best_distance:
                best_label, best_distance = canonical, distance
                if distance == 0:
                    break
        return ClassifiedLabel(
            raw_label=raw_label, canonical_label=best_label, distance=best_distance or 0
        )

    def classify_detailed(self, raw_labels: Iterable[str | None]) -> list[ClassifiedLabel]:
        """One ClassifiedLabel per distinct classifiable raw label, in first-seen order."""
        results = []
        seen: set[str] = set()
        for raw in raw_labels:
            if not isinstance(raw, str) or not self.should_classify(raw) or raw in seen:
                continue
            seen.add(raw)
            results.append(self.best_match(raw))
        return results

    def classify(self, raw_labels: Iterable[str | None]) -> dict[str, str]:
        """Mapping from raw label to canonical label. Filtered labels are absent."""
        mapping = {c.raw_label: c.canonical_label for c in self.classify_detailed(raw_labels)}
        logger.debug(f"Classified {len(mapping)} labels against {len(self.vocabulary)} entries")
        return mapping


def classify(
    raw_labels: Iterable[str | None], vocabulary: ReferenceVocabulary | Iterable[str]
) -> dict[str, str]:
    """Functional shortcut for ``FuzzyClassifier(vocabulary).classify(raw_labels)``."""
    return FuzzyClassifier(vocabulary).classify(raw_labels)


def _read_delimited(path: Path) -> pd.DataFrame:
    with open(path, encoding="utf-8", newline="") as f:
        sample = f.read(4096)
    try:
        sep = csv.Sniffer().sniff(sample, delimiters=",\t;|").delimiter
    except csv.Error:
        # Single-column files give the sniffer nothing to find
        sep = ","
    return pd.read_csv(path, sep=sep, dtype=str)


def load_reference_vocabulary(
    path: str | Path, column: str | None = None
) -> ReferenceVocabulary:
    """Read canonical labels from a delimited file.

    The delimiter is sniffed, so comma, tab and semicolon files all load. The
    canonical labels come from ``column``, or the first column when unset.

    Raises:
        FileSystemError: File missing or unreadable
        ValidationError: Unknown column or no usable labels
    """
    path = Path(path)
    try:
        df = _read_delimited(path)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FileSystemError(
            f"Failed to read vocabulary file: {e}",
            file_path=str(path),
            operation="load_reference_vocabulary",
            cause=e,
        ) from e

    if column is None:
        column = df.columns[0]
    elif column not in df.columns:
        raise ValidationError(
            f"Vocabulary column '{column}' not found in {path.name}",
            component="transformer.label_classifier",
            operation="load_reference_vocabulary",
            details={"columns": list(df.columns)},
        )

    vocabulary = ReferenceVocabulary.from_labels(df[column].dropna().tolist())
    if len(vocabulary) == 0:
        raise ValidationError(
            f"Vocabulary file {path.name} has no labels in column '{column}'",
            component="transformer.label_classifier",
            operation="load_reference_vocabulary",
        )
    logger.info(f"Loaded {len(vocabulary)} vocabulary labels from {path}")
    return vocabulary
