"""Classification and aggregation of flattened affiliations."""

from .aggregation import apply_department_mapping, summarize_by
from .label_classifier import FuzzyClassifier, classify, load_reference_vocabulary
from .title_categorization import TITLE_RULES, categorize_title, categorize_titles


__all__ = [
    "FuzzyClassifier",
    "TITLE_RULES",
    "apply_department_mapping",
    "categorize_title",
    "categorize_titles",
    "classify",
    "load_reference_vocabulary",
    "summarize_by",
]
