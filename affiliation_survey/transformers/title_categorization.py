"""Role title categorization.

Free-text job titles ("Assoc. Prof. of Chemistry", "Postdoctoral Fellow",
"PhD candidate") are bucketed into ``TitleCategory`` values by an ordered
rule list evaluated first-match-wins over the lower-cased title. Order
matters: "assistant professor" must be tested before "professor".

Callers may pass their own rule list; the module default is ``TITLE_RULES``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

import pandas as pd

from ..models.classification import TitleCategory
from ..utils.text_normalization import collapse, is_blank


TitlePredicate = Callable[[str], bool]
TitleRule = tuple[TitlePredicate, TitleCategory]


def matches(pattern: str) -> TitlePredicate:
    """Predicate that searches ``pattern`` in the collapsed title."""
    regex = re.compile(pattern)
    return lambda title: bool(regex.search(title))


TITLE_RULES: list[TitleRule] = [
    (matches(r"\b(post ?doc|postdoctoral)"), TitleCategory.POSTDOC),
    (matches(r"\b(phd|doctoral|graduate|undergraduate|master s?|msc|student|candidate)\b"),
     TitleCategory.STUDENT),
    (matches(r"\bassoc(iate)? prof"), TitleCategory.ASSOCIATE_PROFESSOR),
    (matches(r"\bassist(ant)? prof"), TitleCategory.ASSISTANT_PROFESSOR),
    (matches(r"\bprof(essor)?\b"), TitleCategory.PROFESSOR),
    (matches(r"\b(lecturer|instructor|teaching fellow|reader)\b"), TitleCategory.LECTURER),
    (matches(r"\b(research(er)?|scientist|investigator|fellow)\b"), TitleCategory.RESEARCHER),
    (matches(r"\b(manager|administrator|coordinator|technician|officer|director|staff|engineer)\b"),
     TitleCategory.STAFF),
]


def categorize_title(
    title: str | None, rules: Sequence[TitleRule] | None = None
) -> TitleCategory:
    """Category of the first rule matching ``title``; OTHER when none does.

    Examples:
        >>> categorize_title("Assoc. Prof. of Chemistry")
        <TitleCategory.ASSOCIATE_PROFESSOR: 'associate_professor'>
        >>> categorize_title(None)
        <TitleCategory.OTHER: 'other'>
    """
    if not isinstance(title, str) or is_blank(title):
        return TitleCategory.OTHER
    text = collapse(title)
    for predicate, category in rules if rules is not None else TITLE_RULES:
        if predicate(text):
            return category
    return TitleCategory.OTHER


def categorize_titles(
    titles: pd.Series, rules: Sequence[TitleRule] | None = None
) -> pd.Series:
    """Vectorized-by-map categorization; returns category values as strings."""
    return titles.map(lambda t: categorize_title(t, rules).value)
