"""Text normalization utilities for label matching.

Department names in registry profiles are free text: "Dept. of Chemistry",
"Department of Chemistry & Biochemistry", "CHEM". Before edit-distance
matching they are reduced to a comparable form:

- lowercase, punctuation to spaces, whitespace collapsed
- the near-universal "department" / "department of" prefix (and its "dept"
  abbreviation) stripped, since it otherwise dominates the distance
"""

from __future__ import annotations

import re


_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_DEPARTMENT_PREFIX_RE = re.compile(r"^(?:department|dept)(?:\s+of)?(?:\s+|$)")
_ACRONYM_RE = re.compile(r"^[A-Z]+$")


def is_blank(label: str | None) -> bool:
    """True for None, empty or whitespace-only labels."""
    return label is None or not str(label).strip()


def is_acronym(label: str | None) -> bool:
    """True when the label consists entirely of uppercase letters.

    Examples:
        >>> is_acronym("ECE")
        True
        >>> is_acronym("E.C.E.")
        False
        >>> is_acronym("Physics")
        False
    """
    if is_blank(label):
        return False
    return bool(_ACRONYM_RE.match(str(label).strip()))


def collapse(text: str | None) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    if not text:
        return ""
    s = _PUNCTUATION_RE.sub(" ", str(text).lower())
    return _WHITESPACE_RE.sub(" ", s).strip()


def normalize_label(label: str | None, *, strip_department_prefix: bool = True) -> str:
    """Normalize a department label for edit-distance matching.

    Examples:
        >>> normalize_label("Dept. of Computer Science")
        'computer science'
        >>> normalize_label("DEPARTMENT OF  Physics")
        'physics'
        >>> normalize_label("Departmental Studies")
        'departmental studies'
    """
    s = collapse(label)
    if strip_department_prefix:
        s = _DEPARTMENT_PREFIX_RE.sub("", s).strip()
    return s


def normalize_org_name(name: str | None) -> str:
    """Whitespace-trimmed organization name; exact matching stays case-sensitive."""
    if not name:
        return ""
    return _WHITESPACE_RE.sub(" ", str(name)).strip()
