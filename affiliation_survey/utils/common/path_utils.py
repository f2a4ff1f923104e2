"""Path manipulation utilities for consistent file system operations."""

from __future__ import annotations

import re
from pathlib import Path


def ensure_parent_dir(path: Path | str) -> None:
    """Ensure parent directory exists for a given path.

    Examples:
        >>> ensure_parent_dir(Path("data/processed/output.csv"))
        # Creates data/processed/ if it doesn't exist
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_dir(path: Path | str) -> None:
    """Ensure directory exists, creating it if necessary."""
    Path(path).mkdir(parents=True, exist_ok=True)


def slugify(value: str, max_length: int = 64) -> str:
    """Turn an arbitrary logical name into a filesystem-safe file stem.

    Examples:
        >>> slugify("Chemistry / Employments 2024")
        'chemistry-employments-2024'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", str(value).lower()).strip("-")
    return slug[:max_length] or "entry"
