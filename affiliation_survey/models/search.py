"""Pydantic models for search queries and result pages."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import ValidationError


class Query(BaseModel):
    """A query string in the registry's Solr grammar. Immutable."""

    text: str = Field(..., description="Query text, passed through verbatim")

    model_config = ConfigDict(frozen=True)

    @field_validator("text", mode="before")
    @classmethod
    def _non_blank(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(
                "Query text must be a non-blank string",
                component="models.search",
                operation="Query",
                details={"text": value},
            )
        return value

    def __str__(self) -> str:
        return self.text


def _quote(value: str) -> str:
    value = str(value).strip()
    if " " in value and not (value.startswith('"') and value.endswith('"')):
        return f'"{value}"'
    return value


def build_query(
    field_terms: Mapping[str, Sequence[str]] | None = None,
    free_text: Sequence[str] | None = None,
) -> Query:
    """Join field-scoped and free-text terms with boolean OR.

    Examples:
        >>> str(build_query({"affiliation-org-name": ["Example University"]}, ["EXU"]))
        'affiliation-org-name:"Example University" OR EXU'
    """
    terms: list[str] = []
    for field_name, values in (field_terms or {}).items():
        for value in values:
            if value and str(value).strip():
                terms.append(f"{field_name}:{_quote(value)}")
    for value in free_text or []:
        if value and str(value).strip():
            terms.append(_quote(value))
    if not terms:
        raise ValidationError(
            "Query needs at least one non-blank term",
            component="models.search",
            operation="build_query",
        )
    return Query(text=" OR ".join(terms))


class SearchResult(BaseModel):
    """One matched record.

    ``total_found`` belongs to the query, not the row; it is repeated on every
    row for convenience.
    """

    identifier: str
    total_found: int = Field(..., ge=0)


class SearchPage(BaseModel):
    """A single page returned by the search endpoint."""

    rows: list[SearchResult] = Field(default_factory=list)
    found: int = Field(..., ge=0)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=1, ge=1)

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        # Allows ``rows, found = client.search(...)``
        yield self.rows
        yield self.found

    @property
    def identifiers(self) -> list[str]:
        return [row.identifier for row in self.rows]
