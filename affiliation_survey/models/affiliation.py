"""Pydantic models for flattened employment affiliations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EndDate(BaseModel):
    """Fuzzy end date as recorded in a profile; every part may be missing."""

    year: str | None = None
    month: str | None = None
    day: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return self.year is None and self.month is None and self.day is None


class AffiliationRecord(BaseModel):
    """One employment summary of one registry record."""

    identifier: str = Field(..., description="Registry identifier of the person record")
    organization_name: str = Field(..., description="Organization name as recorded")
    department_name: str | None = Field(None, description="Free-text department")
    role_title: str | None = Field(None, description="Free-text role / job title")
    end_date: EndDate | None = Field(None, description="End date, None when absent")

    model_config = ConfigDict(frozen=True)

    @property
    def has_end_date(self) -> bool:
        return self.end_date is not None and not self.end_date.is_empty

    def to_row(self) -> dict[str, Any]:
        """Flat dict for DataFrame construction."""
        end = self.end_date or EndDate()
        return {
            "identifier": self.identifier,
            "organization_name": self.organization_name,
            "department_name": self.department_name,
            "role_title": self.role_title,
            "end_year": end.year,
            "end_month": end.month,
            "end_day": end.day,
        }


AFFILIATION_COLUMNS = [
    "identifier",
    "organization_name",
    "department_name",
    "role_title",
    "end_year",
    "end_month",
    "end_day",
]
