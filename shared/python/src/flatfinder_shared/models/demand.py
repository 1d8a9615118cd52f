"""
models/demand.py — Pydantic model for per-category applicant statistics.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from flatfinder_shared.models.parsing import parse_count


class DemandRecord(BaseModel):
    """
    Applicant statistics for one (area, unit type) category of a sale exercise.

    Demand is reported per category, not per unit, so it joins to
    UnitRecords on the normalized (area, unit type) key.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    sale_exercise: str | None = Field(
        default=None, validation_alias=AliasChoices("sale_exercise", "sbfCode")
    )
    area: str | None = Field(default=None, validation_alias=AliasChoices("area", "Town"))
    unit_type: str | None = Field(
        default=None, validation_alias=AliasChoices("unit_type", "Flat Type")
    )
    applicants: int = Field(
        default=0, validation_alias=AliasChoices("applicants", "Number of Applicants")
    )
    units_offered: int = Field(
        default=0, validation_alias=AliasChoices("units_offered", "Number of Units")
    )
    first_timer_families: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "first_timer_families", "Estimated Applicants - First-Timer Families"
        ),
    )
    first_timer_singles: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "first_timer_singles", "Estimated Applicants - First-Timer Singles"
        ),
    )
    second_timer_families: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "second_timer_families", "Estimated Applicants - Second-Timer Families"
        ),
    )
    seniors: int = Field(
        default=0,
        validation_alias=AliasChoices("seniors", "Estimated Applicants - Seniors"),
    )

    @field_validator(
        "applicants",
        "units_offered",
        "first_timer_families",
        "first_timer_singles",
        "second_timer_families",
        "seniors",
        mode="before",
    )
    @classmethod
    def lenient_count(cls, v: Any) -> int:
        # Estimates arrive as fractions, blanks or placeholders
        return parse_count(v)
