"""Diff models: comparison options and the divergence summary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DiffOptions(BaseModel):
    """Which divergence categories make a comparison fail."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    missing_row: bool = Field(
        default=True,
        description="Fail when a source row has no counterpart in the target.",
    )
    surplus_row: bool = Field(
        default=True,
        description="Fail when the target has rows the source does not.",
    )
    missing_col: bool = Field(
        default=True,
        description="Fail when a source column is absent from the target.",
    )
    surplus_col: bool = Field(
        default=False,
        description="Fail when the target has columns the source does not.",
    )
    misplaced_col: bool = Field(
        default=False,
        description="Fail when shared columns appear in a different order.",
    )


class DivergenceReport(BaseModel):
    """Categories of divergence detected while aligning two tables."""

    missing_row: bool = False
    surplus_row: bool = False
    missing_col: bool = False
    surplus_col: bool = False
    misplaced_col: bool = False

    def enabled_by(self, options: DiffOptions) -> list[str]:
        """Return the detected categories that *options* turn into failures, sorted."""
        return sorted(
            name
            for name in DivergenceReport.model_fields
            if getattr(self, name) and getattr(options, name)
        )

    def is_failure(self, options: DiffOptions) -> bool:
        return bool(self.enabled_by(options))
