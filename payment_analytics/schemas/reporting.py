"""Display-ready shapes for the dashboard summary."""
from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

from .analytics import TimeSeriesDataPoint


class CardVariant(str, enum.Enum):
    DEFAULT = "default"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class SummaryCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    value: str
    subtitle: str
    variant: CardVariant = CardVariant.DEFAULT


class DeclineTableRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    description: str
    type: str
    count: int
    percentage: str
    lost_revenue: str
    cumulative_percentage: str


class DashboardReport(BaseModel):
    """Formatted snapshot of the filtered view."""

    model_config = ConfigDict(frozen=True)

    cards: list[SummaryCard] = Field(default_factory=list)
    declines: list[DeclineTableRow] = Field(default_factory=list)
    decline_trend: list[TimeSeriesDataPoint] = Field(default_factory=list)


__all__ = ["CardVariant", "DashboardReport", "DeclineTableRow", "SummaryCard"]
