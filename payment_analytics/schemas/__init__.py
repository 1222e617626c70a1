"""Pydantic schemas package."""

from .analytics import (
    AuthorizationMetrics,
    DeclineCodeAnalysis,
    DimensionAggregate,
    GroupByDimension,
    ProcessorPerformance,
    SummaryMetrics,
    TimeGranularity,
    TimeSeriesDataPoint,
)
from .filters import DateRange, TransactionFilters
from .reporting import CardVariant, DashboardReport, DeclineTableRow, SummaryCard

__all__ = [
    "AuthorizationMetrics",
    "CardVariant",
    "DashboardReport",
    "DateRange",
    "DeclineCodeAnalysis",
    "DeclineTableRow",
    "DimensionAggregate",
    "GroupByDimension",
    "ProcessorPerformance",
    "SummaryCard",
    "SummaryMetrics",
    "TimeGranularity",
    "TimeSeriesDataPoint",
    "TransactionFilters",
]
