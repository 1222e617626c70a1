"""Result shapes returned by the aggregation functions."""
from __future__ import annotations

import enum
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from payment_analytics.models import Currency, DeclineCode, DeclineType, Processor


class GroupByDimension(str, enum.Enum):
    COUNTRY = "country"
    PAYMENT_METHOD = "payment_method"
    PROCESSOR = "processor"
    DECLINE_CODE = "decline_code"


class TimeGranularity(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class AuthorizationMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    approved: int
    declined: int
    authorization_rate: float = Field(..., description="Approved share of total, 0-100")
    total_revenue: Decimal = Field(..., description="Sum of approved amounts")
    lost_revenue: Decimal = Field(..., description="Sum of declined amounts")


class DeclineCodeAnalysis(BaseModel):
    """Impact of one decline code, including its Pareto running total."""

    model_config = ConfigDict(frozen=True)

    code: DeclineCode
    type: DeclineType
    count: int
    percentage: float = Field(..., description="Share of all declines, 0-100")
    lost_revenue: Decimal
    average_amount: Decimal
    cumulative_percentage: float


class DimensionAggregate(BaseModel):
    model_config = ConfigDict(frozen=True)

    dimension: str
    approved: int
    declined: int
    total: int
    authorization_rate: float
    total_amount: Decimal = Field(..., description="Sum of approved amounts in the group")


class ProcessorPerformance(DimensionAggregate):
    rank: int = Field(..., ge=1, description="1 is the best performing processor")


class TimeSeriesDataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Bucket start as YYYY-MM-DD")
    timestamp: int = Field(..., description="Bucket start in epoch milliseconds (UTC)")
    approved: int
    declined: int
    total: int
    authorization_rate: float


class SummaryMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_transactions: int
    approved_transactions: int
    declined_transactions: int
    authorization_rate: float
    total_revenue: Decimal
    lost_revenue: Decimal
    average_transaction_amount: Decimal
    top_decline_code: DeclineCode | None = None
    worst_processor: Processor | None = None
    currency: Currency | None = None


__all__ = [
    "AuthorizationMetrics",
    "DeclineCodeAnalysis",
    "DimensionAggregate",
    "GroupByDimension",
    "ProcessorPerformance",
    "SummaryMetrics",
    "TimeGranularity",
    "TimeSeriesDataPoint",
]
