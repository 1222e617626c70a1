"""Aggregations over a transaction list.

Every function here is a pure reducer over the sequence it is given and
returns freshly built results. Empty inputs produce zero-valued or empty
outputs, and a rate with a zero denominator is reported as ``0``.
"""
from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from payment_analytics.models import Currency, DeclineCode, Processor, Transaction
from payment_analytics.schemas import (
    AuthorizationMetrics,
    DeclineCodeAnalysis,
    DimensionAggregate,
    GroupByDimension,
    ProcessorPerformance,
    SummaryMetrics,
    TimeGranularity,
    TimeSeriesDataPoint,
)
from payment_analytics.services.declines import classify_decline

_ZERO = Decimal("0")
_SUNDAY = 6


def _rate(approved: int, total: int) -> float:
    return approved / total * 100 if total > 0 else 0.0


def _sum_amounts(transactions: Sequence[Transaction]) -> Decimal:
    return sum((transaction.amount for transaction in transactions), _ZERO)


def get_authorization_rate(transactions: Sequence[Transaction]) -> AuthorizationMetrics:
    """Count approvals and declines and split revenue between them."""

    approved = [transaction for transaction in transactions if transaction.is_approved]
    declined = [transaction for transaction in transactions if transaction.is_declined]
    total = len(transactions)

    return AuthorizationMetrics(
        total=total,
        approved=len(approved),
        declined=total - len(approved),
        authorization_rate=_rate(len(approved), total),
        total_revenue=_sum_amounts(approved),
        lost_revenue=_sum_amounts(declined),
    )


def get_lost_revenue(transactions: Sequence[Transaction]) -> Decimal:
    """Return the summed amount of declined transactions."""

    return _sum_amounts([transaction for transaction in transactions if transaction.is_declined])


def get_decline_impact(transactions: Sequence[Transaction]) -> list[DeclineCodeAnalysis]:
    """Rank decline codes by frequency with a running Pareto percentage.

    Codes with equal counts keep the order in which they first appear in
    ``transactions``.
    """

    declined = [
        transaction
        for transaction in transactions
        if transaction.is_declined and transaction.decline_code is not None
    ]
    if not declined:
        return []

    grouped: dict[DeclineCode, list[Transaction]] = {}
    for transaction in declined:
        grouped.setdefault(transaction.decline_code, []).append(transaction)

    ranked = sorted(grouped.items(), key=lambda item: len(item[1]), reverse=True)

    analysis: list[DeclineCodeAnalysis] = []
    cumulative = 0.0
    for code, group in ranked:
        count = len(group)
        lost_revenue = _sum_amounts(group)
        percentage = count / len(declined) * 100
        cumulative += percentage
        analysis.append(
            DeclineCodeAnalysis(
                code=code,
                type=classify_decline(code),
                count=count,
                percentage=percentage,
                lost_revenue=lost_revenue,
                average_amount=lost_revenue / count,
                cumulative_percentage=cumulative,
            )
        )
    return analysis


def group_by_dimension(
    transactions: Sequence[Transaction], dimension: GroupByDimension | str
) -> list[DimensionAggregate]:
    """Aggregate transactions per value of ``dimension``, largest groups first.

    Transactions whose value for the dimension is ``None`` are skipped, and
    ``total_amount`` only counts approved amounts.
    """

    field = GroupByDimension(dimension).value
    grouped: dict[str, list[Transaction]] = {}
    for transaction in transactions:
        value = getattr(transaction, field)
        if value is None:
            continue
        grouped.setdefault(value.value, []).append(transaction)

    aggregates: list[DimensionAggregate] = []
    for value, group in grouped.items():
        approved = [transaction for transaction in group if transaction.is_approved]
        declined = sum(1 for transaction in group if transaction.is_declined)
        aggregates.append(
            DimensionAggregate(
                dimension=value,
                approved=len(approved),
                declined=declined,
                total=len(group),
                authorization_rate=_rate(len(approved), len(group)),
                total_amount=_sum_amounts(approved),
            )
        )
    aggregates.sort(key=lambda aggregate: aggregate.total, reverse=True)
    return aggregates


def bucket_start(
    moment: datetime, granularity: TimeGranularity | str, *, week_starts_on: int = _SUNDAY
) -> date:
    """Truncate ``moment`` (in UTC) to the first day of its bucket."""

    granularity = TimeGranularity(granularity)
    day = moment.astimezone(timezone.utc).date()
    if granularity is TimeGranularity.WEEK:
        return day - timedelta(days=(day.weekday() - week_starts_on) % 7)
    if granularity is TimeGranularity.MONTH:
        return day.replace(day=1)
    return day


def group_by_time(
    transactions: Sequence[Transaction],
    granularity: TimeGranularity | str = TimeGranularity.DAY,
    *,
    week_starts_on: int = _SUNDAY,
) -> list[TimeSeriesDataPoint]:
    """Bucket transactions by day, week or month in chronological order."""

    granularity = TimeGranularity(granularity)
    grouped: dict[date, list[Transaction]] = {}
    for transaction in transactions:
        key = bucket_start(transaction.timestamp, granularity, week_starts_on=week_starts_on)
        grouped.setdefault(key, []).append(transaction)

    points: list[TimeSeriesDataPoint] = []
    for day in sorted(grouped):
        group = grouped[day]
        approved = sum(1 for transaction in group if transaction.is_approved)
        points.append(
            TimeSeriesDataPoint(
                date=day.isoformat(),
                timestamp=calendar.timegm(day.timetuple()) * 1000,
                approved=approved,
                declined=sum(1 for transaction in group if transaction.is_declined),
                total=len(group),
                authorization_rate=_rate(approved, len(group)),
            )
        )
    return points


def rank_processors(transactions: Sequence[Transaction]) -> list[ProcessorPerformance]:
    """Rank processors by authorization rate; higher volume wins a tie."""

    aggregates = group_by_dimension(transactions, GroupByDimension.PROCESSOR)
    ordered = sorted(
        aggregates,
        key=lambda aggregate: (aggregate.authorization_rate, aggregate.total),
        reverse=True,
    )
    return [
        ProcessorPerformance(**aggregate.model_dump(), rank=position)
        for position, aggregate in enumerate(ordered, start=1)
    ]


def detect_currency(transactions: Sequence[Transaction]) -> Currency | None:
    """Return the shared currency of ``transactions``, or ``None`` when mixed or empty."""

    currencies = {transaction.currency for transaction in transactions}
    if len(currencies) == 1:
        return currencies.pop()
    return None


def get_summary_metrics(transactions: Sequence[Transaction]) -> SummaryMetrics:
    metrics = get_authorization_rate(transactions)
    impact = get_decline_impact(transactions)
    ranking = rank_processors(transactions)

    gross = metrics.total_revenue + metrics.lost_revenue
    average = gross / metrics.total if metrics.total else _ZERO

    return SummaryMetrics(
        total_transactions=metrics.total,
        approved_transactions=metrics.approved,
        declined_transactions=metrics.declined,
        authorization_rate=metrics.authorization_rate,
        total_revenue=metrics.total_revenue,
        lost_revenue=metrics.lost_revenue,
        average_transaction_amount=average,
        top_decline_code=impact[0].code if impact else None,
        worst_processor=Processor(ranking[-1].dimension) if ranking else None,
        currency=detect_currency(transactions),
    )


__all__ = [
    "bucket_start",
    "detect_currency",
    "get_authorization_rate",
    "get_decline_impact",
    "get_lost_revenue",
    "get_summary_metrics",
    "group_by_dimension",
    "group_by_time",
    "rank_processors",
]
