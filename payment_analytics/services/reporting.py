"""Formatted dashboard summary built from a filtered view."""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from payment_analytics.core.config import Settings, get_settings
from payment_analytics.models import Currency, Transaction
from payment_analytics.schemas import (
    AuthorizationMetrics,
    CardVariant,
    DashboardReport,
    DeclineCodeAnalysis,
    DeclineTableRow,
    SummaryCard,
)
from payment_analytics.services.analytics import (
    get_authorization_rate,
    get_decline_impact,
    group_by_time,
)
from payment_analytics.services.formatters import (
    format_currency,
    format_percentage,
    get_decline_description,
)


def authorization_variant(rate: float) -> CardVariant:
    if rate > 90:
        return CardVariant.SUCCESS
    if rate >= 80:
        return CardVariant.WARNING
    return CardVariant.ERROR


def primary_decline_currency(
    transactions: Sequence[Transaction], default: Currency = Currency.MXN
) -> Currency:
    """Most common currency among declined transactions, ``default`` if there are none."""

    counts = Counter(transaction.currency for transaction in transactions if transaction.is_declined)
    if not counts:
        return default
    return counts.most_common(1)[0][0]


def build_summary_cards(
    transactions: Sequence[Transaction],
    settings: Settings | None = None,
    *,
    metrics: AuthorizationMetrics | None = None,
    impact: list[DeclineCodeAnalysis] | None = None,
) -> list[SummaryCard]:
    """Return the four headline cards: volume, authorization rate, lost revenue, top decline."""

    settings = settings or get_settings()
    metrics = metrics or get_authorization_rate(transactions)
    impact = get_decline_impact(transactions) if impact is None else impact
    currency = primary_decline_currency(transactions, settings.default_currency)

    top = impact[0] if impact else None
    if top is None:
        top_card = SummaryCard(
            title="Top Decline Code",
            value="No Declines",
            subtitle="No declined transactions in filtered data",
        )
    else:
        plural = "" if top.count == 1 else "s"
        top_card = SummaryCard(
            title="Top Decline Code",
            value=get_decline_description(top.code),
            subtitle=f"{top.count:,} transaction{plural}",
            variant=CardVariant.WARNING,
        )

    return [
        SummaryCard(
            title="Total Transactions",
            value=f"{metrics.total:,}",
            subtitle=f"{metrics.approved:,} approved, {metrics.declined:,} declined",
        ),
        SummaryCard(
            title="Authorization Rate",
            value=format_percentage(metrics.authorization_rate, settings.percentage_decimals),
            subtitle="Percentage of approved transactions",
            variant=authorization_variant(metrics.authorization_rate),
        ),
        SummaryCard(
            title="Total Lost Revenue",
            value=format_currency(metrics.lost_revenue, currency),
            subtitle="Sum of all declined transactions",
            variant=CardVariant.ERROR,
        ),
        top_card,
    ]


def build_dashboard_report(
    transactions: Sequence[Transaction], settings: Settings | None = None
) -> DashboardReport:
    settings = settings or get_settings()
    impact = get_decline_impact(transactions)
    currency = primary_decline_currency(transactions, settings.default_currency)
    decimals = settings.percentage_decimals

    rows = [
        DeclineTableRow(
            code=row.code.value,
            description=get_decline_description(row.code),
            type=row.type.value,
            count=row.count,
            percentage=format_percentage(row.percentage, decimals),
            lost_revenue=format_currency(row.lost_revenue, currency),
            cumulative_percentage=format_percentage(row.cumulative_percentage, decimals),
        )
        for row in impact
    ]
    declined = [transaction for transaction in transactions if transaction.is_declined]

    return DashboardReport(
        cards=build_summary_cards(transactions, settings, impact=impact),
        declines=rows,
        decline_trend=group_by_time(
            declined, settings.trend_granularity, week_starts_on=settings.week_starts_on
        ),
    )


__all__ = [
    "authorization_variant",
    "build_dashboard_report",
    "build_summary_cards",
    "primary_decline_currency",
]
