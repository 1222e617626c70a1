"""Authorization and decline analytics over in-memory payment transactions."""

from payment_analytics.services.analytics import (
    detect_currency,
    get_authorization_rate,
    get_decline_impact,
    get_lost_revenue,
    get_summary_metrics,
    group_by_dimension,
    group_by_time,
    rank_processors,
)
from payment_analytics.services.declines import classify_decline
from payment_analytics.services.filter_store import FilterStore, get_filter_store
from payment_analytics.services.filtering import filter_transactions

__all__ = [
    "FilterStore",
    "classify_decline",
    "detect_currency",
    "filter_transactions",
    "get_authorization_rate",
    "get_decline_impact",
    "get_filter_store",
    "get_lost_revenue",
    "get_summary_metrics",
    "group_by_dimension",
    "group_by_time",
    "rank_processors",
]
