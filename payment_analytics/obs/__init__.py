"""Observability utilities."""

from .metrics import (
    FILTER_RECOMPUTATIONS_COUNTER,
    FILTER_RECOMPUTE_LATENCY_SECONDS,
    FILTERED_TRANSACTIONS_GAUGE,
    TRANSACTIONS_LOADED_COUNTER,
    record_recompute,
)

__all__ = [
    "FILTERED_TRANSACTIONS_GAUGE",
    "FILTER_RECOMPUTATIONS_COUNTER",
    "FILTER_RECOMPUTE_LATENCY_SECONDS",
    "TRANSACTIONS_LOADED_COUNTER",
    "record_recompute",
]
