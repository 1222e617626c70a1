"""Prometheus metrics for the filter engine."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

FILTER_RECOMPUTATIONS_COUNTER = Counter(
    "filter_recomputations_total",
    "Total number of filtered-view recomputations.",
    labelnames=("operation",),
)
FILTER_RECOMPUTE_LATENCY_SECONDS = Histogram(
    "filter_recompute_latency_seconds",
    "Time spent re-filtering the transaction snapshot.",
)
FILTERED_TRANSACTIONS_GAUGE = Gauge(
    "filtered_transactions",
    "Number of transactions in the current filtered view.",
)
TRANSACTIONS_LOADED_COUNTER = Counter(
    "transactions_loaded_total",
    "Count of transaction records loaded into memory.",
)


def record_recompute(operation: str, latency: float | None, filtered_count: int) -> None:
    """Record one recomputation of the filtered view.

    ``latency`` is ``None`` when nothing was filtered (a reset), in which case
    the latency histogram is left alone.
    """
    FILTER_RECOMPUTATIONS_COUNTER.labels(operation=operation).inc()
    if latency is not None:
        FILTER_RECOMPUTE_LATENCY_SECONDS.observe(max(0.0, latency))
    FILTERED_TRANSACTIONS_GAUGE.set(filtered_count)


__all__ = [
    "FILTERED_TRANSACTIONS_GAUGE",
    "FILTER_RECOMPUTATIONS_COUNTER",
    "FILTER_RECOMPUTE_LATENCY_SECONDS",
    "TRANSACTIONS_LOADED_COUNTER",
    "record_recompute",
]
