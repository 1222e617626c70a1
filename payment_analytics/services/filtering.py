"""Multi-dimensional transaction filter."""
from __future__ import annotations

from collections.abc import Iterable

from payment_analytics.models import Transaction
from payment_analytics.schemas import TransactionFilters
from payment_analytics.services.declines import classify_decline


def matches_filters(transaction: Transaction, filters: TransactionFilters) -> bool:
    """Return ``True`` when the transaction satisfies every active criterion."""

    date_range = filters.date_range
    if date_range.start is not None and transaction.timestamp < date_range.start:
        return False
    if date_range.end is not None and transaction.timestamp > date_range.end:
        return False

    if filters.countries and transaction.country not in filters.countries:
        return False
    if filters.payment_methods and transaction.payment_method not in filters.payment_methods:
        return False
    if filters.processors and transaction.processor not in filters.processors:
        return False

    # Decline criteria only ever match declined transactions.
    if filters.decline_codes:
        if not transaction.is_declined or transaction.decline_code is None:
            return False
        if transaction.decline_code not in filters.decline_codes:
            return False

    if filters.decline_types:
        if not transaction.is_declined or transaction.decline_code is None:
            return False
        if classify_decline(transaction.decline_code) not in filters.decline_types:
            return False

    return True


def filter_transactions(
    transactions: Iterable[Transaction], filters: TransactionFilters
) -> list[Transaction]:
    """Return a new list holding the transactions that match ``filters``."""

    return [transaction for transaction in transactions if matches_filters(transaction, filters)]


__all__ = ["filter_transactions", "matches_filters"]
