"""Loading and validation of the transaction snapshot."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from payment_analytics.models import (
    COUNTRY_CURRENCIES,
    COUNTRY_PAYMENT_METHODS,
    Transaction,
    TransactionStatus,
)
from payment_analytics.obs import TRANSACTIONS_LOADED_COUNTER

logger = logging.getLogger(__name__)


class TransactionDataError(ValueError):
    """Base exception for unusable transaction data."""

    def __init__(self, message: str, issues: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.issues = list(issues)


class InvalidTransactionError(TransactionDataError):
    """Raised when records fail schema or consistency checks."""


class DuplicateTransactionError(TransactionDataError):
    """Raised when two records share the same identifier."""


def _format_error(index: int, error: dict[str, Any]) -> str:
    path = "->".join(str(part) for part in error.get("loc", ()))
    return f"[{index}] {path or '<root>'}: {error.get('msg', 'invalid value')}"


def validate_transactions(transactions: Iterable[Transaction]) -> list[str]:
    """Return consistency issues found in ``transactions`` without raising.

    Checks the country/currency pairing, the payment methods available in
    each country, and that exactly the declined transactions carry a decline
    code.
    """

    issues: list[str] = []
    for transaction in transactions:
        expected_currency = COUNTRY_CURRENCIES.get(transaction.country)
        if transaction.currency is not expected_currency:
            issues.append(
                f"{transaction.id}: invalid country-currency pair "
                f"{transaction.country.value}-{transaction.currency.value}"
            )
        allowed_methods = COUNTRY_PAYMENT_METHODS.get(transaction.country, frozenset())
        if transaction.payment_method not in allowed_methods:
            issues.append(
                f"{transaction.id}: payment method {transaction.payment_method.value} "
                f"is not available in {transaction.country.value}"
            )
        if transaction.status is TransactionStatus.APPROVED and transaction.decline_code is not None:
            issues.append(f"{transaction.id}: approved transaction has decline code")
        if transaction.status is TransactionStatus.DECLINED and transaction.decline_code is None:
            issues.append(f"{transaction.id}: declined transaction is missing decline code")
    return issues


def parse_transactions(records: Iterable[Any]) -> tuple[Transaction, ...]:
    """Validate raw records and return them as an immutable snapshot."""

    transactions: list[Transaction] = []
    schema_issues: list[str] = []
    for index, record in enumerate(records):
        try:
            transactions.append(Transaction.model_validate(record))
        except ValidationError as exc:
            schema_issues.extend(_format_error(index, error) for error in exc.errors())
    if schema_issues:
        raise InvalidTransactionError(
            f"{len(schema_issues)} schema error(s) in transaction data", schema_issues
        )

    seen: set[str] = set()
    duplicates: list[str] = []
    for transaction in transactions:
        if transaction.id in seen:
            duplicates.append(transaction.id)
        seen.add(transaction.id)
    if duplicates:
        raise DuplicateTransactionError(
            f"{len(duplicates)} duplicate transaction id(s)", duplicates
        )

    issues = validate_transactions(transactions)
    if issues:
        raise InvalidTransactionError(f"{len(issues)} inconsistent transaction(s)", issues)

    return tuple(transactions)


def load_transactions(path: Path | str) -> tuple[Transaction, ...]:
    """Read a JSON array of transactions from ``path``."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidTransactionError(f"Transaction file {path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict) and "transactions" in payload:
        payload = payload["transactions"]
    if not isinstance(payload, list):
        raise InvalidTransactionError("Transaction file must contain a list of records")

    transactions = parse_transactions(payload)
    TRANSACTIONS_LOADED_COUNTER.inc(len(transactions))
    approved = sum(1 for transaction in transactions if transaction.is_approved)
    logger.info(
        "loaded transaction snapshot",
        extra={"path": str(path), "total": len(transactions), "approved": approved},
    )
    return transactions


__all__ = [
    "DuplicateTransactionError",
    "InvalidTransactionError",
    "TransactionDataError",
    "load_transactions",
    "parse_transactions",
    "validate_transactions",
]
