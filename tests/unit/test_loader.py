from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from payment_analytics.models import Country, DeclineCode, TransactionStatus
from payment_analytics.obs import TRANSACTIONS_LOADED_COUNTER
from payment_analytics.services.loader import (
    DuplicateTransactionError,
    InvalidTransactionError,
    TransactionDataError,
    load_transactions,
    parse_transactions,
    validate_transactions,
)


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": "txn_100",
        "amount": 420.5,
        "currency": "MXN",
        "country": "Mexico",
        "payment_method": "credit_card",
        "processor": "PagosRapid",
        "status": "approved",
        "decline_code": None,
        "timestamp": "2026-01-20T10:00:00Z",
    }
    record.update(overrides)
    return record


def _loaded_total() -> float:
    family = next(iter(TRANSACTIONS_LOADED_COUNTER.collect()))
    return next(sample.value for sample in family.samples if sample.name.endswith("_total"))


def test_load_fixture_file(sample_transactions) -> None:
    assert len(sample_transactions) == 10
    first = sample_transactions[0]
    assert first.id == "txn_001"
    assert first.amount == Decimal("1500.0")
    assert first.country is Country.MEXICO
    assert first.timestamp.utcoffset().total_seconds() == 0
    assert sample_transactions[1].decline_code is DeclineCode.INSUFFICIENT_FUNDS


def test_load_accepts_wrapped_payload_and_counts_records(tmp_path: Path) -> None:
    path = tmp_path / "wrapped.json"
    path.write_text(
        json.dumps({"transactions": [_record(), _record(id="txn_101")]}), encoding="utf-8"
    )
    before = _loaded_total()

    transactions = load_transactions(path)

    assert [transaction.id for transaction in transactions] == ["txn_100", "txn_101"]
    assert isinstance(transactions, tuple)
    assert _loaded_total() == before + 2


def test_load_rejects_non_list_payload(tmp_path: Path) -> None:
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"id": "txn_100"}), encoding="utf-8")

    with pytest.raises(InvalidTransactionError):
        load_transactions(path)


def test_schema_errors_are_reported_with_record_index() -> None:
    records = [_record(), _record(id="txn_101", amount=-5, country="Peru")]

    with pytest.raises(InvalidTransactionError) as excinfo:
        parse_transactions(records)

    issues = excinfo.value.issues
    assert len(issues) == 2
    assert all(issue.startswith("[1] ") for issue in issues)
    assert any("amount" in issue for issue in issues)
    assert any("country" in issue for issue in issues)


def test_duplicate_ids_are_rejected() -> None:
    records = [_record(), _record(amount=10), _record(id="txn_101")]

    with pytest.raises(DuplicateTransactionError) as excinfo:
        parse_transactions(records)

    assert excinfo.value.issues == ["txn_100"]
    assert isinstance(excinfo.value, TransactionDataError)


@pytest.mark.parametrize(
    ("overrides", "fragment"),
    [
        ({"currency": "BRL"}, "invalid country-currency pair Mexico-BRL"),
        ({"payment_method": "pix"}, "payment method pix is not available in Mexico"),
        ({"decline_code": "timeout"}, "approved transaction has decline code"),
        ({"status": "declined"}, "declined transaction is missing decline code"),
    ],
)
def test_inconsistent_records_are_rejected(overrides: dict[str, Any], fragment: str) -> None:
    with pytest.raises(InvalidTransactionError) as excinfo:
        parse_transactions([_record(**overrides)])

    assert excinfo.value.issues == [f"txn_100: {fragment}"]


def test_validate_transactions_collects_without_raising(make_transaction) -> None:
    transactions = [
        make_transaction(),
        make_transaction(country="Colombia", currency="COP", payment_method="pse"),
        make_transaction(status=TransactionStatus.DECLINED, decline_code=None),
    ]

    issues = validate_transactions(transactions)

    assert len(issues) == 1
    assert issues[0].endswith("declined transaction is missing decline code")


def test_validate_transactions_accepts_seeded_data(random_transactions) -> None:
    assert validate_transactions(random_transactions) == []


def test_load_wraps_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('[{"id": "txn_100",', encoding="utf-8")

    with pytest.raises(InvalidTransactionError, match="not valid JSON") as excinfo:
        load_transactions(path)

    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)
