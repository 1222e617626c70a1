from __future__ import annotations

import random
import sys
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from payment_analytics.core.config import get_settings
from payment_analytics.models import (
    COUNTRY_CURRENCIES,
    COUNTRY_PAYMENT_METHODS,
    Country,
    DeclineCode,
    Processor,
    Transaction,
    TransactionStatus,
)
from payment_analytics.services.filter_store import get_filter_store
from payment_analytics.services.loader import load_transactions

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
SAMPLE_TRANSACTIONS_PATH = FIXTURES_DIR / "transactions.json"
BASE_TIMESTAMP = datetime(2026, 1, 1, tzinfo=timezone.utc)

TransactionFactory = Callable[..., Transaction]


def build_random_transactions(seed: int, size: int) -> list[Transaction]:
    """Deterministic dataset honouring the loader's consistency rules."""

    rng = random.Random(seed)
    countries = list(Country)
    processors = list(Processor)
    decline_codes = list(DeclineCode)
    transactions: list[Transaction] = []
    moment = BASE_TIMESTAMP
    for index in range(size):
        country = rng.choice(countries)
        methods = sorted(COUNTRY_PAYMENT_METHODS[country], key=lambda method: method.value)
        approved = rng.random() < 0.7
        moment += timedelta(minutes=rng.randint(5, 600))
        transactions.append(
            Transaction(
                id=f"txn_{seed}_{index:04d}",
                amount=Decimal(rng.randint(89, 1_000_000)) / 100,
                currency=COUNTRY_CURRENCIES[country],
                country=country,
                payment_method=rng.choice(methods),
                processor=rng.choice(processors),
                status=TransactionStatus.APPROVED if approved else TransactionStatus.DECLINED,
                decline_code=None if approved else rng.choice(decline_codes),
                timestamp=moment,
            )
        )
    # Shuffle so chronological ordering is the code's job, not the fixture's.
    rng.shuffle(transactions)
    return transactions


@pytest.fixture(autouse=True)
def _clear_cached_singletons() -> Iterator[None]:
    get_settings.cache_clear()
    get_filter_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_filter_store.cache_clear()


@pytest.fixture()
def make_transaction() -> TransactionFactory:
    counter = iter(range(1, 1_000_000))

    def _factory(**overrides: Any) -> Transaction:
        status = TransactionStatus(overrides.pop("status", TransactionStatus.APPROVED))
        fields: dict[str, Any] = {
            "id": f"txn_{next(counter):06d}",
            "amount": Decimal("100.00"),
            "currency": "MXN",
            "country": "Mexico",
            "payment_method": "credit_card",
            "processor": "PagosRapid",
            "status": status,
            "decline_code": None if status is TransactionStatus.APPROVED else "do_not_honor",
            "timestamp": BASE_TIMESTAMP,
        }
        fields.update(overrides)
        return Transaction.model_validate(fields)

    return _factory


@pytest.fixture()
def sample_transactions() -> tuple[Transaction, ...]:
    return load_transactions(SAMPLE_TRANSACTIONS_PATH)


@pytest.fixture(params=[7, 42, 2026], ids=lambda seed: f"seed-{seed}")
def random_transactions(request: pytest.FixtureRequest) -> list[Transaction]:
    return build_random_transactions(request.param, 300)
