from __future__ import annotations

import threading
from decimal import Decimal
from pathlib import Path

import pytest

from payment_analytics import (
    FilterStore,
    detect_currency,
    filter_transactions,
    get_authorization_rate,
    get_decline_impact,
    get_filter_store,
    get_summary_metrics,
    group_by_time,
    rank_processors,
)
from payment_analytics.models import Currency, DeclineType
from payment_analytics.schemas import DashboardReport
from payment_analytics.services.formatters import (
    format_currency,
    format_percentage,
    get_decline_description,
)
from tests.conftest import SAMPLE_TRANSACTIONS_PATH, build_random_transactions


@pytest.fixture()
def store(monkeypatch: pytest.MonkeyPatch) -> FilterStore:
    monkeypatch.setenv("PAYMENT_ANALYTICS_TRANSACTIONS_PATH", str(SAMPLE_TRANSACTIONS_PATH))
    return get_filter_store()


def test_country_drill_down_feeds_every_panel(store: FilterStore) -> None:
    store.toggle_country("Brazil")
    view = store.filtered_transactions

    metrics = get_authorization_rate(view)
    currency = detect_currency(view)
    assert currency is Currency.BRL
    assert format_percentage(metrics.authorization_rate) == "66.7%"
    assert format_currency(metrics.total_revenue, currency) == "R$5,720.00"
    assert format_currency(metrics.total_revenue, currency, compact=True) == "R$5.7K"
    assert format_currency(metrics.lost_revenue, currency) == "R$120.75"

    impact = get_decline_impact(view)
    assert [(get_decline_description(row.code), row.type) for row in impact] == [
        ("Timeout", DeclineType.SOFT)
    ]

    weekly = group_by_time(view, "week")
    assert [(point.date, point.total) for point in weekly] == [
        ("2026-01-04", 2),
        ("2026-01-11", 1),
    ]

    ranking = rank_processors(view)
    assert [row.dimension for row in ranking] == ["AcquireLocal", "BrasilPay"]


def test_reset_returns_dashboard_to_full_snapshot(store: FilterStore) -> None:
    store.toggle_country("Mexico")
    store.toggle_decline_type("soft")
    assert get_summary_metrics(store.filtered_transactions).total_transactions == 2

    store.reset_filters()

    summary = get_summary_metrics(store.filtered_transactions)
    assert summary.total_transactions == 10
    assert summary.total_revenue == Decimal("105430.00")
    assert summary.currency is None


def test_readers_never_see_a_torn_view_under_concurrent_writes() -> None:
    transactions = build_random_transactions(99, 400)
    store = FilterStore(transactions, record_metrics=False)
    countries = ["Mexico", "Colombia", "Brazil"]
    errors: list[str] = []
    stop = threading.Event()

    def writer(offset: int) -> None:
        try:
            for index in range(60):
                store.toggle_country(countries[(index + offset) % len(countries)])
                if index % 7 == 0:
                    store.toggle_decline_type("hard")
        finally:
            stop.set()

    def reader() -> None:
        while not stop.is_set():
            snapshot = store.snapshot()
            expected = filter_transactions(store.all_transactions, snapshot.filters)
            if list(snapshot.filtered_transactions) != expected:
                errors.append(f"inconsistent view for {snapshot.filters!r}")

    threads = [threading.Thread(target=reader) for _ in range(2)]
    threads += [threading.Thread(target=writer, args=(offset,)) for offset in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    final = store.snapshot()
    assert list(final.filtered_transactions) == filter_transactions(transactions, final.filters)


def test_report_script_writes_filtered_json(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    from scripts.dashboard_report import main

    monkeypatch.setenv("PAYMENT_ANALYTICS_TRANSACTIONS_PATH", str(SAMPLE_TRANSACTIONS_PATH))
    destination = tmp_path / "report.json"

    main(["--country", "Colombia", "--decline-type", "hard", "--output", str(destination)])

    report = DashboardReport.model_validate_json(destination.read_text(encoding="utf-8"))
    assert [row.code for row in report.declines] == ["suspected_fraud", "card_expired"]
    assert report.cards[2].value == "$122,000.00"
    assert str(destination) in capsys.readouterr().out


def test_report_script_rejects_unknown_selection(capsys: pytest.CaptureFixture[str]) -> None:
    from scripts.dashboard_report import parse_args

    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--country", "Peru"])

    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
    assert parse_args(["--processor", "BrasilPay"]).processor == ["BrasilPay"]
