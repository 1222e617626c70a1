"""Reactive container for the filter selection and the filtered view."""
from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache, partial
from threading import Lock, RLock
from typing import Any

from payment_analytics.core.config import get_settings
from payment_analytics.models import (
    Country,
    DeclineCode,
    DeclineType,
    PaymentMethod,
    Processor,
    Transaction,
)
from payment_analytics.obs import record_recompute
from payment_analytics.schemas import DateRange, TransactionFilters
from payment_analytics.services.filtering import filter_transactions
from payment_analytics.services.loader import load_transactions

logger = logging.getLogger(__name__)

FiltersListener = Callable[[TransactionFilters], None]
FilteredListener = Callable[[tuple[Transaction, ...]], None]


@dataclass(frozen=True, slots=True)
class FilterSnapshot:
    """Mutually consistent view of the criteria and the transactions they select."""

    filters: TransactionFilters
    filtered_transactions: tuple[Transaction, ...]


@dataclass(frozen=True, slots=True)
class FilterActions:
    """The mutation operations of a :class:`FilterStore`, without its state."""

    set_date_range: Callable[[DateRange], None]
    set_countries: Callable[[Iterable[Country | str]], None]
    set_payment_methods: Callable[[Iterable[PaymentMethod | str]], None]
    set_processors: Callable[[Iterable[Processor | str]], None]
    set_decline_codes: Callable[[Iterable[DeclineCode | str]], None]
    set_decline_types: Callable[[Iterable[DeclineType | str]], None]
    toggle_country: Callable[[Country | str], None]
    toggle_payment_method: Callable[[PaymentMethod | str], None]
    toggle_processor: Callable[[Processor | str], None]
    toggle_decline_code: Callable[[DeclineCode | str], None]
    toggle_decline_type: Callable[[DeclineType | str], None]
    reset_filters: Callable[[], None]


def _toggled(current: tuple[Any, ...], value: Any) -> tuple[Any, ...]:
    if value in current:
        return tuple(item for item in current if item != value)
    return (*current, value)


class FilterStore:
    """Holds the transaction snapshot, the current filters and the filtered view.

    Every mutation replaces the filters and recomputes the filtered view under
    a single lock, so readers never observe one without the other. Listeners
    registered through :meth:`subscribe_filters` and :meth:`subscribe_filtered`
    are notified independently, after the lock is released, and only when the
    value they watch actually changed. Notifications are queued at commit time
    and delivered by one thread at a time, so every listener sees changes in
    commit order even when writers race.
    """

    def __init__(self, transactions: Iterable[Transaction], *, record_metrics: bool = True) -> None:
        self._all_transactions: tuple[Transaction, ...] = tuple(transactions)
        self._filters = TransactionFilters()
        self._filtered_transactions = self._all_transactions
        self._record_metrics = record_metrics
        self._lock = RLock()
        self._filters_listeners: list[FiltersListener] = []
        self._filtered_listeners: list[FilteredListener] = []
        self._outbox: deque[Callable[[], None]] = deque()
        self._delivery_lock = Lock()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def all_transactions(self) -> tuple[Transaction, ...]:
        return self._all_transactions

    @property
    def filters(self) -> TransactionFilters:
        with self._lock:
            return self._filters

    @property
    def filtered_transactions(self) -> tuple[Transaction, ...]:
        with self._lock:
            return self._filtered_transactions

    def snapshot(self) -> FilterSnapshot:
        with self._lock:
            return FilterSnapshot(
                filters=self._filters, filtered_transactions=self._filtered_transactions
            )

    @property
    def actions(self) -> FilterActions:
        return FilterActions(
            set_date_range=self.set_date_range,
            set_countries=self.set_countries,
            set_payment_methods=self.set_payment_methods,
            set_processors=self.set_processors,
            set_decline_codes=self.set_decline_codes,
            set_decline_types=self.set_decline_types,
            toggle_country=self.toggle_country,
            toggle_payment_method=self.toggle_payment_method,
            toggle_processor=self.toggle_processor,
            toggle_decline_code=self.toggle_decline_code,
            toggle_decline_type=self.toggle_decline_type,
            reset_filters=self.reset_filters,
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe_filters(self, listener: FiltersListener) -> Callable[[], None]:
        """Call ``listener`` with the new criteria whenever they change."""
        return self._subscribe(self._filters_listeners, listener)

    def subscribe_filtered(self, listener: FilteredListener) -> Callable[[], None]:
        """Call ``listener`` with the new filtered view whenever its contents change."""
        return self._subscribe(self._filtered_listeners, listener)

    def _subscribe(self, listeners: list[Any], listener: Any) -> Callable[[], None]:
        with self._lock:
            listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def set_date_range(self, date_range: DateRange) -> None:
        self._update("date_range", date_range=date_range)

    def set_countries(self, countries: Iterable[Country | str]) -> None:
        self._update("countries", countries=tuple(Country(value) for value in countries))

    def set_payment_methods(self, payment_methods: Iterable[PaymentMethod | str]) -> None:
        self._update(
            "payment_methods",
            payment_methods=tuple(PaymentMethod(value) for value in payment_methods),
        )

    def set_processors(self, processors: Iterable[Processor | str]) -> None:
        self._update("processors", processors=tuple(Processor(value) for value in processors))

    def set_decline_codes(self, decline_codes: Iterable[DeclineCode | str]) -> None:
        self._update(
            "decline_codes", decline_codes=tuple(DeclineCode(value) for value in decline_codes)
        )

    def set_decline_types(self, decline_types: Iterable[DeclineType | str]) -> None:
        self._update(
            "decline_types", decline_types=tuple(DeclineType(value) for value in decline_types)
        )

    # ------------------------------------------------------------------
    # Toggles
    # ------------------------------------------------------------------
    def toggle_country(self, country: Country | str) -> None:
        self._toggle("countries", Country(country))

    def toggle_payment_method(self, payment_method: PaymentMethod | str) -> None:
        self._toggle("payment_methods", PaymentMethod(payment_method))

    def toggle_processor(self, processor: Processor | str) -> None:
        self._toggle("processors", Processor(processor))

    def toggle_decline_code(self, decline_code: DeclineCode | str) -> None:
        self._toggle("decline_codes", DeclineCode(decline_code))

    def toggle_decline_type(self, decline_type: DeclineType | str) -> None:
        self._toggle("decline_types", DeclineType(decline_type))

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------
    def reset_filters(self) -> None:
        """Drop every criterion; the filtered view becomes the full snapshot."""
        with self._lock:
            self._commit("reset", TransactionFilters(), self._all_transactions, None)
        self._deliver()

    def _update(self, operation: str, **changes: Any) -> None:
        with self._lock:
            self._recompute(operation, **changes)
        self._deliver()

    def _toggle(self, field: str, value: Any) -> None:
        with self._lock:
            current = getattr(self._filters, field)
            self._recompute(field, **{field: _toggled(current, value)})
        self._deliver()

    def _recompute(self, operation: str, **changes: Any) -> None:
        filters = TransactionFilters(**{**dict(self._filters), **changes})
        start = time.perf_counter()
        filtered = tuple(filter_transactions(self._all_transactions, filters))
        self._commit(operation, filters, filtered, time.perf_counter() - start)

    def _commit(
        self,
        operation: str,
        filters: TransactionFilters,
        filtered: tuple[Transaction, ...],
        latency: float | None,
    ) -> None:
        # Caller holds the lock.
        if filters != self._filters:
            self._outbox.extend(partial(listener, filters) for listener in self._filters_listeners)
        if filtered != self._filtered_transactions:
            self._outbox.extend(
                partial(listener, filtered) for listener in self._filtered_listeners
            )
        self._filters = filters
        self._filtered_transactions = filtered

        if self._record_metrics:
            record_recompute(operation, latency, len(filtered))
        logger.debug(
            "filtered view recomputed",
            extra={"operation": operation, "filtered": len(filtered), "latency": latency},
        )

    def _deliver(self) -> None:
        """Run queued notifications in commit order, outside the state lock.

        Whichever thread holds the delivery lock drains the outbox, including
        entries queued by other writers or by listeners mutating the store.
        Callers that find delivery in progress return at once.
        """
        while True:
            if not self._delivery_lock.acquire(blocking=False):
                return
            try:
                while True:
                    with self._lock:
                        if not self._outbox:
                            break
                        notification = self._outbox.popleft()
                    notification()
            finally:
                self._delivery_lock.release()
            # A writer may have queued work after the drain ended but before the release.
            with self._lock:
                if not self._outbox:
                    return


@lru_cache
def get_filter_store() -> FilterStore:
    """Return the process-wide store built from the configured data file."""
    settings = get_settings()
    transactions = load_transactions(settings.transactions_path)
    return FilterStore(transactions, record_metrics=settings.enable_metrics)


__all__ = [
    "FilterActions",
    "FilterSnapshot",
    "FilterStore",
    "FilteredListener",
    "FiltersListener",
    "get_filter_store",
]
