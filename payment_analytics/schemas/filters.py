"""Filter criteria applied to the transaction snapshot."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payment_analytics.models import Country, DeclineCode, DeclineType, PaymentMethod, Processor


class DateRange(BaseModel):
    """Inclusive date window; a ``None`` bound leaves that side open."""

    model_config = ConfigDict(frozen=True)

    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None


class TransactionFilters(BaseModel):
    """Current filter selection.

    Values within one dimension are OR-ed, dimensions are AND-ed, and an empty
    selection places no constraint on its dimension.
    """

    model_config = ConfigDict(frozen=True)

    date_range: DateRange = Field(default_factory=DateRange)
    countries: tuple[Country, ...] = ()
    payment_methods: tuple[PaymentMethod, ...] = ()
    processors: tuple[Processor, ...] = ()
    decline_codes: tuple[DeclineCode, ...] = ()
    decline_types: tuple[DeclineType, ...] = ()

    def is_empty(self) -> bool:
        return (
            self.date_range.is_unbounded()
            and not self.countries
            and not self.payment_methods
            and not self.processors
            and not self.decline_codes
            and not self.decline_types
        )


__all__ = ["DateRange", "TransactionFilters"]
