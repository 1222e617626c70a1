"""Payment transaction record and its categorical attributes."""
from __future__ import annotations

import enum
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Currency(str, enum.Enum):
    MXN = "MXN"
    COP = "COP"
    BRL = "BRL"


class Country(str, enum.Enum):
    MEXICO = "Mexico"
    COLOMBIA = "Colombia"
    BRAZIL = "Brazil"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PSE = "pse"
    PIX = "pix"
    BOLETO = "boleto"


class Processor(str, enum.Enum):
    PAGOS_RAPID = "PagosRapid"
    ACQUIRE_LOCAL = "AcquireLocal"
    BRASIL_PAY = "BrasilPay"


class TransactionStatus(str, enum.Enum):
    APPROVED = "approved"
    DECLINED = "declined"


class DeclineCode(str, enum.Enum):
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CARD_EXPIRED = "card_expired"
    SUSPECTED_FRAUD = "suspected_fraud"
    DO_NOT_HONOR = "do_not_honor"
    ISSUER_UNAVAILABLE = "issuer_unavailable"
    INVALID_CARD_NUMBER = "invalid_card_number"
    TRANSACTION_NOT_PERMITTED = "transaction_not_permitted"
    PROCESSING_ERROR = "processing_error"
    TIMEOUT = "timeout"
    LOST_STOLEN_CARD = "lost_stolen_card"


class DeclineType(str, enum.Enum):
    SOFT = "soft"
    HARD = "hard"


COUNTRY_CURRENCIES: dict[Country, Currency] = {
    Country.MEXICO: Currency.MXN,
    Country.COLOMBIA: Currency.COP,
    Country.BRAZIL: Currency.BRL,
}

COUNTRY_PAYMENT_METHODS: dict[Country, frozenset[PaymentMethod]] = {
    Country.MEXICO: frozenset({PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD}),
    Country.COLOMBIA: frozenset(
        {PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD, PaymentMethod.PSE}
    ),
    Country.BRAZIL: frozenset(
        {
            PaymentMethod.CREDIT_CARD,
            PaymentMethod.DEBIT_CARD,
            PaymentMethod.PIX,
            PaymentMethod.BOLETO,
        }
    ),
}


class Transaction(BaseModel):
    """A single payment attempt as loaded from the data snapshot.

    Instances are frozen. The status/decline code pairing is not enforced here;
    see :func:`payment_analytics.services.loader.parse_transactions`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=Decimal("0"))
    currency: Currency
    country: Country
    payment_method: PaymentMethod
    processor: Processor
    status: TransactionStatus
    decline_code: DeclineCode | None = None
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_approved(self) -> bool:
        return self.status is TransactionStatus.APPROVED

    @property
    def is_declined(self) -> bool:
        return self.status is TransactionStatus.DECLINED


__all__ = [
    "COUNTRY_CURRENCIES",
    "COUNTRY_PAYMENT_METHODS",
    "Country",
    "Currency",
    "DeclineCode",
    "DeclineType",
    "PaymentMethod",
    "Processor",
    "Transaction",
    "TransactionStatus",
]
