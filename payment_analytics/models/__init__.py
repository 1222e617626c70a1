"""Domain models package."""
from .transaction import (
    COUNTRY_CURRENCIES,
    COUNTRY_PAYMENT_METHODS,
    Country,
    Currency,
    DeclineCode,
    DeclineType,
    PaymentMethod,
    Processor,
    Transaction,
    TransactionStatus,
)

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
