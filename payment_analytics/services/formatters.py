"""String formatting helpers for analytics output."""
from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from payment_analytics.models import Currency

CURRENCY_SYMBOLS: dict[Currency, str] = {
    Currency.MXN: "$",
    Currency.COP: "$",
    Currency.BRL: "R$",
}

DECLINE_CODE_DESCRIPTIONS: dict[str, str] = {
    "insufficient_funds": "Insufficient Funds",
    "card_expired": "Card Expired",
    "suspected_fraud": "Suspected Fraud",
    "do_not_honor": "Do Not Honor",
    "issuer_unavailable": "Issuer Unavailable",
    "invalid_card_number": "Invalid Card Number",
    "transaction_not_permitted": "Transaction Not Permitted",
    "processing_error": "Processing Error",
    "timeout": "Timeout",
    "lost_stolen_card": "Lost/Stolen Card",
}

_COMPACT_SUFFIXES = (
    (Decimal("1000000000"), "B"),
    (Decimal("1000000"), "M"),
    (Decimal("1000"), "K"),
)


def _round_half_up(value: Decimal | int | float, decimals: int) -> Decimal:
    # Ties round away from zero, matching JavaScript toFixed on the dashboard.
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def format_currency(
    amount: Decimal | int | float, currency: Currency | str, compact: bool = False
) -> str:
    """Format ``amount`` with the currency symbol, e.g. ``$1,234.56`` or ``R$1.2M``.

    Raises ``ValueError`` for an unsupported currency code.
    """

    symbol = CURRENCY_SYMBOLS[Currency(currency)]
    value = Decimal(str(amount))

    if compact and value >= 1000:
        if value >= 1000000:
            return f"{symbol}{_round_half_up(value / 1000000, 1):.1f}M"
        return f"{symbol}{_round_half_up(value / 1000, 1):.1f}K"

    return f"{symbol}{_round_half_up(value, 2):,.2f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{_round_half_up(value, decimals):.{decimals}f}%"


def format_number(value: Decimal | int | float, decimals: int = 1) -> str:
    """Abbreviate large numbers with K/M/B suffixes."""

    number = Decimal(str(value))
    for threshold, suffix in _COMPACT_SUFFIXES:
        if number >= threshold:
            return f"{_round_half_up(number / threshold, decimals):.{decimals}f}{suffix}"
    return f"{_round_half_up(number, decimals):.{decimals}f}"


def format_date(value: str | date | datetime, fmt: str = "%b %d, %Y") -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime(fmt)


def get_decline_description(code: str) -> str:
    """Return the display label for ``code``, or the code itself if unknown."""
    key = getattr(code, "value", code)
    return DECLINE_CODE_DESCRIPTIONS.get(key, key)


__all__ = [
    "CURRENCY_SYMBOLS",
    "DECLINE_CODE_DESCRIPTIONS",
    "format_currency",
    "format_date",
    "format_number",
    "format_percentage",
    "get_decline_description",
]
