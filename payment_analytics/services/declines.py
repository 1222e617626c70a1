"""Decline code recoverability classification."""
from __future__ import annotations

from payment_analytics.models import DeclineCode, DeclineType

# Transient issuer or network conditions; a later retry can succeed.
SOFT_DECLINE_CODES: frozenset[DeclineCode] = frozenset(
    {
        DeclineCode.INSUFFICIENT_FUNDS,
        DeclineCode.ISSUER_UNAVAILABLE,
        DeclineCode.PROCESSING_ERROR,
        DeclineCode.TIMEOUT,
    }
)

HARD_DECLINE_CODES: frozenset[DeclineCode] = frozenset(
    {
        DeclineCode.CARD_EXPIRED,
        DeclineCode.SUSPECTED_FRAUD,
        DeclineCode.DO_NOT_HONOR,
        DeclineCode.INVALID_CARD_NUMBER,
        DeclineCode.TRANSACTION_NOT_PERMITTED,
        DeclineCode.LOST_STOLEN_CARD,
    }
)


def classify_decline(code: DeclineCode | str) -> DeclineType:
    """Return ``soft`` for retriable decline codes and ``hard`` otherwise.

    Codes outside both tables, including unrecognised raw strings, are
    classified as ``hard``.
    """

    try:
        known = DeclineCode(code)
    except ValueError:
        return DeclineType.HARD
    if known in SOFT_DECLINE_CODES:
        return DeclineType.SOFT
    return DeclineType.HARD


__all__ = ["HARD_DECLINE_CODES", "SOFT_DECLINE_CODES", "classify_decline"]
