"""Shared helpers."""

from app.utils.formatters import AmountInWords, CurrencyFormatter, amount_to_words

__all__ = ["AmountInWords", "CurrencyFormatter", "amount_to_words"]
