"""Pydantic models and constants for the currency exchange board."""

from .constants import (
    SUPPORTED_CURRENCIES,
    FETCH_ERROR_MESSAGE,
    RATE_PLACEHOLDER,
    ZERO_AMOUNT,
)  # re-export
from .rates import AmountIn, ConverterView, CurrencyIn, RatesPayload, TrendPoint

__all__ = [
    "SUPPORTED_CURRENCIES",
    "FETCH_ERROR_MESSAGE",
    "RATE_PLACEHOLDER",
    "ZERO_AMOUNT",
    "AmountIn",
    "ConverterView",
    "CurrencyIn",
    "RatesPayload",
    "TrendPoint",
]
