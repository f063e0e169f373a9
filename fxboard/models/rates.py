from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import SUPPORTED_CURRENCIES


class RatesPayload(BaseModel):
    """Body returned by exchangerate.host ``/latest``.

    ``success`` and ``error`` are optional; some deployments omit them on success.
    """

    rates: Optional[Dict[str, float]] = None
    success: Optional[bool] = None
    error: Any = None

    def reports_failure(self) -> bool:
        return self.success is not None and not self.success and bool(self.error)


class TrendPoint(BaseModel):
    label: str
    value: float = Field(..., gt=0)


class ConverterView(BaseModel):
    """Read-only snapshot of the converter consumed by the presentation layer."""

    amount: str
    base_currency: str
    target_currency: str
    converted_amount: str
    exchange_rate: str
    rate_label: str
    change_percent: str
    change_direction: str
    loading: bool
    error: str
    last_updated_label: str
    trend_samples: List[TrendPoint]
    favorite: bool


class AmountIn(BaseModel):
    # Kept as text: non-numeric input is accepted and converts to 0.00.
    amount: str = Field(..., description="Raw amount as typed by the user")


class CurrencyIn(BaseModel):
    currency: str = Field(..., description="Currency code, e.g. USD")

    @field_validator("currency")
    @classmethod
    def supported_currency(cls, v: str) -> str:
        if v not in SUPPORTED_CURRENCIES:
            raise ValueError("unsupported currency")
        return v
