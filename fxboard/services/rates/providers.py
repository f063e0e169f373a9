"""Concrete rate sources and factory.

'StaticRateSource' serves a built-in USD-relative table (offline development and
tests); 'ExternalHTTPRateSource' asks exchangerate.host for the latest table.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Dict, Optional, Type

from pydantic import ValidationError

from fxboard.core.config import Settings
from fxboard.models.rates import RatesPayload
from fxboard.services.http_client import HttpError, build_url, get_json
from .base import RateFetchError, RateSource, RateTable

logger = logging.getLogger("fxboard.rates")

# Units of each currency per 1 USD (approximate mid-market values)
_STATIC_USD_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.5,
    "CHF": 0.88,
    "CAD": 1.36,
    "AUD": 1.52,
    "NZD": 1.65,
    "INR": 83.2,
    "MXN": 17.1,
    "SGD": 1.34,
    "HKD": 7.82,
    "CNY": 7.24,
    "SEK": 10.6,
    "NOK": 10.7,
}


class StaticRateSource(RateSource):
    name = "static"

    def __init__(self, usd_rates: Optional[Dict[str, float]] = None):
        self._usd_rates = dict(usd_rates or _STATIC_USD_RATES)

    async def fetch_rates(self, base: str) -> RateTable:
        base_per_usd = self._usd_rates.get(base)
        if not base_per_usd:
            raise RateFetchError(base, "unsupported base currency")
        # Cross rate: units of quote per 1 base
        return {
            code: round(per_usd / base_per_usd, 6)
            for code, per_usd in self._usd_rates.items()
        }


class ExternalHTTPRateSource(RateSource):
    """exchangerate.host client (``GET {url}?base=XXX``).

    The blocking urllib call runs in a worker thread so the event loop keeps
    dispatching user input while a request is outstanding.
    """

    name = "external-http"

    def __init__(
        self,
        url: str,
        *,
        access_key: Optional[str] = None,
        timeout: float = 5.0,
        retries: int = 0,
    ):
        self._url = url
        self._access_key = access_key
        self._timeout = timeout
        self._retries = retries

    def _request_url(self, base: str) -> str:
        return build_url(self._url, {"base": base, "access_key": self._access_key})

    async def fetch_rates(self, base: str) -> RateTable:
        url = self._request_url(base)
        try:
            data = await asyncio.to_thread(
                get_json, url, timeout=self._timeout, retries=self._retries
            )
        except HttpError as e:
            raise RateFetchError(base, str(e)) from e
        return self.parse_payload(base, data)

    @staticmethod
    def parse_payload(base: str, data: dict) -> RateTable:
        try:
            payload = RatesPayload.model_validate(data)
        except ValidationError as e:
            raise RateFetchError(base, f"malformed body: {e.error_count()} errors") from e
        if payload.reports_failure():
            raise RateFetchError(base, f"API error: {payload.error}")
        if payload.rates is None:
            raise RateFetchError(base, "response has no 'rates' field")
        table: RateTable = {}
        for code, rate in payload.rates.items():
            if math.isfinite(rate) and rate > 0:
                table[code] = rate
            else:
                logger.warning(
                    "dropping non-finite or non-positive rate",
                    extra={"base": base, "code": code},
                )
        return table


_SOURCE_REGISTRY: Dict[str, Type[RateSource]] = {
    "static": StaticRateSource,
    "external-http": ExternalHTTPRateSource,
}


def make_rate_source(kind: str, settings: Settings) -> RateSource:
    cls = _SOURCE_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate source kind '{kind}'")
    if cls is ExternalHTTPRateSource:
        return ExternalHTTPRateSource(
            str(settings.rates_api_url),
            access_key=settings.rates_api_access_key,
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    return cls()
