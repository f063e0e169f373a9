"""Converter state: the single owner of amount, currency selection and rates.

Design:
    - Mutations (amount, base, target, swap) are plain synchronous calls made
      from the event loop; derived values are pure functions of the state.
    - Changing the base currency (directly, via swap, or on start) issues a fetch
      as a background task tagged with a monotonically increasing id. Only the
      latest issued id may touch the state when it completes; older completions
      are dropped, so a slow response can never clobber a newer selection.
    - A failed fetch keeps the previous rate table. Stale rates are shown
      together with the error message rather than blanking the converter.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

from fxboard.models.constants import FETCH_ERROR_MESSAGE, RATE_PLACEHOLDER, ZERO_AMOUNT
from fxboard.models.rates import ConverterView, TrendPoint
from fxboard.services.money import Number, parse_amount, quantize_str
from fxboard.services.rates.base import RateFetchError, RateSource, RateTable
from fxboard.services.trend import TrendSample, TrendSampler, change_percent, format_change

logger = logging.getLogger("fxboard.state")


class ConversionState:
    def __init__(
        self,
        source: RateSource,
        *,
        amount: Number = "1000",
        base: str = "USD",
        target: str = "EUR",
        sampler: Optional[TrendSampler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._source = source
        self._sampler = sampler or TrendSampler()
        self._clock = clock

        self.amount: Number = amount
        self.base_currency = base
        self.target_currency = target
        self.favorite = False

        self._rates: RateTable = {}
        self._loading = False
        self._error = ""
        self._last_updated: Optional[datetime] = None
        self._trend: List[TrendSample] = []

        self._latest_fetch_id = 0
        self._pending: Set[asyncio.Task] = set()

    # Read-only state ------------------------------------------
    @property
    def rates(self) -> Dict[str, float]:
        return dict(self._rates)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str:
        return self._error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._last_updated

    @property
    def last_updated_label(self) -> str:
        if self._last_updated is None:
            return ""
        return self._last_updated.strftime("%H:%M:%S")

    @property
    def trend_samples(self) -> List[TrendSample]:
        return list(self._trend)

    @property
    def fetch_count(self) -> int:
        """Number of fetches issued so far."""
        return self._latest_fetch_id

    # Mutations ------------------------------------------------
    def set_amount(self, raw: Number) -> None:
        self.amount = raw

    def set_base_currency(self, code: str) -> None:
        if code == self.base_currency:
            return
        self.base_currency = code
        self._issue_fetch()

    def set_target_currency(self, code: str) -> None:
        if code == self.target_currency:
            return
        self.target_currency = code
        # Rates are per base, so the current table already covers the new target.
        self._resample_trend()

    def swap(self) -> None:
        self.base_currency, self.target_currency = (
            self.target_currency,
            self.base_currency,
        )
        self._issue_fetch()

    def toggle_favorite(self) -> bool:
        self.favorite = not self.favorite
        return self.favorite

    # Derived values -------------------------------------------
    def target_rate(self) -> Optional[float]:
        return self._rates.get(self.target_currency)

    def converted_amount(self) -> str:
        rate = self.target_rate()
        value = parse_amount(self.amount)
        if rate is None or value is None:
            return ZERO_AMOUNT
        converted = value * rate
        if not math.isfinite(converted):
            return ZERO_AMOUNT
        return quantize_str(converted, 2)

    def exchange_rate(self) -> str:
        rate = self.target_rate()
        if rate is None or not math.isfinite(rate):
            return RATE_PLACEHOLDER
        return quantize_str(rate, 6)

    def rate_label(self) -> str:
        return f"1 {self.base_currency} = {self.exchange_rate()} {self.target_currency}"

    def snapshot(self) -> ConverterView:
        change = change_percent(self._trend)
        return ConverterView(
            amount=str(self.amount),
            base_currency=self.base_currency,
            target_currency=self.target_currency,
            converted_amount=self.converted_amount(),
            exchange_rate=self.exchange_rate(),
            rate_label=self.rate_label(),
            change_percent=format_change(change),
            change_direction="up" if change >= 0 else "down",
            loading=self._loading,
            error=self._error,
            last_updated_label=self.last_updated_label,
            trend_samples=[TrendPoint(label=s.label, value=s.value) for s in self._trend],
            favorite=self.favorite,
        )

    # Fetch lifecycle ------------------------------------------
    def start(self) -> None:
        """Issue the initial fetch for the current base currency."""
        self._issue_fetch()

    async def refresh(self) -> None:
        """Issue a fetch for the current base and wait until nothing is pending."""
        self._issue_fetch()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._loading = False

    def _issue_fetch(self) -> None:
        self._latest_fetch_id += 1
        fetch_id = self._latest_fetch_id
        base = self.base_currency
        self._loading = True
        self._error = ""
        logger.debug(
            "fetch issued",
            extra={"fetch_id": fetch_id, "base": base, "source": self._source.name},
        )
        task = asyncio.get_running_loop().create_task(self._fetch(fetch_id, base))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_current(self, fetch_id: int) -> bool:
        return fetch_id == self._latest_fetch_id

    async def _fetch(self, fetch_id: int, base: str) -> None:
        log_extra = {"fetch_id": fetch_id, "base": base, "source": self._source.name}
        try:
            rates = await self._source.fetch_rates(base)
        except asyncio.CancelledError:
            if self._is_current(fetch_id):
                self._loading = False
            raise
        except RateFetchError as e:
            if self._is_current(fetch_id):
                logger.warning("rate fetch failed", extra={**log_extra, "error": e.reason})
            self._fail(fetch_id, log_extra)
            return
        except Exception:
            if self._is_current(fetch_id):
                logger.exception("rate source raised unexpectedly", extra=log_extra)
            self._fail(fetch_id, log_extra)
            return

        if not self._is_current(fetch_id):
            logger.debug("stale rates discarded", extra=log_extra)
            return
        self._rates = dict(rates)
        self._last_updated = self._clock()
        self._resample_trend()
        self._loading = False
        logger.info("rates updated", extra={**log_extra, "count": len(rates)})

    def _fail(self, fetch_id: int, log_extra: dict) -> None:
        if not self._is_current(fetch_id):
            logger.debug("stale fetch failure discarded", extra=log_extra)
            return
        self._error = FETCH_ERROR_MESSAGE
        self._loading = False

    def _resample_trend(self) -> None:
        rate = self.target_rate()
        if rate is None or not math.isfinite(rate):
            self._trend = []
            return
        self._trend = self._sampler.sample(rate)
