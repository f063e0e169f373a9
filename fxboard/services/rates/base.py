"""Rate source abstraction.

A rate source returns the full rate table for one base currency. Any failure
(transport, API-reported, malformed body) is signalled as ``RateFetchError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

RateTable = Dict[str, float]


class RateFetchError(Exception):
    def __init__(self, base: str, reason: str):
        super().__init__(f"could not fetch rates for {base}: {reason}")
        self.base = base
        self.reason = reason


class RateSource(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_rates(self, base: str) -> RateTable:
        """Return rates for every known currency, quoted per 1 unit of ``base``."""
        raise NotImplementedError
