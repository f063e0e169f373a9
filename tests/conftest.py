import asyncio
import random
from typing import Dict, List

import pytest

from fxboard.services.conversion_state import ConversionState
from fxboard.services.rates.base import RateFetchError, RateSource
from fxboard.services.trend import TrendSampler

TABLES: Dict[str, Dict[str, float]] = {
    "USD": {"USD": 1.0, "EUR": 0.92, "GBP": 0.79, "JPY": 149.5},
    "EUR": {"EUR": 1.0, "USD": 1.087, "GBP": 0.8587, "JPY": 162.5},
    "GBP": {"GBP": 1.0, "USD": 1.2658, "EUR": 1.1646, "JPY": 189.2},
    "JPY": {"JPY": 1.0, "USD": 0.00669, "EUR": 0.00615, "GBP": 0.00528},
}


class FakeSource(RateSource):
    """Answers immediately from TABLES; bases listed in ``failing`` raise."""

    name = "fake"

    def __init__(self, tables=None, failing=()):
        self.tables = tables or TABLES
        self.failing = set(failing)
        self.calls: List[str] = []

    async def fetch_rates(self, base: str):
        self.calls.append(base)
        if base in self.failing:
            raise RateFetchError(base, "boom")
        return dict(self.tables[base])


class GatedSource(FakeSource):
    """Holds each fetch until the test releases the gate for that base."""

    def __init__(self, tables=None, failing=()):
        super().__init__(tables, failing)
        self.gates: Dict[str, asyncio.Event] = {}

    def gate(self, base: str) -> asyncio.Event:
        return self.gates.setdefault(base, asyncio.Event())

    async def fetch_rates(self, base: str):
        self.calls.append(base)
        await self.gate(base).wait()
        if base in self.failing:
            raise RateFetchError(base, "boom")
        return dict(self.tables[base])


async def drain(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def gated_source():
    return GatedSource()


@pytest.fixture
def sampler():
    return TrendSampler(rng=random.Random(42))


@pytest.fixture
def make_state(sampler):
    def _make(src, **kwargs):
        kwargs.setdefault("sampler", sampler)
        return ConversionState(src, **kwargs)

    return _make
