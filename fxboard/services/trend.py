"""Illustrative trend samples for the rate chart.

This is NOT historical data and NOT a forecast. The samples are random jitter
around the current rate so the chart has some texture; nothing about them is
meant to be accurate. Inject a seeded ``random.Random`` to make them
reproducible in tests.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from fxboard.services.money import quantize_str

DEFAULT_SAMPLE_COUNT = 12
DEFAULT_JITTER = 0.025


@dataclass(frozen=True)
class TrendSample:
    label: str
    value: float


class TrendSampler:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        count: int = DEFAULT_SAMPLE_COUNT,
        jitter: float = DEFAULT_JITTER,
    ):
        if count <= 0:
            raise ValueError("sample count must be positive")
        self._rng = rng or random.Random()
        self.count = count
        self.jitter = jitter

    def sample(self, center: float) -> List[TrendSample]:
        return [
            TrendSample(
                label=f"{i}h",
                value=center * (1 + self._rng.uniform(-self.jitter, self.jitter)),
            )
            for i in range(self.count)
        ]


def change_percent(samples: Sequence[TrendSample]) -> float:
    """Percent move from the first to the last sample; 0.0 with fewer than two."""
    if len(samples) < 2 or samples[0].value <= 0:
        return 0.0
    return (samples[-1].value / samples[0].value - 1) * 100


def format_change(percent: float) -> str:
    if not math.isfinite(percent):
        return "0.00"
    text = quantize_str(percent, 2)
    if text in ("0.00", "-0.00"):
        return "0.00"
    return text if text.startswith("-") else f"+{text}"
