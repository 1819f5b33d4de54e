"""
core/generator.py

Synthetic price generation. No state, no I/O: given an instrument and a
virtual clock time, produce one Observation.

The curve is a slow sine wave offset per instrument plus up to ±1.0 of
uniform noise, so two calls with the same inputs will usually differ.
"""

import math
import random
from typing import Optional

from tickplay.core.series import Observation

BASE_SYMBOLS = (
    "AAPL", "MSFT", "GOOG", "AMZN", "META", "NVDA", "TSLA", "AMD",
    "NFLX", "INTC", "AVGO", "ORCL", "CRM", "ADBE", "CSCO",
)

BASE_PRICE = 100.0
AMPLITUDE = 10.0
NOISE = 2.0
PERIOD_DIVISOR = 5.0


def generate(
    instrument: str,
    virtual_time: float,
    rng: Optional[random.Random] = None,
) -> Observation:
    """
    Produce one observation for `instrument` at `virtual_time` (epoch seconds).
    The timestamp is floored to the whole second.
    """
    rng = rng or random
    t = float(virtual_time)
    value = (
        BASE_PRICE
        + math.sin(t / PERIOD_DIVISOR + len(instrument)) * AMPLITUDE
        + (rng.random() - 0.5) * NOISE
    )
    return Observation(instrument=instrument, timestamp=math.floor(t), value=value)


def build_universe(size: int = 100) -> list[str]:
    """
    Demo universe: AAPL1, MSFT2, GOOG3, ... capped at six characters.
    Truncation can produce repeats (INTC100 -> INTC10), those are dropped
    so the result is an ordered set.
    """
    out: list[str] = []
    seen: set[str] = set()
    for i in range(size):
        symbol = (BASE_SYMBOLS[i % len(BASE_SYMBOLS)] + str(i + 1))[:6]
        if symbol in seen:
            continue
        seen.add(symbol)
        out.append(symbol)
    return out
