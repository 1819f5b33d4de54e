"""
core/series.py

Windowed time-series storage, one bounded buffer per instrument.

SeriesStore is the only thing that mutates a buffer. Everything else reads
through view(), which hands back a snapshot list, so nobody outside this module
holds a live reference to a buffer.

Update rule (apply):
  - empty buffer, or timestamp advances past the last point → append
  - timestamp equal to or behind the last point → overwrite the last point's
    value, keep its timestamp (last write wins within the current bucket)
  - then trim from the front down to the window size
"""

import math
from collections import deque
from dataclasses import dataclass
from numbers import Real
from typing import Optional

from tickplay.core.errors import InvalidObservation


@dataclass(frozen=True)
class Observation:
    """One synthetic price sample for one instrument at one second."""
    instrument: str
    timestamp: int  # seconds
    value: float


@dataclass(frozen=True)
class Point:
    timestamp: int
    value: float

    def to_chart(self) -> dict:
        """Shape expected by the charting collaborator."""
        return {"time": self.timestamp, "value": self.value}


class Series:
    """
    Rolling window of points for a single instrument.
    Timestamps are strictly increasing and len() never exceeds the window:
    the deque's maxlen drops from the front on overflow.
    """

    def __init__(self, instrument: str, window: int = 500):
        self.instrument = instrument
        self._points: deque[Point] = deque(maxlen=window)

    def merge(self, timestamp: int, value: float) -> None:
        if not self._points or timestamp > self._points[-1].timestamp:
            self._points.append(Point(timestamp, value))
        else:
            last = self._points[-1]
            self._points[-1] = Point(last.timestamp, value)

    def points(self) -> list[Point]:
        return list(self._points)

    def last(self) -> Optional[Point]:
        if not self._points:
            return None
        return self._points[-1]

    def __len__(self) -> int:
        return len(self._points)


class SeriesStore:
    """
    Mapping of instrument -> Series. Buffers are created lazily on the first
    observation for an instrument and only go away on clear().

    Usage:
        store = SeriesStore(window=500)
        store.apply(Observation("AAPL1", 1_700_000_000, 101.5))
        store.view("AAPL1")   # [Point(timestamp=1700000000, value=101.5)]
    """

    def __init__(self, window: int = 500):
        if window < 1:
            raise ValueError("window must be at least 1")
        self.window = window
        self._series: dict[str, Series] = {}

    def apply(self, observation: Observation) -> None:
        """
        Append or merge one observation into its instrument's buffer.
        Raises InvalidObservation without touching any state if the
        observation is malformed.
        """
        timestamp, value = _validate(observation)
        series = self._series.get(observation.instrument)
        if series is None:
            series = Series(observation.instrument, self.window)
            self._series[observation.instrument] = series
        series.merge(timestamp, value)

    def view(self, instrument: str) -> list[Point]:
        """Snapshot of the instrument's window. Empty if never observed."""
        series = self._series.get(instrument)
        return series.points() if series else []

    def clear(self) -> None:
        self._series.clear()

    def last_value(self, instrument: str) -> Optional[float]:
        series = self._series.get(instrument)
        if series is None:
            return None
        last = series.last()
        return last.value if last else None

    def instruments(self) -> list[str]:
        """Instruments with a buffer, in order of first observation."""
        return list(self._series)

    def __contains__(self, instrument: str) -> bool:
        return instrument in self._series

    def __len__(self) -> int:
        return len(self._series)

    def __repr__(self) -> str:
        return f"SeriesStore(window={self.window}, instruments={len(self)})"


# --- Validation ---

def _validate(observation: Observation) -> tuple[int, float]:
    """Return (timestamp, value) normalized to (int, float), or raise."""
    instrument = observation.instrument
    ts = observation.timestamp
    value = observation.value

    if isinstance(ts, bool) or not isinstance(ts, Real):
        raise InvalidObservation(instrument, f"timestamp {ts!r} is not a number")
    try:
        whole = math.isfinite(ts) and int(ts) == ts
    except (OverflowError, ValueError, TypeError):
        raise InvalidObservation(instrument, "timestamp is out of range") from None
    if not whole:
        raise InvalidObservation(instrument, f"timestamp {ts!r} is not a whole second")

    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidObservation(instrument, f"value {value!r} is not a number")
    try:
        value = float(value)
    except (OverflowError, ValueError, TypeError):
        raise InvalidObservation(instrument, "value is out of range") from None
    if not math.isfinite(value):
        raise InvalidObservation(instrument, f"value {value!r} is not finite")

    return int(ts), value
