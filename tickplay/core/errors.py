"""
core/errors.py

The two ways the playback core rejects input. Neither is fatal: the store
and the selection stay usable after either one.
"""


class InvalidObservation(ValueError):
    """An observation with a non-finite value or a malformed timestamp."""

    def __init__(self, instrument: str, reason: str):
        self.instrument = instrument
        self.reason = reason
        super().__init__(f"invalid observation for {instrument}: {reason}")


class UnknownInstrument(LookupError):
    """Selection of an identifier outside the configured universe."""

    def __init__(self, instrument: str):
        self.instrument = instrument
        super().__init__(f"unknown instrument '{instrument}'")
