"""
core/selection.py

Which instrument is on screen. Owns a single scalar, the active identifier,
and nothing else. Switching never touches SeriesStore, so updates for the
other instruments keep accumulating in the background.
"""

import logging
from typing import Callable, Iterable, Optional

from tickplay.core.errors import UnknownInstrument

logger = logging.getLogger(__name__)

# Listener signature: def listener(instrument: str) -> None
SelectionListener = Callable[[str], None]


class SelectionController:
    """
    Usage:
        selection = SelectionController(["AAPL1", "MSFT2"], initial="AAPL1")
        selection.select("MSFT2")
        selection.active()   # "MSFT2"
    """

    def __init__(self, universe: Iterable[str], initial: Optional[str] = None):
        self._universe: tuple[str, ...] = tuple(universe)
        self._members = frozenset(self._universe)
        if not self._universe:
            raise ValueError("universe must not be empty")

        if initial is None:
            initial = self._universe[0]
        if initial not in self._members:
            raise UnknownInstrument(initial)

        self._active = initial
        self._listeners: list[SelectionListener] = []

    @property
    def universe(self) -> tuple[str, ...]:
        return self._universe

    def active(self) -> str:
        return self._active

    def select(self, instrument: str) -> bool:
        """
        Make `instrument` the active one.
        Returns True if the selection changed. Raises UnknownInstrument for
        identifiers outside the universe, leaving the selection as it was.
        """
        if instrument not in self._members:
            raise UnknownInstrument(instrument)
        if instrument == self._active:
            return False

        previous, self._active = self._active, instrument
        logger.info("selection %s -> %s", previous, instrument)
        for listener in list(self._listeners):
            try:
                listener(instrument)
            except Exception as e:
                logger.error("selection listener error: %s", e, exc_info=True)
        return True

    def watch(self, listener: SelectionListener) -> None:
        """Call `listener(instrument)` after every selection change."""
        self._listeners.append(listener)

    def unwatch(self, listener: SelectionListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def __contains__(self, instrument: str) -> bool:
        return instrument in self._members

    def __repr__(self) -> str:
        return f"SelectionController(active={self._active!r}, universe={len(self._universe)})"
