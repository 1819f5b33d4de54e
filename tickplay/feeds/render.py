"""
feeds/render.py

Pushes the active instrument's window to the presentation layer.

RenderBridge listens on the Bus and on the SelectionController:
  - OBSERVATION_APPLIED for the active instrument → publish its window
  - OBSERVATION_APPLIED for anything else         → nothing (store already has it)
  - selection change                              → publish the new window at once
  - STORE_CLEARED                                 → publish the (empty) window

Every publish carries the full current window as [{"time", "value"}, ...],
never a delta.
"""

import logging
from typing import Callable

from tickplay.core.context import PlaybackContext
from tickplay.feeds.bus import Event, EventType

logger = logging.getLogger(__name__)

# Presenter signature: def presenter(instrument: str, points: list[dict]) -> None
Presenter = Callable[[str, list[dict]], None]


class RenderBridge:
    def __init__(self, ctx: PlaybackContext, presenter: Presenter):
        self._bus = ctx.bus
        self._store = ctx.store
        self._selection = ctx.selection
        self._presenter = presenter
        self._attached = False
        self.published = 0

    def attach(self) -> "RenderBridge":
        if self._attached:
            return self
        self._bus.on(EventType.OBSERVATION_APPLIED, self._on_applied)
        self._bus.on(EventType.STORE_CLEARED, self._on_cleared)
        self._selection.watch(self._on_selected)
        self._attached = True
        return self

    def detach(self) -> None:
        if not self._attached:
            return
        self._bus.off(EventType.OBSERVATION_APPLIED, self._on_applied)
        self._bus.off(EventType.STORE_CLEARED, self._on_cleared)
        self._selection.unwatch(self._on_selected)
        self._attached = False

    def snapshot(self) -> list[dict]:
        """Current chart points for the active instrument, for polling callers."""
        return [p.to_chart() for p in self._store.view(self._selection.active())]

    def publish(self) -> None:
        instrument = self._selection.active()
        self._presenter(instrument, self.snapshot())
        self.published += 1

    # --- Handlers ---

    async def _on_applied(self, event: Event) -> None:
        if event.payload["observation"].instrument == self._selection.active():
            self.publish()

    async def _on_cleared(self, event: Event) -> None:
        self.publish()

    def _on_selected(self, instrument: str) -> None:
        self.publish()


# --- Built-in presenters ---

def make_print_presenter() -> Presenter:
    """Prints a one-line summary of every published window."""
    def presenter(instrument: str, points: list[dict]) -> None:
        if not points:
            print(f"·  {instrument:<6} (no data)")
            return
        last = points[-1]
        print(f"▲  {instrument:<6} {len(points):>4} pts  last {last['value']:.2f} @ {last['time']}")
    return presenter
