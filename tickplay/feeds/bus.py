"""
feeds/bus.py

Internal event bus. Wires together:
  ClockDriver (clock.py)  →  Bus  →  SeriesStore (apply)
                                 →  Handlers (RenderBridge, logging)

Everything runs in a single asyncio event loop. publish() applies the
observation to the store first and only then notifies handlers, so a handler
reading store.view() always sees the post-apply window.

Usage:
    bus = Bus(store=store)
    bus.on(EventType.OBSERVATION_APPLIED, handler)

    # Clock driver calls this on every tick
    await bus.publish(observation)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Callable, Awaitable

from tickplay.core.errors import InvalidObservation
from tickplay.core.series import Observation, SeriesStore

logger = logging.getLogger(__name__)


class EventType(Enum):
    OBSERVATION_APPLIED  = auto()  # store accepted the observation
    OBSERVATION_REJECTED = auto()  # store refused it (InvalidObservation)
    STORE_CLEARED        = auto()  # every buffer was dropped


@dataclass
class Event:
    type: EventType
    timestamp: datetime
    payload: dict  # different keys per event type

    @classmethod
    def now(cls, event_type: EventType, **kwargs) -> "Event":
        return cls(
            type=event_type,
            timestamp=datetime.now(timezone.utc),
            payload=kwargs,
        )


# Handler signature: async def handler(event: Event) -> None
Handler = Callable[[Event], Awaitable[None]]


class Bus:
    """
    One bus per PlaybackContext.

    Observation flow:
      1. ClockDriver calls await bus.publish(observation)
      2. Bus calls store.apply(observation)
      3. Bus fires OBSERVATION_APPLIED, or OBSERVATION_REJECTED if the store
         raised InvalidObservation

    Handlers are called sequentially in the order they were registered.
    """

    def __init__(self, store: SeriesStore):
        self.store = store
        self._handlers: dict[EventType, list[Handler]] = {et: [] for et in EventType}

    def on(self, event_type: EventType, handler: Handler) -> None:
        """Register an async handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: EventType, handler: Handler) -> None:
        """Remove a previously registered handler."""
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            pass

    async def publish(self, observation: Observation) -> bool:
        """
        Main entry point. Returns True if the store accepted the observation.
        A rejected observation is logged and reported, never raised: the
        next tick simply supersedes it.
        """
        try:
            self.store.apply(observation)
        except InvalidObservation as e:
            logger.warning("rejected observation: %s", e)
            await self._emit(
                EventType.OBSERVATION_REJECTED,
                observation=observation,
                error=e,
            )
            return False

        await self._emit(EventType.OBSERVATION_APPLIED, observation=observation)
        return True

    async def clear(self) -> None:
        """Drop every buffer and tell handlers about it."""
        self.store.clear()
        logger.info("store cleared")
        await self._emit(EventType.STORE_CLEARED)

    async def _emit(self, event_type: EventType, **kwargs) -> None:
        handlers = self._handlers.get(event_type, [])
        if not handlers:
            return
        event = Event.now(event_type, **kwargs)
        for handler in list(handlers):
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "handler error on %s: %s",
                    event_type.name,
                    e,
                    exc_info=True,
                )


# --- Built-in handlers ---

async def log_all(event: Event) -> None:
    """Log every event. Useful for development."""
    logger.info("[%s] %s", event.type.name, event.payload)


async def log_rejections(event: Event) -> None:
    if event.type == EventType.OBSERVATION_REJECTED:
        observation: Observation = event.payload["observation"]
        logger.info(
            "[REJECTED] %s @ %s: %s",
            observation.instrument,
            observation.timestamp,
            event.payload["error"].reason,
        )
