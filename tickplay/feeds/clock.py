"""
feeds/clock.py

Simulated feed. While running, every period it picks one instrument at random
from the universe, asks the generator for an observation, and publishes it
to the Bus.

With N instruments and period P each instrument is updated on average every
N·P seconds: one instrument per period, not one per instrument.

Usage:
    driver = ClockDriver(ctx)
    driver.start()      # needs a running event loop
    ...
    driver.stop()       # no emission happens after this returns
"""

import asyncio
import logging
import random
import time
from typing import Callable, Optional

from tickplay.core.context import PlaybackContext
from tickplay.core.generator import generate
from tickplay.core.series import Observation

logger = logging.getLogger(__name__)

# generate(instrument, virtual_time, rng) -> Observation
Generator = Callable[[str, float, random.Random], Observation]


class ClockDriver:
    """
    Stopped → Running → Stopped, driven only by start() / stop().

    The cycle is one asyncio task. A task only emits while it is still the
    driver's current task, so stop() followed by start() can never leave two
    cycles ticking side by side, and stop() from inside a handler lets the
    in-flight fan-out finish but nothing after it.
    """

    def __init__(
        self,
        ctx: PlaybackContext,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
        generator: Generator = generate,
    ):
        self._bus = ctx.bus
        self._universe = list(ctx.config.universe)
        self._period = ctx.config.period
        self._clock = clock
        self._rng = rng or random.Random()
        self._generate = generator
        self._task: Optional[asyncio.Task] = None
        self._ticking: Optional[asyncio.Task] = None  # task mid fan-out, if any
        self.emitted = 0

    # --- Public API ---

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Begin ticking. No-op if already running."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="playback_clock"
        )
        logger.info("clock started (period %.3fs, %d instruments)", self._period, len(self._universe))

    def stop(self) -> None:
        """Stop ticking. No-op if already stopped."""
        task, self._task = self._task, None
        if task is None:
            return
        # A task mid fan-out finishes the tick, then its loop exits.
        if task is not self._ticking:
            task.cancel()
        logger.info("clock stopped after %d emissions", self.emitted)

    def toggle(self) -> bool:
        """Flip between running and stopped. Returns the new running state."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    # --- Cycle ---

    async def _run(self) -> None:
        me = asyncio.current_task()
        loop = asyncio.get_running_loop()
        next_at = loop.time()

        while self._task is me:
            # missed deadlines are skipped, never fired back to back
            next_at = max(next_at + self._period, loop.time())
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            if self._task is not me:
                return
            self._ticking = me
            try:
                await self._tick()
            except Exception as e:
                logger.error("tick failed: %s", e, exc_info=True)
            finally:
                if self._ticking is me:
                    self._ticking = None

    async def _tick(self) -> None:
        instrument = self._rng.choice(self._universe)
        observation = self._generate(instrument, self._clock(), self._rng)
        self.emitted += 1
        await self._bus.publish(observation)

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"ClockDriver({state}, emitted={self.emitted})"
