"""
main.py

Wires the full stack together end to end.
Run with: python main.py

Environment (a .env file is picked up too):
  PLAYBACK_CONFIG   path to a YAML config, defaults to the built-in demo universe
  PLAYBACK_SECONDS  how long to run, default 10
  LOG_LEVEL         default INFO
"""

import asyncio
import logging
import os
from dotenv import load_dotenv

from tickplay.core.context import PlaybackContext
from tickplay.feeds.bus import EventType, log_all, log_rejections
from tickplay.feeds.clock import ClockDriver
from tickplay.feeds.render import RenderBridge, make_print_presenter
from tickplay.format.parser import load_config

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(levelname)s %(name)s: %(message)s",
)


async def main():
    # --- Build the stack ---
    config = load_config(os.getenv("PLAYBACK_CONFIG") or None)
    ctx = PlaybackContext.from_config(config)
    driver = ClockDriver(ctx)
    bridge = RenderBridge(ctx, make_print_presenter()).attach()
    ctx.bus.on(EventType.OBSERVATION_REJECTED, log_rejections)
    if logging.getLogger().isEnabledFor(logging.DEBUG):
        for event_type in EventType:
            ctx.bus.on(event_type, log_all)

    seconds = float(os.getenv("PLAYBACK_SECONDS", "10"))
    print(f"\nUniverse: {len(config.universe)} instruments, watching {ctx.selection.active()}")
    print(f"Store: {ctx.store}\n")

    # --- Play, switch instruments halfway ---
    driver.start()
    await asyncio.sleep(seconds / 2)

    busiest = max(ctx.store.instruments(), key=lambda s: len(ctx.store.view(s)), default=None)
    if busiest is not None:
        ctx.selection.select(busiest)

    await asyncio.sleep(seconds / 2)

    # --- Pause, wipe every window, resume ---
    driver.toggle()
    print(f"\nPaused, resetting {len(ctx.store)} series")
    await ctx.bus.clear()
    driver.toggle()

    await asyncio.sleep(seconds / 4)
    driver.stop()

    print(f"\n{driver}")
    print(f"Store: {ctx.store}")
    print(f"Published {bridge.published} windows for the display")


if __name__ == "__main__":
    asyncio.run(main())
