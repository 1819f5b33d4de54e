"""
core/context.py

One PlaybackContext per running playback. It owns the store and the
selection and is handed to each component at construction, so there is no
module-level state anywhere in the package.
"""

from dataclasses import dataclass, field

from tickplay.core.selection import SelectionController
from tickplay.core.series import SeriesStore
from tickplay.feeds.bus import Bus
from tickplay.format.schema import PlaybackConfig


@dataclass
class PlaybackContext:
    config: PlaybackConfig
    store: SeriesStore
    selection: SelectionController
    bus: Bus = field(init=False)

    def __post_init__(self):
        self.bus = Bus(store=self.store)

    @classmethod
    def from_config(cls, config: PlaybackConfig) -> "PlaybackContext":
        return cls(
            config=config,
            store=SeriesStore(window=config.window),
            selection=SelectionController(config.universe, initial=config.initial),
        )
