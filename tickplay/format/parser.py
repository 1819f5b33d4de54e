from pathlib import Path
from typing import Optional

import yaml

from tickplay.format.schema import PlaybackConfig


def load_config(path: Optional[str | Path] = None) -> PlaybackConfig:
    if path is None:
        return PlaybackConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return PlaybackConfig(**raw)
