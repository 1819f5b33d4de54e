from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tickplay.core.generator import build_universe


class PlaybackConfig(BaseModel):
    universe: list[str] = Field(default_factory=build_universe)
    period_ms: int = 500
    window: int = 500
    initial: Optional[str] = None

    @field_validator("universe")
    @classmethod
    def must_be_ordered_set(cls, v):
        if len(v) == 0:
            raise ValueError("universe must have at least one instrument")
        if any(not s.strip() for s in v):
            raise ValueError("instrument identifiers must not be blank")
        if len(set(v)) != len(v):
            raise ValueError("universe must not contain duplicates")
        return v

    @field_validator("period_ms", "window")
    @classmethod
    def must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @model_validator(mode="after")
    def initial_in_universe(self):
        if self.initial is None:
            self.initial = self.universe[0]
        elif self.initial not in self.universe:
            raise ValueError(f"initial instrument '{self.initial}' is not in the universe")
        return self

    @property
    def period(self) -> float:
        """Tick period in seconds."""
        return self.period_ms / 1000
