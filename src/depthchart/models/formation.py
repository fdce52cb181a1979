"""Formations and their ordered slots."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


Side = Literal["OFF", "DEF"]


class FormationSlot(BaseModel):
    slot_id: str
    slot_key: str
    position_hints: List[str] = Field(default_factory=list)
    x: float = Field(default=0.5, ge=0.0, le=1.0)
    y: float = Field(default=0.5, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    @property
    def position_label(self) -> str:
        """First stored hint, else the slot key without its trailing digits (WR2 -> WR)."""

        if self.position_hints:
            return self.position_hints[0]
        return self.slot_key.rstrip("0123456789")


class Formation(BaseModel):
    formation_id: str
    side: Side
    name: str
    variant: Optional[str] = None
    slots: List[FormationSlot] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return f"{self.name}:{self.variant}" if self.variant else self.name
