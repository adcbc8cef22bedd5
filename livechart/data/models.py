# Pydantic types (DataPoint) + état fenêtre / drag

from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


class DataPoint(BaseModel):
    """Une observation horodatée. Immuable une fois créée."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime   # UTC (naïf -> supposé UTC)
    price: float
    buy_volume: float = 0.0
    sell_volume: float = 0.0

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_dict(self) -> dict:
        """Format compact côté rendu (time en epoch ms, comme côté JS)."""
        return {
            "time": int(self.timestamp.timestamp() * 1000),
            "price": self.price,
            "buys": self.buy_volume,
            "sells": self.sell_volume,
        }


@dataclass(frozen=True)
class Viewport:
    start: int
    end: int
    window_size: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class DragState:
    active: bool = False
    anchor_x: float = 0.0
