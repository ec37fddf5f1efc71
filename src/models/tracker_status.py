from __future__ import annotations

import enum

from pydantic import BaseModel


class TrackerStatus(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    BLOCKED = "BLOCKED"


class TrackerStatusRecord(BaseModel):
    """One entry of the shared trackers.json document."""

    name: str
    status: TrackerStatus
    last_check: str
    link: str
    product_count: int = 0

    def __repr__(self) -> str:
        return f"<TrackerStatusRecord {self.name}:{self.status.value}>"
