from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.tracker_status import TrackerStatus


class CacheRecord(BaseModel):
    """Last observed product set for one tracker, overwritten on every run."""

    model_config = ConfigDict(populate_by_name=True)

    products: List[str] = Field(default_factory=list)
    status: TrackerStatus = TrackerStatus.OUT
    last_check: Optional[datetime] = Field(default=None, alias="lastCheck")
    new_products: List[str] = Field(default_factory=list, alias="newProducts")

    def __repr__(self) -> str:
        return f"<CacheRecord {self.status.value} products={len(self.products)}>"
