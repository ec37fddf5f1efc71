from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from src.models import TrackerStatus

BLOCKED_MARKERS = ("WAFfailoverassets", "HTTP 403", "Reference Error")


class ExitCode(enum.IntEnum):
    NEW_PRODUCTS = 0
    NO_NEW_PRODUCTS = 1
    ERROR = 2


class BlockedError(Exception):
    """The retailer answered with a 403 or a WAF interstitial."""


@dataclass
class FetchResult:
    html: str
    status_code: int = 200
    # Ids already read from a live DOM; None means "extract them from html"
    product_ids: Optional[List[str]] = None


@dataclass
class CheckResult:
    tracker_id: str
    exit_code: ExitCode
    status: Optional[TrackerStatus] = None
    products: List[str] = field(default_factory=list)
    new_products: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def has_new_products(self) -> bool:
        return bool(self.new_products)


class BaseTracker(ABC):
    tracker_id: str = ""
    name: str = ""
    url: str = ""
    cache_filename: str = ""
    # 離線 HTML 快照；檔案存在時取代網路抓取
    snapshot_file: Optional[Path] = None

    @abstractmethod
    def fetch(self) -> FetchResult:
        """抓取追蹤頁面"""
        ...

    @abstractmethod
    def extract_products(self, html: str) -> List[str]:
        """從 HTML 萃取商品識別碼（不重複、保留出現順序）"""
        ...

    def is_blocked(self, html: str, status_code: int) -> bool:
        if status_code == 403:
            return True
        if not html:
            return False
        return any(marker in html for marker in BLOCKED_MARKERS)
