from __future__ import annotations

import re
from typing import List

import httpx
from loguru import logger

from src.config import get_settings
from src.trackers.base import BaseTracker, FetchResult

SEARCH_URL = (
    "https://geartrade.com/search?q=la+sportiva&type=article%2Cpage%2Cproduct"
    "&options%5Bprefix%5D=last&sort_by=relevance&filter.v.option.size=46.5"
)

_PRODUCT_ID_RE = re.compile(r'data-product-id="(\d+)"')


class GeartradeTracker(BaseTracker):
    tracker_id = "geartrade_la_sportiva_46_5"
    name = "Geartrade - La Sportiva 46.5"
    url = SEARCH_URL
    cache_filename = ".geartrade-cache.json"

    def __init__(self):
        settings = get_settings()
        self.client = httpx.Client(
            timeout=settings.http_timeout,
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
        )

    def fetch(self) -> FetchResult:
        logger.info("Fetching Geartrade products...")
        resp = self.client.get(self.url)
        # 403 is reported as BLOCKED by the runner, anything else is an error
        if resp.status_code != 403:
            resp.raise_for_status()
        return FetchResult(html=resp.text, status_code=resp.status_code)

    def extract_products(self, html: str) -> List[str]:
        return list(dict.fromkeys(_PRODUCT_ID_RE.findall(html)))
