from __future__ import annotations

import json
import random
from typing import Any, List
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from playwright_stealth import Stealth

from src.config import get_settings
from src.trackers.base import BaseTracker, FetchResult

BASE_URL = "https://www.adidas.com"
PRODUCT_URL = f"{BASE_URL}/us/adizero-adios-pro-4-shoes/JR1094.html?forceSelSize=12"

IMAGE_LINK_SELECTOR = '[data-testid="product-card-image-link"]'
PRODUCT_CARD_SELECTOR = '[data-auto-id="product-card"]'
CARD_LINK_SELECTOR = '[data-auto-id="product-card"] a[href$=".html"]'

# 站內非商品頁
EXCLUDED_PATHS = ("/help", "/account", "/terms", "/privacy")

_ID_KEYS = ("productId", "id", "product_id")
_URL_KEYS = ("url", "link", "productUrl", "product_url", "slug")

_COLLECT_HREFS_JS = (
    "els => els.map(el => el.getAttribute('href') || el.href).filter(Boolean)"
)


def normalize_product_url(url: str) -> str:
    """解析為絕對網址，只保留 origin + path"""
    try:
        parts = urlsplit(urljoin(BASE_URL, url))
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def _first_value(node: dict, keys) -> Any:
    for key in keys:
        value = node.get(key)
        if value:
            return value
    return None


def collect_product_nodes(node: Any, results: List[str]) -> None:
    """遞迴走訪 JSON，收集同時帶有商品 ID 與網址的物件"""
    if isinstance(node, list):
        for item in node:
            collect_product_nodes(item, results)
        return
    if isinstance(node, dict):
        product_id = _first_value(node, _ID_KEYS)
        url = _first_value(node, _URL_KEYS)
        if product_id and isinstance(url, str):
            results.append(url)
        for value in node.values():
            collect_product_nodes(value, results)


def extract_product_urls(html: str) -> List[str]:
    soup = BeautifulSoup(html, "lxml")
    urls: List[str] = []

    # 1) Next.js 內嵌資料
    next_data = soup.find("script", id="__NEXT_DATA__", type="application/json")
    if next_data is not None and next_data.string:
        try:
            found: List[str] = []
            collect_product_nodes(json.loads(next_data.string), found)
            urls.extend(normalize_product_url(u) for u in found)
        except json.JSONDecodeError as e:
            logger.debug(f"Ignoring unparsable __NEXT_DATA__: {e}")

    # 2) 商品卡片
    for card in soup.select(PRODUCT_CARD_SELECTOR):
        link = card.select_one('a[href$=".html"]')
        if link is not None:
            urls.append(normalize_product_url(link["href"]))

    # 2b) 商品卡片圖片連結
    for link in soup.select(IMAGE_LINK_SELECTOR):
        href = link.get("href", "")
        if ".html" in href:
            urls.append(normalize_product_url(href))

    # 3) 退而求其次：頁面上任何 /us/*.html 連結
    for tag in soup.find_all(href=True):
        href = tag["href"]
        if not href.startswith("/us/") or not href.endswith(".html"):
            continue
        if any(path in href for path in EXCLUDED_PATHS):
            continue
        urls.append(normalize_product_url(href))

    return list(dict.fromkeys(urls))


class AdidasTracker(BaseTracker):
    tracker_id = "adidas_adizero_adios_pro_8_5"
    name = "Adidas - Adizero Adios Pro 8.5"
    url = PRODUCT_URL
    cache_filename = ".adidas-cache.json"

    def __init__(self):
        self.settings = get_settings()
        self.snapshot_file = self.settings.adidas_html_file

    def _open_context(self, playwright):
        """有設定使用者資料夾時沿用既有 Chrome profile"""
        launch_args = ["--disable-blink-features=AutomationControlled"]
        if self.settings.browser_user_data_dir:
            context = playwright.chromium.launch_persistent_context(
                str(self.settings.browser_user_data_dir),
                headless=self.settings.browser_headless,
                channel=self.settings.browser_channel,
                args=launch_args,
            )
            return None, context
        browser = playwright.chromium.launch(
            headless=self.settings.browser_headless,
            channel=self.settings.browser_channel,
            args=launch_args,
        )
        context = browser.new_context(
            user_agent="Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                       "AppleWebKit/537.36 Chrome/120.0.0.0 Safari/537.36"
        )
        return browser, context

    def _collect_links(self, page, selector: str) -> List[str]:
        try:
            return page.eval_on_selector_all(selector, _COLLECT_HREFS_JS)
        except PlaywrightError as e:
            logger.warning(f"Could not read links for {selector}: {e}")
            return []

    def fetch(self) -> FetchResult:
        logger.info("Fetching Adidas products...")
        with sync_playwright() as p:
            browser, context = self._open_context(p)
            try:
                page = context.pages[0] if context.pages else context.new_page()
                Stealth().apply_stealth_sync(page)

                logger.info("Opening page...")
                response = page.goto(self.url, wait_until="domcontentloaded", timeout=60000)
                status_code = response.status if response is not None else 200

                logger.info("Waiting for content to render...")
                delay = random.uniform(
                    self.settings.browser_delay_min, self.settings.browser_delay_max
                )
                page.wait_for_timeout(delay * 1000)

                # 觸發 lazy-loading
                page.evaluate("() => window.scrollBy(0, window.innerHeight)")
                page.wait_for_timeout(1000)
                page.evaluate("() => window.scrollBy(0, -window.innerHeight)")
                page.wait_for_timeout(1000)

                html = page.content()
                links = self._collect_links(page, IMAGE_LINK_SELECTOR)
                links += self._collect_links(page, CARD_LINK_SELECTOR)

                if self.settings.browser_linger_seconds > 0:
                    logger.info(
                        f"Keeping the browser open for "
                        f"{self.settings.browser_linger_seconds} seconds..."
                    )
                    page.wait_for_timeout(self.settings.browser_linger_seconds * 1000)
            finally:
                context.close()
                if browser is not None:
                    browser.close()

        product_ids = list(dict.fromkeys(normalize_product_url(link) for link in links))
        return FetchResult(html=html, status_code=status_code, product_ids=product_ids)

    def extract_products(self, html: str) -> List[str]:
        return extract_product_urls(html)
