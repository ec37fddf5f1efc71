from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Type

from loguru import logger

from src.config import get_settings
from src.models import CacheRecord, TrackerStatus, TrackerStatusRecord
from src.notifications.dispatcher import NotificationDispatcher
from src.notifications.formatter import format_new_products
from src.storage.json_store import load_cache, save_cache, update_status
from src.trackers.base import BaseTracker, BlockedError, CheckResult, ExitCode, FetchResult

GEARTRADE = "geartrade_la_sportiva_46_5"
ADIDAS = "adidas_adizero_adios_pro_8_5"

TRACKER_IDS = (GEARTRADE, ADIDAS)


def get_tracker_class(tracker_id: str) -> Optional[Type[BaseTracker]]:
    """根據 tracker id 取得對應 Tracker 類別"""
    if tracker_id == GEARTRADE:
        from src.trackers.platforms.geartrade import GeartradeTracker

        return GeartradeTracker
    elif tracker_id == ADIDAS:
        from src.trackers.platforms.adidas import AdidasTracker

        return AdidasTracker
    logger.warning(f"Unknown tracker: {tracker_id}")
    return None


def get_tracker(tracker_id: str) -> Optional[BaseTracker]:
    tracker_cls = get_tracker_class(tracker_id)
    return tracker_cls() if tracker_cls is not None else None


def available_trackers() -> Dict[str, str]:
    """tracker id -> 顯示名稱"""
    return {tracker_id: get_tracker_class(tracker_id).name for tracker_id in TRACKER_IDS}


def diff_products(current: List[str], previous: List[str]) -> List[str]:
    """回傳本次出現但上次快取沒有的商品，保留本次順序"""
    seen = set(previous)
    return [p for p in current if p not in seen]


def _status_record(
    tracker: BaseTracker, status: TrackerStatus, product_count: int
) -> TrackerStatusRecord:
    return TrackerStatusRecord(
        name=tracker.name,
        status=status,
        last_check=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        link=tracker.url,
        product_count=product_count,
    )


def _notify_new_products(tracker: BaseTracker, new_products: List[str]) -> None:
    try:
        message = format_new_products(tracker, new_products)
        results = NotificationDispatcher().dispatch(message)
        logger.info(f"New product notification results: {results}")
    except Exception as e:
        logger.error(f"Error sending notifications for {tracker.tracker_id}: {e}")


def run_tracker(
    tracker: BaseTracker,
    html_file: Optional[Path] = None,
    notify: bool = True,
) -> CheckResult:
    """
    執行一次完整檢查：抓取 -> 萃取 -> 比對快取 -> 寫入快取 -> 更新共用狀態檔。

    html_file（或 tracker.snapshot_file）存在時以離線 HTML 取代網路抓取，
    檔案不存在則照常抓取。任何錯誤都轉為 ExitCode.ERROR。
    """
    settings = get_settings()
    cache_path = settings.cache_path(tracker.cache_filename)
    status_path = settings.trackers_path

    try:
        snapshot = Path(html_file) if html_file is not None else tracker.snapshot_file
        if snapshot is not None and not snapshot.exists():
            logger.warning(f"HTML file {snapshot} not found, fetching live page")
            snapshot = None

        if snapshot is not None:
            logger.info(f"Reading {tracker.name} page from {snapshot}")
            fetched = FetchResult(html=snapshot.read_text(encoding="utf-8"))
        else:
            fetched = tracker.fetch()

        if tracker.is_blocked(fetched.html, fetched.status_code):
            raise BlockedError(f"Blocked by {tracker.name} (HTTP {fetched.status_code} / WAF)")

        if fetched.product_ids is not None:
            current = list(dict.fromkeys(fetched.product_ids))
        else:
            current = tracker.extract_products(fetched.html)

        previous = load_cache(cache_path)
        previous_products = previous.products if previous is not None else []
        new_products = diff_products(current, previous_products)
        status = TrackerStatus.IN if current else TrackerStatus.OUT

        logger.info(f"Found {len(current)} products ({len(new_products)} new)")

        save_cache(
            cache_path,
            CacheRecord(
                products=current,
                status=status,
                last_check=datetime.now(timezone.utc),
                new_products=new_products,
            ),
        )
        update_status(status_path, tracker.tracker_id, _status_record(tracker, status, len(current)))
    except BlockedError as e:
        logger.warning(str(e))
        try:
            update_status(
                status_path,
                tracker.tracker_id,
                _status_record(tracker, TrackerStatus.BLOCKED, 0),
            )
        except Exception as write_error:
            logger.error(f"Could not record BLOCKED status: {write_error}")
        return CheckResult(
            tracker_id=tracker.tracker_id,
            exit_code=ExitCode.ERROR,
            status=TrackerStatus.BLOCKED,
            error=str(e),
        )
    except Exception as e:
        logger.error(f"Error checking {tracker.name}: {e}")
        return CheckResult(
            tracker_id=tracker.tracker_id,
            exit_code=ExitCode.ERROR,
            error=str(e),
        )

    if new_products:
        logger.info(f"New products found: {', '.join(new_products)}")
        if notify:
            _notify_new_products(tracker, new_products)
        exit_code = ExitCode.NEW_PRODUCTS
    else:
        logger.info("No new products")
        exit_code = ExitCode.NO_NEW_PRODUCTS

    return CheckResult(
        tracker_id=tracker.tracker_id,
        exit_code=exit_code,
        status=status,
        products=current,
        new_products=new_products,
    )


def run_all_trackers(notify: bool = True) -> List[CheckResult]:
    results = []
    for tracker_id in TRACKER_IDS:
        logger.info(f"Running tracker {tracker_id}")
        try:
            tracker = get_tracker(tracker_id)
        except Exception as e:
            logger.error(f"Could not create tracker {tracker_id}: {e}")
            results.append(
                CheckResult(tracker_id=tracker_id, exit_code=ExitCode.ERROR, error=str(e))
            )
            continue
        results.append(run_tracker(tracker, notify=notify))
    return results


def combined_exit_code(results: List[CheckResult]) -> ExitCode:
    """任一 tracker 有新品為 0；全部失敗為 2；其餘為 1"""
    if any(r.exit_code == ExitCode.NEW_PRODUCTS for r in results):
        return ExitCode.NEW_PRODUCTS
    if results and all(r.exit_code == ExitCode.ERROR for r in results):
        return ExitCode.ERROR
    return ExitCode.NO_NEW_PRODUCTS
