from __future__ import annotations

from datetime import datetime

from loguru import logger

from src.trackers.utils import get_tracker, run_tracker


def run_tracker_check(tracker_id: str):
    """排程任務：執行單一 tracker 的檢查"""
    logger.info(f"Starting check for {tracker_id} at {datetime.now()}")

    try:
        tracker = get_tracker(tracker_id)
    except Exception as e:
        logger.error(f"Error creating tracker {tracker_id}: {e}")
        return
    if tracker is None:
        return

    result = run_tracker(tracker)
    logger.info(
        f"Check for {tracker_id} completed: status={result.status} "
        f"exit_code={int(result.exit_code)}"
    )
