from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from loguru import logger

from src.config import get_settings
from src.scheduler.jobs import run_tracker_check
from src.trackers.utils import TRACKER_IDS


def create_scheduler() -> BackgroundScheduler:
    settings = get_settings()
    scheduler = BackgroundScheduler()

    for tracker_id in TRACKER_IDS:
        scheduler.add_job(
            run_tracker_check,
            "interval",
            minutes=settings.check_interval_minutes,
            args=[tracker_id],
            id=f"check_{tracker_id}",
            name=f"Check {tracker_id}",
            # 瀏覽器檢查可能很久，避免同一 tracker 重疊執行
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(),
        )

    logger.info(f"Scheduler configured with {len(TRACKER_IDS)} tracker jobs")
    return scheduler


def start_scheduler():
    scheduler = create_scheduler()
    scheduler.start()
    logger.info("Scheduler started")
    return scheduler
