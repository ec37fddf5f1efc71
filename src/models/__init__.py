from src.models.cache_record import CacheRecord
from src.models.tracker_status import TrackerStatus, TrackerStatusRecord

__all__ = [
    "CacheRecord",
    "TrackerStatus",
    "TrackerStatusRecord",
]
