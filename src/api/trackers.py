from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ValidationError

from src.config import get_settings
from src.models import CacheRecord, TrackerStatusRecord
from src.storage.json_store import StorageError, load_cache, load_statuses
from src.trackers.utils import get_tracker_class

router = APIRouter(prefix="/api", tags=["trackers"])

NO_CACHE_HEADERS = {"Cache-Control": "no-store"}


class TrackerResponse(TrackerStatusRecord):
    id: str


class TrackerListResponse(BaseModel):
    items: List[TrackerResponse]


def _load_statuses() -> dict:
    try:
        return load_statuses(get_settings().trackers_path)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


async def status_document():
    """共用狀態檔原樣輸出（查詢字串中的 cache-buster 會被忽略）"""
    return JSONResponse(_load_statuses(), headers=NO_CACHE_HEADERS)


def _to_response(tracker_id: str, record) -> Optional[TrackerResponse]:
    """狀態檔可能含其他工具寫入的項目，格式不符者回傳 None"""
    try:
        validated = TrackerStatusRecord.model_validate(record)
    except ValidationError as e:
        logger.warning(f"Skipping malformed status entry {tracker_id}: {e.error_count()} error(s)")
        return None
    return TrackerResponse(id=tracker_id, **validated.model_dump())


@router.get("/trackers", response_model=TrackerListResponse)
async def list_trackers():
    statuses = _load_statuses()
    items = [_to_response(tracker_id, record) for tracker_id, record in statuses.items()]
    return {"items": [item for item in items if item is not None]}


@router.get("/trackers/{tracker_id}", response_model=TrackerResponse)
async def get_tracker_status(tracker_id: str):
    statuses = _load_statuses()
    if tracker_id not in statuses:
        raise HTTPException(status_code=404, detail="Tracker not found")
    item = _to_response(tracker_id, statuses[tracker_id])
    if item is None:
        raise HTTPException(status_code=422, detail="Malformed status entry")
    return item


@router.get("/trackers/{tracker_id}/cache", response_model=CacheRecord)
async def get_tracker_cache(tracker_id: str):
    tracker_cls = get_tracker_class(tracker_id)
    if tracker_cls is None:
        raise HTTPException(status_code=404, detail="Tracker not found")
    try:
        record = load_cache(get_settings().cache_path(tracker_cls.cache_filename))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail="Tracker has not run yet")
    return record
