from fastapi import APIRouter

from src.api.trackers import router as trackers_router

api_router = APIRouter()
api_router.include_router(trackers_router)
