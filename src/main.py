from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.router import api_router
from src.api.trackers import status_document
from src.config import get_settings
from src.scheduler.runner import start_scheduler

settings = get_settings()
scheduler: Optional[object] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global scheduler
    logger.info("Starting up...")

    if settings.scheduler_enabled:
        scheduler = start_scheduler()

    yield

    if scheduler:
        scheduler.shutdown()
        scheduler = None
    logger.info("Shutting down...")


app = FastAPI(
    title="Stock Radar",
    description="Inventory trackers status API",
    version="0.1.0",
    lifespan=lifespan,
)

# 儀表板可能由其他靜態主機提供
if settings.cors_origins:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]
else:
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)

# 與靜態部署相同路徑，儀表板可直接輪詢
app.add_api_route("/trackers.json", status_document, methods=["GET"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/scheduler")
async def scheduler_status():
    jobs = []
    if scheduler:
        for job in scheduler.get_jobs():
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": str(job.next_run_time) if job.next_run_time else None,
                }
            )

    return {
        "scheduler_running": scheduler is not None and scheduler.running,
        "jobs": jobs,
    }
