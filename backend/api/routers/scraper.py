"""Manual scrape triggers and scheduler status."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.api.dependencies import get_scheduler
from backend.api.schemas.scraper import ScraperStatus, TriggerResponse
from backend.api.services.scheduler import ScrapeScheduler

router = APIRouter()


async def _trigger(scheduler: ScrapeScheduler) -> TriggerResponse:
    result = await scheduler.run_once()
    return TriggerResponse(success=result.success, message=result.describe())


@router.post("/refresh", response_model=TriggerResponse)
async def refresh(
    scheduler: Annotated[ScrapeScheduler, Depends(get_scheduler)],
) -> TriggerResponse:
    """Snapshot the live season now."""
    return await _trigger(scheduler)


@router.post("/scraper/trigger", response_model=TriggerResponse)
async def trigger_scraper(
    scheduler: Annotated[ScrapeScheduler, Depends(get_scheduler)],
) -> TriggerResponse:
    """Snapshot the live season now (alias of ``/refresh``)."""
    return await _trigger(scheduler)


@router.get("/scraper/status", response_model=ScraperStatus)
async def scraper_status(
    scheduler: Annotated[ScrapeScheduler, Depends(get_scheduler)],
) -> ScraperStatus:
    """Whether a run is in progress and the outcome of the last one."""
    last = scheduler.last_result
    return ScraperStatus(
        running=scheduler.is_running(),
        last_run_at=last.finished_at.isoformat() if last else None,
        last_result=last.describe() if last else None,
    )
