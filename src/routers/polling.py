from fastapi import APIRouter, HTTPException

from core.polling_scheduler import PollingScheduler
from core.service_manager import service_manager
from schemas import PollingStatusResponse

router = APIRouter(prefix="/polling", tags=["polling"])

NOT_STARTED = {
    503: {
        "description": "Dashboard services are not running.",
        "content": {"application/json": {"example": {"detail": "Dashboard services are not running"}}},
    }
}


def _scheduler() -> PollingScheduler:
    if service_manager.scheduler is None:
        raise HTTPException(status_code=503, detail="Dashboard services are not running")
    return service_manager.scheduler


@router.get("/status", response_model=PollingStatusResponse, responses=NOT_STARTED)
async def get_polling_status() -> PollingStatusResponse:
    """State of the polling scheduler and its counters."""
    scheduler = _scheduler()
    stats = scheduler.stats
    return PollingStatusResponse(
        state=scheduler.state,
        source=scheduler.source.name,
        interval=scheduler.interval,
        ticks_fired=stats.ticks_fired,
        ticks_skipped=stats.ticks_skipped,
        samples_ok=stats.samples_ok,
        samples_failed=stats.samples_failed,
        consecutive_failures=stats.consecutive_failures,
        last_success_time=stats.last_success_time,
    )


@router.put("/start", status_code=204, responses=NOT_STARTED)
async def start_polling() -> None:
    """
    Resume polling. Samples once immediately, then every interval.
    Does nothing if polling is already running.
    """
    _scheduler().start()


@router.put("/stop", status_code=204, responses=NOT_STARTED)
async def stop_polling() -> None:
    """
    Pause polling. The last readings stay available; results of a sample
    still in flight are discarded.
    """
    _scheduler().stop()
