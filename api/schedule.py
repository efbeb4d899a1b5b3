from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from scheduler.builder import build_schedule
from schemas.schedule.generate import ScheduleRequest
from schemas.schedule.roster import MaterializedSchedule
from exceptions.custom_errors import *
from docs.schedule.roster import schedule_roster_description
import logging
import traceback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Roster"])


# generate roster
@router.post(
    "/generate",
    response_model=MaterializedSchedule,
    description=schedule_roster_description,
    summary="Generate Roster",
)
async def generate_schedule(request: ScheduleRequest):
    try:
        # the search is CPU bound; keep the event loop free
        return await run_in_threadpool(build_schedule, request)

    except tuple(CUSTOM_ERRORS) as e:
        logger.info(f"Schedule generation rejected: {type(e).__name__}: {e}")
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        logger.error(f"Schedule generation failed: {e}\n{tb}")
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")
