import logging
from typing import Optional
import numpy as np
from utils.validate import validate_request
from scheduler.setup import setup_scheduling_data
from scheduler.solver import run_search
from scheduler.extractor import materialize
from schemas.schedule.generate import ScheduleRequest
from schemas.schedule.roster import MaterializedSchedule

logger = logging.getLogger(__name__)


# == Build Schedule ==
def build_schedule(
    request: ScheduleRequest, rng: Optional[np.random.Generator] = None
) -> MaterializedSchedule:
    """
    Generates a ward schedule from nurses, wards, a date range and approved
    unavailability constraints.

    The request is validated, compiled into numpy lookup tables once, searched
    by the genetic solver and the best individual is materialised.

    Args:
        request (ScheduleRequest): Nurses, wards, constraints and run settings.
        rng (np.random.Generator, optional): Random source; defaults to one seeded from `settings.seed`.

    Returns:
        MaterializedSchedule: The schedule, per-nurse statistics, quality report and convergence history.

    Raises:
        SchedulingInputError: If the request is invalid. Raised before any search begins.
        SchedulingInternalError: If an invariant breaks during the search.
    """
    # === Validate inputs ===
    validate_request(request)

    # === Compile run data ===
    logger.info(
        f"📋 Building schedule {request.startDate} → {request.endDate} for "
        f"{len(request.wards)} wards and {len(request.nurses)} nurses..."
    )
    data = setup_scheduling_data(request)

    # === Search ===
    result = run_search(data, rng)
    if not result.converged:
        logger.info(
            f"⚠️ Best schedule below success threshold ({result.best.fitness:.4f} < "
            f"{request.settings.successThreshold}); returning best found."
        )

    # === Materialize ===
    return materialize(
        result.best,
        data,
        history=result.history,
        generations=result.generations,
        execution_time=result.wall_time,
        converged=result.converged,
        stop_reason=result.stop_reason,
    )
