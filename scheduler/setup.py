import logging
import numpy as np
from core.enums import SHIFT_ORDER, Weekday
from core.policy import EvaluatorPolicy
from core.state import SchedulingData
from schemas.schedule.generate import NurseProfile, ScheduleRequest, ScheduleSettings
from utils.nurse_utils import can_work_ward, get_nurse_ids, meets_qualifications
from utils.shift_utils import date_range, shift_tables, week_windows

logger = logging.getLogger(__name__)


def build_ward_tables(wards):
    """`(required, required_charge)` headcount tables of shape `(W, S)`."""
    required = np.zeros((len(wards), len(SHIFT_ORDER)), dtype=int)
    required_charge = np.zeros_like(required)
    for w, ward in enumerate(wards):
        for s, shift in enumerate(SHIFT_ORDER):
            req = ward.shiftRequirements.for_shift(shift)
            required[w, s] = req.total
            required_charge[w, s] = req.chargeNurses
    return required, required_charge


def build_profile_tables(wards, nurses, policy: EvaluatorPolicy):
    """`(qualified, profile_eligible)` tables of shape `(W, N)`."""
    qualified = np.array(
        [[meets_qualifications(n, w, policy.qualification_policy) for n in nurses] for w in wards],
        dtype=bool,
    ).reshape(len(wards), len(nurses))
    profile_eligible = np.array(
        [[can_work_ward(n, w, policy.qualification_policy) for n in nurses] for w in wards],
        dtype=bool,
    ).reshape(len(wards), len(nurses))
    return qualified, profile_eligible


def build_availability_tables(dates, nurses, constraints, nurse_index, policy: EvaluatorPolicy):
    """
    `(blocked, weekday_unavailable, preferred)` tables of shape `(D, S, N)`.

    `blocked` holds approved in-window unavailability requests only; pending,
    rejected and expired requests never block a shift.
    """
    shape = (len(dates), len(SHIFT_ORDER), len(nurses))
    blocked = np.zeros(shape, dtype=bool)
    weekday_unavailable = np.zeros(shape, dtype=bool)
    preferred = np.zeros(shape, dtype=bool)
    day_of = {day: d for d, day in enumerate(dates)}

    for c in constraints:
        n = nurse_index[c.nurseId]
        for blocked_date in c.dates:
            d = day_of.get(blocked_date.date)
            if d is None:
                continue
            for s, shift in enumerate(SHIFT_ORDER):
                if c.blocks(blocked_date.date, shift):
                    blocked[d, s, n] = True

    for d, day in enumerate(dates):
        weekday = Weekday.from_date(day)
        for n, nurse in enumerate(nurses):
            entry = nurse.availability.get(weekday)
            if entry is None:
                if not policy.assume_available_when_unknown:
                    weekday_unavailable[d, :, n] = True
                continue
            if not entry.available:
                weekday_unavailable[d, :, n] = True
            for s, shift in enumerate(SHIFT_ORDER):
                if shift in entry.unavailableShifts:
                    weekday_unavailable[d, s, n] = True
                if shift in entry.preferredShifts:
                    preferred[d, s, n] = True

    return blocked, weekday_unavailable, preferred


def working_limit(nurses, settings: ScheduleSettings, field: str, dtype=float) -> np.ndarray:
    """Per-nurse value of a working constraint, falling back to the run default."""
    default = getattr(settings, field)
    values = []
    for nurse in nurses:
        own = getattr(nurse.workingConstraints, field)
        values.append(default if own is None else own)
    return np.array(values, dtype=dtype)


def setup_scheduling_data(request: ScheduleRequest) -> SchedulingData:
    """
    Compile a validated `ScheduleRequest` into the read-only tables of one run.

    Everything the factory, the evaluator and the fitness function look up per
    gene is precomputed here once, so the search loop only indexes arrays.

    Args:
        request (ScheduleRequest): The validated scheduling request.

    Returns:
        SchedulingData: Entities, policy and numpy lookup tables for the run.
    """
    settings = request.settings
    policy = EvaluatorPolicy.from_settings(settings)
    dates = date_range(request.startDate, request.endDate)
    wards = list(request.wards)
    nurses: list[NurseProfile] = list(request.nurses)
    nurse_index = {nid: n for n, nid in enumerate(get_nurse_ids(nurses))}

    shift_hours, shift_start = shift_tables()
    required, required_charge = build_ward_tables(wards)
    qualified, profile_eligible = build_profile_tables(wards, nurses, policy)
    blocked, weekday_unavailable, preferred = build_availability_tables(
        dates, nurses, request.constraints, nurse_index, policy
    )

    week_index, week_complete = week_windows(dates, policy.week_start)

    data = SchedulingData(
        dates=dates,
        wards=wards,
        nurses=nurses,
        constraints=list(request.constraints),
        shift_types=list(SHIFT_ORDER),
        settings=settings,
        policy=policy,
        weights=settings.fitnessWeights,
        shift_hours=shift_hours,
        shift_start=shift_start,
        required=required,
        required_charge=required_charge,
        is_charge=np.array([n.is_charge for n in nurses], dtype=bool),
        qualified=qualified,
        profile_eligible=profile_eligible,
        blocked=blocked,
        weekday_unavailable=weekday_unavailable,
        preferred=preferred,
        max_consecutive_nights=working_limit(nurses, settings, "maxConsecutiveNights", int),
        max_weekly_hours=working_limit(nurses, settings, "maxWeeklyHours"),
        max_overtime_hours=working_limit(nurses, settings, "maxOvertimeHours"),
        min_rest_hours=working_limit(nurses, settings, "minRestHours"),
        max_consecutive_days=working_limit(nurses, settings, "maxConsecutiveDays", int),
        min_days_off=working_limit(nurses, settings, "minDaysOffPerWeek", int),
        week_index=week_index,
        week_complete=week_complete,
        nurse_index=nurse_index,
    )

    logger.info(
        f"📋 Compiled {len(dates)} days × {len(wards)} wards × {len(SHIFT_ORDER)} shifts × {len(nurses)} nurses "
        f"({int(data.hard_block.sum())} blocked nurse-shifts, {int(required.sum()) * len(dates)} required slots, "
        f"{int(data.eligible.sum())} eligible assignments)"
    )
    return data
