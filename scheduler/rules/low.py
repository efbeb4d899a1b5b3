from typing import List
import numpy as np
from core.enums import Severity, ViolationType
from core.individual import Individual
from core.state import SchedulingData
from core.violations import Violation
from utils.constants import DAYS_PER_WEEK

"""
This module contains the low priority rules of the scheduling problem: weekly
hours, rest between shifts, charge nurse cover, consecutive working days and
days off per week.
"""


def daily_hours(ind: Individual, data: SchedulingData) -> np.ndarray:
    """`(D, N)` hours each nurse works on each date, counting every ward assignment."""
    per_shift = ind.genes.sum(axis=1)  # (D, S, N)
    return (per_shift * data.shift_hours[None, :, None]).sum(axis=1)


def weekly_totals(values: np.ndarray, data: SchedulingData) -> np.ndarray:
    """Sum a `(D, N)` table into `(num_weeks, N)` fixed 7-day windows."""
    totals = np.zeros((data.num_weeks, values.shape[1]), dtype=float)
    np.add.at(totals, data.week_index, values)
    return totals


def week_first_day(data: SchedulingData, week: int) -> int:
    """Index of the first in-range date of a week window."""
    return int(np.flatnonzero(data.week_index == week)[0])


def weekly_hours_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Bucket hours into fixed 7-day windows anchored on the configured week start
    and flag each window above the nurse's weekly limit. The limit includes
    overtime when overtime is allowed.
    """
    totals = weekly_totals(daily_hours(ind, data), data)
    violations = []
    for wk, n in np.argwhere(totals > data.weekly_limit[None, :]):
        nurse = data.nurses[n]
        d = week_first_day(data, wk)
        violations.append(
            Violation(
                type=ViolationType.MAX_WEEKLY_HOURS,
                severity=Severity.MEDIUM,
                date=data.dates[d],
                description=f"{nurse.name} works {totals[wk, n]:g}h in the week of {data.dates[d]} (limit {data.weekly_limit[n]:g}h)",
                nurseId=nurse.id,
            )
        )
    return violations


def rest_period_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """Flag a shift starting less than the nurse's minimum rest after the previous one ended."""
    worked = ind.genes.any(axis=1).reshape(data.num_days * data.num_shifts, data.num_nurses)
    days, shifts = np.divmod(np.arange(worked.shape[0]), data.num_shifts)
    starts = days * 24.0 + data.shift_start[shifts]
    ends = starts + data.shift_hours[shifts]

    violations = []
    for n in range(data.num_nurses):
        slots = np.flatnonzero(worked[:, n])
        if len(slots) < 2:
            continue
        gaps = starts[slots[1:]] - ends[slots[:-1]]
        nurse = data.nurses[n]
        for i in np.flatnonzero(gaps < data.min_rest_hours[n]):
            slot = slots[i + 1]
            shift = data.shift_types[shifts[slot]]
            violations.append(
                Violation(
                    type=ViolationType.REST_PERIOD,
                    severity=Severity.MEDIUM,
                    date=data.dates[days[slot]],
                    description=f"{nurse.name} has {max(gaps[i], 0):g}h rest before {shift.value} (min {data.min_rest_hours[n]:g}h)",
                    nurseId=nurse.id,
                    shift=shift,
                )
            )
    return violations


def charge_nurse_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """Flag shifts with fewer charge or admin nurses than the ward's charge requirement."""
    charge_counts = (ind.genes & data.is_charge).sum(axis=3)  # (D, W, S)
    short = charge_counts < data.required_charge[None, :, :]
    violations = []
    for d, w, s in np.argwhere(short):
        ward = data.wards[w]
        shift = data.shift_types[s]
        violations.append(
            Violation(
                type=ViolationType.CHARGE_NURSE_SHORTFALL,
                severity=Severity.MEDIUM,
                date=data.dates[d],
                description=f"{ward.name} {shift.value} has {charge_counts[d, w, s]} of {data.required_charge[w, s]} charge nurses",
                wardId=ward.id,
                shift=shift,
            )
        )
    return violations


def consecutive_days_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """Flag every working day that takes a nurse's run of consecutive days past the maximum."""
    working = ind.genes.any(axis=(1, 2))  # (D, N)
    streak = np.zeros(data.num_nurses, dtype=int)
    violations = []
    for d in range(data.num_days):
        streak = np.where(working[d], streak + 1, 0)
        for n in np.flatnonzero(streak > data.max_consecutive_days):
            nurse = data.nurses[n]
            violations.append(
                Violation(
                    type=ViolationType.MAX_CONSECUTIVE_DAYS,
                    severity=Severity.LOW,
                    date=data.dates[d],
                    description=f"{nurse.name} works {streak[n]} consecutive days (max {data.max_consecutive_days[n]})",
                    nurseId=nurse.id,
                )
            )
    return violations


def days_off_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Flag complete weeks in which a nurse gets fewer days off than required.
    Partial weeks at either end of the range are not checked.
    """
    working = ind.genes.any(axis=(1, 2)).astype(float)  # (D, N)
    days_worked = weekly_totals(working, data)
    days_off = DAYS_PER_WEEK - days_worked
    short = (days_off < data.min_days_off[None, :]) & data.week_complete[:, None]
    violations = []
    for wk, n in np.argwhere(short):
        nurse = data.nurses[n]
        d = week_first_day(data, wk)
        violations.append(
            Violation(
                type=ViolationType.MIN_DAYS_OFF,
                severity=Severity.LOW,
                date=data.dates[d],
                description=f"{nurse.name} has {int(days_off[wk, n])} days off in the week of {data.dates[d]} (min {data.min_days_off[n]})",
                nurseId=nurse.id,
            )
        )
    return violations
