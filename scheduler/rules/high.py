from typing import List
import numpy as np
from core.enums import Severity, ShiftType, ViolationType
from core.individual import Individual
from core.state import SchedulingData
from core.violations import Violation

"""
This module contains the high priority rules of the scheduling problem:
consecutive night shifts, more than one shift per day and under-staffed shifts.
"""


def consecutive_nights_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Walk every nurse's nights in date order. A night on the day after another
    night extends the streak; a gap or a night off resets it. Every night that
    takes the streak past the nurse's maximum is one HIGH violation.
    """
    nights = ind.genes[:, :, ShiftType.NIGHT.position, :].any(axis=1)  # (D, N)
    streak = np.zeros(data.num_nurses, dtype=int)
    violations = []
    for d in range(data.num_days):
        streak = np.where(nights[d], streak + 1, 0)
        for n in np.flatnonzero(streak > data.max_consecutive_nights):
            nurse = data.nurses[n]
            violations.append(
                Violation(
                    type=ViolationType.MAX_CONSECUTIVE_NIGHTS,
                    severity=Severity.HIGH,
                    date=data.dates[d],
                    description=f"{nurse.name} works {streak[n]} consecutive nights (max {data.max_consecutive_nights[n]})",
                    nurseId=nurse.id,
                    shift=ShiftType.NIGHT,
                )
            )
    return violations


def double_shift_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """Flag any nurse working more than one shift type on the same date."""
    worked = ind.genes.any(axis=1)  # (D, S, N)
    shifts_per_day = worked.sum(axis=1)  # (D, N)
    violations = []
    for d, n in np.argwhere(shifts_per_day > 1):
        nurse = data.nurses[n]
        labels = [data.shift_types[s].value for s in np.flatnonzero(worked[d, :, n])]
        violations.append(
            Violation(
                type=ViolationType.DOUBLE_SHIFT,
                severity=Severity.HIGH,
                date=data.dates[d],
                description=f"{nurse.name} works {'/'.join(labels)} on the same day",
                nurseId=nurse.id,
            )
        )
    return violations


def under_staffed_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Flag every (date, ward, shift) with fewer nurses than the ward requires.
    These are scored by the coverage sub-score, not the constraint sub-score.
    """
    counts = ind.counts()  # (D, W, S)
    short = counts < data.required[None, :, :]
    violations = []
    for d, w, s in np.argwhere(short):
        ward = data.wards[w]
        shift = data.shift_types[s]
        violations.append(
            Violation(
                type=ViolationType.UNDER_STAFFED,
                severity=Severity.MEDIUM,
                date=data.dates[d],
                description=f"{ward.name} {shift.value} has {counts[d, w, s]} of {data.required[w, s]} required nurses",
                wardId=ward.id,
                shift=shift,
            )
        )
    return violations
