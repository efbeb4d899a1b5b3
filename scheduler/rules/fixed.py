from typing import List
import numpy as np
from core.enums import Severity, ViolationType
from core.individual import Individual
from core.state import SchedulingData
from core.violations import Violation

"""
This module contains the hard rules of the scheduling problem: approved time-off
requests, weekday availability and a nurse being in two wards at once. Every
violation raised here is CRITICAL.
"""


def unavailability_request_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Flag every assignment that falls on a (date, shift) blocked by an approved,
    in-window unavailability constraint of the assigned nurse.

    :param ind: The individual to check.
    :param data: The compiled scheduling data holding the `blocked` table.
    """
    hits = ind.genes & data.blocked[:, None, :, :]
    violations = []
    for d, w, s, n in np.argwhere(hits):
        nurse = data.nurses[n]
        shift = data.shift_types[s]
        violations.append(
            Violation(
                type=ViolationType.UNAVAILABILITY_REQUEST_VIOLATION,
                severity=Severity.CRITICAL,
                date=data.dates[d],
                description=f"{nurse.name} is assigned to {shift.value} on {data.dates[d]} despite an approved unavailability request",
                nurseId=nurse.id,
                wardId=data.wards[w].id,
                shift=shift,
            )
        )
    return violations


def weekday_availability_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """
    Flag assignments the nurse's weekly availability rules out. Only registered
    when availability is enforced; shifts already reported as an approved
    request violation are not reported twice.
    """
    hits = ind.genes & (data.weekday_unavailable & ~data.blocked)[:, None, :, :]
    violations = []
    for d, w, s, n in np.argwhere(hits):
        nurse = data.nurses[n]
        shift = data.shift_types[s]
        violations.append(
            Violation(
                type=ViolationType.UNAVAILABLE_ASSIGNMENT,
                severity=Severity.CRITICAL,
                date=data.dates[d],
                description=f"{nurse.name} is not available for {shift.value} on {data.dates[d].strftime('%A')}s",
                nurseId=nurse.id,
                wardId=data.wards[w].id,
                shift=shift,
            )
        )
    return violations


def overlapping_assignment_rule(ind: Individual, data: SchedulingData) -> List[Violation]:
    """Flag a nurse assigned to the same date and shift in more than one ward."""
    wards_per_shift = ind.genes.sum(axis=1)  # (D, S, N)
    violations = []
    for d, s, n in np.argwhere(wards_per_shift > 1):
        nurse = data.nurses[n]
        shift = data.shift_types[s]
        ward_ids = [data.wards[w].id for w in np.flatnonzero(ind.genes[d, :, s, n])]
        violations.append(
            Violation(
                type=ViolationType.OVERLAPPING_ASSIGNMENT,
                severity=Severity.CRITICAL,
                date=data.dates[d],
                description=f"{nurse.name} is assigned to {shift.value} in {len(ward_ids)} wards at once ({', '.join(ward_ids)})",
                nurseId=nurse.id,
                shift=shift,
            )
        )
    return violations
