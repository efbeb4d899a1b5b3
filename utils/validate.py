from collections import Counter
from typing import List
from exceptions.custom_errors import (
    InputMismatchError,
    InvalidConstraintWindowError,
    InvalidDateRangeError,
    InvalidSettingsError,
    NoEligibleNursesError,
)
from schemas.schedule.generate import ScheduleRequest, ScheduleSettings, WardProfile
from core.enums import SHIFT_ORDER, QualificationPolicy
from utils.nurse_utils import can_work_ward


def duplicates(ids: List[str]) -> List[str]:
    """Ids that occur more than once."""
    return sorted(i for i, count in Counter(ids).items() if count > 1)


def validate_settings(settings: ScheduleSettings):
    """
    Cross-field checks on the run settings. Field ranges are already enforced
    by the pydantic model.

    Raises:
        InvalidSettingsError: If the settings are inconsistent.
    """
    errors = []
    if settings.tournamentSize > settings.populationSize:
        errors.append(
            f" • Tournament size ({settings.tournamentSize}) must be less than or equal to population size ({settings.populationSize}).\n"
        )
    if int(settings.eliteRate * settings.populationSize) >= settings.populationSize and settings.populationSize > 1:
        errors.append(" • Elite rate must leave room for at least one offspring per generation.\n")

    if errors:
        errors.insert(0, "Recheck your settings:\n")
        raise InvalidSettingsError("".join(errors))


def validate_request(request: ScheduleRequest):
    """
    Validate a scheduling request before any search begins.

    Checks, in order: the date range, that nurses and wards are present and
    uniquely identified, that every constraint references a known nurse and has
    a sane validity window, the run settings, and that every ward needing staff
    has at least one nurse who could ever work it.

    Raises:
        InvalidDateRangeError: If the end date is before the start date.
        InputMismatchError: If ids are duplicated, lists are empty or a constraint names an unknown nurse.
        InvalidConstraintWindowError: If a constraint's validFrom is after its validUntil.
        InvalidSettingsError: If the settings are inconsistent.
        NoEligibleNursesError: If a ward with requirements has no eligible nurse at all.
    """
    if request.endDate < request.startDate:
        raise InvalidDateRangeError(
            f"End date {request.endDate} must be after or same as start date {request.startDate}."
        )

    errors = []
    if not request.nurses:
        errors.append(" • At least one nurse is required.\n")
    if not request.wards:
        errors.append(" • At least one ward is required.\n")

    dup_nurses = duplicates([n.id for n in request.nurses])
    if dup_nurses:
        errors.append(f" • Duplicate nurse ids: {', '.join(dup_nurses)}\n")
    dup_wards = duplicates([w.id for w in request.wards])
    if dup_wards:
        errors.append(f" • Duplicate ward ids: {', '.join(dup_wards)}\n")

    known = {n.id for n in request.nurses}
    unknown = sorted({c.nurseId for c in request.constraints} - known)
    if unknown:
        errors.append(f" • Constraints reference unknown nurses: {', '.join(unknown)}\n")

    if errors:
        errors.insert(0, "⚠️ Inconsistent scheduling input:\n")
        raise InputMismatchError("".join(errors))

    bad_windows = [c for c in request.constraints if c.validFrom > c.validUntil]
    if bad_windows:
        lines = [
            f" • {c.id or c.nurseId}: validFrom {c.validFrom} is after validUntil {c.validUntil}\n"
            for c in bad_windows
        ]
        raise InvalidConstraintWindowError("Invalid constraint window:\n" + "".join(lines))

    validate_settings(request.settings)

    policy = QualificationPolicy(request.settings.qualificationPolicy)
    unstaffable = [
        w
        for w in request.wards
        if ward_needs_staff(w) and not any(can_work_ward(n, w, policy) for n in request.nurses)
    ]
    if unstaffable:
        lines = [
            f" • {w.name} ({w.id}): requires {', '.join(w.requiredQualifications) or 'no qualifications'}, "
            f"min hierarchy level {w.minHierarchyLevel}\n"
            for w in unstaffable
        ]
        raise NoEligibleNursesError("❌ No nurse can ever staff these wards:\n" + "".join(lines))


def ward_needs_staff(ward: WardProfile) -> bool:
    """Whether any shift of the ward requires at least one nurse."""
    return any(ward.shiftRequirements.for_shift(s).total > 0 for s in SHIFT_ORDER)
