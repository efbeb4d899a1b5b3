import logging
from typing import Dict, List, Optional
import numpy as np
from core.enums import ShiftType
from core.individual import Individual
from core.state import SchedulingData
from core.violations import violations_for_nurse, violations_on
from exceptions.custom_errors import InvalidIndividualError
from schemas.schedule.roster import (
    DailyStats,
    DaySchedule,
    GenerationStats,
    MaterializedSchedule,
    NurseAssignment,
    NurseStats,
    OverallStatistics,
    QualityReport,
    ShiftSlot,
    WardDay,
)
from utils.shift_utils import longest_streak

logger = logging.getLogger(__name__)


def slot_coverage(actual: int, required: int) -> float:
    """Coverage percentage of one slot, capped at 100. A slot that requires nobody is fully covered."""
    if required <= 0:
        return 100.0
    return min(100.0, actual / required * 100.0)


def overtime_hours(ind: Individual, data: SchedulingData) -> np.ndarray:
    """
    Replay every nurse's assignments in chronological order and return
    `(D, W, S, N)` hours of each assignment that fall beyond the nurse's
    contracted weekly hours.
    """
    overtime = np.zeros(ind.genes.shape, dtype=float)
    week_hours = np.zeros((max(data.num_weeks, 1), data.num_nurses), dtype=float)
    for d in range(data.num_days):
        wk = data.week_index[d]
        for s in range(data.num_shifts):
            for w in range(data.num_wards):
                for n in np.flatnonzero(ind.genes[d, w, s]):
                    before = week_hours[wk, n]
                    after = before + data.shift_hours[s]
                    week_hours[wk, n] = after
                    limit = data.max_weekly_hours[n]
                    overtime[d, w, s, n] = max(0.0, after - max(before, limit))
    return overtime


def build_slot(ind, data, overtime, d, w, s) -> ShiftSlot:
    assignments = []
    for n in ind.nurses_at(d, w, s):
        nurse = data.nurses[n]
        assignments.append(
            NurseAssignment(
                nurseId=nurse.id,
                nurseName=nurse.name,
                nurseCode=nurse.code,
                role=nurse.role.value,
                hours=float(data.shift_hours[s]),
                qualifications=list(nurse.qualifications),
                overtime=bool(overtime[d, w, s, n] > 0),
                preferred=bool(data.preferred[d, s, n]),
            )
        )
    required = int(data.required[w, s])
    return ShiftSlot(
        nurses=assignments,
        requiredNurses=required,
        requiredChargeNurses=int(data.required_charge[w, s]),
        actualNurses=len(assignments),
        chargeNurses=int(sum(data.is_charge[n] for n in ind.nurses_at(d, w, s))),
        coverage=round(slot_coverage(len(assignments), required), 2),
    )


def build_nurse_stats(ind: Individual, data: SchedulingData, overtime: np.ndarray) -> Dict[str, NurseStats]:
    worked = ind.genes.sum(axis=1)  # (D, S, N)
    nights = worked[:, ShiftType.NIGHT.position, :] > 0
    stats = {}
    for n, nurse in enumerate(data.nurses):
        per_shift = worked[:, :, n].sum(axis=0)
        total_shifts = int(per_shift.sum())
        preferred = int((worked[:, :, n] * data.preferred[:, :, n]).sum())
        stats[nurse.id] = NurseStats(
            nurseId=nurse.id,
            nurseName=nurse.name,
            totalHours=float((per_shift * data.shift_hours).sum()),
            totalShifts=total_shifts,
            shiftDistribution={shift: int(per_shift[s]) for s, shift in enumerate(data.shift_types)},
            maxConsecutiveNights=longest_streak(nights[:, n]),
            overtimeHours=float(overtime[..., n].sum()),
            preferenceSatisfaction=round(100.0 * preferred / total_shifts, 2) if total_shifts else 100.0,
            constraintViolations=len(violations_for_nurse(ind.violations, nurse.id)),
        )
    return stats


def generation_settings(data: SchedulingData) -> Dict[str, Dict]:
    """Echo of the parameters the schedule was generated with."""
    s = data.settings
    return {
        "parameters": {
            "populationSize": s.populationSize,
            "generations": s.generations,
            "crossoverRate": s.crossoverRate,
            "mutationRate": s.mutationRate,
            "eliteRate": s.eliteRate,
            "tournamentSize": s.tournamentSize,
            "successThreshold": s.successThreshold,
            "seed": s.seed,
        },
        "constraints": {
            "enforceAvailability": s.enforceAvailability,
            "allowOvertime": s.allowOvertime,
            "qualificationPolicy": s.qualificationPolicy.value,
            "allowConstraintOverrideOnStarvation": s.allowConstraintOverrideOnStarvation,
            "weekStart": s.weekStart.value,
            "maxConsecutiveNights": s.maxConsecutiveNights,
            "maxWeeklyHours": s.maxWeeklyHours,
            "maxOvertimeHours": s.maxOvertimeHours,
            "minRestHours": s.minRestHours,
            "maxConsecutiveDays": s.maxConsecutiveDays,
            "minDaysOffPerWeek": s.minDaysOffPerWeek,
        },
        "objectives": data.weights.model_dump(),
    }


def materialize(
    best: Individual,
    data: SchedulingData,
    history: Optional[List[GenerationStats]] = None,
    generations: int = 0,
    execution_time: float = 0.0,
    converged: bool = False,
    stop_reason: str = "generations",
) -> MaterializedSchedule:
    """
    Convert the winning individual into the schedule document handed back to the caller.

    Deterministic: the same individual and data always give the same document.
    Nurse lists follow ascending nurse order and the violation list is copied
    verbatim from the individual.

    Args:
        best (Individual): An evaluated individual.
        data (SchedulingData): The compiled run data.
        history (List[GenerationStats], optional): Convergence history of the search.
        generations (int): Generations actually run.
        execution_time (float): Wall-clock seconds of the search.
        converged (bool): Whether the success threshold was reached.
        stop_reason (str): Why the search stopped.

    Returns:
        MaterializedSchedule: The schedule, per-nurse statistics and quality report.
    """
    if best.scores is None:
        raise InvalidIndividualError("Cannot materialize an individual that has not been evaluated")

    overtime = overtime_hours(best, data)
    schedule = {}
    all_coverage = []
    for d, day in enumerate(data.dates):
        wards = {}
        day_coverage = []
        for w, ward in enumerate(data.wards):
            shifts = {shift: build_slot(best, data, overtime, d, w, s) for s, shift in enumerate(data.shift_types)}
            day_coverage.extend(slot.coverage for slot in shifts.values())
            wards[ward.id] = WardDay(wardId=ward.id, wardName=ward.name, shifts=shifts)

        genes_today = best.genes[d]
        schedule[day] = DaySchedule(
            date=day,
            dayOfWeek=day.strftime("%A"),
            wards=wards,
            dailyStats=DailyStats(
                totalNurses=int(genes_today.any(axis=(0, 1)).sum()),
                totalHours=float((genes_today.sum(axis=(0, 2)) * data.shift_hours).sum()),
                averageCoverage=round(float(np.mean(day_coverage)), 2) if day_coverage else 100.0,
                constraintViolations=violations_on(best.violations, day),
            ),
        )
        all_coverage.extend(day_coverage)

    nurse_stats = build_nurse_stats(best, data, overtime)
    active = [s for s in nurse_stats.values() if s.totalShifts > 0]
    total_shifts = int(best.genes.sum())
    total_hours = float(sum(s.totalHours for s in nurse_stats.values()))

    statistics = OverallStatistics(
        totalShifts=total_shifts,
        totalHours=total_hours,
        averageShiftsPerNurse=round(total_shifts / len(active), 2) if active else 0.0,
        averageHoursPerNurse=round(total_hours / len(active), 2) if active else 0.0,
        averageCoverage=round(float(np.mean(all_coverage)), 2) if all_coverage else 100.0,
        totalConstraintViolations=len(best.violations),
    )

    scores = best.scores
    quality = QualityReport(
        overallScore=round(best.fitness * 100, 2),
        coverageScore=round(scores.coverage, 2),
        fairnessScore=round(scores.fairness, 2),
        preferenceScore=round(scores.preferences, 2),
        constraintScore=round(scores.constraints, 2),
        qualificationScore=round(scores.qualifications, 2),
        violations=list(best.violations),
        criticalViolations=best.critical,
        statistics=statistics,
        generations=generations,
        executionTime=round(execution_time, 3),
        converged=converged,
        stopReason=stop_reason,
    )

    logger.info(
        f"📊 Materialized {len(data.dates)} days: {total_shifts} assignments, "
        f"coverage {statistics.averageCoverage}%, {len(best.violations)} violations"
    )
    return MaterializedSchedule(
        startDate=data.dates[0],
        endDate=data.dates[-1],
        wardIds=[w.id for w in data.wards],
        schedule=schedule,
        nurseStats=nurse_stats,
        quality=quality,
        convergence=list(history or []),
        generationSettings=generation_settings(data),
    )
