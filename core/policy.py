from dataclasses import dataclass
from core.enums import QualificationPolicy, Weekday
from utils.constants import FAIRNESS_NORMALIZER, VIOLATION_TOLERANCE


@dataclass(frozen=True)
class EvaluatorPolicy:
    """
    Every policy choice the evaluator, the factory and the fitness function make
    in one place, so that defaults such as "no availability data means available"
    are visible and testable instead of buried in rule code.
    """

    enforce_availability: bool = True
    """Weekday availability (`unavailableShifts`, `available=False`) is a hard rule."""
    assume_available_when_unknown: bool = True
    """A weekday with no availability entry counts as available. Permissive by default."""
    qualification_policy: QualificationPolicy = QualificationPolicy.ANY
    """Whether a nurse needs ANY or ALL of the ward's required qualifications."""
    allow_overtime: bool = False
    """Weekly hours may run up to `max_weekly_hours + max_overtime_hours`."""
    allow_constraint_override_on_starvation: bool = False
    """When a shift is short of workload-feasible nurses, top it up ignoring soft limits."""
    week_start: int = 0
    """Weekday index (Monday=0) on which the fixed 7-day hour windows start."""
    fairness_normalizer: float = FAIRNESS_NORMALIZER
    """Variance divisor in the fairness score `1 / (1 + variance / normalizer)`."""
    violation_tolerance: float = VIOLATION_TOLERANCE
    """Share of nurse-day-shift cells that may be in violation before the constraint score hits 0."""

    @classmethod
    def from_settings(cls, settings) -> "EvaluatorPolicy":
        """Build the policy from a `ScheduleSettings` request model."""
        return cls(
            enforce_availability=settings.enforceAvailability,
            assume_available_when_unknown=settings.assumeAvailableWhenUnknown,
            qualification_policy=QualificationPolicy(settings.qualificationPolicy),
            allow_overtime=settings.allowOvertime,
            allow_constraint_override_on_starvation=settings.allowConstraintOverrideOnStarvation,
            week_start=Weekday(settings.weekStart).position,
        )
