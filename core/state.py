from dataclasses import dataclass, field
from functools import cached_property
from datetime import date
from typing import Dict, List, Tuple
import numpy as np
from core.enums import ShiftType
from core.policy import EvaluatorPolicy
from schemas.schedule.generate import (
    FitnessWeights,
    NurseProfile,
    ScheduleSettings,
    UnavailabilityConstraint,
    WardProfile,
)


@dataclass
class SchedulingData:
    """
    A dataclass to hold all the read-only state of one optimisation run: the
    request entities plus the numpy lookup tables the factory, the evaluator and
    the fitness function index into.

    Tensor axes follow the gene layout of an `Individual`:
    `d` = date index, `w` = ward index, `s` = shift index, `n` = nurse index.
    """

    # model inputs
    dates: List[date]
    """Every date of the inclusive scheduling range, in order."""
    wards: List[WardProfile]
    """The wards to staff, in gene order."""
    nurses: List[NurseProfile]
    """The nurse pool, in gene order."""
    constraints: List[UnavailabilityConstraint]
    """The unavailability constraints supplied with the request."""
    shift_types: List[ShiftType]
    """Shift types in chronological order within a date."""
    settings: ScheduleSettings
    """The run settings the data was compiled with."""
    policy: EvaluatorPolicy
    """Explicit evaluator policy derived from the settings."""
    weights: FitnessWeights
    """Fitness sub-score weights."""

    # shift tables
    shift_hours: np.ndarray
    """`(S,)` hours worked per shift type."""
    shift_start: np.ndarray
    """`(S,)` start hour of each shift type, relative to midnight of its date."""

    # ward tables
    required: np.ndarray
    """`(W, S)` total headcount required per ward and shift."""
    required_charge: np.ndarray
    """`(W, S)` how many of the required slots need a charge or admin nurse."""

    # nurse tables
    is_charge: np.ndarray
    """`(N,)` nurses whose role can fill a charge slot."""
    qualified: np.ndarray
    """`(W, N)` nurses meeting a ward's qualification policy."""
    profile_eligible: np.ndarray
    """`(W, N)` nurses that may work a ward at all: qualification, ward access and hierarchy."""
    blocked: np.ndarray
    """`(D, S, N)` shifts blocked by an approved, in-window unavailability constraint."""
    weekday_unavailable: np.ndarray
    """`(D, S, N)` shifts the nurse's weekly availability rules out."""
    preferred: np.ndarray
    """`(D, S, N)` shifts in the nurse's preferred set for that weekday."""

    # working constraints, per nurse
    max_consecutive_nights: np.ndarray
    max_weekly_hours: np.ndarray
    max_overtime_hours: np.ndarray
    min_rest_hours: np.ndarray
    max_consecutive_days: np.ndarray
    min_days_off: np.ndarray

    # week bucketing
    week_index: np.ndarray
    """`(D,)` index of the fixed 7-day window each date falls into."""
    week_complete: np.ndarray
    """`(num_weeks,)` windows whose seven days all lie inside the range."""

    nurse_index: Dict[str, int] = field(default_factory=dict)
    """Nurse id to gene index."""

    @property
    def num_days(self) -> int:
        return len(self.dates)

    @property
    def num_wards(self) -> int:
        return len(self.wards)

    @property
    def num_shifts(self) -> int:
        return len(self.shift_types)

    @property
    def num_nurses(self) -> int:
        return len(self.nurses)

    @property
    def num_weeks(self) -> int:
        return len(self.week_complete)

    @property
    def shape(self) -> Tuple[int, int, int, int]:
        return (self.num_days, self.num_wards, self.num_shifts, self.num_nurses)

    @cached_property
    def hard_block(self) -> np.ndarray:
        """`(D, S, N)` every (date, shift) a nurse must never work under the current policy."""
        if self.policy.enforce_availability:
            return self.blocked | self.weekday_unavailable
        return self.blocked

    @cached_property
    def eligible(self) -> np.ndarray:
        """`(D, W, S, N)` static eligibility used by the factory, mutation and repair."""
        return self.profile_eligible[None, :, None, :] & ~self.hard_block[:, None, :, :]

    @cached_property
    def weekly_limit(self) -> np.ndarray:
        """`(N,)` weekly hours a nurse may work before a violation is raised."""
        if self.policy.allow_overtime:
            return self.max_weekly_hours + self.max_overtime_hours
        return self.max_weekly_hours

    def slot_start(self, d: int, s: int) -> float:
        """Absolute start of a shift, in hours from midnight of the first date."""
        return d * 24.0 + float(self.shift_start[s])

    def slot_end(self, d: int, s: int) -> float:
        return self.slot_start(d, s) + float(self.shift_hours[s])
