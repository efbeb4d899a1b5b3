from pydantic import BaseModel, model_validator, Field, ConfigDict
from typing import Dict, List, Optional, Any
from datetime import date
from core.enums import (
    QualificationPolicy,
    RequestStatus,
    Role,
    ShiftType,
    Weekday,
)
from utils.constants import *


# Define data models
class DayAvailability(BaseModel):
    model_config = ConfigDict(extra="allow")

    available: bool = True
    preferredShifts: List[ShiftType] = Field(default_factory=list)
    unavailableShifts: List[ShiftType] = Field(default_factory=list)


class WorkingConstraints(BaseModel):
    """Per-nurse limits. A `None` field falls back to the run-level default in `ScheduleSettings`."""

    model_config = ConfigDict(extra="allow")

    maxConsecutiveNights: Optional[int] = Field(default=None, ge=0)
    maxWeeklyHours: Optional[float] = Field(default=None, ge=0)
    maxOvertimeHours: Optional[float] = Field(default=None, ge=0)
    minRestHours: Optional[float] = Field(default=None, ge=0)
    maxConsecutiveDays: Optional[int] = Field(default=None, ge=1)
    minDaysOffPerWeek: Optional[int] = Field(default=None, ge=0, le=DAYS_PER_WEEK)


class NurseProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    code: Optional[str] = None
    role: Role = Role.STAFF
    hierarchyLevel: Optional[int] = Field(default=None, ge=1, le=3)
    qualifications: List[str] = Field(default_factory=list)
    wardAccess: List[str] = Field(default_factory=lambda: ["all"])
    availability: Dict[Weekday, DayAvailability] = Field(default_factory=dict)
    workingConstraints: WorkingConstraints = Field(default_factory=WorkingConstraints)

    @model_validator(mode="after")
    def derive_hierarchy_level(self) -> "NurseProfile":
        """
        The hierarchy level is owned by the role: staff=1, charge=2, admin=3.

        A missing level is filled in from the role; an explicit level that disagrees
        with the role is rejected rather than silently corrected.
        """
        expected = ROLE_HIERARCHY[self.role.value]
        if self.hierarchyLevel is None:
            self.hierarchyLevel = expected
        elif self.hierarchyLevel != expected:
            raise ValueError(
                f"hierarchyLevel {self.hierarchyLevel} does not match role '{self.role.value}' (expected {expected})"
            )
        return self

    def can_access_ward(self, ward: "WardProfile") -> bool:
        access = {a.strip().lower() for a in self.wardAccess}
        return "all" in access or ward.id.lower() in access or ward.name.lower() in access

    @property
    def is_charge(self) -> bool:
        return self.role in (Role.CHARGE, Role.ADMIN)


class ShiftRequirement(BaseModel):
    model_config = ConfigDict(extra="allow")

    nurses: int = Field(default=0, ge=0)
    chargeNurses: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.nurses + self.chargeNurses


class ShiftRequirements(BaseModel):
    model_config = ConfigDict(extra="allow")

    day: ShiftRequirement = Field(
        default_factory=lambda: ShiftRequirement(**DEFAULT_SHIFT_REQUIREMENTS["day"])
    )
    evening: ShiftRequirement = Field(
        default_factory=lambda: ShiftRequirement(**DEFAULT_SHIFT_REQUIREMENTS["evening"])
    )
    night: ShiftRequirement = Field(
        default_factory=lambda: ShiftRequirement(**DEFAULT_SHIFT_REQUIREMENTS["night"])
    )

    def for_shift(self, shift: ShiftType) -> ShiftRequirement:
        return getattr(self, shift.value.lower())


class WardProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    requiredQualifications: List[str] = Field(default_factory=list)
    minHierarchyLevel: int = Field(default=1, ge=1, le=3)
    capacity: int = Field(default=1, ge=1)
    shiftRequirements: ShiftRequirements = Field(default_factory=ShiftRequirements)


class BlockedDate(BaseModel):
    model_config = ConfigDict(extra="allow")

    date: date
    shifts: List[ShiftType]


class UnavailabilityConstraint(BaseModel):
    """
    A nurse's time-off request. Only approved requests are binding, and only for
    (date, shift) pairs that fall inside the validity window.

    The window itself is checked by `utils.validate.validate_request`, so that a
    malformed window surfaces as `InvalidConstraintWindowError` instead of a
    generic validation error.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    nurseId: str
    dates: List[BlockedDate] = Field(default_factory=list)
    validFrom: date
    validUntil: date
    status: RequestStatus = RequestStatus.PENDING
    reason: Optional[str] = None

    def blocks(self, day: date, shift: ShiftType) -> bool:
        if self.status != RequestStatus.APPROVED:
            return False
        if day < self.validFrom or day > self.validUntil:
            return False
        return any(b.date == day and shift in b.shifts for b in self.dates)


class FitnessWeights(BaseModel):
    model_config = ConfigDict(extra="allow")

    coverage: float = Field(default=FITNESS_WEIGHTS["coverage"], ge=0)
    fairness: float = Field(default=FITNESS_WEIGHTS["fairness"], ge=0)
    preferences: float = Field(default=FITNESS_WEIGHTS["preferences"], ge=0)
    constraints: float = Field(default=FITNESS_WEIGHTS["constraints"], ge=0)
    qualifications: float = Field(default=FITNESS_WEIGHTS["qualifications"], ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "FitnessWeights":
        if self.total <= 0:
            raise ValueError("At least one fitness weight must be positive.")
        return self

    @property
    def total(self) -> float:
        return (
            self.coverage
            + self.fairness
            + self.preferences
            + self.constraints
            + self.qualifications
        )


class ScheduleSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    # search parameters
    populationSize: int = Field(default=POPULATION_SIZE, ge=1)
    generations: int = Field(default=GENERATIONS, ge=1)
    crossoverRate: float = Field(default=CROSSOVER_RATE, ge=0, le=1)
    mutationRate: float = Field(default=MUTATION_RATE, ge=0, le=1)
    eliteRate: float = Field(default=ELITE_RATE, ge=0, le=1)
    tournamentSize: int = Field(default=TOURNAMENT_SIZE, ge=1)
    successThreshold: float = Field(default=SUCCESS_THRESHOLD, ge=0, le=1)
    fitnessWeights: FitnessWeights = Field(default_factory=FitnessWeights)
    seed: Optional[int] = None
    timeoutSeconds: Optional[float] = Field(default=None, gt=0)
    workers: int = Field(default=1, ge=1)
    repair: bool = True

    # evaluator policy
    enforceAvailability: bool = True
    allowOvertime: bool = False
    assumeAvailableWhenUnknown: bool = True
    qualificationPolicy: QualificationPolicy = QualificationPolicy.ANY
    allowConstraintOverrideOnStarvation: bool = False
    weekStart: Weekday = Weekday.MONDAY

    # default working constraints
    maxConsecutiveNights: int = Field(default=MAX_CONSECUTIVE_NIGHTS, ge=0)
    maxWeeklyHours: float = Field(default=MAX_WEEKLY_HOURS, ge=0)
    maxOvertimeHours: float = Field(default=MAX_OVERTIME_HOURS, ge=0)
    minRestHours: float = Field(default=MIN_REST_HOURS, ge=0)
    maxConsecutiveDays: int = Field(default=MAX_CONSECUTIVE_DAYS, ge=1)
    minDaysOffPerWeek: int = Field(default=MIN_DAYS_OFF_PER_WEEK, ge=0, le=DAYS_PER_WEEK)


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    startDate: date
    endDate: date
    wards: List[WardProfile]
    nurses: List[NurseProfile]
    constraints: List[UnavailabilityConstraint] = Field(default_factory=list)
    settings: ScheduleSettings = Field(default_factory=ScheduleSettings)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_keys(cls, values: Any) -> Any:
        """
        Accept `unavailability` / `unavailabilityRequests` as aliases of `constraints`,
        the names the admin dashboard sends approved requests under.
        """
        if isinstance(values, dict) and "constraints" not in values:
            for key in ("unavailability", "unavailabilityRequests"):
                if key in values:
                    values["constraints"] = values.pop(key)
                    break
        return values
