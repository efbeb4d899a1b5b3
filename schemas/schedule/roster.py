from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import date
from core.enums import ShiftType
from core.violations import Violation


# Output models handed back to the persistence layer
class NurseAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    nurseId: str
    nurseName: str
    nurseCode: Optional[str] = None
    role: str
    hours: float
    qualifications: List[str]
    overtime: bool = False
    preferred: bool = False


class ShiftSlot(BaseModel):
    nurses: List[NurseAssignment] = Field(default_factory=list)
    requiredNurses: int
    requiredChargeNurses: int = 0
    actualNurses: int
    chargeNurses: int = 0
    coverage: float


class WardDay(BaseModel):
    wardId: str
    wardName: str
    shifts: Dict[ShiftType, ShiftSlot]


class DailyStats(BaseModel):
    totalNurses: int
    totalHours: float
    averageCoverage: float
    constraintViolations: List[Violation] = Field(default_factory=list)


class DaySchedule(BaseModel):
    date: date
    dayOfWeek: str
    wards: Dict[str, WardDay]
    dailyStats: DailyStats


class NurseStats(BaseModel):
    nurseId: str
    nurseName: str
    totalHours: float = 0
    totalShifts: int = 0
    shiftDistribution: Dict[ShiftType, int] = Field(
        default_factory=lambda: {s: 0 for s in ShiftType}
    )
    maxConsecutiveNights: int = 0
    overtimeHours: float = 0
    preferenceSatisfaction: float = 0
    constraintViolations: int = 0


class OverallStatistics(BaseModel):
    totalShifts: int
    totalHours: float
    averageShiftsPerNurse: float
    averageHoursPerNurse: float
    averageCoverage: float
    totalConstraintViolations: int


class GenerationStats(BaseModel):
    generation: int
    bestFitness: float
    averageFitness: float
    worstFitness: float
    populationSize: int


class QualityReport(BaseModel):
    overallScore: float
    coverageScore: float
    fairnessScore: float
    preferenceScore: float
    constraintScore: float
    qualificationScore: float
    violations: List[Violation] = Field(default_factory=list)
    criticalViolations: int = 0
    statistics: OverallStatistics
    generations: int
    executionTime: float
    converged: bool
    stopReason: str


class MaterializedSchedule(BaseModel):
    startDate: date
    endDate: date
    wardIds: List[str]
    schedule: Dict[date, DaySchedule]
    nurseStats: Dict[str, NurseStats]
    quality: QualityReport
    convergence: List[GenerationStats] = Field(default_factory=list)
    generationSettings: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
