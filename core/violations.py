from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional
from core.enums import Severity, ShiftType, ViolationType


@dataclass(frozen=True)
class Violation:
    """A single rule breach found in a candidate schedule. Never mutated after creation."""

    type: ViolationType
    severity: Severity
    date: date
    description: str
    nurseId: Optional[str] = None
    wardId: Optional[str] = None
    shift: Optional[ShiftType] = None


# Violation types scored by the coverage sub-score rather than the constraint sub-score
COVERAGE_VIOLATIONS = {ViolationType.UNDER_STAFFED}


def count_critical(violations: Iterable[Violation]) -> int:
    return sum(1 for v in violations if v.severity == Severity.CRITICAL)


def violations_for_nurse(violations: Iterable[Violation], nurse_id: str) -> List[Violation]:
    return [v for v in violations if v.nurseId == nurse_id]


def violations_on(violations: Iterable[Violation], day: date) -> List[Violation]:
    return [v for v in violations if v.date == day]
