from enum import Enum

"""
Enumerations shared by the request schemas, the evaluator and the extractor.
All are `str` enums so they serialise as their plain value.
"""


class ShiftType(str, Enum):
    DAY = "DAY"
    EVENING = "EVENING"
    NIGHT = "NIGHT"

    @property
    def position(self) -> int:
        return SHIFT_ORDER.index(self)


# chronological order within a date; also the shift axis of the gene tensor
SHIFT_ORDER = [ShiftType.DAY, ShiftType.EVENING, ShiftType.NIGHT]


class Role(str, Enum):
    STAFF = "staff"
    CHARGE = "charge"
    ADMIN = "admin"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day) -> "Weekday":
        """Weekday of a `datetime.date` (Monday first, as `date.weekday()`)."""
        return WEEKDAY_ORDER[day.weekday()]

    @property
    def position(self) -> int:
        return WEEKDAY_ORDER.index(self)


WEEKDAY_ORDER = list(Weekday)


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ViolationType(str, Enum):
    UNAVAILABILITY_REQUEST_VIOLATION = "UNAVAILABILITY_REQUEST_VIOLATION"
    UNAVAILABLE_ASSIGNMENT = "UNAVAILABLE_ASSIGNMENT"
    OVERLAPPING_ASSIGNMENT = "OVERLAPPING_ASSIGNMENT"
    MAX_CONSECUTIVE_NIGHTS = "MAX_CONSECUTIVE_NIGHTS"
    DOUBLE_SHIFT = "DOUBLE_SHIFT"
    UNDER_STAFFED = "UNDER_STAFFED"
    MAX_WEEKLY_HOURS = "MAX_WEEKLY_HOURS"
    REST_PERIOD = "REST_PERIOD"
    CHARGE_NURSE_SHORTFALL = "CHARGE_NURSE_SHORTFALL"
    MAX_CONSECUTIVE_DAYS = "MAX_CONSECUTIVE_DAYS"
    MIN_DAYS_OFF = "MIN_DAYS_OFF"


class QualificationPolicy(str, Enum):
    ANY = "any"
    ALL = "all"
