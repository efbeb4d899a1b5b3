"""
Shared fixtures for the scheduling tests.

The builders return plain dicts so tests can tweak any field before
validation; `request_factory` turns them into a `ScheduleRequest`.
"""

from datetime import date
import pytest
from schemas.schedule.generate import ScheduleRequest
from scheduler.setup import setup_scheduling_data

# Monday 3 November 2025
MONDAY = date(2025, 11, 3)

FAST_SETTINGS = {
    "populationSize": 6,
    "generations": 4,
    "tournamentSize": 2,
    "seed": 7,
}


def nurse(nid, role="staff", qualifications=("ICU",), **extra):
    record = {
        "id": nid,
        "name": f"Nurse {nid}",
        "role": role,
        "qualifications": list(qualifications),
    }
    record.update(extra)
    return record


def ward(wid="W1", day=(2, 0), evening=(0, 0), night=(0, 0), qualifications=("ICU",), **extra):
    record = {
        "id": wid,
        "name": f"Ward {wid}",
        "requiredQualifications": list(qualifications),
        "shiftRequirements": {
            "day": {"nurses": day[0], "chargeNurses": day[1]},
            "evening": {"nurses": evening[0], "chargeNurses": evening[1]},
            "night": {"nurses": night[0], "chargeNurses": night[1]},
        },
    }
    record.update(extra)
    return record


def blocked(nurse_id, day, shifts, status="approved", valid_from=None, valid_until=None):
    return {
        "id": f"c-{nurse_id}-{day}",
        "nurseId": nurse_id,
        "dates": [{"date": day.isoformat(), "shifts": list(shifts)}],
        "validFrom": (valid_from or day).isoformat(),
        "validUntil": (valid_until or day).isoformat(),
        "status": status,
    }


@pytest.fixture
def make_nurse():
    return nurse


@pytest.fixture
def make_ward():
    return ward


@pytest.fixture
def make_blocked():
    return blocked


@pytest.fixture
def request_factory():
    def build(nurses, wards, start=MONDAY, end=None, constraints=(), **settings):
        merged = dict(FAST_SETTINGS)
        merged.update(settings)
        return ScheduleRequest.model_validate(
            {
                "startDate": start.isoformat(),
                "endDate": (end or start).isoformat(),
                "nurses": list(nurses),
                "wards": list(wards),
                "constraints": list(constraints),
                "settings": merged,
            }
        )

    return build


@pytest.fixture
def data_factory(request_factory):
    def build(*args, **kwargs):
        return setup_scheduling_data(request_factory(*args, **kwargs))

    return build


@pytest.fixture
def small_request(request_factory):
    """Two wards, six nurses, one week starting on a Monday."""
    nurses = [
        nurse("N1", role="charge"),
        nurse("N2"),
        nurse("N3"),
        nurse("N4", qualifications=("ER",)),
        nurse("N5", qualifications=("ER", "ICU")),
        nurse("N6", role="admin", qualifications=("ER",)),
    ]
    wards = [
        ward("ICU", day=(1, 1), evening=(1, 0), night=(1, 0), qualifications=("ICU",)),
        ward("ER", day=(1, 0), evening=(1, 0), night=(0, 0), qualifications=("ER",)),
    ]
    return request_factory(nurses, wards, start=MONDAY, end=date(2025, 11, 9))
