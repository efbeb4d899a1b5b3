from datetime import date, timedelta
import pytest
from core.constraint_manager import ConstraintManager, build_constraint_manager, evaluate
from core.enums import Severity, ShiftType, ViolationType
from core.individual import Individual
from scheduler.rules import (
    charge_nurse_rule,
    consecutive_days_rule,
    consecutive_nights_rule,
    days_off_rule,
    double_shift_rule,
    overlapping_assignment_rule,
    rest_period_rule,
    unavailability_request_rule,
    under_staffed_rule,
    weekday_availability_rule,
    weekly_hours_rule,
)

START = date(2025, 11, 3)  # Monday
DAY, EVENING, NIGHT = ShiftType.DAY.position, ShiftType.EVENING.position, ShiftType.NIGHT.position


def of_type(violations, vtype):
    return [v for v in violations if v.type == vtype]


@pytest.fixture
def night_data(data_factory, make_nurse, make_ward):
    """Scenario C: one ward needing one night nurse for four nights."""
    nurses = [
        make_nurse("A", workingConstraints={"maxConsecutiveNights": 2}),
        make_nurse("B"),
    ]
    return data_factory(nurses, [make_ward(day=(0, 0), night=(1, 0))], start=START, end=START + timedelta(days=3))


def test_consecutive_nights_flags_third_and_fourth(night_data):
    ind = Individual.empty(night_data.shape)
    ind.genes[:, 0, NIGHT, 0] = True

    found = of_type(consecutive_nights_rule(ind, night_data), ViolationType.MAX_CONSECUTIVE_NIGHTS)
    assert [v.date for v in found] == [START + timedelta(days=2), START + timedelta(days=3)]
    assert all(v.severity == Severity.HIGH and v.nurseId == "A" for v in found)


def test_consecutive_nights_reset_by_gap(night_data):
    ind = Individual.empty(night_data.shape)
    ind.genes[[0, 1, 3], 0, NIGHT, 0] = True
    assert consecutive_nights_rule(ind, night_data) == []


def test_unavailability_request_is_critical(data_factory, make_nurse, make_ward, make_blocked):
    data = data_factory([make_nurse("N1")], [make_ward()], constraints=[make_blocked("N1", START, ["DAY"])])
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True

    found = unavailability_request_rule(ind, data)
    assert len(found) == 1
    assert found[0].type == ViolationType.UNAVAILABILITY_REQUEST_VIOLATION
    assert found[0].severity == Severity.CRITICAL
    assert found[0].shift == ShiftType.DAY

    ind.genes[0, 0, DAY, 0] = False
    ind.genes[0, 0, EVENING, 0] = True
    assert unavailability_request_rule(ind, data) == []


def test_pending_request_not_binding(data_factory, make_nurse, make_ward, make_blocked):
    data = data_factory(
        [make_nurse("N1")], [make_ward()], constraints=[make_blocked("N1", START, ["DAY"], status="pending")]
    )
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True
    assert evaluate(ind, data) == of_type(evaluate(ind, data), ViolationType.UNDER_STAFFED)


def test_weekday_availability_rule(data_factory, make_nurse, make_ward):
    nurses = [make_nurse("N1", availability={"monday": {"unavailableShifts": ["DAY"]}})]
    data = data_factory(nurses, [make_ward()])
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True

    found = weekday_availability_rule(ind, data)
    assert [v.type for v in found] == [ViolationType.UNAVAILABLE_ASSIGNMENT]
    assert found[0].severity == Severity.CRITICAL


def test_weekday_availability_ignored_when_not_enforced(data_factory, make_nurse, make_ward):
    nurses = [make_nurse("N1", availability={"monday": {"available": False}})]
    data = data_factory(nurses, [make_ward()], enforceAvailability=False)
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True
    assert not of_type(evaluate(ind, data), ViolationType.UNAVAILABLE_ASSIGNMENT)


def test_overlapping_assignment(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward("W1"), make_ward("W2")])
    ind = Individual.empty(data.shape)
    ind.genes[0, :, DAY, 0] = True

    found = overlapping_assignment_rule(ind, data)
    assert len(found) == 1
    assert found[0].severity == Severity.CRITICAL
    assert "W1, W2" in found[0].description


def test_double_shift(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()])
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True
    ind.genes[0, 0, NIGHT, 0] = True

    found = double_shift_rule(ind, data)
    assert len(found) == 1
    assert found[0].severity == Severity.HIGH


def test_rest_period_night_then_day(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()], start=START, end=START + timedelta(days=1))
    ind = Individual.empty(data.shape)
    # night ends 07:00 on day two, day shift starts 07:00
    ind.genes[0, 0, NIGHT, 0] = True
    ind.genes[1, 0, DAY, 0] = True

    found = rest_period_rule(ind, data)
    assert len(found) == 1
    assert found[0].date == START + timedelta(days=1)
    assert found[0].shift == ShiftType.DAY
    assert found[0].severity == Severity.MEDIUM


def test_rest_period_day_then_day_is_fine(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()], start=START, end=START + timedelta(days=1))
    ind = Individual.empty(data.shape)
    ind.genes[:, 0, DAY, 0] = True
    assert rest_period_rule(ind, data) == []


def test_weekly_hours(data_factory, make_nurse, make_ward):
    data = data_factory(
        [make_nurse("N1")], [make_ward()], start=START, end=START + timedelta(days=6), maxWeeklyHours=40
    )
    ind = Individual.empty(data.shape)
    ind.genes[:6, 0, DAY, 0] = True  # 48h

    found = weekly_hours_rule(ind, data)
    assert len(found) == 1
    assert found[0].date == START
    assert found[0].severity == Severity.MEDIUM


def test_weekly_hours_with_overtime_allowed(data_factory, make_nurse, make_ward):
    data = data_factory(
        [make_nurse("N1")],
        [make_ward()],
        start=START,
        end=START + timedelta(days=6),
        maxWeeklyHours=40,
        maxOvertimeHours=8,
        allowOvertime=True,
    )
    ind = Individual.empty(data.shape)
    ind.genes[:6, 0, DAY, 0] = True
    assert weekly_hours_rule(ind, data) == []


def test_weekly_hours_date_is_first_in_range_day(data_factory, make_nurse, make_ward):
    wednesday = START + timedelta(days=2)
    data = data_factory(
        [make_nurse("N1")], [make_ward()], start=wednesday, end=wednesday + timedelta(days=4), maxWeeklyHours=16
    )
    ind = Individual.empty(data.shape)
    ind.genes[:3, 0, DAY, 0] = True
    found = weekly_hours_rule(ind, data)
    assert [v.date for v in found] == [wednesday]


def test_consecutive_days_and_days_off(data_factory, make_nurse, make_ward):
    data = data_factory(
        [make_nurse("N1")],
        [make_ward()],
        start=START,
        end=START + timedelta(days=6),
        maxConsecutiveDays=5,
        minDaysOffPerWeek=2,
    )
    ind = Individual.empty(data.shape)
    ind.genes[:, 0, DAY, 0] = True

    days = consecutive_days_rule(ind, data)
    assert [v.date for v in days] == [START + timedelta(days=5), START + timedelta(days=6)]
    assert all(v.severity == Severity.LOW for v in days)

    off = days_off_rule(ind, data)
    assert len(off) == 1
    assert off[0].type == ViolationType.MIN_DAYS_OFF


def test_days_off_skips_partial_weeks(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()], start=START, end=START + timedelta(days=4))
    ind = Individual.empty(data.shape)
    ind.genes[:, 0, DAY, 0] = True
    assert days_off_rule(ind, data) == []


def test_under_staffed_and_charge(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1"), make_nurse("N2", role="charge")], [make_ward(day=(1, 1))])
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, 0] = True

    short = under_staffed_rule(ind, data)
    assert len(short) == 1
    assert short[0].severity == Severity.MEDIUM
    assert short[0].wardId == "W1"

    charge = charge_nurse_rule(ind, data)
    assert [v.type for v in charge] == [ViolationType.CHARGE_NURSE_SHORTFALL]

    ind.genes[0, 0, DAY, 1] = True
    assert under_staffed_rule(ind, data) == []
    assert charge_nurse_rule(ind, data) == []


def test_constraint_manager_condition(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()])
    cm = ConstraintManager(data)
    cm.add_rule(double_shift_rule)
    cm.add_rule(under_staffed_rule, condition=False)
    assert cm.rules == [double_shift_rule]

    full = build_constraint_manager(data)
    # no charge requirement anywhere, so the charge rule is not registered
    assert charge_nurse_rule not in full.rules
    assert unavailability_request_rule in full.rules


def test_evaluate_is_pure(night_data):
    ind = Individual.empty(night_data.shape)
    ind.genes[:, 0, NIGHT, 0] = True
    before = ind.genes.copy()
    first = evaluate(ind, night_data)
    second = evaluate(ind, night_data)
    assert first == second
    assert (ind.genes == before).all()
    assert ind.violations == []
