from datetime import date, timedelta
import numpy as np
import pytest
from core.constraint_manager import evaluate
from core.enums import Severity, ShiftType, ViolationType
from core.individual import Individual
from core.violations import Violation
from scheduler.factory import create_random
from scheduler.fitness import (
    constraint_score,
    coverage_score,
    evaluate_fitness,
    fairness_score,
    preference_score,
    qualification_score,
)

START = date(2025, 11, 3)
DAY, NIGHT = ShiftType.DAY.position, ShiftType.NIGHT.position


def scored(ind, data):
    evaluate_fitness(ind, data, evaluate(ind, data))
    return ind


def test_coverage_monotonic(data_factory, make_nurse, make_ward):
    nurses = [make_nurse(f"N{i}") for i in range(4)]
    data = data_factory(nurses, [make_ward(day=(3, 0))])
    ind = Individual.empty(data.shape)
    previous = coverage_score(ind, data)
    for n in range(4):
        ind.genes[0, 0, DAY, n] = True
        current = coverage_score(ind, data)
        assert current >= previous
        previous = current
    # over-staffing is capped at full coverage
    assert previous == pytest.approx(100.0)


def test_zero_requirement_counts_as_covered(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward(day=(0, 0))])
    assert coverage_score(Individual.empty(data.shape), data) == pytest.approx(100.0)


def test_fairness_in_bounds(small_request):
    from scheduler.setup import setup_scheduling_data

    data = setup_scheduling_data(small_request)
    for seed in range(20):
        score = fairness_score(create_random(data, seed=seed), data)
        assert 0.0 <= score <= 100.0


def test_fairness_counts_idle_nurses(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1"), make_nurse("N2")], [make_ward(day=(1, 0))])
    ind = Individual.empty(data.shape)
    assert fairness_score(ind, data) == pytest.approx(100.0)
    ind.genes[0, 0, DAY, 0] = True
    # hours [8, 0]: variance 16
    assert fairness_score(ind, data) == pytest.approx(100.0 / (1 + 16 / 100.0))


def test_preferences(data_factory, make_nurse, make_ward):
    nurses = [make_nurse("N1", availability={"monday": {"preferredShifts": ["DAY"]}}), make_nurse("N2")]
    data = data_factory(nurses, [make_ward(day=(2, 0))])
    ind = Individual.empty(data.shape)
    assert preference_score(ind, data) == pytest.approx(100.0)
    ind.genes[0, 0, DAY, :] = True
    assert preference_score(ind, data) == pytest.approx(50.0)


def test_constraint_score_ignores_under_staffing(data_factory, make_nurse, make_ward):
    data = data_factory([make_nurse("N1")], [make_ward()])
    short = Violation(ViolationType.UNDER_STAFFED, Severity.MEDIUM, START, "short")
    rest = Violation(ViolationType.REST_PERIOD, Severity.MEDIUM, START, "rest", nurseId="N1")
    assert constraint_score([short, short], data) == pytest.approx(100.0)
    # tolerance 0.1 * 1 nurse * 1 day * 3 shifts = 0.3: one violation clips to 0
    assert constraint_score([rest], data) == pytest.approx(0.0)


def test_qualification_score_any_policy(data_factory, make_nurse, make_ward):
    nurses = [make_nurse("N1", qualifications=("ICU",)), make_nurse("N2", qualifications=("ER",))]
    data = data_factory(nurses, [make_ward(qualifications=("ICU", "ACLS"))])
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, :] = True
    assert qualification_score(ind, data) == pytest.approx(50.0)


def test_fitness_in_unit_interval(small_request):
    from scheduler.setup import setup_scheduling_data

    data = setup_scheduling_data(small_request)
    for seed in range(10):
        ind = scored(create_random(data, seed=seed), data)
        assert 0.0 <= ind.fitness <= 1.0
        assert ind.evaluated
        assert ind.scores is not None


def test_perfect_individual_scores_one(data_factory, make_nurse, make_ward):
    prefs = {"monday": {"preferredShifts": ["DAY"]}}
    data = data_factory(
        [make_nurse("N1", availability=prefs), make_nurse("N2", availability=prefs)],
        [make_ward(day=(2, 0))],
    )
    ind = Individual.empty(data.shape)
    ind.genes[0, 0, DAY, :] = True
    assert scored(ind, data).fitness == pytest.approx(1.0)


def test_rotation_beats_long_night_run(data_factory, make_nurse, make_ward):
    """Scenario C: four straight nights for a nurse capped at two score lower than rotating."""
    nurses = [make_nurse("A", workingConstraints={"maxConsecutiveNights": 2}), make_nurse("B")]
    data = data_factory(
        nurses, [make_ward(day=(0, 0), night=(1, 0))], start=START, end=START + timedelta(days=3)
    )

    run = Individual.empty(data.shape)
    run.genes[:, 0, NIGHT, 0] = True
    rotated = Individual.empty(data.shape)
    rotated.genes[[0, 2], 0, NIGHT, 0] = True
    rotated.genes[[1, 3], 0, NIGHT, 1] = True

    scored(run, data)
    scored(rotated, data)
    assert len([v for v in run.violations if v.type == ViolationType.MAX_CONSECUTIVE_NIGHTS]) == 2
    assert rotated.violations == []
    assert rotated.fitness > run.fitness


def test_custom_weights_override(data_factory, make_nurse, make_ward):
    from schemas.schedule.generate import FitnessWeights

    data = data_factory([make_nurse("N1")], [make_ward(day=(1, 0), evening=(1, 0), night=(1, 0))])
    ind = Individual.empty(data.shape)
    # only coverage counts, and no required slot is filled
    fitness = evaluate_fitness(
        ind, data, evaluate(ind, data),
        FitnessWeights(coverage=1, fairness=0, preferences=0, constraints=0, qualifications=0),
    )
    assert fitness == pytest.approx(0.0)
