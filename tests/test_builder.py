from datetime import date, timedelta
import numpy as np
import pytest
from core.enums import Severity, ShiftType, ViolationType
from core.individual import Individual
from exceptions.custom_errors import FitnessEvaluationError, InvalidDateRangeError, InvalidIndividualError
from scheduler.builder import build_schedule
from scheduler.extractor import materialize
from scheduler.setup import setup_scheduling_data
from scheduler.solver import GeneticSolver, run_search

START = date(2025, 11, 3)


def assigned_ids(result, day, ward_id, shift):
    return [a.nurseId for a in result.schedule[day].wards[ward_id].shifts[shift].nurses]


def test_scenario_a_full_day_coverage(request_factory, make_nurse, make_ward):
    """Two qualified, available nurses for a ward needing two DAY nurses cover every date."""
    req = request_factory(
        [make_nurse("N1"), make_nurse("N2")],
        [make_ward(day=(2, 0))],
        start=START,
        end=START + timedelta(days=4),
    )
    result = build_schedule(req)
    for day, day_schedule in result.schedule.items():
        slot = day_schedule.wards["W1"].shifts[ShiftType.DAY]
        assert slot.coverage == pytest.approx(100.0)
        assert sorted(assigned_ids(result, day, "W1", ShiftType.DAY)) == ["N1", "N2"]
    day_violations = [v for v in result.quality.violations if v.shift in (None, ShiftType.DAY)]
    assert day_violations == []
    assert result.quality.coverageScore == pytest.approx(100.0)


def test_scenario_a_converges_with_preferences(request_factory, make_nurse, make_ward):
    prefs = {day: {"preferredShifts": ["DAY"]} for day in ("monday", "tuesday", "wednesday")}
    req = request_factory(
        [make_nurse("N1", availability=prefs), make_nurse("N2", availability=prefs)],
        [make_ward(day=(2, 0))],
        start=START,
        end=START + timedelta(days=2),
    )
    result = build_schedule(req)
    assert result.quality.converged
    assert result.quality.stopReason == "threshold"
    assert result.quality.generations == 1
    assert result.quality.overallScore == pytest.approx(100.0)


def test_scenario_b_blocked_day_never_assigned(request_factory, make_nurse, make_ward, make_blocked):
    blocked_day = date(2025, 11, 15)
    nurses = [make_nurse("N1"), make_nurse("N2"), make_nurse("N3"), make_nurse("N4")]
    wards = [make_ward(day=(2, 0), evening=(1, 0), night=(1, 0))]
    for seed in range(10):
        req = request_factory(
            nurses,
            wards,
            start=date(2025, 11, 13),
            end=date(2025, 11, 17),
            constraints=[make_blocked("N1", blocked_day, ["DAY"])],
            seed=seed,
        )
        result = build_schedule(req)
        assert "N1" not in assigned_ids(result, blocked_day, "W1", ShiftType.DAY)
        assert result.quality.criticalViolations == 0


def test_hard_constraints_hold_over_seeded_runs(request_factory, make_nurse, make_ward, make_blocked):
    nurses = [make_nurse(f"N{i}") for i in range(5)]
    wards = [make_ward("W1", day=(2, 0), evening=(1, 0), night=(1, 0)), make_ward("W2", day=(1, 0))]
    shifts = ["DAY", "EVENING", "NIGHT"]
    for seed in range(100):
        rng = np.random.default_rng(seed)
        day = START + timedelta(days=int(rng.integers(0, 4)))
        nurse_id = f"N{int(rng.integers(0, 5))}"
        shift = shifts[int(rng.integers(0, 3))]
        req = request_factory(
            nurses,
            wards,
            start=START,
            end=START + timedelta(days=3),
            constraints=[make_blocked(nurse_id, day, [shift])],
            seed=seed,
            populationSize=4,
            generations=2,
        )
        result = build_schedule(req)
        assert nurse_id not in assigned_ids(result, day, "W1", ShiftType(shift))
        assert nurse_id not in assigned_ids(result, day, "W2", ShiftType(shift))
        assert not [v for v in result.quality.violations if v.severity == Severity.CRITICAL]


def test_materialization_is_idempotent(small_request):
    data = setup_scheduling_data(small_request)
    search = run_search(data)
    first = materialize(search.best, data, search.history, search.generations, search.wall_time)
    second = materialize(search.best, data, search.history, search.generations, search.wall_time)
    assert first.model_dump_json() == second.model_dump_json()


def test_convergence_history(small_request):
    data = setup_scheduling_data(small_request)
    search = run_search(data)
    assert search.generations == len(search.history) <= small_request.settings.generations
    for stats in search.history:
        assert stats.worstFitness <= stats.averageFitness + 1e-9
        assert stats.averageFitness <= stats.bestFitness + 1e-9
        assert stats.populationSize == small_request.settings.populationSize
    best_ever = max(s.bestFitness for s in search.history)
    assert search.best.fitness == pytest.approx(best_ever)


def test_same_seed_same_schedule(small_request):
    first = build_schedule(small_request)
    second = build_schedule(small_request)
    assert first.schedule == second.schedule
    assert first.quality.overallScore == second.quality.overallScore


def test_thread_pool_matches_sequential(small_request):
    parallel = small_request.model_copy(
        update={"settings": small_request.settings.model_copy(update={"workers": 3})}
    )
    assert build_schedule(parallel).schedule == build_schedule(small_request).schedule


def test_timeout_stops_search(small_request):
    settings = small_request.settings.model_copy(update={"generations": 10_000, "timeoutSeconds": 0.05})
    data = setup_scheduling_data(small_request.model_copy(update={"settings": settings}))
    search = GeneticSolver(data).run()
    assert search.stop_reason in ("timeout", "threshold")
    assert search.generations < 10_000


def test_report_contents(small_request):
    result = build_schedule(small_request)
    assert list(result.schedule) == [START + timedelta(days=i) for i in range(7)]
    assert result.wardIds == ["ICU", "ER"]
    assert set(result.nurseStats) == {f"N{i}" for i in range(1, 7)}
    assert result.generationSettings["parameters"]["populationSize"] == 6
    assert result.generationSettings["objectives"]["coverage"] == pytest.approx(0.30)

    stats = result.quality.statistics
    assert stats.totalShifts == sum(s.totalShifts for s in result.nurseStats.values())
    assert stats.totalConstraintViolations == len(result.quality.violations)

    for day, day_schedule in result.schedule.items():
        assert day_schedule.dayOfWeek == day.strftime("%A")
        for v in day_schedule.dailyStats.constraintViolations:
            assert v.date == day
        for ward in day_schedule.wards.values():
            for slot in ward.shifts.values():
                assert slot.actualNurses == len(slot.nurses)
                ids = [a.nurseId for a in slot.nurses]
                assert ids == sorted(ids, key=lambda nid: int(nid[1:]))


def test_overtime_flags(request_factory, make_nurse, make_ward):
    req = request_factory(
        [make_nurse("N1")],
        [make_ward(day=(1, 0))],
        start=START,
        end=START + timedelta(days=2),
        maxWeeklyHours=16,
        maxOvertimeHours=8,
        allowOvertime=True,
        minDaysOffPerWeek=0,
    )
    result = build_schedule(req)
    flags = [result.schedule[START + timedelta(days=i)].wards["W1"].shifts[ShiftType.DAY].nurses[0].overtime for i in range(3)]
    assert flags == [False, False, True]
    assert result.nurseStats["N1"].overtimeHours == pytest.approx(8.0)
    assert not [v for v in result.quality.violations if v.type == ViolationType.MAX_WEEKLY_HOURS]


def test_invalid_request_raises_before_search(request_factory, make_nurse, make_ward):
    req = request_factory([make_nurse("N1")], [make_ward()], start=START, end=START - timedelta(days=1))
    with pytest.raises(InvalidDateRangeError):
        build_schedule(req)


def test_failing_rule_aborts_search(small_request):
    def broken_rule(ind, data):
        raise RuntimeError("rule exploded")

    solver = GeneticSolver(setup_scheduling_data(small_request))
    solver.constraints.add_rule(broken_rule)
    with pytest.raises(FitnessEvaluationError, match="rule exploded"):
        solver.run()


def test_fitness_out_of_range_aborts_search(small_request, monkeypatch):
    def inflated(ind, data, violations):
        ind.fitness = 1.5
        ind.evaluated = True
        return ind.fitness

    monkeypatch.setattr("scheduler.solver.evaluate_fitness", inflated)
    solver = GeneticSolver(setup_scheduling_data(small_request))
    with pytest.raises(FitnessEvaluationError, match="outside"):
        solver.run()


def test_malformed_individual_is_not_wrapped(small_request):
    solver = GeneticSolver(setup_scheduling_data(small_request))
    with pytest.raises(InvalidIndividualError):
        solver.evaluate(Individual.empty((1, 1, 3, 1)))


def test_materialize_requires_evaluated_individual(small_request):
    data = setup_scheduling_data(small_request)
    with pytest.raises(InvalidIndividualError):
        materialize(Individual.empty(data.shape), data)
