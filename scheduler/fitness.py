from typing import List, Optional
import numpy as np
from core.individual import Individual, SubScores
from core.state import SchedulingData
from core.violations import COVERAGE_VIOLATIONS, Violation, count_critical
from schemas.schedule.generate import FitnessWeights


def coverage_score(ind: Individual, data: SchedulingData) -> float:
    """Mean over every (date, ward, shift) of `min(assigned, required) / required`, as a percentage."""
    if ind.genes.size == 0 or data.required.size == 0:
        return 100.0
    counts = ind.counts()  # (D, W, S)
    required = np.broadcast_to(data.required[None, :, :], counts.shape)
    ratio = np.where(required > 0, np.minimum(counts, required) / np.maximum(required, 1), 1.0)
    return float(ratio.mean() * 100)


def nurse_hours(ind: Individual, data: SchedulingData) -> np.ndarray:
    """`(N,)` total hours per nurse over the whole range."""
    per_shift = ind.genes.sum(axis=(0, 1))  # (S, N)
    return (per_shift * data.shift_hours[:, None]).sum(axis=0)


def fairness_score(ind: Individual, data: SchedulingData) -> float:
    """`100 / (1 + variance / normalizer)` over the hours of every nurse, including idle ones."""
    if data.num_nurses == 0:
        return 100.0
    variance = float(np.var(nurse_hours(ind, data)))
    return 100.0 / (1.0 + variance / data.policy.fairness_normalizer)


def preference_score(ind: Individual, data: SchedulingData) -> float:
    """Percentage of assignments on a preferred shift for that weekday. No assignments scores 100."""
    total = int(ind.genes.sum())
    if total == 0:
        return 100.0
    hits = int((ind.genes & data.preferred[:, None, :, :]).sum())
    return 100.0 * hits / total


def constraint_score(violations: List[Violation], data: SchedulingData) -> float:
    """
    `100 * (1 - violations / expected_max)`, clipped to [0, 100], where
    `expected_max = tolerance * nurses * days * shifts`. Under-staffing is left
    to the coverage score.
    """
    count = sum(1 for v in violations if v.type not in COVERAGE_VIOLATIONS)
    expected_max = data.policy.violation_tolerance * data.num_nurses * data.num_days * data.num_shifts
    if expected_max <= 0:
        return 100.0 if count == 0 else 0.0
    return float(np.clip(100.0 * (1.0 - count / expected_max), 0.0, 100.0))


def qualification_score(ind: Individual, data: SchedulingData) -> float:
    """Percentage of assignments whose nurse meets the ward's qualification policy."""
    total = int(ind.genes.sum())
    if total == 0:
        return 100.0
    hits = int((ind.genes & data.qualified[None, :, None, :]).sum())
    return 100.0 * hits / total


def combine(scores: SubScores, weights: FitnessWeights) -> float:
    """Weighted sum of the sub-scores, normalised by the weight total into [0, 1]."""
    weighted = (
        scores.coverage * weights.coverage
        + scores.fairness * weights.fairness
        + scores.preferences * weights.preferences
        + scores.constraints * weights.constraints
        + scores.qualifications * weights.qualifications
    )
    return float(np.clip(weighted / weights.total / 100.0, 0.0, 1.0))


def evaluate_fitness(
    ind: Individual,
    data: SchedulingData,
    violations: List[Violation],
    weights: Optional[FitnessWeights] = None,
) -> float:
    """
    Score `ind` and store the result on it.

    Args:
        ind (Individual): The individual to score. Its fitness, scores and violations are set in place.
        data (SchedulingData): The compiled run data.
        violations (List[Violation]): Output of the constraint evaluator for `ind`.
        weights (FitnessWeights, optional): Overrides the run weights.

    Returns:
        float: The fitness in [0, 1].
    """
    weights = weights or data.weights
    scores = SubScores(
        coverage=coverage_score(ind, data),
        fairness=fairness_score(ind, data),
        preferences=preference_score(ind, data),
        constraints=constraint_score(violations, data),
        qualifications=qualification_score(ind, data),
    )
    ind.scores = scores
    ind.violations = violations
    ind.critical = count_critical(violations)
    ind.fitness = combine(scores, weights)
    ind.evaluated = True
    return ind.fitness
