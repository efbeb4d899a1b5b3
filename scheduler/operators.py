from typing import List, Optional, Tuple
import numpy as np
from core.individual import Individual
from core.state import SchedulingData
from exceptions.custom_errors import InvalidIndividualError

"""
Genetic operators: tournament selection, single-cut date crossover, the three
slot mutations and repair. Operators never touch their parents; they return
new individuals or modify the one they are handed explicitly.
"""


def tournament_selection(population: List[Individual], k: int, rng: np.random.Generator) -> Individual:
    """Pick `k` distinct individuals at random and return the best by rank key."""
    if not population:
        raise InvalidIndividualError("Cannot select from an empty population")
    size = min(max(k, 1), len(population))
    picks = rng.choice(len(population), size=size, replace=False)
    return max((population[i] for i in picks), key=lambda ind: ind.rank_key)


def crossover(
    parent_a: Individual, parent_b: Individual, rng: np.random.Generator
) -> Tuple[Individual, Individual]:
    """
    Single-cut crossover on the date axis.

    Child one takes `parent_a`'s dates before the cut and `parent_b`'s from the
    cut on; child two is the complement. With fewer than two dates there is no
    cut point and the children are copies.
    """
    if parent_a.genes.shape != parent_b.genes.shape:
        raise InvalidIndividualError(
            f"Cannot cross individuals of shapes {parent_a.genes.shape} and {parent_b.genes.shape}"
        )
    num_days = parent_a.genes.shape[0]
    if num_days < 2:
        return Individual(genes=parent_a.genes.copy()), Individual(genes=parent_b.genes.copy())

    cut = int(rng.integers(1, num_days))
    child_a = np.concatenate([parent_a.genes[:cut], parent_b.genes[cut:]], axis=0)
    child_b = np.concatenate([parent_b.genes[:cut], parent_a.genes[cut:]], axis=0)
    return Individual(genes=child_a), Individual(genes=child_b)


def free_nurses(ind: Individual, data: SchedulingData, d: int, w: int, s: int) -> np.ndarray:
    """Eligible nurses for a slot who are not already working that date and shift in any ward."""
    return np.flatnonzero(data.eligible[d, w, s] & ~ind.genes[d, :, s, :].any(axis=0))


def mutate_reassign(ind: Individual, data: SchedulingData, rng: np.random.Generator) -> bool:
    """Swap one assigned nurse for another eligible, free nurse in the same slot."""
    assigned = np.argwhere(ind.genes)
    if len(assigned) == 0:
        return False
    d, w, s, n = assigned[rng.integers(len(assigned))]
    candidates = free_nurses(ind, data, d, w, s)
    if len(candidates) == 0:
        return False
    ind.genes[d, w, s, n] = False
    ind.genes[d, w, s, rng.choice(candidates)] = True
    return True


def mutate_add(ind: Individual, data: SchedulingData, rng: np.random.Generator) -> bool:
    """Add an eligible, free nurse to an under-filled slot."""
    under = np.argwhere(ind.counts() < data.required[None, :, :])
    rng.shuffle(under)
    for d, w, s in under:
        candidates = free_nurses(ind, data, d, w, s)
        if len(candidates):
            ind.genes[d, w, s, rng.choice(candidates)] = True
            return True
    return False


def mutate_remove(ind: Individual, data: SchedulingData, rng: np.random.Generator) -> bool:
    """Drop a random nurse from an over-filled slot."""
    over = np.argwhere(ind.counts() > data.required[None, :, :])
    if len(over) == 0:
        return False
    d, w, s = over[rng.integers(len(over))]
    ind.genes[d, w, s, rng.choice(np.flatnonzero(ind.genes[d, w, s]))] = False
    return True


MUTATIONS = (mutate_reassign, mutate_add, mutate_remove)


def mutate(ind: Individual, data: SchedulingData, rng: np.random.Generator) -> Individual:
    """
    Apply one of reassign, add-to-under-filled or remove-from-over-filled,
    chosen at random. When the chosen mutation has no target the others are
    tried in turn; an individual none of them applies to is returned unchanged.
    """
    for i in rng.permutation(len(MUTATIONS)):
        if MUTATIONS[i](ind, data, rng):
            ind.invalidate()
            break
    return ind


def repair(ind: Individual, data: SchedulingData, rng: Optional[np.random.Generator] = None) -> Individual:
    """
    Strip every assignment that breaks a hard rule, then refill the slots left
    short from the eligible pool.

    Hard-rule assignments are those outside the static eligibility table
    (approved unavailability, enforced weekday availability, ward profile) and
    all but the first ward of a nurse double-booked on one date and shift.
    Refill only draws nurses who are not working that date at all.
    """
    rng = rng if rng is not None else np.random.default_rng()
    genes = ind.genes
    before = genes.copy()
    genes &= data.eligible

    # keep only the lowest ward index of a double-booked nurse
    first_ward = np.cumsum(genes, axis=1) == 1
    genes &= first_ward

    counts = genes.sum(axis=3)
    for d, w, s in np.argwhere(counts < data.required[None, :, :]):
        busy_today = genes[d].any(axis=(0, 1))
        pool = np.flatnonzero(data.eligible[d, w, s] & ~busy_today)
        missing = int(data.required[w, s] - genes[d, w, s].sum())
        take = min(missing, len(pool))
        if take > 0:
            genes[d, w, s, rng.choice(pool, size=take, replace=False)] = True

    if not np.array_equal(before, genes):
        ind.invalidate()
    return ind
